"""Interactive engine: pygame window, keyboard input and the frame loop.

Startup loads every asset once. If that fails, the window shows a static
error message and the frame loop never starts.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

import numpy as np
import pygame

from .compositor import LayerCompositor, draw_fatal_error
from .config import GameConfig
from .errors import HopperError
from .game import GameState, boot, current_bundle, get_state, update
from .player import Controls


logger = logging.getLogger(__name__)

LEFT_KEYS = (pygame.K_LEFT, pygame.K_a)
RIGHT_KEYS = (pygame.K_RIGHT, pygame.K_d)


class HopperEngine:
    """Main game engine coordinating loading, input, update and drawing.

    Handles:
    - One-shot asset loading with a fatal error screen
    - Keyboard input (arrows or A/D, Escape quits)
    - Frame loop with clamped per-tick dt
    - Compositing into a fixed logical viewport
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        debug_level: Any = None,
        clock: Callable[[], float] = time.perf_counter,
        rng: Optional[np.random.Generator] = None,
    ):
        """Initialize game engine.

        Args:
            config: Game configuration. Uses defaults if None.
            debug_level: 1-based debug start level from the command line.
            clock: Wall-clock source in seconds for transition deadlines.
            rng: Random generator for level selection.
        """
        self.config = config or GameConfig()
        self.debug_level = debug_level
        self.now = clock
        self.rng = rng

        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.config.screen_width, self.config.screen_height)
        )
        pygame.display.set_caption("Universe Hopper")
        self.clock = pygame.time.Clock()

        self.compositor = LayerCompositor(self.config)
        self.game: Optional[GameState] = None
        self.fatal_error: Optional[HopperError] = None

        self.running = False
        self._keys_pressed: Dict[int, bool] = {}

    def startup(self) -> bool:
        """Load levels and sprites. Returns False after a fatal failure."""
        try:
            self.game = boot(self.config, rng=self.rng, debug_level=self.debug_level)
        except HopperError as e:
            logger.error("Startup failed: %s", e)
            self.fatal_error = e
            self.game = None
            draw_fatal_error(self.screen)
            pygame.display.flip()
            return False
        return True

    def handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._keys_pressed[event.key] = True
                if event.key == pygame.K_ESCAPE:
                    self.running = False
            elif event.type == pygame.KEYUP:
                self._keys_pressed[event.key] = False

    def controls(self) -> Controls:
        """Current held-input snapshot."""
        return Controls(
            left=any(self._keys_pressed.get(k) for k in LEFT_KEYS),
            right=any(self._keys_pressed.get(k) for k in RIGHT_KEYS),
        )

    def update(self, dt: float) -> float:
        """Advance one frame. Returns the clamped dt."""
        return update(self.game, self.controls(), dt, self.now(), self.config)

    def render(self, dt: float) -> None:
        """Composite the current level and flip the display."""
        self.compositor.draw_frame(
            self.screen, current_bundle(self.game), self.game.player, self.game.sprites, dt,
        )
        pygame.display.flip()

    def _wait_for_quit(self) -> None:
        """Keep the error screen up until the window is closed."""
        while self.running:
            self.handle_events()
            self.clock.tick(10)

    def run(self) -> None:
        """Boot, then run the frame loop until quit."""
        self.running = True

        if self.game is None and self.fatal_error is None:
            self.startup()

        if self.game is None:
            self._wait_for_quit()
            pygame.quit()
            return

        self.clock.tick()
        while self.running:
            self.handle_events()
            raw_dt = self.clock.tick(self.config.viewport.fps) / 1000.0
            dt = self.update(raw_dt)
            self.render(dt)

        pygame.quit()

    def get_state(self) -> Dict[str, Any]:
        """Get current game state for observation/logging."""
        if self.game is None:
            return {"fatal_error": str(self.fatal_error) if self.fatal_error else None}
        return get_state(self.game)
