"""Gymnasium environment wrapper for the universe hopper.

Provides the standard Gym API for scripted traversal runs and automated
testing. Time is simulated (each step advances a fixed 1/fps), so an
episode is fully determined by its seed and actions.
"""

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium
from gymnasium import spaces

import pygame

from .assets import AssetRegistry, ImageLoader, LoadedLevels, PlayerSprites
from .compositor import LayerCompositor, hero_normalized_x
from .config import GameConfig
from .game import GameState, current_bundle, get_state, new_game, update
from .levels import debug_start_index, load_level_document
from .player import AnimMode, Controls


ACTION_STAY = 0
ACTION_LEFT = 1
ACTION_RIGHT = 2

STATE_SIZE = 8


def action_to_controls(action: int) -> Controls:
    return Controls(left=action == ACTION_LEFT, right=action == ACTION_RIGHT)


class HopperEnv(gymnasium.Env):
    """Gymnasium wrapper around one hopper session.

    Observation space (Dict):
        'rgb': uint8 array of shape (H, W, 3) - rendered frame
        'state': float32 array of shape (8,) - state vector containing:
            [0] player x (px)
            [1] player x normalized to [-1, 1]
            [2] facing (-1 left, +1 right)
            [3] walking (0/1)
            [4] current level index
            [5] transitioning (0/1)
            [6] fraction of levels visited this episode
            [7] completed transitions

    Action space: Discrete(3) - 0 stay, 1 walk left, 2 walk right.

    Reward = weighted sum of raw signals (stored in info['reward_signals']):
        new_level:  1.0 when entering a level not yet visited this episode
        transition: 1.0 when a transition completes
        step:       1.0 every step
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        obs_resolution: Tuple[int, int] = (144, 256),
        max_episode_steps: int = 2000,
        reward_weights: Optional[Dict[str, float]] = None,
        image_loader: Optional[ImageLoader] = None,
        load_sprites: bool = True,
    ):
        super().__init__()

        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.obs_height, self.obs_width = obs_resolution
        self.max_episode_steps = max_episode_steps

        self.reward_weights = reward_weights or {
            "new_level": 10.0,
            "transition": 1.0,
            "step": -0.01,
        }

        self.action_space = spaces.Discrete(3)
        self.observation_space = spaces.Dict({
            "rgb": spaces.Box(
                low=0, high=255,
                shape=(self.obs_height, self.obs_width, 3),
                dtype=np.uint8,
            ),
            "state": spaces.Box(
                low=-np.inf, high=np.inf,
                shape=(STATE_SIZE,),
                dtype=np.float32,
            ),
        })

        # Initialize pygame (caller sets SDL_VIDEODRIVER for headless)
        if not pygame.get_init():
            pygame.init()

        # Offscreen render surface (native resolution)
        self._surface = pygame.Surface(
            (self.config.screen_width, self.config.screen_height)
        )

        self._display = None
        if render_mode == "human":
            self._display = pygame.display.set_mode(
                (self.config.screen_width, self.config.screen_height)
            )
            pygame.display.set_caption("HopperEnv")

        # Assets load once per environment; fatal errors propagate
        lc = self.config.levels
        self.registry = AssetRegistry(
            lc.asset_root, image_loader=image_loader, default_layer_fps=lc.default_layer_fps,
        )
        self._levels: LoadedLevels = self.registry.load_levels(
            load_level_document(self.registry.asset_root / lc.levels_path)
        )
        self._sprites: Optional[PlayerSprites] = (
            self.registry.load_player_sprites(self.config.player) if load_sprites else None
        )

        self._compositor = LayerCompositor(self.config)
        self._game: Optional[GameState] = None
        self._episode_steps = 0
        self._now = 0.0
        self._last_dt = 0.0
        self._dt = 1.0 / self.config.viewport.fps

    @property
    def level_count(self) -> int:
        return len(self._levels)

    @property
    def game(self) -> Optional[GameState]:
        return self._game

    def reset(self, *, seed=None, options=None):
        """Start a new session.

        Options:
            debug_level: 1-based start level, overriding home/random seeding.
        """
        super().reset(seed=seed)
        options = options or {}

        start_index = None
        if options.get("debug_level") is not None:
            start_index = debug_start_index(True, options["debug_level"], self.level_count)

        self._game = new_game(
            self._levels, self._sprites, self.config,
            rng=self.np_random, start_index=start_index,
        )
        self._episode_steps = 0
        self._now = 0.0
        self._last_dt = 0.0

        return self._get_obs(), self._get_info()

    def step(self, action):
        assert self._game is not None, "Must call reset() before step()"

        if isinstance(action, np.ndarray):
            action = int(action.item())
        action = int(action)

        visited_before = len(self._game.visited)
        transitions_before = self._game.transitions

        self._now += self._dt
        self._last_dt = update(self._game, action_to_controls(action), self._dt, self._now, self.config)
        self._episode_steps += 1

        reward_signals = {
            "new_level": float(len(self._game.visited) > visited_before),
            "transition": float(self._game.transitions - transitions_before),
            "step": 1.0,
        }
        reward = sum(
            self.reward_weights.get(k, 0.0) * v
            for k, v in reward_signals.items()
        )

        terminated = False
        truncated = self._episode_steps >= self.max_episode_steps

        obs = self._get_obs()
        info = self._get_info()
        info["reward_signals"] = reward_signals

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # ------------------------------------------------------------------
    # Observations
    # ------------------------------------------------------------------

    def _get_obs(self):
        # Render only when a caller asked for frames
        if self.render_mode in ("rgb_array", "human"):
            rgb = self._render_frame()
        else:
            rgb = np.zeros((self.obs_height, self.obs_width, 3), dtype=np.uint8)
        return {"rgb": rgb, "state": self._get_state_vector()}

    def _get_state_vector(self):
        state = np.zeros(STATE_SIZE, dtype=np.float32)
        game = self._game
        if game is None:
            return state

        p = game.player
        state[0] = p.x
        state[1] = hero_normalized_x(p.x, p.render_w, self.config.viewport.width)
        state[2] = float(p.facing)
        state[3] = float(p.anim is AnimMode.WALK)
        state[4] = float(game.level_index)
        state[5] = float(game.transition.transitioning)
        state[6] = len(game.visited) / max(1, self.level_count)
        state[7] = float(game.transitions)
        return state

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_frame(self):
        """Render current state to numpy array (H, W, 3) uint8."""
        self._compositor.draw_frame(
            self._surface, current_bundle(self._game), self._game.player, self._sprites, self._last_dt,
        )
        scaled = pygame.transform.scale(self._surface, (self.obs_width, self.obs_height))
        # surfarray gives (W, H, 3); transpose to (H, W, 3)
        array = pygame.surfarray.array3d(scaled)
        return np.transpose(array, (1, 0, 2)).astype(np.uint8)

    def render(self):
        if self.render_mode == "rgb_array":
            return self._render_frame()
        elif self.render_mode == "human" and self._display:
            self._render_frame()  # updates self._surface
            self._display.blit(self._surface, (0, 0))
            pygame.display.flip()
            pygame.event.pump()  # Keep the window responsive

    def _get_info(self) -> Dict[str, Any]:
        info = get_state(self._game) if self._game else {}
        info["episode_steps"] = self._episode_steps
        info["level_count"] = self.level_count
        return info

    def close(self):
        if self._display:
            pygame.display.quit()
            self._display = None
