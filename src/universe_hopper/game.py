"""Application state and the per-frame update.

All mutable session state lives in one GameState owned by whoever runs the
frame loop (the interactive engine or the Gymnasium wrapper). ``update``
is the whole simulation step; rendering reads the state afterwards.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Set

import numpy as np

from .animation import FrameAnimation
from .assets import AssetRegistry, LevelAssetBundle, LoadedLevels, PlayerSprites
from .carousel import LevelSelector, make_selector
from .config import GameConfig
from .levels import debug_start_index, home_index, load_level_document
from .player import (
    AnimMode,
    Controls,
    PlayerState,
    fit_to_sprite,
    place_at_entry,
    step_player,
)
from .transition import TransitionMachine, TransitionState


logger = logging.getLogger(__name__)


@dataclass
class GameState:
    """Everything that changes while a session runs."""
    levels: LoadedLevels
    sprites: Optional[PlayerSprites]
    selector: LevelSelector
    player: PlayerState
    transition: TransitionState = field(default_factory=TransitionState)
    level_index: int = 0
    visited: Set[int] = field(default_factory=set)
    transitions: int = 0

    @property
    def level_id(self) -> str:
        return self.levels.descriptors[self.level_index].id


def current_bundle(state: GameState) -> LevelAssetBundle:
    return state.levels.bundle_at(state.level_index)


def _anim_tables(sprites: Optional[PlayerSprites]):
    if sprites is None:
        return {}, {}
    fps = {AnimMode.IDLE: sprites.idle_fps, AnimMode.WALK: sprites.walk_fps}
    counts = {AnimMode.IDLE: len(sprites.idle), AnimMode.WALK: len(sprites.walk)}
    return fps, counts


def new_game(
    levels: LoadedLevels,
    sprites: Optional[PlayerSprites] = None,
    config: Optional[GameConfig] = None,
    rng: Optional[np.random.Generator] = None,
    start_index: Optional[int] = None,
) -> GameState:
    """Build a fresh session: player centred, selector seeded.

    Args:
        levels: Playable level pool from the asset registry.
        sprites: Player frames; None draws no player (tests, headless runs).
        config: Game configuration. Uses defaults if None.
        rng: Random generator for level selection.
        start_index: Debug override for the first level (0-based).
    """
    config = config or GameConfig()
    width = config.viewport.width

    player = PlayerState(
        x=float(width // 2),
        render_w=config.player.default_render_w,
        render_h=config.player.default_render_h,
    )
    if sprites is not None:
        fit_to_sprite(player, sprites.idle, config.player.sprite_scale, width)
        player.animation = FrameAnimation(frame_count=len(sprites.idle), fps=sprites.idle_fps)

    selector = make_selector(
        config.levels.selection_policy,
        len(levels),
        home_index=home_index(levels.descriptors),
        rng=rng,
        start_index=start_index,
    )

    state = GameState(
        levels=levels,
        sprites=sprites,
        selector=selector,
        player=player,
        level_index=selector.current,
    )
    state.visited.add(state.level_index)
    logger.info("Starting in level %s (%d/%d)", state.level_id, state.level_index + 1, len(levels))
    return state


def update(
    state: GameState,
    controls: Controls,
    dt: float,
    now: float,
    config: Optional[GameConfig] = None,
) -> float:
    """Advance the session by one frame.

    Args:
        state: Session to mutate.
        controls: Held inputs for this frame.
        dt: Raw elapsed seconds since the last frame.
        now: Wall-clock time in seconds (drives transition deadlines).
        config: Game configuration. Uses defaults if None.

    Returns:
        The clamped dt, for advancing layer animations while drawing.
    """
    config = config or GameConfig()
    dt = min(config.viewport.max_frame_dt, max(0.0, dt))
    machine = TransitionMachine(config.transition.duration)
    width = config.viewport.width
    fps, counts = _anim_tables(state.sprites)

    if not state.transition.transitioning:
        edge = step_player(
            state.player, controls, dt, width, config.player.speed,
            fps=fps, frame_counts=counts,
        )
        if edge is not None and machine.trigger(state.transition, edge, now):
            state.player.visible = False
    else:
        edge = machine.poll(state.transition, now)
        if edge is not None:
            state.level_index = state.selector.move(edge)
            state.visited.add(state.level_index)
            state.transitions += 1
            place_at_entry(
                state.player, edge, width,
                margin=config.player.edge_margin_px,
                idle_frames=counts.get(AnimMode.IDLE, 1),
                idle_fps=fps.get(AnimMode.IDLE, 1.0),
            )
            logger.debug("Left through %s edge → level %s", edge.value, state.level_id)

    return dt


def get_state(state: GameState) -> Dict[str, Any]:
    """Plain-dict snapshot for logging and inspection."""
    return {
        "level_index": state.level_index,
        "level_id": state.level_id,
        "player_x": state.player.x,
        "facing": state.player.facing,
        "anim": state.player.anim.value,
        "player_visible": state.player.visible,
        "transitioning": state.transition.transitioning,
        "last_edge": state.transition.last_edge.value if state.transition.last_edge else None,
        "visited": sorted(state.visited),
        "transitions": state.transitions,
    }


def boot(
    config: Optional[GameConfig] = None,
    registry: Optional[AssetRegistry] = None,
    rng: Optional[np.random.Generator] = None,
    debug_level: Any = None,
    load_sprites: bool = True,
) -> GameState:
    """Load the level document, every level and the player sprites once.

    Args:
        config: Game configuration. Uses defaults if None.
        registry: Asset registry. Built from ``config.levels`` if None.
        rng: Random generator for level selection.
        debug_level: 1-based debug start level, or None. Ignored when it
            does not resolve to a playable level.
        load_sprites: Set False to run without player sprites.

    Raises:
        LevelConfigError, NoPlayableLevelsError, SpriteLoadError: fatal
        startup failures.
    """
    config = config or GameConfig()
    lc = config.levels
    registry = registry or AssetRegistry(lc.asset_root, default_layer_fps=lc.default_layer_fps)

    levels_path = Path(lc.levels_path)
    if not levels_path.is_absolute():
        levels_path = registry.asset_root / levels_path
    descriptors = load_level_document(levels_path)

    levels = registry.load_levels(descriptors)
    sprites = registry.load_player_sprites(config.player) if load_sprites else None

    start_index = debug_start_index(debug_level is not None, debug_level, len(levels))
    if debug_level is not None and start_index is None:
        logger.warning("Debug start level %r does not match a playable level; ignoring", debug_level)

    return new_game(levels, sprites, config, rng=rng, start_index=start_index)
