"""universe-hopper: walk off the edge of the screen into another universe.

A 2D side-scroller where reaching either viewport edge hops the player to a
different layered background scene. Levels are chosen by a home-aware
carousel (or plain random choice) and drawn by a parallax layer compositor
with zoom-and-pan-follow backgrounds and optional animated layers.
"""

from .config import (
    GameConfig,
    ViewportConfig,
    ParallaxConfig,
    PlayerConfig,
    TransitionConfig,
    LevelConfig,
    CONFIGS,
)
from .errors import HopperError, LevelConfigError, NoPlayableLevelsError, SpriteLoadError
from .levels import LevelDescriptor, load_level_document, parse_level_document
from .assets import AssetRegistry, LevelAssetBundle, LoadedLevels, PlayerSprites
from .carousel import LevelCarousel, RandomSelector, make_selector
from .transition import TransitionMachine, TransitionState
from .player import PlayerState, Controls, Edge
from .compositor import LayerCompositor
from .game import GameState, new_game, update, boot

__all__ = [
    "GameConfig",
    "ViewportConfig",
    "ParallaxConfig",
    "PlayerConfig",
    "TransitionConfig",
    "LevelConfig",
    "CONFIGS",
    "HopperError",
    "LevelConfigError",
    "NoPlayableLevelsError",
    "SpriteLoadError",
    "LevelDescriptor",
    "load_level_document",
    "parse_level_document",
    "AssetRegistry",
    "LevelAssetBundle",
    "LoadedLevels",
    "PlayerSprites",
    "LevelCarousel",
    "RandomSelector",
    "make_selector",
    "TransitionMachine",
    "TransitionState",
    "PlayerState",
    "Controls",
    "Edge",
    "LayerCompositor",
    "GameState",
    "new_game",
    "update",
    "boot",
]
