"""Configuration system for the universe hopper.

All tunables live here as small dataclass groups:
- ViewportConfig: logical drawing surface and frame pacing
- ParallaxConfig: zoom-and-pan-follow for background and foreground
- PlayerConfig: walking speed, sprite folders and sprite placement
- TransitionConfig: how long the player stays hidden between levels
- LevelConfig: level document location, layer stack order, selection policy

GameConfig combines them. CONFIGS holds named presets.
"""

from dataclasses import dataclass, field
from typing import Tuple, Dict, Any, ClassVar


@dataclass
class ViewportConfig:
    """Fixed logical viewport the compositor draws into."""
    width: int = 1280
    height: int = 720
    fps: int = 60
    max_frame_dt: float = 0.033  # Per-tick elapsed time ceiling (s). Bounds jumps after pauses.

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "fps": self.fps,
            "max_frame_dt": self.max_frame_dt,
        }


@dataclass
class ParallaxConfig:
    """Zoom-and-pan-follow parameters.

    Zoom > 1 creates extra image to pan inside without revealing edges.
    Follow is 0..1 (0 = static, 1 = full follow left/center/right).
    """
    background_zoom: float = 1.05
    foreground_zoom: float = 1.02
    background_follow: float = 0.025  # Near-static
    foreground_follow: float = 0.55  # Noticeably more parallax than the background
    max_pan_px: float = 55.0  # Hard ceiling on pan displacement, per side

    def __post_init__(self):
        for name in ("background_zoom", "foreground_zoom"):
            if getattr(self, name) <= 1.0:
                raise ValueError(f"{name} must be > 1, got {getattr(self, name)}")
        if self.max_pan_px < 0:
            raise ValueError(f"max_pan_px must be >= 0, got {self.max_pan_px}")

    def to_dict(self) -> Dict[str, float]:
        return {
            "background_zoom": self.background_zoom,
            "foreground_zoom": self.foreground_zoom,
            "background_follow": self.background_follow,
            "foreground_follow": self.foreground_follow,
            "max_pan_px": self.max_pan_px,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> "ParallaxConfig":
        return cls(
            background_zoom=d.get("background_zoom", 1.05),
            foreground_zoom=d.get("foreground_zoom", 1.02),
            background_follow=d.get("background_follow", 0.025),
            foreground_follow=d.get("foreground_follow", 0.55),
            max_pan_px=d.get("max_pan_px", 55.0),
        )


@dataclass
class SpriteAnimationConfig:
    """Folder of auto-detected frames for one player animation mode."""
    folder: str
    fps: float


@dataclass
class PlayerConfig:
    """Player movement and sprite placement."""
    speed: float = 90.0  # px/s
    sprite_scale: float = 0.32
    floor_y: int = 600  # Logical floor (never drawn); sprite feet rest here
    feet_fudge_px: int = 0
    walk_bob_px: float = 0.0  # 0 disables the walk bob
    edge_margin_px: float = 2.0  # Re-entry inset from the viewport edge

    # Render footprint used until sprites are loaded
    default_render_w: int = 26
    default_render_h: int = 56

    idle: SpriteAnimationConfig = field(
        default_factory=lambda: SpriteAnimationConfig("assets/sprites/hero_idle_custom", 1)
    )
    walk: SpriteAnimationConfig = field(
        default_factory=lambda: SpriteAnimationConfig("assets/sprites/hero_walk_custom", 12)
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speed": self.speed,
            "sprite_scale": self.sprite_scale,
            "floor_y": self.floor_y,
            "feet_fudge_px": self.feet_fudge_px,
            "walk_bob_px": self.walk_bob_px,
            "edge_margin_px": self.edge_margin_px,
            "idle": {"folder": self.idle.folder, "fps": self.idle.fps},
            "walk": {"folder": self.walk.folder, "fps": self.walk.fps},
        }


@dataclass
class TransitionConfig:
    """Edge-trigger → hide → reposition → reveal timing."""
    duration: float = 0.06  # Seconds the player stays hidden


@dataclass
class LevelConfig:
    """Where levels come from and how they are sequenced and stacked."""
    levels_path: str = "data/levels.json"
    asset_root: str = "."
    default_layer_fps: float = 12.0
    selection_policy: str = "carousel"  # carousel, random

    # Back-to-front draw order. Fixed roles: background, player, foreground.
    # Every other name is an optional layer slot read from the level document.
    layer_order: Tuple[str, ...] = (
        "background", "layer1", "player", "layer2", "layer3", "layer4", "foreground",
    )

    SELECTION_POLICIES: ClassVar[list] = ["carousel", "random"]
    FIXED_ROLES: ClassVar[Tuple[str, ...]] = ("background", "player", "foreground")

    def __post_init__(self):
        if self.selection_policy not in self.SELECTION_POLICIES:
            raise ValueError(
                f"Unknown selection_policy: {self.selection_policy!r} "
                f"(expected one of {self.SELECTION_POLICIES})"
            )
        self.layer_order = tuple(self.layer_order)
        for role in self.FIXED_ROLES:
            if self.layer_order.count(role) != 1:
                raise ValueError(f"layer_order must contain {role!r} exactly once")
        if len(set(self.layer_order)) != len(self.layer_order):
            raise ValueError("layer_order contains duplicate slots")

    @property
    def optional_slots(self) -> Tuple[str, ...]:
        """Layer slots that are neither background, player, nor foreground."""
        return tuple(s for s in self.layer_order if s not in self.FIXED_ROLES)


@dataclass
class GameConfig:
    """Complete game configuration combining all parameter groups."""
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    parallax: ParallaxConfig = field(default_factory=ParallaxConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    transition: TransitionConfig = field(default_factory=TransitionConfig)
    levels: LevelConfig = field(default_factory=LevelConfig)

    @property
    def screen_width(self) -> int:
        return self.viewport.width

    @property
    def screen_height(self) -> int:
        return self.viewport.height

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary."""
        return {
            "viewport": self.viewport.to_dict(),
            "parallax": self.parallax.to_dict(),
            "player": self.player.to_dict(),
            "transition_duration": self.transition.duration,
            "selection_policy": self.levels.selection_policy,
            "layer_order": list(self.levels.layer_order),
        }


# Predefined configurations
CONFIGS = {
    # Subtle parallax, home-aware carousel
    "default": GameConfig(),

    # Barely any pan at all
    "subtle": GameConfig(parallax=ParallaxConfig(
        background_follow=0.0,
        foreground_follow=0.2,
        max_pan_px=20.0,
    )),

    # Deep zoom margins, strong follow
    "dramatic": GameConfig(parallax=ParallaxConfig(
        background_zoom=1.15,
        foreground_zoom=1.1,
        background_follow=0.3,
        foreground_follow=1.0,
        max_pan_px=120.0,
    )),

    # Pure random level choice on every edge (with replacement), no history
    "classic": GameConfig(levels=LevelConfig(selection_policy="random")),
}
