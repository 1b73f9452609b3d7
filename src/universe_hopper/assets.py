"""Asset registry: resolves level descriptors into loaded image bundles.

Loading runs once at startup. Failure here is data, not control flow:
- background missing/unloadable → the level is dropped from the pool
- foreground unloadable → the level keeps going without a foreground
- any optional layer problem → that single layer is absent
- zero usable levels → NoPlayableLevelsError (fatal)

Each recoverable problem is logged once per cause key, tracked on the
registry instance.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, Union

import pygame

from .animation import FrameAnimation
from .config import PlayerConfig
from .errors import LayerSpecError, NoPlayableLevelsError, SpriteLoadError
from .levels import (
    Alignment,
    FrameSequenceLayerSpec,
    ImageLayerSpec,
    LevelDescriptor,
    parse_layer_spec,
)


logger = logging.getLogger(__name__)

ImageLoader = Callable[[str], pygame.Surface]

# Upper bound on auto-detected frames per sequence
MAX_AUTO_FRAMES = 999


def frame_filename(index: int) -> str:
    """Name of the 1-based frame ``index`` inside a sequence folder."""
    return f"frame_{index:02d}.png"


@dataclass
class StaticLayer:
    """Resolved single-image layer."""
    image: pygame.Surface
    alignment: Alignment = Alignment.SCREEN


@dataclass
class AnimatedLayer:
    """Resolved looping frame sequence with its own playback state."""
    frames: List[pygame.Surface]
    animation: FrameAnimation
    alignment: Alignment = Alignment.SCREEN

    @property
    def current_frame(self) -> pygame.Surface:
        return self.frames[self.animation.frame_index % len(self.frames)]


ResolvedLayer = Union[StaticLayer, AnimatedLayer]


@dataclass
class LevelAssetBundle:
    """All loaded images for one valid level."""
    level_id: str
    background: pygame.Surface
    foreground: Optional[pygame.Surface] = None
    layers: Dict[str, ResolvedLayer] = field(default_factory=dict)


@dataclass
class LoadedLevels:
    """Result of resolving a level document: the playable pool."""
    descriptors: List[LevelDescriptor]
    bundles: Dict[str, LevelAssetBundle]

    def __len__(self) -> int:
        return len(self.descriptors)

    def bundle_at(self, index: int) -> LevelAssetBundle:
        return self.bundles[self.descriptors[index].id]


@dataclass
class PlayerSprites:
    """Idle and walk frames for the player, with their frame rates."""
    idle: List[pygame.Surface]
    walk: List[pygame.Surface]
    idle_fps: float = 1.0
    walk_fps: float = 12.0


class AssetRegistry:
    """Loads and owns every image used by a session.

    Usage:
        registry = AssetRegistry(asset_root="game")
        loaded = registry.load_levels(load_level_document("game/data/levels.json"))
        sprites = registry.load_player_sprites(PlayerConfig())
    """

    def __init__(
        self,
        asset_root: Union[str, Path] = ".",
        image_loader: Optional[ImageLoader] = None,
        default_layer_fps: float = 12.0,
    ):
        """Create a registry.

        Args:
            asset_root: Directory that relative asset paths are resolved against.
            image_loader: Callable loading one image path. Defaults to pygame.image.load.
            default_layer_fps: Frame rate for frame layers that do not declare one.
        """
        self.asset_root = Path(asset_root)
        self.image_loader = image_loader or pygame.image.load
        self.default_layer_fps = default_layer_fps
        self._warned: Set[str] = set()

    @property
    def warnings_emitted(self) -> Set[str]:
        """Cause keys that have already produced a warning."""
        return set(self._warned)

    def warn_once(self, key: str, message: str) -> None:
        if key in self._warned:
            return
        self._warned.add(key)
        logger.warning(message)

    def _resolve(self, src: Union[str, Path]) -> str:
        path = Path(src)
        if not path.is_absolute():
            path = self.asset_root / path
        return str(path)

    def load_image(self, src: Union[str, Path]) -> pygame.Surface:
        """Load one image. Raises pygame.error / OSError on failure."""
        return self.image_loader(self._resolve(src))

    def try_load_image(self, src: Union[str, Path]) -> Optional[pygame.Surface]:
        """Load one image, returning None instead of raising."""
        try:
            return self.load_image(src)
        except (pygame.error, OSError) as e:
            logger.debug("Image load failed for %s: %s", src, e)
            return None

    # ------------------------------------------------------------------
    # Frame sequences
    # ------------------------------------------------------------------

    def load_frame_sequence(
        self, folder: Union[str, Path], count: Optional[int] = None,
    ) -> List[pygame.Surface]:
        """Load ``<folder>/frame_01.png``, ``frame_02.png``, ...

        Args:
            folder: Sequence folder (relative to asset_root unless absolute).
            count: Exact number of frames to load. Every one must load.
                None probes until the first missing frame.

        Raises:
            pygame.error / OSError: a counted frame failed to load.
            SpriteLoadError: auto-detect found no frames at all.
        """
        folder = Path(folder)
        if count is not None:
            return [self.load_image(folder / frame_filename(i)) for i in range(1, count + 1)]

        frames = []
        for i in range(1, MAX_AUTO_FRAMES + 1):
            frame = self.try_load_image(folder / frame_filename(i))
            if frame is None:
                break
            frames.append(frame)
        if not frames:
            raise SpriteLoadError(f"No frames found in {self._resolve(folder)} (expected {frame_filename(1)})")
        return frames

    # ------------------------------------------------------------------
    # Levels
    # ------------------------------------------------------------------

    def load_optional_layer(self, level_id: str, slot: str, raw) -> Optional[ResolvedLayer]:
        """Resolve one optional layer. Any problem yields None plus one warning."""
        if raw is None:
            return None

        try:
            spec = parse_layer_spec(raw, default_fps=self.default_layer_fps)
        except LayerSpecError as e:
            self.warn_once(f"{level_id}:{slot}:{e.cause}", f"[{level_id}] {slot}: {e}. Skipping.")
            return None

        if isinstance(spec, ImageLayerSpec):
            image = self.try_load_image(spec.source)
            if image is None:
                self.warn_once(
                    f"{level_id}:{slot}:loadFail",
                    f"[{level_id}] Failed to load {slot} image {spec.source}. Skipping layer.",
                )
                return None
            return StaticLayer(image=image, alignment=spec.alignment)

        if isinstance(spec, FrameSequenceLayerSpec):
            try:
                frames = self.load_frame_sequence(spec.folder, spec.count)
            except (pygame.error, OSError) as e:
                self.warn_once(
                    f"{level_id}:{slot}:loadFail",
                    f"[{level_id}] Failed to load {slot} frames. Skipping layer. ({e})",
                )
                return None
            return AnimatedLayer(
                frames=frames,
                animation=FrameAnimation(frame_count=len(frames), fps=spec.fps),
                alignment=spec.alignment,
            )

        raise TypeError(f"Unhandled layer spec: {spec!r}")

    def load_level(self, desc: LevelDescriptor) -> Optional[LevelAssetBundle]:
        """Resolve one level, or None when its background is unusable."""
        if not desc.background:
            self.warn_once(
                f"{desc.id}:background:missingSource",
                f'[{desc.id}] Missing required "background" field. Level excluded.',
            )
            return None

        background = self.try_load_image(desc.background)
        if background is None:
            self.warn_once(
                f"{desc.id}:background:loadFail",
                f"[{desc.id}] Background failed to load ({desc.background}). Level excluded.",
            )
            return None

        foreground = None
        if desc.foreground:
            foreground = self.try_load_image(desc.foreground)
            if foreground is None:
                self.warn_once(
                    f"{desc.id}:foreground:loadFail",
                    f"[{desc.id}] Foreground failed to load; continuing without it. ({desc.foreground})",
                )

        layers = {}
        for slot, raw in desc.layers.items():
            layer = self.load_optional_layer(desc.id, slot, raw)
            if layer is not None:
                layers[slot] = layer

        return LevelAssetBundle(
            level_id=desc.id,
            background=background,
            foreground=foreground,
            layers=layers,
        )

    def load_levels(self, descriptors: List[LevelDescriptor]) -> LoadedLevels:
        """Resolve every descriptor; keep those with a usable background.

        Raises:
            NoPlayableLevelsError: if no level survives.
        """
        valid = []
        bundles = {}
        for desc in descriptors:
            if desc.id in bundles:
                logger.warning("[%s] Duplicate level id. Later entry excluded.", desc.id)
                continue
            bundle = self.load_level(desc)
            if bundle is None:
                continue
            valid.append(desc)
            bundles[desc.id] = bundle
            logger.debug(
                "[%s] loaded (foreground=%s, layers=%s)",
                desc.id, bundle.foreground is not None, sorted(bundle.layers),
            )

        if not valid:
            raise NoPlayableLevelsError(
                "No valid levels loaded. Check that each level has a valid background image."
            )

        logger.info("Loaded %d of %d levels", len(valid), len(descriptors))
        return LoadedLevels(descriptors=valid, bundles=bundles)

    # ------------------------------------------------------------------
    # Player
    # ------------------------------------------------------------------

    def load_player_sprites(self, config: Optional[PlayerConfig] = None) -> PlayerSprites:
        """Auto-detect idle and walk frames.

        Raises:
            SpriteLoadError: if either animation has no frames.
        """
        config = config or PlayerConfig()
        return PlayerSprites(
            idle=self.load_frame_sequence(config.idle.folder),
            walk=self.load_frame_sequence(config.walk.folder),
            idle_fps=config.idle.fps,
            walk_fps=config.walk.fps,
        )
