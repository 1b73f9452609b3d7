"""Level documents: descriptors, layer specs and the debug start override.

A level document is JSON of the form::

    {"levels": [
        {"id": "forest", "background": "assets/levels/forest/bg.png",
         "foreground": "assets/levels/forest/fg.png",
         "layer1": {"type": "frames", "folder": "assets/levels/forest/fireflies",
                    "count": 6, "fps": 10, "align": "background"},
         "layer2": {"type": "image", "src": "assets/ui/arrows.png"},
         "isHome": true},
        ...
    ]}

Adding a level only needs new assets and a new entry here. Layer specs are
kept raw on the descriptor and parsed by the asset registry, so that a
broken layer only ever costs that one layer.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import LevelConfigError, LayerSpecError


logger = logging.getLogger(__name__)

MISSING_ID = "(missing id)"
LAYER_KINDS = ("image", "frames")


class Alignment(Enum):
    """How an optional layer is positioned on screen."""
    SCREEN = "screen"  # Full viewport, no transform (titles, arrows)
    BACKGROUND = "background"  # Shares the background's zoom-and-pan transform


@dataclass(frozen=True)
class ImageLayerSpec:
    """Single static image layer."""
    source: str
    alignment: Alignment = Alignment.SCREEN


@dataclass(frozen=True)
class FrameSequenceLayerSpec:
    """Looping animation read from ``<folder>/frame_NN.png``."""
    folder: str
    count: int
    fps: float
    alignment: Alignment = Alignment.SCREEN


LayerSpec = Union[ImageLayerSpec, FrameSequenceLayerSpec]


@dataclass
class LevelDescriptor:
    """One entry of the level document (read-only after parsing)."""
    id: str
    background: Optional[str]
    foreground: Optional[str] = None
    layers: Dict[str, Any] = field(default_factory=dict)  # slot -> raw layer spec
    is_home: bool = False


def parse_layer_spec(raw: Any, default_fps: float = 12.0) -> LayerSpec:
    """Parse one raw layer mapping into a typed LayerSpec.

    Raises:
        LayerSpecError: with a cause key describing what is wrong.
    """
    if not isinstance(raw, dict):
        raise LayerSpecError("unsupportedType", f"layer spec must be an object, got {type(raw).__name__}")

    kind = str(raw.get("type") or "frames").lower()
    if kind not in LAYER_KINDS:
        raise LayerSpecError("unsupportedType", f'unsupported type="{raw.get("type")}"')

    align_raw = str(raw.get("align") or Alignment.SCREEN.value).lower()
    try:
        alignment = Alignment(align_raw)
    except ValueError:
        raise LayerSpecError("unsupportedAlign", f'unsupported align="{raw.get("align")}"') from None

    if kind == "image":
        source = raw.get("src")
        if not source:
            raise LayerSpecError("missingSource", 'type=image but is missing "src"')
        return ImageLayerSpec(source=str(source), alignment=alignment)

    folder = raw.get("folder")
    if not folder:
        raise LayerSpecError("missingFolder", 'type=frames but is missing "folder"')
    try:
        count = int(raw.get("count") or 0)
    except (TypeError, ValueError):
        count = 0
    if count <= 0:
        raise LayerSpecError("missingCount", 'type=frames but has no positive "count"')
    try:
        fps = float(raw.get("fps") or default_fps)
    except (TypeError, ValueError):
        fps = default_fps
    return FrameSequenceLayerSpec(folder=str(folder), count=count, fps=fps, alignment=alignment)


def _image_path(entry: Dict[str, Any], key: str, level_id: str) -> Optional[str]:
    """Read an image path field; anything but a non-empty string counts as absent."""
    value = entry.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        logger.warning("[%s] %s must be a path string, got %s. Ignoring it.", level_id, key, type(value).__name__)
        return None
    return value


def parse_level_document(data: Any) -> List[LevelDescriptor]:
    """Turn a decoded level document into descriptors, preserving order.

    Raises:
        LevelConfigError: if there is no non-empty ``levels`` list.
    """
    levels = data.get("levels") if isinstance(data, dict) else None
    if not isinstance(levels, list) or not levels:
        raise LevelConfigError("level document must contain { levels: [ ... ] } with at least 1 level")

    descriptors = []
    for entry in levels:
        if not isinstance(entry, dict):
            raise LevelConfigError(f"level entries must be objects, got {type(entry).__name__}")
        layers = {
            key: value for key, value in entry.items()
            if key.startswith("layer") and key[5:].isdigit() and value is not None
        }
        level_id = str(entry.get("id") or MISSING_ID)
        descriptors.append(LevelDescriptor(
            id=level_id,
            background=_image_path(entry, "background", level_id),
            foreground=_image_path(entry, "foreground", level_id),
            layers=layers,
            is_home=entry.get("isHome") is True,
        ))
    return descriptors


def load_level_document(path: Union[str, Path]) -> List[LevelDescriptor]:
    """Read and parse the level document at ``path``.

    Raises:
        LevelConfigError: document missing, unreadable, not JSON, or empty.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        raise LevelConfigError(f"level document not found: {path}") from None
    except (OSError, json.JSONDecodeError) as e:
        raise LevelConfigError(f"failed to read level document {path}: {e}") from e
    return parse_level_document(data)


def home_index(descriptors: List[LevelDescriptor]) -> Optional[int]:
    """Index of the first level flagged as home, or None."""
    for i, desc in enumerate(descriptors):
        if desc.is_home:
            return i
    return None


def debug_start_index(debug: Any, raw_level: Any, level_count: int) -> Optional[int]:
    """Resolve a 1-based debug level number into a 0-based index.

    Only honoured when ``debug`` is truthy (``True`` or the string "true").
    Returns None when the number is missing, unparsable, < 1, or beyond
    ``level_count``.
    """
    if isinstance(debug, str):
        debug = debug.strip().lower() == "true"
    if not debug or raw_level is None or raw_level == "":
        return None
    try:
        n = int(raw_level)
    except (TypeError, ValueError):
        return None
    if n < 1 or n > level_count:
        return None
    return n - 1
