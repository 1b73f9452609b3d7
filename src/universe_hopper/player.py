"""Player kinematics and animation state.

The player only moves horizontally. Each frame the held left/right inputs
are summed into a velocity, integrated, and clamped to the walkable range
[0, viewport_width - render_w]. Clamping against either bound reports that
edge, which is what starts a level transition.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Sequence

from .animation import FrameAnimation


class Edge(Enum):
    """Viewport edge the player ran into."""
    LEFT = "left"
    RIGHT = "right"


class AnimMode(Enum):
    IDLE = "idle"
    WALK = "walk"


FACING_RIGHT = 1
FACING_LEFT = -1


@dataclass
class Controls:
    """Snapshot of the two input signals for one frame."""
    left: bool = False
    right: bool = False

    @property
    def direction(self) -> int:
        """Net horizontal direction: -1, 0 or +1."""
        return int(self.right) - int(self.left)


@dataclass
class PlayerState:
    """Mutable per-frame player state."""
    x: float = 0.0
    facing: int = FACING_RIGHT
    anim: AnimMode = AnimMode.IDLE
    animation: FrameAnimation = field(default_factory=lambda: FrameAnimation(frame_count=1, fps=1))
    visible: bool = True

    # Render footprint (recomputed once sprites load)
    render_w: int = 26
    render_h: int = 56

    @property
    def frame_index(self) -> int:
        return self.animation.frame_index

    def max_x(self, viewport_width: float) -> float:
        """Right bound of the walkable range."""
        return max(0.0, viewport_width - self.render_w)


def set_anim(player: PlayerState, mode: AnimMode, frame_count: int = 1, fps: float = 1.0) -> None:
    """Switch animation mode, restarting playback only on an actual change.

    Restarting avoids indexing the new mode's frames with the old mode's
    (possibly larger) frame index.
    """
    if player.anim == mode:
        return
    player.anim = mode
    player.animation = FrameAnimation(frame_count=frame_count, fps=fps)


def step_player(
    player: PlayerState,
    controls: Controls,
    dt: float,
    viewport_width: float,
    speed: float,
    fps: Optional[Dict[AnimMode, float]] = None,
    frame_counts: Optional[Dict[AnimMode, int]] = None,
) -> Optional[Edge]:
    """Advance the player by one frame.

    Args:
        player: State to mutate.
        controls: Held inputs for this frame.
        dt: Elapsed seconds (already clamped by the caller).
        viewport_width: Logical viewport width.
        speed: Walking speed in px/s.
        fps: Frame rate per animation mode.
        frame_counts: Number of sprite frames per animation mode.

    Returns:
        The edge the player was clamped against, or None.
    """
    fps = fps or {}
    frame_counts = frame_counts or {}

    vx = controls.direction
    if vx != 0:
        player.facing = FACING_RIGHT if vx > 0 else FACING_LEFT

    mode = AnimMode.WALK if vx != 0 else AnimMode.IDLE
    set_anim(player, mode, frame_counts.get(mode, 1), fps.get(mode, 1.0))

    player.x += vx * speed * dt

    edge = None
    right_bound = player.max_x(viewport_width)
    if player.x <= 0:
        player.x = 0.0
        edge = Edge.LEFT
    elif player.x >= right_bound:
        player.x = right_bound
        edge = Edge.RIGHT

    player.animation.advance(dt)
    return edge


def place_at_entry(
    player: PlayerState,
    exit_edge: Edge,
    viewport_width: float,
    margin: float = 2.0,
    idle_frames: int = 1,
    idle_fps: float = 1.0,
) -> None:
    """Put the player just inside the edge opposite to ``exit_edge``.

    Leaving through the left edge re-enters from the right facing left;
    leaving through the right edge re-enters from the left facing right.
    """
    if exit_edge is Edge.LEFT:
        player.x = player.max_x(viewport_width) - margin
        player.facing = FACING_LEFT
    else:
        player.x = margin
        player.facing = FACING_RIGHT
    player.x = min(max(player.x, 0.0), player.max_x(viewport_width))

    player.anim = AnimMode.IDLE
    player.animation = FrameAnimation(frame_count=idle_frames, fps=idle_fps)
    player.visible = True


def fit_to_sprite(player: PlayerState, frames: Sequence, scale: float, viewport_width: float) -> None:
    """Size the render footprint from the first frame and re-clamp ``x``."""
    if not frames:
        return
    base = frames[0]
    player.render_w = round(base.get_width() * scale)
    player.render_h = round(base.get_height() * scale)
    player.x = min(max(player.x, 0.0), player.max_x(viewport_width))
