"""Frame timer shared by animated layers and the player sprite."""

from dataclasses import dataclass


# Absorbs float drift so dt == k * interval steps exactly k frames
_EPSILON = 1e-9


@dataclass
class FrameAnimation:
    """Looping frame index driven by accumulated elapsed time.

    Steps forward in whole frames, as many as the accumulated time allows,
    so one large ``dt`` catches up instead of dropping frames.
    """
    frame_count: int
    fps: float
    frame_index: int = 0
    timer: float = 0.0

    @property
    def interval(self) -> float:
        """Seconds per frame (fps below 1 behaves as 1)."""
        return 1.0 / max(1.0, self.fps)

    def advance(self, dt: float) -> int:
        """Accumulate ``dt`` seconds and step the frame index.

        Returns:
            Number of whole frames stepped.
        """
        count = max(1, self.frame_count)
        interval = self.interval
        self.timer += dt
        steps = 0
        while self.timer + _EPSILON >= interval:
            self.timer -= interval
            self.frame_index = (self.frame_index + 1) % count
            steps += 1
        return steps

    def reset(self) -> None:
        self.frame_index = 0
        self.timer = 0.0
