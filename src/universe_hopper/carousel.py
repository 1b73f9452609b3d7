"""Level selection policies.

Two policies share the LevelSelector interface:

- LevelCarousel (default): traversal history with a cursor. Walking past
  either end of the history inserts one not-yet-used non-home level at
  that end. Once every non-home level has been used, the history freezes
  into a ring and further moves only rotate the cursor. A level flagged as
  home seeds the history and stays in the ring.
- RandomSelector: the older policy. Every move draws a uniformly random
  level, with replacement, and keeps no history.
"""

from typing import List, Optional, Set

import numpy as np

from .player import Edge


class LevelSelector:
    """Base class: picks the next level index when the player leaves an edge."""

    name: str = "base"

    def __init__(self, level_count: int, rng: Optional[np.random.Generator] = None):
        if level_count < 1:
            raise ValueError("level_count must be at least 1")
        self.level_count = level_count
        self.rng = rng or np.random.default_rng()

    @property
    def current(self) -> int:
        raise NotImplementedError

    def move_right(self) -> int:
        raise NotImplementedError

    def move_left(self) -> int:
        raise NotImplementedError

    def move(self, edge: Edge) -> int:
        """Move in the direction of the edge the player left through."""
        if edge is Edge.RIGHT:
            return self.move_right()
        return self.move_left()

    def _random_index(self) -> int:
        return int(self.rng.integers(0, self.level_count))


class LevelCarousel(LevelSelector):
    """History-based carousel with an optional home level.

    Attributes:
        sequence: Level indices in traversal order (left to right).
        cursor: Position of the current level inside ``sequence``.
    """

    name = "carousel"

    def __init__(
        self,
        level_count: int,
        home_index: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        start_index: Optional[int] = None,
    ):
        """Seed the carousel.

        Args:
            level_count: Number of playable levels.
            home_index: Level flagged as home, if any. Seeds the history.
            rng: Random generator for draws from the unused pool.
            start_index: Debug override for the first level. Takes
                precedence over the home seed.
        """
        super().__init__(level_count, rng)
        if home_index is not None and not 0 <= home_index < level_count:
            raise ValueError(f"home_index {home_index} out of range for {level_count} levels")
        if start_index is not None and not 0 <= start_index < level_count:
            raise ValueError(f"start_index {start_index} out of range for {level_count} levels")

        self.home_index = home_index
        self.non_home: List[int] = [i for i in range(level_count) if i != home_index]

        if start_index is not None:
            seed = start_index
        elif home_index is not None:
            seed = home_index
        else:
            seed = self._random_index()

        self.sequence: List[int] = [seed]
        self.cursor = 0

    @property
    def current(self) -> int:
        return self.sequence[self.cursor]

    @property
    def used(self) -> Set[int]:
        """Non-home levels that have appeared in the history."""
        return {i for i in self.sequence if i != self.home_index}

    @property
    def unused(self) -> List[int]:
        used = self.used
        return [i for i in self.non_home if i not in used]

    @property
    def exhausted(self) -> bool:
        """True once every non-home level has been used; the ring is frozen."""
        return not self.unused

    def _draw_unused(self) -> int:
        pool = self.unused
        return pool[int(self.rng.integers(0, len(pool)))]

    def move_right(self) -> int:
        if self.level_count <= 1:
            return self.current

        if self.exhausted:
            self.cursor = (self.cursor + 1) % len(self.sequence)
        elif self.cursor < len(self.sequence) - 1:
            self.cursor += 1
        else:
            self.sequence.append(self._draw_unused())
            self.cursor = len(self.sequence) - 1
        return self.current

    def move_left(self) -> int:
        if self.level_count <= 1:
            return self.current

        if self.exhausted:
            self.cursor = (self.cursor - 1) % len(self.sequence)
        elif self.cursor > 0:
            self.cursor -= 1
        else:
            self.sequence.insert(0, self._draw_unused())
            self.cursor = 0
        return self.current


class RandomSelector(LevelSelector):
    """Uniform random level on every move, with replacement."""

    name = "random"

    def __init__(
        self,
        level_count: int,
        rng: Optional[np.random.Generator] = None,
        start_index: Optional[int] = None,
    ):
        super().__init__(level_count, rng)
        if start_index is not None and not 0 <= start_index < level_count:
            raise ValueError(f"start_index {start_index} out of range for {level_count} levels")
        self._current = start_index if start_index is not None else self._random_index()

    @property
    def current(self) -> int:
        return self._current

    def move_right(self) -> int:
        self._current = self._random_index()
        return self._current

    def move_left(self) -> int:
        return self.move_right()


def make_selector(
    policy: str,
    level_count: int,
    home_index: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    start_index: Optional[int] = None,
) -> LevelSelector:
    """Build the selector named by ``policy``.

    The random policy ignores ``home_index``.
    """
    if policy == "carousel":
        return LevelCarousel(level_count, home_index=home_index, rng=rng, start_index=start_index)
    if policy == "random":
        return RandomSelector(level_count, rng=rng, start_index=start_index)
    raise ValueError(f"Unknown selection policy: {policy!r}")
