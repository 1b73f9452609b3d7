"""Edge-triggered level transition: steady → transitioning → steady.

Reaching an edge hides the player until a short wall-clock deadline; when
it passes the caller switches level and re-places the player. Triggering
again while already transitioning changes nothing, so one overshoot frame
can never fire two transitions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .player import Edge


class TransitionMode(Enum):
    STEADY = "steady"
    TRANSITIONING = "transitioning"


@dataclass
class TransitionState:
    mode: TransitionMode = TransitionMode.STEADY
    until: float = 0.0  # Deadline (same clock as ``now``)
    last_edge: Optional[Edge] = None

    @property
    def transitioning(self) -> bool:
        return self.mode is TransitionMode.TRANSITIONING


class TransitionMachine:
    """Drives a TransitionState with a fixed hide duration."""

    def __init__(self, duration: float = 0.06):
        self.duration = duration

    def trigger(self, state: TransitionState, edge: Edge, now: float) -> bool:
        """Start a transition through ``edge``.

        Returns:
            False (and leaves ``state`` untouched) if already transitioning.
        """
        if state.transitioning:
            return False
        state.mode = TransitionMode.TRANSITIONING
        state.until = now + self.duration
        state.last_edge = edge
        return True

    def poll(self, state: TransitionState, now: float) -> Optional[Edge]:
        """Finish the transition once the deadline has passed.

        Returns:
            The edge that started the transition when it completes on this
            call, otherwise None.
        """
        if not state.transitioning or now < state.until:
            return None
        state.mode = TransitionMode.STEADY
        return state.last_edge
