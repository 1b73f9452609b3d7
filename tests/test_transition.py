"""Tests for the edge transition state machine."""

import pytest

from universe_hopper.player import Edge
from universe_hopper.transition import TransitionMachine, TransitionMode, TransitionState


class TestTransitionMachine:
    def test_starts_steady(self):
        state = TransitionState()
        assert state.mode is TransitionMode.STEADY
        assert not state.transitioning
        assert state.last_edge is None

    def test_trigger(self):
        state = TransitionState()
        assert TransitionMachine(0.06).trigger(state, Edge.RIGHT, now=10.0)
        assert state.transitioning
        assert state.until == pytest.approx(10.06)
        assert state.last_edge is Edge.RIGHT

    def test_trigger_is_idempotent_while_transitioning(self):
        machine = TransitionMachine(0.06)
        state = TransitionState()
        machine.trigger(state, Edge.LEFT, now=1.0)
        until = state.until

        assert not machine.trigger(state, Edge.RIGHT, now=1.02)
        assert not machine.trigger(state, Edge.LEFT, now=1.03)
        assert state.until == until
        assert state.last_edge is Edge.LEFT

    def test_poll_before_deadline(self):
        machine = TransitionMachine(0.06)
        state = TransitionState()
        machine.trigger(state, Edge.LEFT, now=1.0)
        assert machine.poll(state, now=1.05) is None
        assert state.transitioning

    def test_poll_completes_once(self):
        machine = TransitionMachine(0.06)
        state = TransitionState()
        machine.trigger(state, Edge.LEFT, now=1.0)
        assert machine.poll(state, now=1.07) is Edge.LEFT
        assert state.mode is TransitionMode.STEADY
        assert machine.poll(state, now=1.08) is None

    def test_poll_when_steady(self):
        assert TransitionMachine().poll(TransitionState(), now=100.0) is None

    def test_retrigger_after_completion(self):
        machine = TransitionMachine(0.5)
        state = TransitionState()
        machine.trigger(state, Edge.LEFT, now=0.0)
        machine.poll(state, now=0.5)
        assert machine.trigger(state, Edge.RIGHT, now=0.6)
        assert state.until == pytest.approx(1.1)
        assert state.last_edge is Edge.RIGHT
