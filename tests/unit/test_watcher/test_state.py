"""Tests for the pure capture state transitions."""

from __future__ import annotations

import pytest

from docsnap.domain.models import CaptureState
from docsnap.watcher.state import (
    CaptureEvent,
    InvalidTransitionError,
    next_state,
    should_trigger,
)


class TestNextState:
    @pytest.mark.parametrize(
        ("state", "event", "expected"),
        [
            (CaptureState.WATCHING, CaptureEvent.CHANGE_DETECTED, CaptureState.CAPTURING),
            (CaptureState.CAPTURING, CaptureEvent.CAPTURE_FINISHED, CaptureState.COOLDOWN),
            (CaptureState.COOLDOWN, CaptureEvent.COOLDOWN_ELAPSED, CaptureState.WATCHING),
        ],
    )
    def test_valid_transitions(self, state, event, expected) -> None:
        assert next_state(state, event) is expected

    @pytest.mark.parametrize(
        ("state", "event"),
        [
            (CaptureState.CAPTURING, CaptureEvent.CHANGE_DETECTED),
            (CaptureState.COOLDOWN, CaptureEvent.CHANGE_DETECTED),
            (CaptureState.WATCHING, CaptureEvent.CAPTURE_FINISHED),
            (CaptureState.WATCHING, CaptureEvent.COOLDOWN_ELAPSED),
            (CaptureState.CAPTURING, CaptureEvent.COOLDOWN_ELAPSED),
        ],
    )
    def test_invalid_transitions_raise(self, state, event) -> None:
        with pytest.raises(InvalidTransitionError) as excinfo:
            next_state(state, event)
        assert excinfo.value.state is state
        assert excinfo.value.event is event


class TestShouldTrigger:
    def test_triggers_above_threshold(self) -> None:
        assert should_trigger(CaptureState.WATCHING, 16.0, True, 15.0)

    def test_equal_to_threshold_does_not_trigger(self) -> None:
        assert not should_trigger(CaptureState.WATCHING, 15.0, True, 15.0)

    def test_needs_previous_frame(self) -> None:
        assert not should_trigger(CaptureState.WATCHING, 200.0, False, 15.0)

    @pytest.mark.parametrize("state", [CaptureState.CAPTURING, CaptureState.COOLDOWN])
    def test_never_triggers_outside_watching(self, state) -> None:
        assert not should_trigger(state, 200.0, True, 15.0)
