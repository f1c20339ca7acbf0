"""Pure transition rules for the capture state machine.

Side effects (pausing the sampler, invoking the extractor, scheduling
the re-arm) live in ``docsnap.watcher.machine``. This module only
answers "what state comes next" and "should this tick trigger".
"""

from __future__ import annotations

import enum

from docsnap.domain.models import CaptureState


class CaptureEvent(str, enum.Enum):
    """Events that move the capture session between states."""

    CHANGE_DETECTED = "change_detected"
    CAPTURE_FINISHED = "capture_finished"
    COOLDOWN_ELAPSED = "cooldown_elapsed"


TRANSITIONS: dict[tuple[CaptureState, CaptureEvent], CaptureState] = {
    (CaptureState.WATCHING, CaptureEvent.CHANGE_DETECTED): CaptureState.CAPTURING,
    (CaptureState.CAPTURING, CaptureEvent.CAPTURE_FINISHED): CaptureState.COOLDOWN,
    (CaptureState.COOLDOWN, CaptureEvent.COOLDOWN_ELAPSED): CaptureState.WATCHING,
}


class InvalidTransitionError(Exception):
    """Raised when an event does not apply to the current state."""

    def __init__(self, state: CaptureState, event: CaptureEvent) -> None:
        super().__init__(f"Event {event.value!r} is not valid in state {state.value!r}")
        self.state = state
        self.event = event


def next_state(state: CaptureState, event: CaptureEvent) -> CaptureState:
    """Return the state reached by applying ``event`` in ``state``."""
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransitionError(state, event) from None


def should_trigger(
    state: CaptureState,
    score: float,
    has_previous: bool,
    threshold: float,
) -> bool:
    """Whether a scored tick should start a capture.

    A score exactly equal to the threshold does not trigger.
    """
    return state is CaptureState.WATCHING and has_previous and score > threshold
