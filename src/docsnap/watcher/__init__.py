"""Watcher module for docsnap.

Implements the motion-triggered capture session: frame change scoring,
the capture state machine, the capture invoker, status sinks, and the
loop that drives them.

Public API:
    WatchLoop -- Session loop owning the capture device
    CaptureStateMachine -- Watch/capture/cooldown lifecycle
    CaptureInvoker -- Runs one extraction per trigger
    StatusReporter -- Abstract status sink
    frame_difference -- Single-channel mean absolute difference
"""

from docsnap.watcher.change import frame_difference
from docsnap.watcher.invoker import CaptureInvoker
from docsnap.watcher.loop import WatchLoop
from docsnap.watcher.machine import CaptureStateMachine
from docsnap.watcher.reporter import (
    ConsoleStatusReporter,
    FanOutReporter,
    StatusBoard,
    StatusReporter,
)
from docsnap.watcher.state import CaptureEvent, InvalidTransitionError, next_state, should_trigger

__all__ = [
    "CaptureEvent",
    "CaptureInvoker",
    "CaptureStateMachine",
    "ConsoleStatusReporter",
    "FanOutReporter",
    "InvalidTransitionError",
    "StatusBoard",
    "StatusReporter",
    "WatchLoop",
    "frame_difference",
    "next_state",
    "should_trigger",
]
