"""Drawing module for mapsketch.

This package turns pointer events into committed features:

    - Machine: IDLE / ARMED / ACTIVE drawing state machine
    - Pipeline: enclosure check, overlap trim, commit
    - Outcomes: Committed results and typed Rejections
    - Events: replayable event models

Example:
    from mapsketch.drawing import DrawingStateMachine, Rejection
    from mapsketch.geometry import LngLat
    from mapsketch.store import FeatureStore, FeatureType

    machine = DrawingStateMachine(FeatureStore())
    machine.select_mode(FeatureType.POLYGON)
    for lng, lat in [(0, 0), (1, 0), (1, 1)]:
        machine.click(LngLat(lng=lng, lat=lat))
    outcome = machine.finish()
    if isinstance(outcome, Rejection):
        print(outcome.message)
"""

from mapsketch.drawing.events import (
    CancelEvent,
    ClearAllEvent,
    ClickEvent,
    DrawingEvent,
    EventScript,
    FinishEvent,
    MoveEvent,
    RemoveFeatureEvent,
    SelectModeEvent,
    SetLimitEvent,
    ToggleModeEvent,
    dispatch,
    replay,
)
from mapsketch.drawing.machine import DrawingStateMachine, SessionState
from mapsketch.drawing.outcomes import Committed, Outcome, Rejection, RejectionReason
from mapsketch.drawing.pipeline import check_enclosure, commit_candidate, constrain_candidate
from mapsketch.drawing.session import DrawingSession

__all__ = [
    "CancelEvent",
    "ClearAllEvent",
    "ClickEvent",
    "Committed",
    "DrawingEvent",
    "DrawingSession",
    "DrawingStateMachine",
    "EventScript",
    "FinishEvent",
    "MoveEvent",
    "Outcome",
    "Rejection",
    "RejectionReason",
    "RemoveFeatureEvent",
    "SelectModeEvent",
    "SessionState",
    "SetLimitEvent",
    "ToggleModeEvent",
    "check_enclosure",
    "commit_candidate",
    "constrain_candidate",
    "dispatch",
    "replay",
]
