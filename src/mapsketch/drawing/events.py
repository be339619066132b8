"""Drawing event models and replay.

Map pointer events (click, move, double-click finish) and toolbar actions
are modelled as a discriminated union so a recorded session can be stored
as JSON and replayed against a state machine.

Example script:

    {
      "events": [
        {"event": "select_mode", "mode": "rectangle"},
        {"event": "click", "lng": 0.0, "lat": 0.0},
        {"event": "move", "lng": 1.0, "lat": 1.0},
        {"event": "click", "lng": 1.0, "lat": 1.0}
      ]
    }
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Annotated, Literal, assert_never

from pydantic import BaseModel, Field, PositiveInt

from mapsketch.drawing.machine import DrawingStateMachine
from mapsketch.drawing.outcomes import Outcome
from mapsketch.geometry.primitives import LngLat
from mapsketch.store.features import FeatureType


class SelectModeEvent(BaseModel):
    """Toolbar: select a drawing mode (null deselects)."""

    event: Literal["select_mode"] = "select_mode"
    mode: FeatureType | None = None


class ToggleModeEvent(BaseModel):
    """Toolbar: press a tool button (pressing the active tool deselects it)."""

    event: Literal["toggle_mode"] = "toggle_mode"
    mode: FeatureType


class ClickEvent(BaseModel):
    """Map: single click at a position."""

    event: Literal["click"] = "click"
    lng: float
    lat: float = Field(..., ge=-90.0, le=90.0)

    @property
    def point(self) -> LngLat:
        return LngLat(lng=self.lng, lat=self.lat)


class MoveEvent(BaseModel):
    """Map: pointer moved to a position."""

    event: Literal["move"] = "move"
    lng: float
    lat: float = Field(..., ge=-90.0, le=90.0)

    @property
    def point(self) -> LngLat:
        return LngLat(lng=self.lng, lat=self.lat)


class FinishEvent(BaseModel):
    """Map: finish signal (double-click) for polygons and line strings."""

    event: Literal["finish"] = "finish"


class CancelEvent(BaseModel):
    """Discard the shape in progress."""

    event: Literal["cancel"] = "cancel"


class RemoveFeatureEvent(BaseModel):
    """Remove a committed feature by id."""

    event: Literal["remove_feature"] = "remove_feature"
    feature_id: str = Field(..., min_length=1)


class ClearAllEvent(BaseModel):
    """Remove every feature and deselect the mode."""

    event: Literal["clear_all"] = "clear_all"


class SetLimitEvent(BaseModel):
    """Change the capacity limit of one feature type."""

    event: Literal["set_limit"] = "set_limit"
    feature_type: FeatureType
    maximum: PositiveInt


# Discriminated union for all drawing events
DrawingEvent = Annotated[
    SelectModeEvent
    | ToggleModeEvent
    | ClickEvent
    | MoveEvent
    | FinishEvent
    | CancelEvent
    | RemoveFeatureEvent
    | ClearAllEvent
    | SetLimitEvent,
    Field(discriminator="event"),
]


class EventScript(BaseModel):
    """An ordered, replayable list of drawing events."""

    events: list[DrawingEvent] = Field(default_factory=list)

    @classmethod
    def from_file(cls, path: Path) -> EventScript:
        """Load a script from a JSON file.

        Raises:
            OSError: If the file cannot be read.
            pydantic.ValidationError: If the content is not a valid script.
        """
        return cls.model_validate_json(path.read_text(encoding="utf-8"))


def dispatch(machine: DrawingStateMachine, event: DrawingEvent) -> Outcome | None:
    """Apply one event to the machine.

    Returns:
        The outcome reported by the machine, if any.
    """
    if isinstance(event, SelectModeEvent):
        machine.select_mode(event.mode)
        return None
    if isinstance(event, ToggleModeEvent):
        machine.toggle_mode(event.mode)
        return None
    if isinstance(event, ClickEvent):
        return machine.click(event.point)
    if isinstance(event, MoveEvent):
        machine.move(event.point)
        return None
    if isinstance(event, FinishEvent):
        return machine.finish()
    if isinstance(event, CancelEvent):
        machine.cancel()
        return None
    if isinstance(event, RemoveFeatureEvent):
        machine.store.remove(event.feature_id)
        return None
    if isinstance(event, ClearAllEvent):
        machine.clear_all()
        return None
    if isinstance(event, SetLimitEvent):
        machine.store.set_limit(event.feature_type, event.maximum)
        return None
    assert_never(event)


def replay(
    machine: DrawingStateMachine,
    events: Iterable[DrawingEvent],
) -> list[Outcome]:
    """Apply events in order and collect every reported outcome.

    Raises:
        FeatureNotFoundError: If a remove event names an unknown feature.
    """
    outcomes: list[Outcome] = []
    for event in events:
        outcome = dispatch(machine, event)
        if outcome is not None:
            outcomes.append(outcome)
    return outcomes
