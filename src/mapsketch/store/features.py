"""Feature model and the in-memory feature store.

The store is the single source of truth for committed features, per-type
capacity limits and the drawing mode flags. Features are immutable: the
collection only ever grows by appending and shrinks by removal.
"""

from __future__ import annotations

import secrets
import string
import time
from enum import Enum
from typing import Self

from pydantic import BaseModel, Field, PositiveInt, model_validator

from mapsketch.geometry.primitives import Geometry, LineStringGeometry, PolygonGeometry


class FeatureType(str, Enum):
    """Kinds of feature a user can draw."""

    POLYGON = "polygon"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    LINESTRING = "linestring"

    @property
    def is_area(self) -> bool:
        """Whether features of this type are subject to the overlap rules."""
        return self is not FeatureType.LINESTRING

    @property
    def label(self) -> str:
        """Human-readable name used in messages."""
        return "line string" if self is FeatureType.LINESTRING else self.value


FEATURE_COLORS: dict[FeatureType, str] = {
    FeatureType.POLYGON: "#3b82f6",
    FeatureType.RECTANGLE: "#10b981",
    FeatureType.CIRCLE: "#f59e0b",
    FeatureType.LINESTRING: "#ef4444",
}
FALLBACK_COLOR = "#6b7280"

_ID_ALPHABET = string.digits + string.ascii_lowercase


def default_color(feature_type: FeatureType) -> str:
    """Display color for a feature type."""
    return FEATURE_COLORS.get(feature_type, FALLBACK_COLOR)


def generate_feature_id() -> str:
    """Generate a unique feature identifier.

    Format: ``feature_<epoch milliseconds>_<9 random base36 characters>``.
    """
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"feature_{int(time.time() * 1000)}_{suffix}"


class FeatureNotFoundError(KeyError):
    """Raised when a feature id is not present in the store."""

    def __init__(self, feature_id: str) -> None:
        self.feature_id = feature_id
        super().__init__(f"No feature with id {feature_id!r}")


class FeatureProperties(BaseModel, frozen=True):
    """Display properties of a feature.

    Attributes:
        name: Optional display name.
        color: Optional display color (CSS hex string).
    """

    name: str | None = Field(default=None, description="Display name")
    color: str | None = Field(default=None, description="Display color")


class Feature(BaseModel, frozen=True):
    """A committed map feature.

    Polygon, rectangle and circle features always carry polygon geometry;
    line string features carry line string geometry.

    Attributes:
        id: Opaque unique identifier.
        type: Kind of feature that was drawn.
        geometry: Stored geometry.
        properties: Display properties.
    """

    id: str = Field(..., min_length=1, description="Unique feature id")
    type: FeatureType = Field(..., description="Drawn feature type")
    geometry: Geometry = Field(..., description="Stored geometry")
    properties: FeatureProperties = Field(default_factory=FeatureProperties)

    @model_validator(mode="after")
    def _validate_geometry_kind(self) -> Self:
        """Ensure the geometry kind matches the feature type."""
        expected = PolygonGeometry if self.type.is_area else LineStringGeometry
        if not isinstance(self.geometry, expected):
            raise ValueError(
                f"{self.type.value} feature requires {expected.__name__}, "
                f"got {type(self.geometry).__name__}"
            )
        return self


class CapacityLimits(BaseModel, frozen=True):
    """Maximum number of features per type.

    The polygon limit applies to all area features together (polygons,
    rectangles and circles). The other limits apply to their own type only.
    """

    polygon: PositiveInt = 10
    rectangle: PositiveInt = 5
    circle: PositiveInt = 5
    linestring: PositiveInt = 20

    def for_type(self, feature_type: FeatureType) -> int:
        """Return the limit for a feature type."""
        return int(getattr(self, feature_type.value))

    def with_limit(self, feature_type: FeatureType, maximum: int) -> CapacityLimits:
        """Return a copy with one limit replaced (validated)."""
        values = self.model_dump()
        values[feature_type.value] = maximum
        return CapacityLimits(**values)


class DrawingState(BaseModel, frozen=True):
    """Drawing mode flags shared with toolbar and map collaborators.

    Attributes:
        mode: Selected drawing mode, or None when no tool is selected.
        is_drawing: Whether a shape is currently being drawn.
    """

    mode: FeatureType | None = None
    is_drawing: bool = False


class FeatureStore:
    """Insertion-ordered collection of committed features.

    Usage:
        store = FeatureStore(limits=CapacityLimits(polygon=3))
        store.add(feature)
        if not store.has_capacity(FeatureType.CIRCLE):
            ...
    """

    def __init__(self, limits: CapacityLimits | None = None) -> None:
        """Initialize an empty store.

        Args:
            limits: Capacity limits. Defaults to the configured settings.
        """
        if limits is None:
            from mapsketch.config import settings  # noqa: PLC0415

            limits = settings.capacity_limits()
        self._limits = limits
        self._features: dict[str, Feature] = {}
        self._drawing_state = DrawingState()

    def __len__(self) -> int:
        return len(self._features)

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self._features

    @property
    def features(self) -> tuple[Feature, ...]:
        """All committed features in insertion order."""
        return tuple(self._features.values())

    @property
    def limits(self) -> CapacityLimits:
        """Current capacity limits."""
        return self._limits

    @property
    def drawing_state(self) -> DrawingState:
        """Current drawing mode flags."""
        return self._drawing_state

    def get(self, feature_id: str) -> Feature:
        """Look up a feature by id.

        Raises:
            FeatureNotFoundError: If no feature has this id.
        """
        try:
            return self._features[feature_id]
        except KeyError:
            raise FeatureNotFoundError(feature_id) from None

    def add(self, feature: Feature) -> None:
        """Append a feature.

        Raises:
            ValueError: If a feature with the same id is already stored.
        """
        if feature.id in self._features:
            raise ValueError(f"Feature {feature.id!r} already exists")
        self._features[feature.id] = feature

    def remove(self, feature_id: str) -> Feature:
        """Remove a feature and return it.

        Raises:
            FeatureNotFoundError: If no feature has this id.
        """
        try:
            return self._features.pop(feature_id)
        except KeyError:
            raise FeatureNotFoundError(feature_id) from None

    def clear(self) -> None:
        """Remove every feature and reset the drawing flags."""
        self._features.clear()
        self._drawing_state = DrawingState()

    def count(self, feature_type: FeatureType) -> int:
        """Number of committed features of exactly this type."""
        return sum(1 for f in self._features.values() if f.type is feature_type)

    def bucket_count(self, feature_type: FeatureType) -> int:
        """Number of features counted against this type's capacity limit."""
        if feature_type is FeatureType.POLYGON:
            return sum(1 for f in self._features.values() if f.type.is_area)
        return self.count(feature_type)

    def has_capacity(self, feature_type: FeatureType) -> bool:
        """Whether a new feature of this type may be started."""
        return self.bucket_count(feature_type) < self._limits.for_type(feature_type)

    def set_limit(self, feature_type: FeatureType, maximum: int) -> None:
        """Change one capacity limit.

        Takes effect at the next capacity check. Features already committed
        beyond the new limit are kept.

        Raises:
            ValueError: If maximum is not a positive integer.
        """
        if isinstance(maximum, bool) or not isinstance(maximum, int) or maximum <= 0:
            raise ValueError(f"Capacity limit must be a positive integer, got {maximum!r}")
        self._limits = self._limits.with_limit(feature_type, maximum)

    def polygon_geometries(self) -> list[PolygonGeometry]:
        """Geometries of all committed area features, in collection order."""
        return [
            f.geometry
            for f in self._features.values()
            if f.type.is_area and isinstance(f.geometry, PolygonGeometry)
        ]

    def set_drawing_mode(self, mode: FeatureType | None) -> None:
        """Select a drawing mode (None deselects)."""
        self._drawing_state = self._drawing_state.model_copy(update={"mode": mode})

    def set_is_drawing(self, is_drawing: bool) -> None:
        """Set whether a shape is being drawn."""
        self._drawing_state = self._drawing_state.model_copy(
            update={"is_drawing": is_drawing}
        )
