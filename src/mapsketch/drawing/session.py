"""Transient state of one in-progress draw."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from mapsketch.geometry.primitives import LngLat, Position, dedupe_consecutive
from mapsketch.geometry.shapes import distance_m, rectangle_ring
from mapsketch.render.snapshot import ProvisionalShape
from mapsketch.store.features import FeatureType


@dataclass
class DrawingSession:
    """Mutable state of a single draw, from first click to commit or cancel.

    Attributes:
        feature_type: Type of the feature being drawn.
        session_id: Correlation id for logging.
        anchor: Centre (circle) or first corner (rectangle).
        points: Clicked vertices (polygon, line string).
        cursor: Last pointer position seen while active.
    """

    feature_type: FeatureType
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    anchor: LngLat | None = None
    points: list[LngLat] = field(default_factory=list)
    cursor: LngLat | None = None

    @property
    def uses_anchor(self) -> bool:
        """Whether this session is an anchor-and-drag shape."""
        return self.feature_type in (FeatureType.CIRCLE, FeatureType.RECTANGLE)

    def vertex_positions(self) -> list[Position]:
        """Clicked vertices with consecutive repeats removed."""
        return dedupe_consecutive(point.to_tuple() for point in self.points)

    def radius_m(self, pointer: LngLat | None = None) -> float:
        """Circle radius from the anchor to `pointer` (or the cursor)."""
        target = pointer or self.cursor
        if self.anchor is None or target is None:
            return 0.0
        return distance_m(self.anchor, target)

    def preview(self) -> ProvisionalShape:
        """Build the live preview for the current state."""
        if self.feature_type is FeatureType.CIRCLE and self.anchor is not None:
            return ProvisionalShape(
                type=self.feature_type,
                center=self.anchor.to_tuple(),
                radius_m=self.radius_m(),
            )
        if self.feature_type is FeatureType.RECTANGLE and self.anchor is not None:
            corner = self.cursor or self.anchor
            return ProvisionalShape(
                type=self.feature_type,
                coordinates=rectangle_ring(self.anchor, corner),
            )
        path = [point.to_tuple() for point in self.points]
        if self.cursor is not None:
            path.append(self.cursor.to_tuple())
        return ProvisionalShape(type=self.feature_type, coordinates=tuple(path))
