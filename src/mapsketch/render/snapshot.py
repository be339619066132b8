"""Read-only render snapshot for map and preview collaborators.

A snapshot freezes what should be on screen: every committed feature with
its display color, plus the live preview of the shape being drawn.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field

from mapsketch.geometry.primitives import Geometry, PolygonGeometry, Position
from mapsketch.store.features import Feature, FeatureType, default_color


class ProvisionalShape(BaseModel, frozen=True):
    """Live preview of the shape being drawn.

    Not validated as feature geometry: a preview may be degenerate (a
    zero-radius circle, a polygon with a single point).

    Attributes:
        type: Feature type being drawn.
        coordinates: Path (line string, polygon) or ring (rectangle) to draw.
        center: Circle centre, circles only.
        radius_m: Circle radius in metres, circles only.
    """

    type: FeatureType
    coordinates: tuple[Position, ...] = Field(default=())
    center: Position | None = None
    radius_m: float | None = Field(default=None, ge=0.0)

    @property
    def color(self) -> str:
        """Display color of the shape being drawn."""
        return default_color(self.type)


class RenderedFeature(BaseModel, frozen=True):
    """What a renderer needs to draw one committed feature."""

    id: str
    type: FeatureType
    geometry: Geometry
    color: str


class RenderSnapshot(BaseModel, frozen=True):
    """Everything on screen at one instant.

    Attributes:
        features: Committed features in collection order.
        provisional: Live preview, None when nothing is being drawn.
    """

    features: tuple[RenderedFeature, ...] = Field(default=())
    provisional: ProvisionalShape | None = None

    def positions(self) -> list[Position]:
        """All positions on screen, used to fit a view."""
        result: list[Position] = []
        for feature in self.features:
            if isinstance(feature.geometry, PolygonGeometry):
                for ring in feature.geometry.coordinates:
                    result.extend(ring)
            else:
                result.extend(feature.geometry.coordinates)
        if self.provisional is not None:
            result.extend(self.provisional.coordinates)
            if self.provisional.center is not None:
                result.append(self.provisional.center)
        return result


def build_snapshot(
    features: Iterable[Feature],
    provisional: ProvisionalShape | None = None,
) -> RenderSnapshot:
    """Freeze features and the live preview into a snapshot.

    A feature without a stored color falls back to its type's default.
    """
    rendered = tuple(
        RenderedFeature(
            id=feature.id,
            type=feature.type,
            geometry=feature.geometry,
            color=feature.properties.color or default_color(feature.type),
        )
        for feature in features
    )
    return RenderSnapshot(features=rendered, provisional=provisional)
