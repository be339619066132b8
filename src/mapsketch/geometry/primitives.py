"""Geometry primitives for mapsketch.

This module provides immutable Pydantic models for map positions and for the
two geometry kinds a feature can carry. Geometry models mirror their GeoJSON
counterparts so they serialize directly into exported documents.

Coordinates follow the GeoJSON convention: (longitude, latitude), in the
stored coordinate system's native units (degrees for WGS84).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Annotated, Literal, Self

from pydantic import BaseModel, Field, field_validator

Position = tuple[float, float]


class LngLat(BaseModel, frozen=True):
    """A map position as longitude/latitude.

    Longitude is not range-checked so positions on wrapped map copies
    (beyond +/-180) are kept as the pointer reported them.

    Attributes:
        lng: Longitude (x).
        lat: Latitude (y), within [-90, 90].
    """

    lng: float = Field(..., description="Longitude")
    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude")

    def to_tuple(self) -> Position:
        """Convert to (lng, lat) tuple."""
        return (self.lng, self.lat)

    @classmethod
    def from_tuple(cls, coord: Sequence[float]) -> Self:
        """Create LngLat from an (lng, lat) pair."""
        return cls(lng=coord[0], lat=coord[1])


def dedupe_consecutive(points: Iterable[Position]) -> list[Position]:
    """Drop points that repeat the point right before them."""
    result: list[Position] = []
    for point in points:
        if not result or result[-1] != point:
            result.append(point)
    return result


def distinct_vertex_count(ring: Sequence[Position]) -> int:
    """Count distinct vertices of a ring, ignoring the closing point."""
    body = ring[:-1] if len(ring) > 1 and ring[0] == ring[-1] else ring
    return len(set(body))


def close_ring(points: Sequence[Position]) -> tuple[Position, ...]:
    """Return the points as a closed ring (first point repeated last)."""
    ring = tuple(points)
    if ring and ring[0] != ring[-1]:
        ring = (*ring, ring[0])
    return ring


class PolygonGeometry(BaseModel, frozen=True):
    """A polygon as a list of linear rings.

    The first ring is the exterior boundary, any further rings are holes.
    Circles and rectangles are stored as polygons too, already rasterized.

    Attributes:
        type: GeoJSON type tag, always "Polygon".
        coordinates: Closed rings of (lng, lat) positions.
    """

    type: Literal["Polygon"] = "Polygon"
    coordinates: tuple[tuple[Position, ...], ...] = Field(..., min_length=1)

    @field_validator("coordinates")
    @classmethod
    def _validate_rings(
        cls, rings: tuple[tuple[Position, ...], ...]
    ) -> tuple[tuple[Position, ...], ...]:
        """Ensure every ring is closed and has at least 3 distinct vertices."""
        for index, ring in enumerate(rings):
            if len(ring) < 4:
                raise ValueError(
                    f"ring {index} needs at least 4 positions, got {len(ring)}"
                )
            if ring[0] != ring[-1]:
                raise ValueError(f"ring {index} is not closed")
            if distinct_vertex_count(ring) < 3:
                raise ValueError(f"ring {index} needs at least 3 distinct vertices")
        return rings

    @property
    def exterior(self) -> tuple[Position, ...]:
        """Return the exterior ring."""
        return self.coordinates[0]

    @property
    def holes(self) -> tuple[tuple[Position, ...], ...]:
        """Return the interior rings (usually empty)."""
        return self.coordinates[1:]

    @classmethod
    def from_ring(cls, points: Sequence[Position]) -> Self:
        """Create a single-ring polygon, closing the ring if needed."""
        return cls(coordinates=(close_ring(points),))


class LineStringGeometry(BaseModel, frozen=True):
    """An open path of at least two positions.

    Attributes:
        type: GeoJSON type tag, always "LineString".
        coordinates: Ordered (lng, lat) positions.
    """

    type: Literal["LineString"] = "LineString"
    coordinates: tuple[Position, ...] = Field(..., min_length=2)


# Discriminated union of every geometry a feature may store
Geometry = Annotated[
    PolygonGeometry | LineStringGeometry,
    Field(discriminator="type"),
]
