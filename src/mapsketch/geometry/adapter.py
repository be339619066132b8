"""Conversion between feature geometry and shapely polygons.

Only polygon geometry has a shapely counterpart here; every other geometry
kind maps to None so callers can treat it as "not an area".
"""

from __future__ import annotations

from typing import assert_never

from shapely.geometry import Polygon

from mapsketch.geometry.primitives import (
    Geometry,
    LineStringGeometry,
    PolygonGeometry,
    Position,
)


def to_polygon(geometry: Geometry) -> Polygon | None:
    """Convert feature geometry into a shapely Polygon.

    Args:
        geometry: Stored feature geometry.

    Returns:
        The polygon for PolygonGeometry, None for line strings.
    """
    if isinstance(geometry, PolygonGeometry):
        return Polygon(geometry.exterior, geometry.holes)
    if isinstance(geometry, LineStringGeometry):
        return None
    assert_never(geometry)


def _ring_positions(coords: object) -> tuple[Position, ...]:
    return tuple((float(c[0]), float(c[1])) for c in coords)  # type: ignore[attr-defined]


def from_polygon(polygon: Polygon) -> PolygonGeometry:
    """Convert a shapely Polygon back into feature geometry.

    Raises:
        pydantic.ValidationError: If the polygon is degenerate (fewer than
            3 distinct vertices in a ring).
    """
    rings = [_ring_positions(polygon.exterior.coords)]
    rings.extend(_ring_positions(interior.coords) for interior in polygon.interiors)
    return PolygonGeometry(coordinates=tuple(rings))
