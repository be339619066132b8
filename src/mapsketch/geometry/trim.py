"""Overlap trimming for candidate polygons.

A candidate polygon that overlaps existing polygons is reduced by
subtracting each overlapping polygon in turn. When a subtraction splits the
candidate into several parts only the largest part survives. The trim fails
(returns None) when nothing, or too little, is left.

The minimum area is measured in the coordinates' native units, so for
longitude/latitude data it is in square degrees. This is a planar
approximation, not a geodesic area.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from mapsketch.geometry.adapter import from_polygon, to_polygon
from mapsketch.geometry.predicates import GEOMETRY_ERRORS, polygons_overlap
from mapsketch.geometry.primitives import Geometry, PolygonGeometry

logger = logging.getLogger(__name__)

MIN_TRIM_AREA = 0.0001


def largest_part(geometry: BaseGeometry) -> Polygon | None:
    """Pick the polygon to keep from a difference result.

    Args:
        geometry: Result of a polygon difference.

    Returns:
        The polygon itself, the largest polygon part of a multi-part result
        (first part wins on equal area), or None when no area is left.
    """
    if geometry.is_empty:
        return None
    if isinstance(geometry, Polygon):
        return geometry
    if isinstance(geometry, (MultiPolygon, GeometryCollection)):
        parts = [
            part
            for part in geometry.geoms
            if isinstance(part, Polygon) and not part.is_empty
        ]
        if not parts:
            return None
        # max() keeps the first maximal element
        return max(parts, key=lambda part: part.area)
    return None


def trim(
    candidate: Geometry,
    existing: Iterable[Geometry],
    *,
    min_area: float = MIN_TRIM_AREA,
) -> PolygonGeometry | None:
    """Remove the area shared with existing polygons from a candidate.

    Existing geometries are processed in the given order. Non-polygon
    geometries and polygons that do not overlap the current remainder are
    skipped.

    Args:
        candidate: Polygon geometry to trim.
        existing: Geometries of already committed features.
        min_area: Smallest acceptable area of the result.

    Returns:
        The trimmed polygon, or None if the candidate is not a polygon, is
        consumed entirely, ends up below `min_area`, or the geometry library
        fails along the way.
    """
    try:
        current = to_polygon(candidate)
        if current is None:
            return None

        for geometry in existing:
            other = to_polygon(geometry)
            if other is None or not polygons_overlap(current, other):
                continue
            remainder = largest_part(current.difference(other))
            if remainder is None:
                logger.debug("Candidate fully consumed by an existing polygon")
                return None
            current = remainder

        if current.is_empty or not current.is_valid:
            logger.debug("Trim result is not a valid polygon")
            return None
        if current.area < min_area:
            logger.debug(
                "Trim result area %.8f below minimum %.8f", current.area, min_area
            )
            return None
        return from_polygon(current)

    except GEOMETRY_ERRORS as e:
        logger.warning("Trimming failed: %s", e)
        return None
