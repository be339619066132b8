"""Overlap and enclosure predicates between feature geometries.

Both predicates fail open: non-polygon input, or any error raised by the
geometry library, yields False instead of an exception.
"""

from __future__ import annotations

import logging

from shapely.errors import ShapelyError
from shapely.geometry import Polygon

from mapsketch.geometry.adapter import to_polygon
from mapsketch.geometry.primitives import Geometry

logger = logging.getLogger(__name__)

# DE-9IM: interiors share at least one point (positive common area for polygons)
INTERIORS_INTERSECT = "T********"

# Errors the geometry library raises on malformed input.
# ValueError also covers pydantic.ValidationError from model conversion.
GEOMETRY_ERRORS: tuple[type[Exception], ...] = (ShapelyError, ValueError)


def polygons_overlap(a: Polygon, b: Polygon) -> bool:
    """Check whether two polygons share area.

    Touching along an edge or at a vertex does not count.
    """
    try:
        return bool(a.relate_pattern(b, INTERIORS_INTERSECT))
    except GEOMETRY_ERRORS as e:
        logger.warning("Overlap check failed, treating as disjoint: %s", e)
        return False


def polygon_covers(outer: Polygon, inner: Polygon) -> bool:
    """Check whether `inner` lies entirely within `outer` (boundary inclusive)."""
    try:
        return bool(outer.covers(inner))
    except GEOMETRY_ERRORS as e:
        logger.warning("Enclosure check failed, treating as not enclosed: %s", e)
        return False


def overlaps(a: Geometry, b: Geometry) -> bool:
    """Check whether two feature geometries overlap.

    Args:
        a: First geometry.
        b: Second geometry.

    Returns:
        True iff both are polygons and their interiors intersect.
    """
    try:
        poly_a = to_polygon(a)
        poly_b = to_polygon(b)
    except GEOMETRY_ERRORS as e:
        logger.warning("Could not build polygons for overlap check: %s", e)
        return False
    if poly_a is None or poly_b is None:
        return False
    return polygons_overlap(poly_a, poly_b)


def encloses(outer: Geometry, inner: Geometry) -> bool:
    """Check whether `outer` fully encloses `inner`.

    Args:
        outer: Candidate enclosing geometry.
        inner: Candidate enclosed geometry.

    Returns:
        True iff both are polygons and `inner` is covered by `outer`.
    """
    try:
        poly_outer = to_polygon(outer)
        poly_inner = to_polygon(inner)
    except GEOMETRY_ERRORS as e:
        logger.warning("Could not build polygons for enclosure check: %s", e)
        return False
    if poly_outer is None or poly_inner is None:
        return False
    return polygon_covers(poly_outer, poly_inner)
