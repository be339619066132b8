"""Geometry module for mapsketch.

This package provides the geometry model for drawn features and the
constraint engine that keeps area features from overlapping.

Key Components:
    - Primitives: LngLat and the Polygon/LineString geometry union
    - Adapter: conversion to and from shapely polygons
    - Predicates: overlap and enclosure checks (fail open on library errors)
    - Trim: subtract existing polygons from a candidate
    - Shapes: circle/rectangle rings and geodesic distance

Example:
    from mapsketch.geometry import PolygonGeometry, overlaps, trim

    existing = PolygonGeometry.from_ring([(0, 0), (2, 0), (2, 2), (0, 2)])
    candidate = PolygonGeometry.from_ring([(1, 0), (3, 0), (3, 2), (1, 2)])

    if overlaps(candidate, existing):
        trimmed = trim(candidate, [existing])  # the (2..3) x (0..2) half
"""

from mapsketch.geometry.adapter import from_polygon, to_polygon
from mapsketch.geometry.predicates import encloses, overlaps
from mapsketch.geometry.primitives import (
    Geometry,
    LineStringGeometry,
    LngLat,
    PolygonGeometry,
    Position,
)
from mapsketch.geometry.shapes import circle_ring, distance_m, rectangle_ring
from mapsketch.geometry.trim import MIN_TRIM_AREA, largest_part, trim

__all__ = [
    "MIN_TRIM_AREA",
    "Geometry",
    "LineStringGeometry",
    "LngLat",
    "PolygonGeometry",
    "Position",
    "circle_ring",
    "distance_m",
    "encloses",
    "from_polygon",
    "largest_part",
    "overlaps",
    "rectangle_ring",
    "to_polygon",
    "trim",
]
