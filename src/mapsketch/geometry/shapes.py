"""Shape builders for circle and rectangle drawing.

Circles and rectangles are never stored as primitives. They are turned into
closed polygon rings when the user finishes drawing them. Distances are
geodesic (WGS84 ellipsoid) and expressed in metres.
"""

from __future__ import annotations

import numpy as np
from pyproj import Geod

from mapsketch.geometry.primitives import LngLat, Position

DEFAULT_CIRCLE_STEPS = 64

_GEOD = Geod(ellps="WGS84")


def distance_m(a: LngLat, b: LngLat) -> float:
    """Geodesic distance between two positions in metres."""
    _, _, distance = _GEOD.inv(a.lng, a.lat, b.lng, b.lat)
    return float(distance)


def circle_ring(
    center: LngLat,
    radius_m: float,
    steps: int = DEFAULT_CIRCLE_STEPS,
) -> tuple[Position, ...]:
    """Approximate a circle on the ellipsoid with a closed ring.

    Vertices are placed at `steps` evenly spaced bearings, walking clockwise
    from north, each `radius_m` metres from the centre. Longitudes stay on
    the centre's side of the antimeridian, so a circle crossing +/-180 or
    centred on a wrapped map copy keeps a continuous ring.

    Args:
        center: Circle centre.
        radius_m: Radius in metres (must be >= 0).
        steps: Number of distinct vertices.

    Returns:
        Closed ring of `steps + 1` positions.

    Raises:
        ValueError: If radius is negative or steps < 3.
    """
    if radius_m < 0:
        raise ValueError(f"radius must be non-negative, got {radius_m}")
    if steps < 3:
        raise ValueError(f"steps must be at least 3, got {steps}")

    bearings = -np.arange(steps) * (360.0 / steps)
    lons, lats, _ = _GEOD.fwd(
        np.full(steps, center.lng),
        np.full(steps, center.lat),
        bearings,
        np.full(steps, radius_m),
    )
    # Geod.fwd wraps longitudes into [-180, 180]
    lons = center.lng + ((np.asarray(lons) - center.lng + 180.0) % 360.0 - 180.0)
    ring = [(float(lng), float(lat)) for lng, lat in zip(lons, lats, strict=True)]
    ring.append(ring[0])
    return tuple(ring)


def rectangle_ring(a: LngLat, b: LngLat) -> tuple[Position, ...]:
    """Closed ring of the axis-aligned box spanned by two corners.

    The ring starts at the south-west corner and runs SW, SE, NE, NW, SW.
    """
    west, east = sorted((a.lng, b.lng))
    south, north = sorted((a.lat, b.lat))
    return (
        (west, south),
        (east, south),
        (east, north),
        (west, north),
        (west, south),
    )
