"""Commit pipeline for finished shapes.

Area features go through three stages before they are stored:

1. Enclosure: the candidate may neither sit inside an existing polygon nor
   contain one. All existing polygons are checked before anything else.
2. Overlap: if the candidate overlaps any existing polygon it is trimmed.
3. Commit: a new feature with a fresh id and the type's color is appended.

Line strings skip straight to the commit stage.
"""

from __future__ import annotations

from collections.abc import Sequence

from mapsketch.drawing.outcomes import Committed, Outcome, Rejection
from mapsketch.geometry.predicates import encloses, overlaps
from mapsketch.geometry.primitives import Geometry, PolygonGeometry
from mapsketch.geometry.trim import MIN_TRIM_AREA, trim
from mapsketch.store.features import (
    Feature,
    FeatureProperties,
    FeatureStore,
    FeatureType,
    default_color,
    generate_feature_id,
)
from mapsketch.utils.logging import get_logger

logger = get_logger(__name__)


def check_enclosure(
    feature_type: FeatureType,
    candidate: Geometry,
    existing: Sequence[PolygonGeometry],
) -> Rejection | None:
    """Return the first enclosure violation, in collection order."""
    for geometry in existing:
        if encloses(geometry, candidate):
            return Rejection.would_be_enclosed(feature_type)
        if encloses(candidate, geometry):
            return Rejection.would_enclose_existing(feature_type)
    return None


def constrain_candidate(
    feature_type: FeatureType,
    candidate: Geometry,
    existing: Sequence[PolygonGeometry],
    *,
    min_area: float = MIN_TRIM_AREA,
) -> Geometry | Rejection:
    """Apply the enclosure and overlap rules to a candidate geometry.

    Args:
        feature_type: Type of the feature being committed.
        candidate: Finished geometry.
        existing: Geometries of committed area features.
        min_area: Smallest acceptable trimmed area.

    Returns:
        The geometry to store (trimmed when needed) or a Rejection.
    """
    if not feature_type.is_area:
        return candidate

    rejection = check_enclosure(feature_type, candidate, existing)
    if rejection is not None:
        return rejection

    if not any(overlaps(candidate, geometry) for geometry in existing):
        return candidate

    trimmed = trim(candidate, existing, min_area=min_area)
    if trimmed is None:
        return Rejection.invalid_trim_result(feature_type)
    return trimmed


def commit_candidate(
    store: FeatureStore,
    feature_type: FeatureType,
    candidate: Geometry,
    *,
    min_area: float = MIN_TRIM_AREA,
    name: str | None = None,
) -> Outcome:
    """Run the constraint pipeline and store the resulting feature.

    Args:
        store: Store holding the committed features.
        feature_type: Type of the feature being committed.
        candidate: Finished geometry.
        min_area: Smallest acceptable trimmed area.
        name: Optional display name for the new feature.

    Returns:
        Committed with the stored feature, or the Rejection that stopped it.
        The store is untouched on rejection.
    """
    result = constrain_candidate(
        feature_type,
        candidate,
        store.polygon_geometries(),
        min_area=min_area,
    )
    if isinstance(result, Rejection):
        logger.warning(
            "Commit rejected",
            feature_type=feature_type.value,
            reason=result.reason.value,
        )
        return result

    feature = Feature(
        id=generate_feature_id(),
        type=feature_type,
        geometry=result,
        properties=FeatureProperties(name=name, color=default_color(feature_type)),
    )
    store.add(feature)
    trimmed = result is not candidate
    logger.info(
        "Feature committed",
        feature_id=feature.id,
        feature_type=feature_type.value,
        trimmed=trimmed,
        total=len(store),
    )
    return Committed(feature=feature, trimmed=trimmed)
