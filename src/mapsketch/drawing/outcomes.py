"""Results of drawing operations.

Every user-facing refusal is returned as a Rejection value carrying a
reason code, so a presentation layer can pick type-specific messaging.
Nothing here is raised: rejections are local and recoverable.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from mapsketch.store.features import Feature, FeatureType


class RejectionReason(str, Enum):
    """Why a drawing step was refused."""

    CAPACITY_EXCEEDED = "capacity_exceeded"  # draw not started, mode stays armed
    INSUFFICIENT_VERTICES = "insufficient_vertices"  # session stays active
    WOULD_BE_ENCLOSED = "would_be_enclosed"  # session discarded
    WOULD_ENCLOSE_EXISTING = "would_enclose_existing"  # session discarded
    INVALID_TRIM_RESULT = "invalid_trim_result"  # session discarded


class Rejection(BaseModel, frozen=True):
    """A refused drawing step.

    Attributes:
        reason: Machine-readable reason code.
        feature_type: Type of the feature being drawn.
        message: Human-readable explanation.
    """

    reason: RejectionReason
    feature_type: FeatureType
    message: str = Field(..., min_length=1)

    @classmethod
    def capacity_exceeded(cls, feature_type: FeatureType, maximum: int) -> Rejection:
        plural = f"{feature_type.label}s"
        return cls(
            reason=RejectionReason.CAPACITY_EXCEEDED,
            feature_type=feature_type,
            message=f"Maximum {maximum} {plural} allowed",
        )

    @classmethod
    def insufficient_vertices(cls, feature_type: FeatureType) -> Rejection:
        if feature_type is FeatureType.CIRCLE:
            message = "Circle needs a radius greater than zero"
        elif feature_type is FeatureType.RECTANGLE:
            message = "Rectangle needs a non-zero width and height"
        elif feature_type is FeatureType.LINESTRING:
            message = "Line string needs at least 2 points"
        else:
            message = "Polygon needs at least 3 points"
        return cls(
            reason=RejectionReason.INSUFFICIENT_VERTICES,
            feature_type=feature_type,
            message=message,
        )

    @classmethod
    def would_be_enclosed(cls, feature_type: FeatureType) -> Rejection:
        return cls(
            reason=RejectionReason.WOULD_BE_ENCLOSED,
            feature_type=feature_type,
            message=(
                "Cannot draw: This polygon would be fully enclosed "
                "by an existing polygon"
            ),
        )

    @classmethod
    def would_enclose_existing(cls, feature_type: FeatureType) -> Rejection:
        return cls(
            reason=RejectionReason.WOULD_ENCLOSE_EXISTING,
            feature_type=feature_type,
            message="Cannot draw: This polygon would fully enclose an existing polygon",
        )

    @classmethod
    def invalid_trim_result(cls, feature_type: FeatureType) -> Rejection:
        return cls(
            reason=RejectionReason.INVALID_TRIM_RESULT,
            feature_type=feature_type,
            message="Cannot draw: Overlap trimming resulted in invalid geometry",
        )


class Committed(BaseModel, frozen=True):
    """A feature that passed the constraint pipeline and was stored.

    Attributes:
        feature: The stored feature.
        trimmed: Whether the geometry was trimmed against existing features.
    """

    feature: Feature
    trimmed: bool = False


Outcome = Committed | Rejection
