"""Feature store for mapsketch."""

from mapsketch.store.features import (
    FEATURE_COLORS,
    CapacityLimits,
    DrawingState,
    Feature,
    FeatureNotFoundError,
    FeatureProperties,
    FeatureStore,
    FeatureType,
    default_color,
    generate_feature_id,
)

__all__ = [
    "FEATURE_COLORS",
    "CapacityLimits",
    "DrawingState",
    "Feature",
    "FeatureNotFoundError",
    "FeatureProperties",
    "FeatureStore",
    "FeatureType",
    "default_color",
    "generate_feature_id",
]
