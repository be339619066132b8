"""GeoJSON export for mapsketch."""

from mapsketch.export.geojson import (
    export_feature_collection,
    export_geojson,
    feature_to_geojson,
    load_feature_collection,
)

__all__ = [
    "export_feature_collection",
    "export_geojson",
    "feature_to_geojson",
    "load_feature_collection",
]
