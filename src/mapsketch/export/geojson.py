"""GeoJSON export and import of the feature collection.

Each feature becomes a GeoJSON Feature whose properties hold the feature id
and type next to its display properties:

    {"type": "Feature",
     "geometry": {"type": "Polygon", "coordinates": [...]},
     "properties": {"id": "feature_...", "type": "circle", "color": "#f59e0b"}}

Export is a pure function of the features and their order.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from mapsketch.geometry.primitives import Geometry
from mapsketch.store.features import Feature, FeatureProperties, FeatureType


class ExportedProperties(BaseModel):
    """Properties block of an exported feature."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    type: FeatureType
    name: str | None = None
    color: str | None = None


class GeoJSONFeature(BaseModel):
    """A GeoJSON Feature as written by export."""

    type: Literal["Feature"] = "Feature"
    geometry: Geometry
    properties: ExportedProperties


class GeoJSONFeatureCollection(BaseModel):
    """A GeoJSON FeatureCollection as written by export."""

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[GeoJSONFeature] = Field(default_factory=list)


def feature_to_geojson(feature: Feature) -> dict[str, Any]:
    """Serialize one feature as a GeoJSON Feature dict.

    Unset optional properties are omitted.
    """
    return {
        "type": "Feature",
        "geometry": feature.geometry.model_dump(mode="json"),
        "properties": {
            "id": feature.id,
            "type": feature.type.value,
            **feature.properties.model_dump(mode="json", exclude_none=True),
        },
    }


def export_feature_collection(features: Iterable[Feature]) -> dict[str, Any]:
    """Serialize features as a GeoJSON FeatureCollection dict."""
    return {
        "type": "FeatureCollection",
        "features": [feature_to_geojson(feature) for feature in features],
    }


def export_geojson(features: Iterable[Feature], indent: int | None = 2) -> str:
    """Serialize features as a GeoJSON FeatureCollection string.

    Args:
        features: Features in collection order.
        indent: JSON indentation (None for compact output).

    Returns:
        The JSON document.
    """
    return json.dumps(export_feature_collection(features), indent=indent)


def load_feature_collection(document: str | dict[str, Any]) -> list[Feature]:
    """Read features back from an exported FeatureCollection.

    Args:
        document: JSON string or already parsed dict.

    Returns:
        Features in document order.

    Raises:
        pydantic.ValidationError: If the document is not a valid export.
    """
    if isinstance(document, str):
        collection = GeoJSONFeatureCollection.model_validate_json(document)
    else:
        collection = GeoJSONFeatureCollection.model_validate(document)

    return [
        Feature(
            id=entry.properties.id,
            type=entry.properties.type,
            geometry=entry.geometry,
            properties=FeatureProperties(
                name=entry.properties.name,
                color=entry.properties.color,
            ),
        )
        for entry in collection.features
    ]
