"""
Domain service: GeoJSON structure and feature field validation.

Structure problems are batch-fatal and raised as GeoJSONStructureError
subclasses. Feature field problems are returned as message lists so a batch
can report every rejected feature and continue.
"""
import json
from typing import Any

from paddock_api.domain.constants import GeoJSONLimits, PropertyKeys
from paddock_api.domain.exceptions import (
    EmptyFeaturesError,
    FeaturesNotArrayError,
    InvalidJSONError,
    NotAnObjectError,
    TooManyFeaturesError,
    UnknownTypeError,
)
from paddock_api.utils.property_lookup import lookup_property, parse_number


def parse_geojson(raw: Any) -> Any:
    """
    Parse raw upload content into a JSON value.

    Args:
        raw: bytes or str containing JSON, or an already parsed value

    Returns:
        Parsed JSON value

    Raises:
        InvalidJSONError: If bytes/str content is not valid JSON
    """
    if not isinstance(raw, (bytes, bytearray, str)):
        return raw

    try:
        text = raw.decode("utf-8-sig") if isinstance(raw, (bytes, bytearray)) else raw
        if not text.strip():
            raise InvalidJSONError("Invalid JSON format: content is empty")
        return json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidJSONError(f"Invalid JSON format: {e}") from e


def validate_structure(data: Any) -> dict:
    """
    Validate top-level GeoJSON structure and normalize to a FeatureCollection.

    A single Feature is wrapped into a one-element FeatureCollection. Features
    themselves are not inspected here.

    Args:
        data: Parsed JSON value

    Returns:
        FeatureCollection mapping

    Raises:
        NotAnObjectError: If data is not a JSON object
        UnknownTypeError: If type is not Feature or FeatureCollection
        FeaturesNotArrayError: If features is not an array
        EmptyFeaturesError: If features is empty
        TooManyFeaturesError: If there are more features than the cap
    """
    if not isinstance(data, dict):
        raise NotAnObjectError("Invalid data: must be a non-null object")

    geojson_type = data.get("type")

    if geojson_type == "Feature":
        return {"type": "FeatureCollection", "features": [data]}

    if geojson_type != "FeatureCollection":
        raise UnknownTypeError(
            'Invalid GeoJSON: type must be "Feature" or "FeatureCollection"'
        )

    features = data.get("features")
    if not isinstance(features, list):
        raise FeaturesNotArrayError("Invalid GeoJSON: features must be an array")

    if not features:
        raise EmptyFeaturesError("Invalid GeoJSON: features array cannot be empty")

    if len(features) > GeoJSONLimits.MAX_FEATURES:
        raise TooManyFeaturesError(
            f"Invalid GeoJSON: too many features "
            f"(maximum {GeoJSONLimits.MAX_FEATURES:,} allowed, got {len(features):,})"
        )

    return data


def check_feature(feature: Any) -> list[str]:
    """
    Check that a feature carries the fields needed to build a paddock.

    Every rule is evaluated; the result lists one message per violated rule.
    Coordinate ranges and ring closure are left to the geometry engine.

    Args:
        feature: One element of a FeatureCollection's features array

    Returns:
        List of error messages (empty if acceptable)
    """
    if not isinstance(feature, dict):
        feature = {}

    errors = []

    if feature.get("type") != "Feature":
        errors.append('Feature must have type "Feature"')

    properties = feature.get("properties")
    if not isinstance(properties, dict):
        errors.append("Feature must have properties")
    else:
        if lookup_property(properties, PropertyKeys.ID) is None:
            errors.append("Feature must have id or paddockId property")

        if lookup_property(properties, PropertyKeys.NAME) is None:
            errors.append("Feature must have name or paddock_name property")

        if lookup_property(properties, PropertyKeys.OWNER) is None:
            errors.append("Feature must have owner property")

        if lookup_property(properties, PropertyKeys.PROJECT) is None:
            errors.append("Feature must have Project__Name or project_name property")

        area_acres = lookup_property(properties, PropertyKeys.AREA_ACRES)
        if area_acres is None:
            errors.append("Feature must have area_acres property")
        else:
            # Unparseable values are accepted and normalize to 0
            parsed = parse_number(area_acres)
            if parsed is not None and parsed < 0:
                errors.append("Feature area_acres must not be negative")

    geometry = feature.get("geometry")
    if not isinstance(geometry, dict):
        errors.append("Feature must have geometry")
    elif geometry.get("type") != "Polygon":
        errors.append("Feature geometry must be a Polygon")
    elif not isinstance(geometry.get("coordinates"), list):
        errors.append("Feature geometry must have coordinates array")

    return errors
