"""Parses GeoJSON text into the closed document model.

Structural problems are rejected here so that rendering never has to
guess. Geometry types without a KML rendering are not errors: they become
UnknownGeometry / UnknownDocument and are skipped by the renderer.
"""

import json
import math
from typing import Any

from geokml.conversion.exceptions import ConversionError
from geokml.conversion.models import (
    UNNAMED,
    Feature,
    FeatureCollection,
    GeoDocument,
    Geometry,
    LineString,
    Point,
    Polygon,
    Position,
    UnknownDocument,
    UnknownGeometry,
)

_GEOMETRY_TYPES = frozenset({"Point", "LineString", "Polygon"})


def parse_document(text: str) -> GeoDocument:
    """Parse GeoJSON text into a GeoDocument.

    Raises:
        ConversionError: on invalid JSON or a malformed document structure.
    """
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError and the int digit limit are both ValueError
        raise ConversionError(f"Invalid GeoJSON: {exc}") from exc
    return build_document(data)


def build_document(data: Any) -> GeoDocument:
    """Build a GeoDocument from already-decoded JSON."""
    doc_type = _require_type(data, "$")
    if doc_type == "Feature":
        return _build_feature(data, "$")
    if doc_type == "FeatureCollection":
        return _build_feature_collection(data)
    if doc_type in _GEOMETRY_TYPES:
        return _build_geometry(data, "$")
    return UnknownDocument(type=doc_type)


def _require_type(raw: Any, path: str) -> str:
    if not isinstance(raw, dict):
        raise ConversionError(f"'{path}' must be an object")
    value = raw.get("type")
    if not isinstance(value, str):
        raise ConversionError(f"'{path}.type' must be a string")
    return value


def _build_feature_collection(raw: dict[str, Any]) -> FeatureCollection:
    features = raw.get("features")
    if not isinstance(features, list):
        raise ConversionError("'$.features' must be an array")
    return FeatureCollection(
        features=tuple(
            _build_feature(item, f"features[{i}]") for i, item in enumerate(features)
        )
    )


def _build_feature(raw: Any, path: str) -> Feature:
    if not isinstance(raw, dict):
        raise ConversionError(f"'{path}' must be an object")
    geometry_raw = raw.get("geometry")
    if geometry_raw is None:
        geometry: Geometry = UnknownGeometry(type="null")
    else:
        geometry = _build_geometry(geometry_raw, f"{path}.geometry")
    return Feature(name=_feature_name(raw.get("properties")), geometry=geometry)


def _feature_name(properties: Any) -> str:
    if isinstance(properties, dict):
        name = properties.get("name")
        if isinstance(name, str):
            return name
    return UNNAMED


def _build_geometry(raw: Any, path: str) -> Geometry:
    geometry_type = _require_type(raw, path)
    coordinates = raw.get("coordinates")
    coords_path = f"{path}.coordinates"
    if geometry_type == "Point":
        return Point(position=_build_position(coordinates, coords_path))
    if geometry_type == "LineString":
        return LineString(positions=_build_positions(coordinates, coords_path))
    if geometry_type == "Polygon":
        return _build_polygon(coordinates, coords_path)
    return UnknownGeometry(type=geometry_type)


def _build_polygon(raw: Any, path: str) -> Polygon:
    if not isinstance(raw, list) or not raw:
        raise ConversionError(f"'{path}' must be a non-empty array of rings")
    return Polygon(
        rings=tuple(
            _build_positions(ring, f"{path}[{i}]") for i, ring in enumerate(raw)
        )
    )


def _build_positions(raw: Any, path: str) -> tuple[Position, ...]:
    if not isinstance(raw, list):
        raise ConversionError(f"'{path}' must be an array of positions")
    return tuple(_build_position(item, f"{path}[{i}]") for i, item in enumerate(raw))


def _build_position(raw: Any, path: str) -> Position:
    if not isinstance(raw, list) or len(raw) < 2:
        raise ConversionError(f"'{path}' must be an array of at least 2 numbers")
    values = raw[:3]
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConversionError(f"'{path}' must contain only numbers, got {value!r}")
    try:
        numbers = [float(value) for value in values]
    except OverflowError as exc:
        raise ConversionError(f"'{path}' has a coordinate out of range") from exc
    if not all(math.isfinite(number) for number in numbers):
        raise ConversionError(f"'{path}' must contain only finite numbers")
    alt = numbers[2] if len(numbers) > 2 else 0.0
    return Position(lon=numbers[0], lat=numbers[1], alt=alt)
