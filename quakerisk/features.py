"""Feature model and per-feature geometry parsing."""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping

import structlog
from shapely.errors import ShapelyError
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from quakerisk.errors import InvalidInput, MalformedGeometry

logger = structlog.get_logger()

POLYGON_TYPES = ("Polygon", "MultiPolygon")
LINE_TYPES = ("LineString", "MultiLineString")


def in_wgs84_range(lon: float, lat: float) -> bool:
    return -180.0 <= lon <= 180.0 and -90.0 <= lat <= 90.0


@dataclass(frozen=True)
class GeographicPoint:
    """A WGS84 coordinate in degrees."""

    lat: float
    lon: float

    @classmethod
    def create(cls, lat: Any, lon: Any) -> "GeographicPoint":
        """Validate and build a point.

        Raises:
            InvalidInput: If either value is non-numeric, non-finite or out of range.
        """
        try:
            lat_f = float(lat)
            lon_f = float(lon)
        except (TypeError, ValueError):
            raise InvalidInput("lat and lon must be numbers", lat=lat, lng=lon) from None

        if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
            raise InvalidInput("lat and lon must be finite", lat=lat_f, lng=lon_f)
        if not -90.0 <= lat_f <= 90.0:
            raise InvalidInput("lat must be within [-90, 90]", lat=lat_f)
        if not -180.0 <= lon_f <= 180.0:
            raise InvalidInput("lng must be within [-180, 180]", lng=lon_f)

        return cls(lat=lat_f, lon=lon_f)


@dataclass(frozen=True)
class Feature:
    """A GeoJSON feature: geometry mapping plus read-only attributes."""

    geometry: Mapping[str, Any] | None
    properties: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_geojson(cls, data: Mapping[str, Any]) -> "Feature":
        """Build from a parsed GeoJSON feature.

        Raises:
            ValueError: If ``properties`` is present but not an object.
        """
        props = data.get("properties") or {}
        if not isinstance(props, Mapping):
            raise ValueError(f"Feature properties must be an object, got {type(props).__name__}")
        return cls(
            geometry=data.get("geometry"),
            properties=MappingProxyType(dict(props)),
        )

    def to_geojson(self) -> dict[str, Any]:
        return {
            "type": "Feature",
            "geometry": self.geometry,
            "properties": dict(self.properties),
        }


@dataclass(frozen=True)
class FeatureCollection:
    """Ordered, immutable collection of features from one dataset."""

    name: str
    features: tuple[Feature, ...] = ()
    type: str = "FeatureCollection"

    @classmethod
    def from_geojson(cls, name: str, data: Mapping[str, Any]) -> "FeatureCollection":
        """Build from a parsed GeoJSON document, preserving feature order.

        Entries that are not feature objects are skipped and logged.

        Raises:
            ValueError: If ``features`` is present but not a list.
        """
        raw_features = data.get("features")
        if raw_features is None:
            raw_features = []
        if not isinstance(raw_features, list):
            raise ValueError(f"{name}: 'features' must be a list, got {type(raw_features).__name__}")

        features = []
        for index, raw in enumerate(raw_features):
            if not isinstance(raw, Mapping):
                logger.warning("Skipping non-object feature", dataset=name, index=index)
                continue
            try:
                features.append(Feature.from_geojson(raw))
            except ValueError as e:
                logger.warning("Skipping malformed feature", dataset=name, index=index, error=str(e))

        return cls(
            name=name,
            features=tuple(features),
            type=str(data.get("type", "FeatureCollection")),
        )

    def to_geojson(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "features": [feature.to_geojson() for feature in self.features],
        }

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)


@dataclass(frozen=True)
class GeometryOutcome:
    """Result of parsing one feature's geometry: a value or an error."""

    feature: Feature
    value: Any = None
    error: MalformedGeometry | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_geometry(feature: Feature, kinds: tuple[str, ...]) -> GeometryOutcome:
    """Parse a feature geometry into a shapely object of one of ``kinds``.

    Empty, invalid (e.g. self-intersecting), wrong-kind, out-of-range and
    unparseable geometries come back as an outcome carrying MalformedGeometry.

    Args:
        feature: Feature to parse.
        kinds: Accepted GeoJSON geometry type names.

    Returns:
        GeometryOutcome with a shapely geometry or an error.
    """
    if not feature.geometry:
        return GeometryOutcome(feature, error=MalformedGeometry("Feature has no geometry"))

    try:
        geom: BaseGeometry = shape(feature.geometry)
    except (ShapelyError, ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
        return GeometryOutcome(feature, error=MalformedGeometry(f"Unparseable geometry: {e}"))

    if geom.geom_type not in kinds:
        return GeometryOutcome(
            feature,
            error=MalformedGeometry(f"Expected {'/'.join(kinds)}, got {geom.geom_type}"),
        )
    if geom.is_empty:
        return GeometryOutcome(feature, error=MalformedGeometry("Empty geometry"))
    if not geom.is_valid:
        return GeometryOutcome(feature, error=MalformedGeometry("Invalid geometry"))

    min_x, min_y, max_x, max_y = geom.bounds
    if not (in_wgs84_range(min_x, min_y) and in_wgs84_range(max_x, max_y)):
        return GeometryOutcome(feature, error=MalformedGeometry("Coordinates outside WGS84 range"))

    return GeometryOutcome(feature, value=geom)


def parse_point_coordinates(feature: Feature) -> GeometryOutcome:
    """Extract (lon, lat) from a Point feature; a trailing depth is ignored."""
    geometry = feature.geometry or {}
    coords = geometry.get("coordinates") if isinstance(geometry, Mapping) else None

    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return GeometryOutcome(feature, error=MalformedGeometry("Point needs [lon, lat]"))

    try:
        lon = float(coords[0])
        lat = float(coords[1])
    except (TypeError, ValueError):
        return GeometryOutcome(feature, error=MalformedGeometry("Non-numeric point coordinates"))

    if not (math.isfinite(lon) and math.isfinite(lat)):
        return GeometryOutcome(feature, error=MalformedGeometry("Non-finite point coordinates"))
    if not in_wgs84_range(lon, lat):
        return GeometryOutcome(feature, error=MalformedGeometry("Point outside WGS84 range"))

    return GeometryOutcome(feature, value=(lon, lat))
