"""Earthquake counting and magnitude aggregation within a radius."""

import math
from dataclasses import dataclass
from typing import Any, Iterable

import structlog

from quakerisk.features import Feature, GeographicPoint, parse_point_coordinates
from quakerisk.geo_utils import great_circle_km

logger = structlog.get_logger()


@dataclass(frozen=True)
class QuakeAggregate:
    """Earthquakes found within the search radius."""

    count: int = 0
    max_magnitude: float | None = None


def _magnitude(value: Any) -> float | None:
    # bool is an int subclass but never a magnitude
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def aggregate_quakes(
    point: GeographicPoint,
    radius_km: float,
    points: Iterable[Feature],
    magnitude_attribute: str = "mag",
) -> QuakeAggregate:
    """Count earthquakes within a radius and find their maximum magnitude.

    A quake is included when its great-circle distance is <= radius_km.
    Quakes without a numeric magnitude are counted but do not affect the
    maximum.

    Args:
        point: Query coordinate.
        radius_km: Search radius in kilometers (inclusive).
        points: Point features with [lon, lat(, depth)] coordinates.
        magnitude_attribute: Property holding the magnitude.

    Returns:
        QuakeAggregate with count and max magnitude.
    """
    count = 0
    max_mag: float | None = None

    for index, feature in enumerate(points):
        outcome = parse_point_coordinates(feature)
        if not outcome.ok:
            logger.debug("Skipping malformed quake feature", index=index, error=outcome.error.message)
            continue

        lon, lat = outcome.value
        distance = great_circle_km(point.lon, point.lat, lon, lat)
        if not math.isfinite(distance):
            logger.debug("Skipping quake with non-finite distance", index=index)
            continue
        if distance > radius_km:
            continue

        count += 1
        mag = _magnitude(feature.properties.get(magnitude_attribute))
        if mag is not None and (max_mag is None or mag > max_mag):
            max_mag = mag

    return QuakeAggregate(count=count, max_magnitude=max_mag)
