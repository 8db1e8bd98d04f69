"""Soil polygon lookup by point containment."""

from typing import Iterable

import structlog
from shapely.geometry import Point

from quakerisk.features import POLYGON_TYPES, Feature, GeographicPoint, parse_geometry

logger = structlog.get_logger()


def locate_soil_feature(
    point: GeographicPoint,
    polygons: Iterable[Feature],
) -> Feature | None:
    """Find the first polygon feature containing a point.

    Containment is tested on raw lon/lat treated as planar coordinates, and
    points on a polygon boundary count as inside. Features are scanned in
    collection order and the first match wins, so overlapping polygons
    resolve to the earlier one.

    Args:
        point: Query coordinate.
        polygons: Polygon/MultiPolygon features in stored order.

    Returns:
        The containing feature, or None if no polygon contains the point.
    """
    pt = Point(point.lon, point.lat)

    for index, feature in enumerate(polygons):
        outcome = parse_geometry(feature, POLYGON_TYPES)
        if not outcome.ok:
            logger.debug("Skipping malformed soil feature", index=index, error=outcome.error.message)
            continue

        if outcome.value.covers(pt):
            return feature

    return None
