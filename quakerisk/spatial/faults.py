"""Distance from a point to the nearest fault line."""

import math
from typing import Iterable

import structlog
from shapely.geometry import LineString
from shapely.geometry.base import BaseGeometry

from quakerisk.features import LINE_TYPES, Feature, GeographicPoint, parse_geometry
from quakerisk.geo_utils import point_to_segment_km

logger = structlog.get_logger()

# Below this a point is treated as lying on the fault
ON_FAULT_TOLERANCE_KM = 1e-9


def _line_parts(geom: BaseGeometry) -> list[LineString]:
    if geom.geom_type == "MultiLineString":
        return list(geom.geoms)
    return [geom]


def distance_to_line_km(point: GeographicPoint, line: BaseGeometry) -> float:
    """Great-circle distance from a point to a (multi)line geometry.

    Args:
        point: Query coordinate.
        line: LineString or MultiLineString in lon/lat degrees.

    Returns:
        Distance in kilometers to the nearest segment.
    """
    distances = []
    for part in _line_parts(line):
        coords = [(c[0], c[1]) for c in part.coords]
        for start, end in zip(coords, coords[1:]):
            distances.append(point_to_segment_km(point.lon, point.lat, start, end))

    nearest = min(distances)
    return 0.0 if nearest < ON_FAULT_TOLERANCE_KM else nearest


def nearest_fault_distance_km(
    point: GeographicPoint,
    lines: Iterable[Feature],
) -> float | None:
    """Minimum great-circle distance from a point to any fault line.

    Args:
        point: Query coordinate.
        lines: LineString/MultiLineString features.

    Returns:
        Distance in kilometers, or None if no usable line geometry exists.
    """
    nearest: float | None = None
    skipped = 0

    for index, feature in enumerate(lines):
        outcome = parse_geometry(feature, LINE_TYPES)
        if not outcome.ok:
            skipped += 1
            logger.debug("Skipping malformed fault feature", index=index, error=outcome.error.message)
            continue

        d = distance_to_line_km(point, outcome.value)
        if not math.isfinite(d):
            skipped += 1
            logger.debug("Skipping fault with non-finite distance", index=index)
            continue
        if nearest is None or d < nearest:
            nearest = d

    if skipped:
        logger.debug("Fault scan skipped features", skipped=skipped)

    return nearest
