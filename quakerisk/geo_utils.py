"""Shared geodesic utility functions.

All distances are great-circle distances on a sphere with the mean Earth
radius, computed on WGS84 lon/lat degrees without reprojection.
"""

import math

import numpy as np
from pyproj import Geod

EARTH_RADIUS_KM = 6371.0088

_SPHERE = Geod(a=EARTH_RADIUS_KM * 1000.0, b=EARTH_RADIUS_KM * 1000.0)


def great_circle_km(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Great-circle distance between two WGS84 coordinates.

    Args:
        lon1: Longitude of the first point in degrees.
        lat1: Latitude of the first point in degrees.
        lon2: Longitude of the second point in degrees.
        lat2: Latitude of the second point in degrees.

    Returns:
        Distance in kilometers.
    """
    _, _, dist_m = _SPHERE.inv(lon1, lat1, lon2, lat2)
    return abs(dist_m) / 1000.0


def _unit_vector(lon: float, lat: float) -> np.ndarray:
    lon_r = math.radians(lon)
    lat_r = math.radians(lat)
    return np.array([
        math.cos(lat_r) * math.cos(lon_r),
        math.cos(lat_r) * math.sin(lon_r),
        math.sin(lat_r),
    ])


def point_to_segment_km(
    lon: float,
    lat: float,
    start: tuple[float, float],
    end: tuple[float, float],
) -> float:
    """Great-circle distance from a point to the arc between two vertices.

    Uses the cross-track distance when the perpendicular foot of the point
    falls inside the arc, otherwise the distance to the nearer endpoint.

    Args:
        lon: Point longitude in degrees.
        lat: Point latitude in degrees.
        start: (lon, lat) of the first segment vertex.
        end: (lon, lat) of the second segment vertex.

    Returns:
        Distance in kilometers (never negative).
    """
    endpoint_km = min(
        great_circle_km(lon, lat, start[0], start[1]),
        great_circle_km(lon, lat, end[0], end[1]),
    )

    a = _unit_vector(*start)
    b = _unit_vector(*end)
    p = _unit_vector(lon, lat)

    normal = np.cross(a, b)
    norm = float(np.linalg.norm(normal))
    if norm < 1e-15:
        # Zero-length or antipodal segment
        return endpoint_km
    normal /= norm

    offset = float(np.dot(p, normal))
    foot = p - offset * normal

    # Foot lies on the arc when it sits between a and b along the great circle
    if np.dot(np.cross(a, foot), normal) >= 0 and np.dot(np.cross(foot, b), normal) >= 0:
        cross_track_km = abs(math.asin(max(-1.0, min(1.0, offset)))) * EARTH_RADIUS_KM
        return min(cross_track_km, endpoint_km)

    return endpoint_km
