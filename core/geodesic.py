"""Great-circle primitives on a spherical Earth.

All functions take decimal degrees (WGS84 latitude/longitude) and work in
meters. The scalar functions use the ``math`` module; ``haversine_matrix``
is the numpy counterpart used for cluster-quality scoring. Its results agree
with ``haversine_distance`` only to rounding, so threshold tests (``<= eps``)
use the scalar function.
"""

import math
from typing import Tuple

import numpy as np

from config import GEODESY_CONFIG

EARTH_RADIUS_M = GEODESY_CONFIG["earth_radius_m"]


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two coordinate pairs"""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (math.sin(delta_lat / 2.0) ** 2
         + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2.0) ** 2)
    c = 2.0 * math.asin(math.sqrt(min(a, 1.0)))

    return EARTH_RADIUS_M * c


def distance(a, b) -> float:
    """Great-circle distance in meters between two locations"""
    return haversine_distance(a.lat, a.lon, b.lat, b.lon)


def bearing(a, b) -> float:
    """Initial bearing from ``a`` toward ``b`` in degrees, normalized to [0, 360)"""
    lat1_rad = math.radians(a.lat)
    lat2_rad = math.radians(b.lat)
    delta_lon = math.radians(b.lon - a.lon)

    x = math.sin(delta_lon) * math.cos(lat2_rad)
    y = (math.cos(lat1_rad) * math.sin(lat2_rad)
         - math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(delta_lon))

    return (math.degrees(math.atan2(x, y)) + 360.0) % 360.0


def destination_point(lat: float, lon: float, bearing_deg: float,
                      distance_m: float) -> Tuple[float, float]:
    """Project a point ``distance_m`` meters along ``bearing_deg``.

    Returns the destination as a ``(lat, lon)`` pair with longitude wrapped
    into [-180, 180).
    """
    lat_rad = math.radians(lat)
    lon_rad = math.radians(lon)
    bearing_rad = math.radians(bearing_deg)
    angular_dist = distance_m / EARTH_RADIUS_M

    dest_lat = math.asin(
        math.sin(lat_rad) * math.cos(angular_dist)
        + math.cos(lat_rad) * math.sin(angular_dist) * math.cos(bearing_rad)
    )
    dest_lon = lon_rad + math.atan2(
        math.sin(bearing_rad) * math.sin(angular_dist) * math.cos(lat_rad),
        math.cos(angular_dist) - math.sin(lat_rad) * math.sin(dest_lat)
    )

    dest_lon_deg = (math.degrees(dest_lon) + 540.0) % 360.0 - 180.0
    return math.degrees(dest_lat), dest_lon_deg


def destination(point, bearing_deg: float, distance_m: float) -> Tuple[float, float]:
    """Forward geodesic projection from a location"""
    return destination_point(point.lat, point.lon, bearing_deg, distance_m)


def haversine_matrix(lats, lons) -> np.ndarray:
    """Pairwise great-circle distances in meters as an (n, n) array"""
    lats = np.asarray(lats, dtype=float)
    lons = np.asarray(lons, dtype=float)
    if lats.size == 0:
        return np.zeros((0, 0))

    # Same operation order as haversine_distance
    dlat = np.radians(lats[np.newaxis, :] - lats[:, np.newaxis])
    dlon = np.radians(lons[np.newaxis, :] - lons[:, np.newaxis])
    lats = np.radians(lats)
    a = (np.sin(dlat / 2.0) ** 2
         + np.cos(lats)[:, np.newaxis] * np.cos(lats)[np.newaxis, :] * np.sin(dlon / 2.0) ** 2)
    # Rounding can push a a hair above 1 for antipodal pairs
    a = np.clip(a, 0.0, 1.0)
    return 2.0 * EARTH_RADIUS_M * np.arcsin(np.sqrt(a))
