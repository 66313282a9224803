"""
Spherical geometry helpers.

Distances use the haversine formula on a sphere of radius 6371 km.
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_M = EARTH_RADIUS_KM * 1000.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_km_many(
    lat: float,
    lng: float,
    lats: np.ndarray,
    lngs: np.ndarray,
) -> np.ndarray:
    """
    Vectorised haversine distance from one origin to many points.

    Args:
        lat, lng: Origin in degrees
        lats, lngs: Arrays of destination coordinates in degrees

    Returns:
        Array of distances in kilometres, same shape as ``lats``
    """
    phi1 = np.radians(lat)
    phi2 = np.radians(lats)
    d_phi = np.radians(lats - lat)
    d_lambda = np.radians(lngs - lng)
    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def destination_point(
    lat: float,
    lng: float,
    bearings_deg: np.ndarray,
    distance_m: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Points reached by travelling ``distance_m`` from an origin along each bearing.

    Bearings are clockwise from true north. Longitudes are wrapped into
    [-180, 180).
    """
    delta = distance_m / EARTH_RADIUS_M
    theta = np.radians(bearings_deg)
    phi1 = math.radians(lat)
    lambda1 = math.radians(lng)

    sin_phi2 = math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(delta) * np.cos(theta)
    phi2 = np.arcsin(np.clip(sin_phi2, -1.0, 1.0))
    lambda2 = lambda1 + np.arctan2(
        np.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * sin_phi2,
    )

    lats = np.degrees(phi2)
    lngs = (np.degrees(lambda2) + 540.0) % 360.0 - 180.0
    return lats, lngs


def initial_bearing_deg(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Initial great-circle bearing from the first point to the second, in [0, 360)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_lambda = math.radians(lng2 - lng1)
    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0
