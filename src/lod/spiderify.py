"""
Spiderify: radial layout for clusters whose members are coincident.

Members are placed on a circle of ``radius_m`` metres around the cluster
centroid, member ``i`` at bearing ``phase + i * 360 / count``. Positions are
geographic; projecting them to pixels is the renderer's job. Deciding
whether a cluster's members are visually coincident is also the caller's.
"""

from __future__ import annotations

import math
from typing import List

import numpy as np

from .geo import destination_point
from .models import Cluster, EmptyClusterError, SpiderPosition


def leg_bearings(count: int, phase_deg: float = 0.0) -> np.ndarray:
    """Evenly spaced bearings in [0, 360) for ``count`` spider legs."""
    return (phase_deg + np.arange(count) * (360.0 / count)) % 360.0


def expand(
    cluster: Cluster,
    radius_m: float,
    *,
    phase_deg: float = 0.0,
) -> List[SpiderPosition]:
    """
    Fan the members of ``cluster`` out around its centroid.

    A single member stays on the centroid. For more members every position
    is exactly ``radius_m`` from the centroid along its own bearing, so no
    two positions coincide.

    Args:
        cluster: Cluster to expand; must have at least one member
        radius_m: Circle radius in metres
        phase_deg: Bearing of the first member, clockwise from north

    Returns:
        One position per member, in member order

    Raises:
        EmptyClusterError: If the cluster has no members
        ValueError: If ``radius_m`` is not a positive finite number
    """
    if cluster.count < 1:
        raise EmptyClusterError(f"Cannot expand cluster '{cluster.id}' without members")
    if not (radius_m > 0 and math.isfinite(radius_m)):
        raise ValueError(f"radius_m must be positive and finite, got {radius_m}")

    center = cluster.centroid
    if cluster.count == 1:
        return [SpiderPosition(point_id=cluster.members[0].id, lat=center.lat, lng=center.lng)]

    bearings = leg_bearings(cluster.count, phase_deg)
    lats, lngs = destination_point(center.lat, center.lng, bearings, radius_m)

    return [
        SpiderPosition(point_id=point.id, lat=float(lat), lng=float(lng), bearing_deg=float(bearing))
        for point, lat, lng, bearing in zip(cluster.members, lats, lngs, bearings)
    ]
