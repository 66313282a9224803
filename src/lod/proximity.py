"""
Proximity clustering for points without country/region tags.

Greedy seed clustering: walk points in input order; each point not yet
assigned seeds a new cluster and absorbs every unassigned point within
``threshold_km`` (haversine) of the seed. Membership is decided by
distance to the seed only, so two members may be up to twice the
threshold apart. This favours fewer, denser clusters over tightness.

The scan is O(n^2). For larger inputs an H3 bucket index restricts each
seed's comparisons to nearby cells without changing the result.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

import h3
import numpy as np

from .geo import haversine_km_many
from .models import Cluster, ClusterLevel, GeoPoint, LatLng

logger = logging.getLogger(__name__)

# Extra grid rings searched around a seed's cell to absorb cell size
# variation across the globe.
INDEX_RING_MARGIN = 3
MAX_H3_RESOLUTION = 15


def proximity_label(members: Sequence[GeoPoint]) -> str:
    if len(members) == 1:
        return members[0].display_name
    return f"{len(members)} locations"


def _steps_for_radius(radius_km: float, resolution: int) -> int:
    """Return the number of hex steps required to cover ``radius_km``."""

    edge_length = h3.average_hexagon_edge_length(resolution, unit="km")
    if edge_length == 0:
        return 1
    return max(1, int(math.ceil(radius_km / edge_length)))


def index_resolution(threshold_km: float) -> Optional[int]:
    """
    Finest H3 resolution whose average edge is at least ``threshold_km``.

    Returns None when even resolution 0 cells are smaller than the
    threshold; the index is of no use then.
    """
    best = None
    for res in range(MAX_H3_RESOLUTION + 1):
        if h3.average_hexagon_edge_length(res, unit="km") >= threshold_km:
            best = res
        else:
            break
    return best


class _CellIndex:
    """Point positions bucketed by H3 cell."""

    def __init__(self, lats: np.ndarray, lngs: np.ndarray, resolution: int, rings: int):
        self.rings = rings
        self.cells = [h3.latlng_to_cell(float(lat), float(lng), resolution) for lat, lng in zip(lats, lngs)]
        self.buckets: Dict[str, List[int]] = defaultdict(list)
        for position, cell in enumerate(self.cells):
            self.buckets[cell].append(position)

    def candidates(self, position: int) -> np.ndarray:
        nearby: List[int] = []
        for cell in h3.grid_disk(self.cells[position], self.rings):
            nearby.extend(self.buckets.get(cell, ()))
        return np.array(sorted(nearby), dtype=int)


def by_distance(
    points: Sequence[GeoPoint],
    threshold_km: float,
    *,
    level: ClusterLevel = ClusterLevel.LOCAL,
    use_index: Optional[bool] = None,
    index_min_points: int = 1000,
) -> List[Cluster]:
    """
    Cluster points by distance to a seed point.

    Args:
        points: Points to cluster
        threshold_km: Maximum seed-to-member distance (inclusive)
        level: Level recorded on the produced clusters
        use_index: Force (True) or disable (False) the H3 bucket index.
            None enables it from ``index_min_points`` points on.
        index_min_points: Auto-enable threshold for the index

    Returns:
        Clusters in seed order. Members keep input order.

    Raises:
        ValueError: If ``threshold_km`` is not a positive finite number
    """
    if not (threshold_km > 0 and math.isfinite(threshold_km)):
        raise ValueError(f"threshold_km must be positive and finite, got {threshold_km}")
    if not points:
        return []

    n = len(points)
    lats = np.array([p.lat for p in points], dtype=float)
    lngs = np.array([p.lng for p in points], dtype=float)
    assigned = np.zeros(n, dtype=bool)

    if use_index is None:
        use_index = n >= index_min_points

    index = None
    if use_index:
        resolution = index_resolution(threshold_km)
        if resolution is not None:
            index = _CellIndex(lats, lngs, resolution, _steps_for_radius(threshold_km, resolution) + INDEX_RING_MARGIN)
            logger.debug(f"Proximity index: {len(index.buckets)} cells at resolution {resolution} for {n} points")

    clusters: List[Cluster] = []
    for seed in range(n):
        if assigned[seed]:
            continue

        if index is None:
            candidates = np.flatnonzero(~assigned)
        else:
            candidates = index.candidates(seed)
            candidates = candidates[~assigned[candidates]]

        distances = haversine_km_many(lats[seed], lngs[seed], lats[candidates], lngs[candidates])
        selected = candidates[distances <= threshold_km]
        # The seed is always within 0 km of itself.
        assigned[selected] = True

        members = tuple(points[i] for i in selected)
        clusters.append(
            Cluster(
                id=f"proximity:{points[seed].id}",
                centroid=LatLng(lat=float(lats[selected].mean()), lng=float(lngs[selected].mean())),
                members=members,
                label=proximity_label(members),
                level=level,
            )
        )

    logger.debug(f"Proximity clustering at {threshold_km} km: {n} points -> {len(clusters)} clusters")
    return clusters
