"""
Level-of-detail clustering for the travel map.

This module provides the two entry points the rendering layer calls:
1. cluster_data: partition a point set for the current zoom
2. expand_cluster: spider layout for a cluster the user opens

Dispatch:
- Points tagged with country/region anywhere in the dataset are grouped
  administratively (country -> country + region -> one per point).
- Fully untagged datasets fall back to proximity clustering with a
  zoom-dependent distance threshold.

Every call is pure and deterministic: the same (points, zoom) always gives
the same clusters, so callers may cache results. A TTL cache keyed on the
point set and the selected band is provided here as well. The cache is
module-level state without a lock: cluster_data_cached is not thread-safe,
so concurrent callers should use cluster_data or their own ClusterCache.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from cachetools import TTLCache

from .administrative import cluster_by_country, cluster_by_region
from .config import DEFAULT_CONFIG, LODConfig
from .levels import StrategyChoice, ZoomBand, select_strategy
from .models import Cluster, ClusterLevel, GeoPoint, LatLng, SpiderPosition
from .proximity import by_distance
from .spiderify import expand

logger = logging.getLogger(__name__)


def has_administrative_tags(points: Sequence[GeoPoint]) -> bool:
    """Whether any point carries a country or region."""
    return any(p.country or p.region for p in points)


def local_clusters(points: Sequence[GeoPoint]) -> List[Cluster]:
    """Local view: one cluster per point."""
    return [
        Cluster(
            id=f"local:{p.id}",
            centroid=LatLng(lat=p.lat, lng=p.lng),
            members=(p,),
            label=p.display_name,
            level=ClusterLevel.LOCAL,
        )
        for p in points
    ]


def _cluster_for_choice(
    points: Sequence[GeoPoint],
    choice: StrategyChoice,
    config: LODConfig,
) -> List[Cluster]:
    if not has_administrative_tags(points):
        if choice.band is ZoomBand.LOCAL and not config.local_fallback:
            return local_clusters(points)
        return by_distance(
            points,
            choice.threshold_km,
            level=choice.level,
            index_min_points=config.index_min_points,
        )

    if choice.band is ZoomBand.GLOBAL:
        return cluster_by_country(
            points,
            unknown=config.unknown_label,
            singular_counts=config.singular_counts,
        )
    if choice.band is ZoomBand.REGIONAL:
        return cluster_by_region(points, unknown=config.unknown_label)
    return local_clusters(points)


def cluster_data(
    points: Sequence[GeoPoint],
    zoom: float,
    config: Optional[LODConfig] = None,
) -> List[Cluster]:
    """
    Partition ``points`` into clusters for the given map zoom.

    Every input point lands in exactly one cluster, so the cluster counts
    sum to ``len(points)``. An empty input yields an empty list.

    Args:
        points: Normalized points (see :mod:`src.lod.normalization`)
        zoom: Current web-map zoom; out-of-range values are clamped
        config: LOD configuration (uses defaults if None)

    Returns:
        List of clusters
    """
    if not points:
        return []

    config = config or DEFAULT_CONFIG
    choice = select_strategy(zoom, config)
    clusters = _cluster_for_choice(points, choice, config)

    logger.debug(f"cluster_data: {len(points)} points at zoom {choice.zoom} -> {len(clusters)} clusters")
    return clusters


def expand_cluster(
    cluster: Cluster,
    radius_m: Optional[float] = None,
    config: Optional[LODConfig] = None,
) -> List[SpiderPosition]:
    """
    Spider layout for ``cluster``, invoked when the user opens it.

    Args:
        cluster: Cluster whose members are coincident at the current zoom
        radius_m: Spider radius in metres (config default if None)
        config: LOD configuration (uses defaults if None)
    """
    config = config or DEFAULT_CONFIG
    if radius_m is None:
        radius_m = config.spider_radius_m
    return expand(cluster, radius_m, phase_deg=config.spider_phase_deg)


# -----------------------------
# Result Cache
# -----------------------------

class ClusterCache:
    """TTL cache of clustering results keyed by point set and zoom band."""

    def __init__(self, maxsize: int = DEFAULT_CONFIG.cache_maxsize, ttl: float = DEFAULT_CONFIG.cache_ttl_s):
        self._cache = TTLCache(maxsize=maxsize, ttl=ttl)
        self.hits = 0
        self.misses = 0

    def _cache_key(self, points: Sequence[GeoPoint], choice: StrategyChoice, config: LODConfig) -> Tuple:
        """
        Generate cache key from the request.

        Zooms within one band produce the same clusters, so the key holds the
        band and threshold rather than the raw zoom. Points compare without
        their payload, so point sets differing only in payload share an entry.
        """
        return (tuple(points), choice.band.value, choice.threshold_km, config)

    @staticmethod
    def _member_positions(points: Sequence[GeoPoint], clusters: Sequence[Cluster]) -> Tuple[Tuple[int, ...], ...]:
        """Input positions of each cluster's members."""
        slots: Dict[int, List[int]] = {}
        for i, point in enumerate(points):
            slots.setdefault(id(point), []).append(i)
        return tuple(tuple(slots[id(member)].pop(0) for member in cluster.members) for cluster in clusters)

    def get_or_compute(
        self,
        points: Sequence[GeoPoint],
        zoom: float,
        config: LODConfig,
    ) -> List[Cluster]:
        """
        Return clusters for ``points``, computing them on a miss.

        Entries store membership as input positions. On a hit the members are
        taken from the caller's ``points``, so payloads are always the current
        call's records.
        """
        choice = select_strategy(zoom, config)
        key = self._cache_key(points, choice, config)
        cached = self._cache.get(key)
        if cached is not None:
            self.hits += 1
            clusters, positions = cached
            return [
                replace(cluster, members=tuple(points[i] for i in members))
                for cluster, members in zip(clusters, positions)
            ]

        self.misses += 1
        clusters = _cluster_for_choice(points, choice, config) if points else []
        self._cache[key] = (tuple(clusters), self._member_positions(points, clusters))
        return clusters

    def clear(self) -> None:
        """Clear the cache and its counters."""
        self._cache.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        return {
            "size": len(self._cache),
            "maxsize": self._cache.maxsize,
            "ttl": self._cache.ttl,
            "hits": self.hits,
            "misses": self.misses,
        }


# Global cache instance
_cluster_cache = ClusterCache()


def cluster_data_cached(
    points: Sequence[GeoPoint],
    zoom: float,
    config: Optional[LODConfig] = None,
) -> List[Cluster]:
    """:func:`cluster_data` backed by the module-level TTL cache."""
    return _cluster_cache.get_or_compute(points, zoom, config or DEFAULT_CONFIG)


def get_cache_stats() -> Dict[str, Any]:
    """Get current cache statistics."""
    return _cluster_cache.stats()


def clear_cache() -> None:
    """Clear the clustering result cache."""
    _cluster_cache.clear()
