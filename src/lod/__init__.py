"""
src/lod: Level-of-detail clustering for the travel map.

Normalizes journey/story records into points, partitions them per zoom
level (country, region, individual points, or proximity fallback) and lays
out coincident clusters as spiders.
"""

from .models import (
    Cluster,
    ClusterLevel,
    EmptyClusterError,
    GeoPoint,
    LatLng,
    SpiderPosition,
)
from .config import LODConfig, load_lod_config
from .normalization import (
    RecordKind,
    extract_journey_points,
    extract_story_points,
    normalize,
)
from .levels import StrategyChoice, ZoomBand, select_strategy
from .administrative import by_field, cluster_by_country, cluster_by_region
from .proximity import by_distance
from .spiderify import expand
from .clustering import (
    clear_cache,
    cluster_data,
    cluster_data_cached,
    expand_cluster,
    get_cache_stats,
)

__all__ = [
    # Data models
    "Cluster",
    "ClusterLevel",
    "EmptyClusterError",
    "GeoPoint",
    "LatLng",
    "SpiderPosition",

    # Configuration
    "LODConfig",
    "load_lod_config",

    # Normalization
    "RecordKind",
    "extract_journey_points",
    "extract_story_points",
    "normalize",

    # Strategies
    "StrategyChoice",
    "ZoomBand",
    "select_strategy",
    "by_field",
    "cluster_by_country",
    "cluster_by_region",
    "by_distance",
    "expand",

    # Entry points
    "cluster_data",
    "cluster_data_cached",
    "expand_cluster",

    # Cache management
    "get_cache_stats",
    "clear_cache",
]
