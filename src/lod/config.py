"""
Typed LOD configuration built from YAML profiles.

Profiles live in ``configs/<name>.yaml`` and are read through
:class:`src.tools.config_loader.ConfigLoader`. Keys that are absent fall
back to the defaults below.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from ..tools.config_loader import ConfigLoader


@dataclass(frozen=True)
class LODConfig:
    """Zoom bands, thresholds and presentation settings for clustering."""

    regional_min_zoom: float = 5
    """First zoom of the regional band (inclusive)."""

    local_min_zoom: float = 10
    """First zoom of the local band (inclusive)."""

    global_threshold_km: float = 500.0
    """Proximity threshold below ``regional_min_zoom``."""

    regional_threshold_km: float = 100.0
    """Proximity threshold in the regional band."""

    local_threshold_km: float = 10.0
    """Proximity threshold in the local band."""

    index_min_points: int = 1000
    """Point count from which proximity clustering uses the H3 bucket index."""

    local_fallback: bool = False
    """Use proximity clustering in the local band for untagged datasets."""

    unknown_label: str = "Unknown"
    """Group key for points without a country or region."""

    singular_counts: bool = False
    """Render '1 place' instead of '1 places' in country labels."""

    spider_radius_m: float = 1000.0
    """Default spiderify radius in metres."""

    spider_phase_deg: float = 0.0
    """Bearing of the first spider leg, clockwise from north."""

    cache_maxsize: int = 256
    cache_ttl_s: float = 300.0

    def __post_init__(self):
        if self.regional_min_zoom > self.local_min_zoom:
            raise ValueError(
                f"regional_min_zoom ({self.regional_min_zoom}) must not exceed "
                f"local_min_zoom ({self.local_min_zoom})"
            )
        for name in ("global_threshold_km", "regional_threshold_km", "local_threshold_km"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.spider_radius_m <= 0:
            raise ValueError(f"spider_radius_m must be positive, got {self.spider_radius_m}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LODConfig":
        """
        Build a config from a profile dictionary.

        YAML Format:
            ```yaml
            bands:
              regional_min_zoom: 5
              local_min_zoom: 10
            proximity:
              global_threshold_km: 500
              regional_threshold_km: 100
              local_threshold_km: 10
              index_min_points: 1000
              local_fallback: false
            labels:
              unknown: "Unknown"
              singular_counts: false
            spiderify:
              radius_m: 1000
              phase_deg: 0
            cache:
              maxsize: 256
              ttl_s: 300
            ```
        """
        data = data or {}
        bands = data.get("bands") or {}
        proximity = data.get("proximity") or {}
        labels = data.get("labels") or {}
        spiderify = data.get("spiderify") or {}
        cache = data.get("cache") or {}

        values = {
            "regional_min_zoom": bands.get("regional_min_zoom"),
            "local_min_zoom": bands.get("local_min_zoom"),
            "global_threshold_km": proximity.get("global_threshold_km"),
            "regional_threshold_km": proximity.get("regional_threshold_km"),
            "local_threshold_km": proximity.get("local_threshold_km"),
            "index_min_points": proximity.get("index_min_points"),
            "local_fallback": proximity.get("local_fallback"),
            "unknown_label": labels.get("unknown"),
            "singular_counts": labels.get("singular_counts"),
            "spider_radius_m": spiderify.get("radius_m"),
            "spider_phase_deg": spiderify.get("phase_deg"),
            "cache_maxsize": cache.get("maxsize"),
            "cache_ttl_s": cache.get("ttl_s"),
        }
        return cls(**{key: value for key, value in values.items() if value is not None})

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_CONFIG = LODConfig()


def load_lod_config(profile_name: Optional[str] = None) -> LODConfig:
    """
    Load a :class:`LODConfig` from a named profile, or from ``LOD_PROFILE``.

    Args:
        profile_name: Profile to load. If None, uses the environment or the
            default profile, falling back to built-in defaults.

    Raises:
        FileNotFoundError: If an explicitly named profile doesn't exist
        ValueError: If the profile describes inconsistent bands or thresholds
    """
    if profile_name is None:
        data = ConfigLoader.load_default_or_env_profile()
    else:
        data = ConfigLoader.load_profile(profile_name)
    return LODConfig.from_dict(data)
