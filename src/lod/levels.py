"""
Zoom level selection.

Maps a web-map zoom value (0 = whole world, ~20 = building level) onto one
of three bands, each with its clustering strategy and the distance
threshold used when the data carries no administrative tags.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import DEFAULT_CONFIG, LODConfig
from .models import ClusterLevel

logger = logging.getLogger(__name__)


class ZoomBand(Enum):
    """Contiguous zoom ranges, coarse to fine."""
    GLOBAL = "global"
    REGIONAL = "regional"
    LOCAL = "local"


BAND_LEVELS = {
    ZoomBand.GLOBAL: ClusterLevel.COUNTRY,
    ZoomBand.REGIONAL: ClusterLevel.REGION,
    ZoomBand.LOCAL: ClusterLevel.LOCAL,
}


@dataclass(frozen=True)
class StrategyChoice:
    """The clustering strategy for one zoom value."""

    band: ZoomBand
    """Tag selecting the strategy."""

    threshold_km: float
    """Proximity threshold for datasets without country/region tags."""

    zoom: float
    """Zoom after clamping."""

    @property
    def level(self) -> ClusterLevel:
        return BAND_LEVELS[self.band]


def clamp_zoom(zoom: float) -> float:
    """
    Clamp a zoom value onto the valid range.

    Negative values and -inf become 0, NaN becomes 0 (world view) and
    +inf is kept, which lands in the local band.
    """
    zoom = float(zoom)
    if math.isnan(zoom):
        logger.warning("Non-finite zoom value NaN, clamping to 0")
        return 0.0
    if zoom < 0:
        return 0.0
    return zoom


def select_strategy(zoom: float, config: Optional[LODConfig] = None) -> StrategyChoice:
    """
    Select the clustering strategy for ``zoom``.

    Bands (with default config):
        zoom < 5        -> GLOBAL   (by country, 500 km proximity threshold)
        5 <= zoom < 10  -> REGIONAL (by country + region, 100 km)
        zoom >= 10      -> LOCAL    (one cluster per point, 10 km)

    Never raises for bad zoom values; see :func:`clamp_zoom`.
    """
    config = config or DEFAULT_CONFIG
    zoom = clamp_zoom(zoom)

    if zoom < config.regional_min_zoom:
        choice = StrategyChoice(ZoomBand.GLOBAL, config.global_threshold_km, zoom)
    elif zoom < config.local_min_zoom:
        choice = StrategyChoice(ZoomBand.REGIONAL, config.regional_threshold_km, zoom)
    else:
        choice = StrategyChoice(ZoomBand.LOCAL, config.local_threshold_km, zoom)

    logger.debug(f"Zoom {zoom} -> {choice.band.value} (threshold {choice.threshold_km} km)")
    return choice
