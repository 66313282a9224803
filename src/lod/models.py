"""
Data model for the travel map level-of-detail engine.

GeoPoint is the normalized input unit, Cluster the output unit and
SpiderPosition the ephemeral layout coordinate handed to the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ClusterLevel(Enum):
    """Which strategy produced a cluster."""
    COUNTRY = "country"
    REGION = "region"
    LOCAL = "local"


class EmptyClusterError(AssertionError, ValueError):
    """Raised when a cluster without members is expanded."""


@dataclass(frozen=True)
class LatLng:
    """Simple latitude/longitude container."""
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class GeoPoint:
    """A geo-tagged record, normalized from a journey or a story."""

    id: str
    """Identifier of the source record."""

    lat: float
    """Latitude in decimal degrees, within [-90, 90]."""

    lng: float
    """Longitude in decimal degrees, within [-180, 180]."""

    country: Optional[str] = None
    region: Optional[str] = None
    """Administrative region (state) when known."""

    place: Optional[str] = None
    """Place label fallback (place name or city)."""

    title: Optional[str] = None
    photos: Tuple[str, ...] = ()

    payload: Any = field(default=None, compare=False, repr=False)
    """Originating record. Never inspected by the clustering logic."""

    @property
    def cover_photo(self) -> Optional[str]:
        return self.photos[0] if self.photos else None

    @property
    def display_name(self) -> str:
        return self.place or self.title or "Location"


@dataclass(frozen=True)
class Cluster:
    """A group of points rendered as one marker."""

    id: str
    centroid: LatLng
    members: Tuple[GeoPoint, ...]
    label: str
    level: ClusterLevel

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def member_ids(self) -> List[str]:
        return [point.id for point in self.members]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "centroid": self.centroid.to_dict(),
            "count": self.count,
            "label": self.label,
            "level": self.level.value,
            "member_ids": self.member_ids,
        }


@dataclass(frozen=True)
class SpiderPosition:
    """Temporary display coordinate of one member of an expanded cluster."""
    point_id: str
    lat: float
    lng: float
    bearing_deg: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "point_id": self.point_id,
            "lat": self.lat,
            "lng": self.lng,
            "bearing_deg": self.bearing_deg,
        }
