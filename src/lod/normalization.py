"""
Point normalization: raw journey and story records to :class:`GeoPoint`.

Records come from the journey and story stores as plain mappings. Absent
or malformed locations are expected for many records; such records are
dropped silently rather than failing the whole pass. Only the id and the
coordinates decide whether a record is kept: a bad title, tag or media
entry is discarded on its own.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ValidationError, field_validator

from .models import GeoPoint

logger = logging.getLogger(__name__)


class RecordKind(Enum):
    """Source record type; decides where media references are read from."""
    JOURNEY = "journey"
    STORY = "story"


class RawCoordinates(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class RawLocation(BaseModel):
    coordinates: Optional[RawCoordinates] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    place_name: Optional[str] = None

    @field_validator("country", "state", "city", "place_name", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return None


class RawRecord(BaseModel):
    """The subset of a journey/story record the map needs."""

    id: str
    title: Optional[str] = None
    location: Optional[RawLocation] = None
    photos: Optional[List[str]] = None
    images: Optional[List[str]] = None
    featured_image: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("title", mode="before")
    @classmethod
    def _lenient_title(cls, value: Any) -> Optional[str]:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return None

    @field_validator("photos", "images", mode="before")
    @classmethod
    def _url_strings(cls, value: Any) -> Optional[List[str]]:
        # Non-string entries (nulls, JSON objects) are skipped, never fatal.
        if isinstance(value, (list, tuple)):
            return [item for item in value if isinstance(item, str)]
        return None

    @field_validator("featured_image", mode="before")
    @classmethod
    def _url_or_none(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None

    def media(self, kind: RecordKind) -> Tuple[str, ...]:
        if kind is RecordKind.STORY:
            ordered = [self.featured_image] + list(self.images or [])
        else:
            ordered = list(self.photos or self.images or [])
        seen = []
        for url in ordered:
            if url and url not in seen:
                seen.append(url)
        return tuple(seen)


def is_valid_coordinate(lat: Optional[float], lng: Optional[float]) -> bool:
    """Finite and within [-90, 90] x [-180, 180]."""
    if lat is None or lng is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def _to_point(raw: Mapping[str, Any], kind: RecordKind) -> Optional[GeoPoint]:
    try:
        record = RawRecord.model_validate(raw)
    except ValidationError as exc:
        logger.debug(f"Dropping malformed {kind.value} record: {exc.error_count()} validation errors")
        return None

    location = record.location
    coords = location.coordinates if location else None
    if coords is None or not is_valid_coordinate(coords.latitude, coords.longitude):
        return None

    return GeoPoint(
        id=record.id,
        lat=float(coords.latitude),
        lng=float(coords.longitude),
        country=location.country,
        region=location.state,
        place=location.place_name or location.city,
        title=record.title,
        photos=record.media(kind),
        payload=raw,
    )


def normalize(
    records: Iterable[Mapping[str, Any]],
    kind: RecordKind = RecordKind.JOURNEY,
) -> List[GeoPoint]:
    """
    Convert raw records into :class:`GeoPoint` objects.

    Records without a usable location (missing, non-numeric, non-finite or
    out-of-range coordinates) are excluded. Output keeps input order.

    Args:
        records: Iterable of record mappings
        kind: Whether the records are journeys or stories

    Returns:
        List of normalized points

    Raises:
        TypeError: If ``records`` is not iterable or holds non-mapping items
    """
    if isinstance(records, (str, bytes)) or isinstance(records, Mapping):
        raise TypeError("records must be an iterable of mappings, not a single value")

    points: List[GeoPoint] = []
    dropped = 0
    for raw in records:
        if not isinstance(raw, Mapping):
            raise TypeError(f"Expected a mapping record, got {type(raw).__name__}")
        point = _to_point(raw, kind)
        if point is None:
            dropped += 1
            continue
        points.append(point)

    if dropped and logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Normalized {len(points)} {kind.value} points, dropped {dropped} without location")
    return points


def extract_journey_points(journeys: Iterable[Mapping[str, Any]]) -> List[GeoPoint]:
    """Map points for journey records."""
    return normalize(journeys, RecordKind.JOURNEY)


def extract_story_points(stories: Iterable[Mapping[str, Any]]) -> List[GeoPoint]:
    """Map points for story records."""
    return normalize(stories, RecordKind.STORY)
