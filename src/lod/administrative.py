"""
Administrative clustering: grouping by country, or by country and region.

Keys are compared with exact, case-sensitive string equality, so "India"
and "india" form separate groups. Casing normalization is left to callers.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .models import Cluster, ClusterLevel, GeoPoint, LatLng

GroupKey = Union[str, Tuple[str, ...]]
KeyFn = Callable[[GeoPoint], GroupKey]
LabelFn = Callable[[GroupKey, Tuple[GeoPoint, ...]], str]

UNKNOWN = "Unknown"
REGION_KEY_SEPARATOR = "|"


def points_frame(points: Sequence[GeoPoint]) -> pd.DataFrame:
    """Coordinates of ``points`` as a dataframe indexed by input position."""
    return pd.DataFrame(
        {
            "lat": [p.lat for p in points],
            "lng": [p.lng for p in points],
        }
    )


def count_label(key: str, count: int, singular_counts: bool = False) -> str:
    """'India (12 places)'; '(1 place)' only when ``singular_counts`` is set."""
    noun = "place" if singular_counts and count == 1 else "places"
    return f"{key} ({count} {noun})"


def _key_parts(key: GroupKey) -> Tuple[str, ...]:
    return key if isinstance(key, tuple) else (key,)


def _escape_part(part: str) -> str:
    return part.replace("\\", "\\\\").replace(REGION_KEY_SEPARATOR, "\\" + REGION_KEY_SEPARATOR)


def cluster_id(level: ClusterLevel, key: GroupKey) -> str:
    """'country:India'; multi-part keys join as 'region:India|Rajasthan' with '|' escaped."""
    parts = _key_parts(key)
    if len(parts) == 1:
        return f"{level.value}:{parts[0]}"
    return f"{level.value}:{REGION_KEY_SEPARATOR.join(_escape_part(p) for p in parts)}"


def by_field(
    points: Sequence[GeoPoint],
    key_fn: KeyFn,
    *,
    level: ClusterLevel = ClusterLevel.COUNTRY,
    label_fn: Optional[LabelFn] = None,
) -> List[Cluster]:
    """
    Group points whose ``key_fn`` values are equal.

    Args:
        points: Points to group
        key_fn: Returns the group key for a point: a string, or a tuple of
            strings compared part by part
        level: Level recorded on the produced clusters
        label_fn: Builds the label from (key, members). Defaults to
            :func:`count_label`.

    Returns:
        One cluster per distinct key, in order of first appearance. Members
        keep input order; the centroid is the planar mean of member
        coordinates.
    """
    if not points:
        return []

    label_fn = label_fn or (lambda key, members: count_label(key, len(members)))

    keys = [_key_parts(key_fn(point)) for point in points]
    columns = [f"key_{i}" for i in range(len(keys[0]))]
    frame = points_frame(points)
    for i, column in enumerate(columns):
        frame[column] = [parts[i] for parts in keys]

    clusters: List[Cluster] = []
    for group_key, group in frame.groupby(columns, sort=False, dropna=False):
        parts = _key_parts(group_key)
        key = parts[0] if len(parts) == 1 else parts
        members = tuple(points[i] for i in group.index)
        clusters.append(
            Cluster(
                id=cluster_id(level, key),
                centroid=LatLng(lat=float(group["lat"].mean()), lng=float(group["lng"].mean())),
                members=members,
                label=label_fn(key, members),
                level=level,
            )
        )
    return clusters


def cluster_by_country(
    points: Sequence[GeoPoint],
    *,
    unknown: str = UNKNOWN,
    singular_counts: bool = False,
) -> List[Cluster]:
    """Global view: one cluster per country. Untagged points share the ``unknown`` bucket."""
    return by_field(
        points,
        lambda p: p.country or unknown,
        level=ClusterLevel.COUNTRY,
        label_fn=lambda key, members: count_label(key, len(members), singular_counts),
    )


def region_name(point: GeoPoint, unknown: str = UNKNOWN) -> str:
    return point.region or point.place or unknown


def cluster_by_region(points: Sequence[GeoPoint], *, unknown: str = UNKNOWN) -> List[Cluster]:
    """
    Regional view: one cluster per (country, region) pair.

    The region falls back to the point's place, then to ``unknown``.
    Labels read 'Rajasthan (5)'.
    """
    return by_field(
        points,
        lambda p: (p.country or unknown, region_name(p, unknown)),
        level=ClusterLevel.REGION,
        label_fn=lambda key, members: f"{region_name(members[0], unknown)} ({len(members)})",
    )
