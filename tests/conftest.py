"""
Pytest configuration and shared fixtures for travel-map-lod tests.

This file provides:
- Raw journey and story records as the record stores return them
- Normalized point sets (tagged, untagged, coincident)
- A point factory for ad-hoc test data
"""

from typing import Any, Callable, Dict, List

import numpy as np
import pytest

from src.lod.clustering import clear_cache
from src.lod.models import Cluster, ClusterLevel, GeoPoint, LatLng
from src.lod.normalization import extract_journey_points


# ==============================================================================
# Point Factory
# ==============================================================================

@pytest.fixture
def make_point() -> Callable[..., GeoPoint]:
    """Factory building a GeoPoint with optional tags."""

    def _make(point_id: str, lat: float, lng: float, **tags: Any) -> GeoPoint:
        return GeoPoint(id=point_id, lat=lat, lng=lng, **tags)

    return _make


# ==============================================================================
# Raw Records
# ==============================================================================

@pytest.fixture
def sample_journeys() -> List[Dict[str, Any]]:
    """Journey records, including ones without a usable location."""
    return [
        {
            "id": "j1",
            "title": "Pink City weekend",
            "location": {
                "coordinates": {"latitude": 26.9124, "longitude": 75.7873},
                "country": "India",
                "state": "Rajasthan",
                "city": "Jaipur",
                "place_name": "Hawa Mahal",
            },
            "photos": ["https://cdn.example.com/j1.jpg"],
        },
        {
            "id": "j2",
            "title": "Lake palaces",
            "location": {
                "coordinates": {"latitude": 24.5854, "longitude": 73.7125},
                "country": "India",
                "state": "Rajasthan",
                "city": "Udaipur",
            },
            "images": ["https://cdn.example.com/j2a.jpg", "https://cdn.example.com/j2b.jpg"],
        },
        {
            "id": "j3",
            "title": "Backwaters",
            "location": {
                "coordinates": {"latitude": 9.9312, "longitude": 76.2673},
                "country": "India",
                "state": "Kerala",
                "city": "Kochi",
            },
        },
        {
            "id": "j4",
            "title": "Tokyo stopover",
            "location": {
                "coordinates": {"latitude": 35.6812, "longitude": 139.7671},
                "country": "Japan",
                "state": "Tokyo",
                "place_name": "Tokyo Station",
            },
        },
        {
            "id": "j5",
            "title": "Somewhere",
        },
        {
            "id": "j6",
            "title": "Bad latitude",
            "location": {"coordinates": {"latitude": 123.0, "longitude": 10.0}, "country": "Nowhere"},
        },
        {
            "id": "j7",
            "title": "Garbage coordinates",
            "location": {"coordinates": {"latitude": "abc", "longitude": 10.0}},
        },
        {
            "id": 42,
            "title": "Null Island",
            "location": {
                "coordinates": {"latitude": 0.0, "longitude": 0.0},
                "place_name": "Null Island",
            },
        },
    ]


@pytest.fixture
def sample_stories() -> List[Dict[str, Any]]:
    """Story records with featured images."""
    return [
        {
            "id": "s1",
            "title": "Sunrise",
            "featured_image": "https://cdn.example.com/s1-cover.jpg",
            "images": ["https://cdn.example.com/s1-cover.jpg", "https://cdn.example.com/s1-b.jpg"],
            "location": {
                "coordinates": {"latitude": 27.1751, "longitude": 78.0421},
                "country": "India",
                "state": "Uttar Pradesh",
                "city": "Agra",
            },
        },
        {
            "id": "s2",
            "title": "No location story",
            "images": ["https://cdn.example.com/s2.jpg"],
            "location": {"country": "India"},
        },
    ]


# ==============================================================================
# Normalized Point Sets
# ==============================================================================

@pytest.fixture
def tagged_points(sample_journeys) -> List[GeoPoint]:
    """Five points: three in India, one in Japan, one untagged (Null Island)."""
    return extract_journey_points(sample_journeys)


@pytest.fixture
def paris_points(make_point) -> List[GeoPoint]:
    """Five untagged points around Paris, all within 40 km of each other."""
    return [
        make_point("p1", 48.8566, 2.3522, place="Hotel de Ville"),
        make_point("p2", 48.9000, 2.3000),
        make_point("p3", 48.8000, 2.4000),
        make_point("p4", 48.8800, 2.4500),
        make_point("p5", 48.8300, 2.2500),
    ]


@pytest.fixture
def lyon_point(make_point) -> GeoPoint:
    """Untagged point roughly 390 km from Paris."""
    return make_point("l1", 45.7640, 4.8357, place="Lyon")


@pytest.fixture
def random_untagged_points() -> List[GeoPoint]:
    """1500 untagged points scattered around 30 random centres (seeded)."""
    rng = np.random.default_rng(7)
    centres = np.column_stack([rng.uniform(-60, 60, 30), rng.uniform(-180, 180, 30)])
    points = []
    for i in range(1500):
        c_lat, c_lng = centres[i % len(centres)]
        lat = float(np.clip(c_lat + rng.normal(0, 0.6), -90, 90))
        lng = float((c_lng + rng.normal(0, 0.6) + 540.0) % 360.0 - 180.0)
        points.append(GeoPoint(id=f"r{i}", lat=lat, lng=lng))
    return points


@pytest.fixture
def coincident_cluster(make_point) -> Cluster:
    """Six members sharing one coordinate."""
    members = tuple(make_point(f"c{i}", 48.8584, 2.2945) for i in range(6))
    return Cluster(
        id="local:eiffel",
        centroid=LatLng(lat=48.8584, lng=2.2945),
        members=members,
        label="6 locations",
        level=ClusterLevel.LOCAL,
    )


@pytest.fixture(autouse=True)
def _reset_cluster_cache():
    """Start every test with an empty result cache."""
    clear_cache()
    yield
    clear_cache()
