"""
Unit Tests for Point Normalization (src/lod/normalization.py)

Tests record validation, coordinate filtering and media extraction.
"""

import math

import pytest

from src.lod.models import GeoPoint
from src.lod.normalization import (
    RecordKind,
    extract_journey_points,
    extract_story_points,
    is_valid_coordinate,
    normalize,
)


class TestCoordinateValidation:
    """Test coordinate range and finiteness checks."""

    @pytest.mark.parametrize("lat,lng", [
        (0.0, 0.0),
        (90.0, 180.0),
        (-90.0, -180.0),
        (35.6812, 139.7671),
    ])
    def test_valid_coordinates(self, lat, lng):
        assert is_valid_coordinate(lat, lng)

    @pytest.mark.parametrize("lat,lng", [
        (None, 0.0),
        (0.0, None),
        (90.5, 0.0),
        (0.0, -180.01),
        (math.nan, 0.0),
        (0.0, math.inf),
    ])
    def test_invalid_coordinates(self, lat, lng):
        assert not is_valid_coordinate(lat, lng)


class TestJourneyNormalization:
    """Test normalizing journey records."""

    def test_drops_records_without_usable_location(self, sample_journeys):
        """Missing, out-of-range and non-numeric coordinates are excluded."""
        points = extract_journey_points(sample_journeys)

        assert [p.id for p in points] == ["j1", "j2", "j3", "j4", "42"]

    def test_zero_coordinates_are_kept(self, sample_journeys):
        """Lat/lng of 0.0 is a real location, not a missing one."""
        points = {p.id: p for p in extract_journey_points(sample_journeys)}

        null_island = points["42"]
        assert null_island.lat == 0.0
        assert null_island.lng == 0.0
        assert null_island.country is None

    def test_field_mapping(self, sample_journeys):
        """State maps to region; place name falls back to city."""
        points = {p.id: p for p in extract_journey_points(sample_journeys)}

        jaipur = points["j1"]
        assert jaipur.country == "India"
        assert jaipur.region == "Rajasthan"
        assert jaipur.place == "Hawa Mahal"
        assert jaipur.title == "Pink City weekend"

        udaipur = points["j2"]
        assert udaipur.place == "Udaipur"

    def test_journey_media(self, sample_journeys):
        """Journeys use photos, falling back to images."""
        points = {p.id: p for p in extract_journey_points(sample_journeys)}

        assert points["j1"].photos == ("https://cdn.example.com/j1.jpg",)
        assert points["j2"].cover_photo == "https://cdn.example.com/j2a.jpg"
        assert points["j3"].photos == ()
        assert points["j3"].cover_photo is None

    def test_payload_is_original_record(self, sample_journeys):
        points = extract_journey_points(sample_journeys)

        assert points[0].payload is sample_journeys[0]

    def test_blank_tags_become_none(self):
        records = [{
            "id": "b1",
            "location": {
                "coordinates": {"latitude": 10, "longitude": 20},
                "country": "  ",
                "state": "",
            },
        }]

        point = normalize(records)[0]
        assert point.country is None
        assert point.region is None
        assert point.lat == 10.0

    def test_numeric_strings_are_accepted(self):
        records = [{"id": "n1", "location": {"coordinates": {"latitude": "12.5", "longitude": "-3.25"}}}]

        point = normalize(records)[0]
        assert point.lat == 12.5
        assert point.lng == -3.25

    def test_record_without_id_is_dropped(self):
        records = [{"location": {"coordinates": {"latitude": 1.0, "longitude": 2.0}}}]

        assert normalize(records) == []

    def test_null_photo_entry_keeps_record(self):
        records = [{
            "id": "m1",
            "location": {"coordinates": {"latitude": 26.9, "longitude": 75.8}},
            "photos": [None, "https://cdn.example.com/m1.jpg"],
        }]

        points = normalize(records)

        assert [p.id for p in points] == ["m1"]
        assert points[0].photos == ("https://cdn.example.com/m1.jpg",)

    def test_object_images_keep_record(self):
        """JSON objects in the images column are skipped, not fatal."""
        records = [{
            "id": "m2",
            "location": {"coordinates": {"latitude": 26.9, "longitude": 75.8}},
            "images": [{"url": "x"}],
        }]

        points = normalize(records)

        assert [p.id for p in points] == ["m2"]
        assert points[0].photos == ()

    def test_numeric_title_keeps_record(self):
        records = [{
            "id": "m3",
            "title": 2024,
            "location": {"coordinates": {"latitude": 26.9, "longitude": 75.8}},
        }]

        points = normalize(records)

        assert [p.id for p in points] == ["m3"]
        assert points[0].title == "2024"

    def test_non_string_tags_and_cover_keep_record(self):
        records = [{
            "id": "m4",
            "title": ["not", "a", "title"],
            "featured_image": {"url": "x"},
            "location": {
                "coordinates": {"latitude": 26.9, "longitude": 75.8},
                "country": 91,
                "state": "Rajasthan",
            },
        }]

        point = extract_story_points(records)[0]

        assert point.title is None
        assert point.country is None
        assert point.region == "Rajasthan"
        assert point.photos == ()

    def test_normalization_is_stable(self, sample_journeys):
        """Same input gives equal output on every call."""
        assert extract_journey_points(sample_journeys) == extract_journey_points(sample_journeys)

    def test_fresh_points_each_call(self, sample_journeys):
        first = extract_journey_points(sample_journeys)
        second = extract_journey_points(sample_journeys)

        assert all(a is not b for a, b in zip(first, second))


class TestStoryNormalization:
    """Test normalizing story records."""

    def test_story_points(self, sample_stories):
        points = extract_story_points(sample_stories)

        assert len(points) == 1
        assert points[0].id == "s1"
        assert points[0].region == "Uttar Pradesh"
        assert points[0].place == "Agra"

    def test_featured_image_first_and_deduplicated(self, sample_stories):
        point = extract_story_points(sample_stories)[0]

        assert point.photos == (
            "https://cdn.example.com/s1-cover.jpg",
            "https://cdn.example.com/s1-b.jpg",
        )

    def test_kind_controls_media(self, sample_stories):
        """Read as a journey, the featured image is ignored."""
        point = normalize(sample_stories, RecordKind.JOURNEY)[0]

        assert point.cover_photo == "https://cdn.example.com/s1-cover.jpg"
        assert len(point.photos) == 2


class TestNormalizationTypeErrors:
    """Caller type violations raise instead of being silently dropped."""

    def test_empty_input(self):
        assert normalize([]) == []

    def test_non_mapping_record(self):
        with pytest.raises(TypeError):
            normalize([{"id": "ok"}, "not a record"])

    def test_single_mapping_instead_of_list(self):
        with pytest.raises(TypeError):
            normalize({"id": "j1"})

    def test_returns_geopoints(self, sample_journeys):
        assert all(isinstance(p, GeoPoint) for p in normalize(sample_journeys))
