import math

import pytest

from app.models.geo import DetectionConfidence
from app.services.mangrove_detection import (
    MANGROVE_REGIONS,
    MangroveRegion,
    confidence_for_distance,
    detect_mangrove_area,
    detection_summary,
    haversine_km,
    validate_coordinates,
)


@pytest.mark.parametrize("region", MANGROVE_REGIONS, ids=lambda r: r.name)
def test_region_centre_is_inside(region):
    lat, lon = region.center
    result = detect_mangrove_area(lat, lon)

    assert result.is_in_mangrove_area is True
    assert result.region_name == region.name
    assert result.confidence == DetectionConfidence.HIGH
    assert result.distance_to_nearest_mangrove is None
    assert result.coordinates.latitude == lat
    assert result.coordinates.longitude == lon


def test_box_edges_are_inclusive():
    sundarbans = MANGROVE_REGIONS[0]
    result = detect_mangrove_area(sundarbans.north, sundarbans.west)
    assert result.is_in_mangrove_area is True
    assert result.region_name == "Sundarbans"


def test_outside_reports_nearest_region_and_distance():
    # Bengaluru is inland, far from every box
    result = detect_mangrove_area(12.9716, 77.5946)

    assert result.is_in_mangrove_area is False
    assert result.region_name == "Pichavaram"
    assert result.distance_to_nearest_mangrove > 50
    assert result.confidence == DetectionConfidence.LOW


def test_just_outside_box_is_high_confidence():
    # Mumbai box ends at 19.3N; centre is (19.1, 72.85)
    result = detect_mangrove_area(19.31, 72.85)

    assert result.is_in_mangrove_area is False
    assert result.region_name == "Mumbai Metropolitan"
    assert result.distance_to_nearest_mangrove <= 50


def test_first_matching_region_wins_on_overlap():
    regions = [
        MangroveRegion("First", north=10, south=0, east=10, west=0),
        MangroveRegion("Second", north=10, south=0, east=10, west=0),
    ]
    assert detect_mangrove_area(5, 5, regions=regions).region_name == "First"


def test_empty_region_list():
    result = detect_mangrove_area(5, 5, regions=[])
    assert result.is_in_mangrove_area is False
    assert result.region_name is None
    assert result.confidence == DetectionConfidence.LOW


@pytest.mark.parametrize("lat,lon", [(91, 0), (-91, 0), (0, 181), (0, -181), (math.nan, 0), ("north", 0), (None, 0)])
def test_invalid_coordinates(lat, lon):
    assert validate_coordinates(lat, lon) is False
    with pytest.raises(ValueError):
        detect_mangrove_area(lat, lon)


def test_numeric_strings_are_accepted():
    result = detect_mangrove_area("22.0", "89.0")
    assert result.is_in_mangrove_area is True
    assert result.region_name == "Sundarbans"
    assert result.coordinates.latitude == 22.0


def test_haversine_known_distance():
    # One degree of latitude is roughly 111.19 km
    assert haversine_km(0, 0, 1, 0) == pytest.approx(111.19, abs=0.01)
    assert haversine_km(19.0, 72.8, 19.0, 72.8) == 0


@pytest.mark.parametrize("distance,expected", [
    (0, DetectionConfidence.HIGH),
    (10, DetectionConfidence.HIGH),
    (10.01, DetectionConfidence.MEDIUM),
    (50, DetectionConfidence.MEDIUM),
    (50.01, DetectionConfidence.LOW),
])
def test_confidence_thresholds(distance, expected):
    assert confidence_for_distance(distance) == expected


def test_summary_text():
    inside = detect_mangrove_area(22.0, 89.0)
    assert detection_summary(inside) == "This location is inside the Sundarbans mangrove area."

    outside = detect_mangrove_area(12.9716, 77.5946)
    summary = detection_summary(outside)
    assert summary.startswith("This location is NOT inside a mangrove area.")
    assert "Pichavaram" in summary
