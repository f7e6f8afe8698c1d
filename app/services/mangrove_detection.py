"""
Mangrove geofence classifier.

Approximate bounding boxes for the major mangrove regions of India. A point is
classified by a linear scan over the boxes; the first box containing it wins.
When no box contains the point, the nearest region is reported with the
great-circle distance to its box centre.

Limitations: boxes do not cross the antimeridian and are not unioned, so
overlapping boxes resolve to whichever comes first in MANGROVE_REGIONS.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from app.models.geo import Coordinates, DetectionConfidence, MangroveDetectionResult

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

# Distance thresholds (km) for the confidence of a "not inside" result
HIGH_CONFIDENCE_KM = 10.0
MEDIUM_CONFIDENCE_KM = 50.0


@dataclass(frozen=True)
class MangroveRegion:
    name: str
    north: float
    south: float
    east: float
    west: float

    def contains(self, latitude: float, longitude: float) -> bool:
        return self.south <= latitude <= self.north and self.west <= longitude <= self.east

    @property
    def center(self) -> tuple:
        return (self.north + self.south) / 2, (self.east + self.west) / 2


MANGROVE_REGIONS: List[MangroveRegion] = [
    MangroveRegion("Sundarbans", north=22.5, south=21.5, east=89.5, west=88.5),
    MangroveRegion("Bhitarkanika", north=20.8, south=20.4, east=87.0, west=86.7),
    MangroveRegion("Pichavaram", north=11.5, south=11.3, east=79.8, west=79.7),
    MangroveRegion("Godavari-Krishna", north=16.8, south=16.0, east=82.5, west=81.5),
    MangroveRegion("Mumbai Metropolitan", north=19.3, south=18.9, east=73.0, west=72.7),
    MangroveRegion("Gulf of Kutch", north=22.8, south=22.0, east=70.5, west=69.5),
    MangroveRegion("Andaman and Nicobar", north=13.5, south=6.5, east=94.0, west=92.0),
    MangroveRegion("Lakshadweep", north=12.0, south=10.0, east=73.0, west=71.5),
]


def validate_coordinates(latitude: float, longitude: float) -> bool:
    """True when both values are real numbers within WGS84 range."""
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        return False
    if math.isnan(lat) or math.isnan(lon):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def confidence_for_distance(distance_km: float) -> DetectionConfidence:
    if distance_km > MEDIUM_CONFIDENCE_KM:
        return DetectionConfidence.LOW
    if distance_km > HIGH_CONFIDENCE_KM:
        return DetectionConfidence.MEDIUM
    return DetectionConfidence.HIGH


def find_containing_region(
    latitude: float,
    longitude: float,
    regions: Optional[List[MangroveRegion]] = None,
) -> Optional[MangroveRegion]:
    for region in regions if regions is not None else MANGROVE_REGIONS:
        if region.contains(latitude, longitude):
            return region
    return None


def detect_mangrove_area(
    latitude: float,
    longitude: float,
    regions: Optional[List[MangroveRegion]] = None,
) -> MangroveDetectionResult:
    """
    Classify a coordinate against the known mangrove regions.

    Args:
        latitude: Latitude in degrees (-90..90)
        longitude: Longitude in degrees (-180..180)
        regions: Optional region list (defaults to MANGROVE_REGIONS)

    Returns:
        MangroveDetectionResult

    Raises:
        ValueError: If the coordinates are not valid
    """
    if not validate_coordinates(latitude, longitude):
        raise ValueError(f"Invalid coordinates: latitude={latitude}, longitude={longitude}")
    latitude, longitude = float(latitude), float(longitude)

    regions = regions if regions is not None else MANGROVE_REGIONS
    coordinates = Coordinates(latitude=latitude, longitude=longitude)

    region = find_containing_region(latitude, longitude, regions)
    if region is not None:
        logger.info(f"🌿 ({latitude}, {longitude}) is inside {region.name}")
        return MangroveDetectionResult(
            is_in_mangrove_area=True,
            region_name=region.name,
            confidence=DetectionConfidence.HIGH,
            coordinates=coordinates,
        )

    nearest_name = None
    nearest_distance = math.inf
    for candidate in regions:
        center_lat, center_lon = candidate.center
        distance = haversine_km(latitude, longitude, center_lat, center_lon)
        if distance < nearest_distance:
            nearest_distance = distance
            nearest_name = candidate.name

    if nearest_name is None:
        # Empty region list: nothing to compare against
        return MangroveDetectionResult(
            is_in_mangrove_area=False,
            confidence=DetectionConfidence.LOW,
            coordinates=coordinates,
        )

    logger.info(f"({latitude}, {longitude}) is outside all regions; nearest {nearest_name} at {nearest_distance:.2f} km")
    return MangroveDetectionResult(
        is_in_mangrove_area=False,
        region_name=nearest_name,
        confidence=confidence_for_distance(nearest_distance),
        coordinates=coordinates,
        distance_to_nearest_mangrove=nearest_distance,
    )


def detection_summary(result: MangroveDetectionResult) -> str:
    if result.is_in_mangrove_area:
        return f"This location is inside the {result.region_name} mangrove area."
    distance = result.distance_to_nearest_mangrove or 0.0
    return (
        f"This location is NOT inside a mangrove area. "
        f"Nearest mangrove: {result.region_name} ({distance:.1f} km away)"
    )
