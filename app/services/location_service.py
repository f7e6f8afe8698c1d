"""
Location Service - turn coordinates into a readable address.
"""

import logging
from typing import Dict, Optional

from app.models.geo import Coordinates, LocationInfo
from app.services.geocoding.resolver import get_geocoding_provider
from app.services.mangrove_detection import validate_coordinates

logger = logging.getLogger(__name__)

UNKNOWN_CITY = "Unknown City"


def build_location_info(latitude: float, longitude: float, geocoded: Dict[str, Optional[str]]) -> LocationInfo:
    """
    Assemble a LocationInfo from a provider result.

    The full address is "street, city, state postal, country" with empty parts
    skipped, falling back to the raw coordinates when nothing resolved.
    """
    street = geocoded.get("street") or ""
    city = geocoded.get("city") or UNKNOWN_CITY
    state = geocoded.get("state") or ""
    country = geocoded.get("country") or ""
    postal_code = geocoded.get("postal_code") or ""

    full_address = street
    if city != UNKNOWN_CITY:
        full_address = f"{full_address}, {city}" if full_address else city
    if state:
        full_address = f"{full_address}, {state}" if full_address else state
    if postal_code:
        full_address = f"{full_address} {postal_code}" if full_address else postal_code
    if country:
        full_address = f"{full_address}, {country}" if full_address else country

    if not full_address:
        full_address = f"{latitude:.6f}, {longitude:.6f}"

    return LocationInfo(
        coordinates=Coordinates(latitude=latitude, longitude=longitude),
        address=street,
        city=city,
        state=state,
        country=country,
        full_address=full_address,
        provider=geocoded.get("provider"),
    )


def get_address_from_coordinates(latitude: float, longitude: float) -> LocationInfo:
    """
    Reverse geocode coordinates with the configured provider.

    Raises:
        ValueError: If the coordinates are not valid
    """
    if not validate_coordinates(latitude, longitude):
        raise ValueError(f"Invalid coordinates: latitude={latitude}, longitude={longitude}")

    geocoded = get_geocoding_provider().reverse_geocode(latitude, longitude)
    info = build_location_info(latitude, longitude, geocoded)
    logger.info(f"📍 Resolved ({latitude}, {longitude}) → {info.full_address} via {info.provider}")
    return info
