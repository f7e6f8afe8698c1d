import logging
from typing import Any, Dict, Optional

import requests

from .base import GeocodingProvider, empty_result

logger = logging.getLogger(__name__)

# Nominatim reports the settlement under whichever key matches its size
SETTLEMENT_KEYS = ("city", "town", "village", "hamlet", "suburb", "county")


def parse_nominatim(data: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """Map a Nominatim /reverse JSON body onto the provider result keys."""
    address = data.get("address") or {}

    street = address.get("road") or address.get("pedestrian") or address.get("path")
    if street and address.get("house_number"):
        street = f"{address['house_number']} {street}"

    city = next((address[key] for key in SETTLEMENT_KEYS if address.get(key)), None)

    return {
        "formatted_address": data.get("display_name"),
        "street": street,
        "city": city,
        "state": address.get("state"),
        "country": address.get("country"),
        "postal_code": address.get("postcode"),
        "provider": "nominatim",
    }


class NominatimProvider(GeocodingProvider):
    """
    OpenStreetMap Nominatim reverse geocoding (default, no API key).

    Nominatim's usage policy requires an identifying User-Agent.
    """

    BASE_URL = "https://nominatim.openstreetmap.org/reverse"

    def __init__(self, user_agent: str = "mangrove-watch/1.0", language: str = "en", timeout: float = 3.0):
        self.user_agent = user_agent
        self.language = language
        self.timeout = timeout

    def reverse_geocode(self, latitude: float, longitude: float) -> Dict[str, Optional[str]]:
        params = {
            "lat": latitude,
            "lon": longitude,
            "format": "jsonv2",
            "addressdetails": 1,
            "accept-language": self.language,
        }
        try:
            resp = requests.get(
                self.BASE_URL,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            if resp.status_code != 200:
                logger.warning(f"Nominatim returned {resp.status_code} for ({latitude}, {longitude})")
                return empty_result("nominatim")

            data = resp.json()
            if "error" in data:
                # e.g. open sea: {"error": "Unable to geocode"}
                logger.info(f"Nominatim found nothing at ({latitude}, {longitude}): {data['error']}")
                return empty_result("nominatim")
            return parse_nominatim(data)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Nominatim reverse-geocode error: {e}")
            return empty_result("nominatim")
