import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from .base import GeocodingProvider, empty_result

logger = logging.getLogger(__name__)


def _component(components: List[Dict], types: Iterable[str]) -> Optional[str]:
    for component in components:
        if set(types).intersection(component.get("types", [])):
            return component.get("long_name")
    return None


def parse_google(result: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """Map the first Geocoding API result onto the provider result keys."""
    components = result.get("address_components") or []

    street = _component(components, ["route"])
    number = _component(components, ["street_number"])
    if street and number:
        street = f"{number} {street}"

    return {
        "formatted_address": result.get("formatted_address"),
        "street": street,
        "city": _component(components, ["locality", "postal_town", "administrative_area_level_2"]),
        "state": _component(components, ["administrative_area_level_1"]),
        "country": _component(components, ["country"]),
        "postal_code": _component(components, ["postal_code"]),
        "provider": "google",
    }


class GoogleMapsProvider(GeocodingProvider):
    """
    Google Geocoding API provider.

    Selected when GEOCODING_PROVIDER=google and GOOGLE_MAPS_API_KEY is set.
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(self, api_key: Optional[str], language: str = "en", timeout: float = 3.0):
        self.api_key = api_key
        self.language = language
        self.timeout = timeout

    def reverse_geocode(self, latitude: float, longitude: float) -> Dict[str, Optional[str]]:
        if not self.api_key:
            logger.info("GoogleMapsProvider called without API key; returning empty result.")
            return empty_result("google")

        params = {
            "latlng": f"{latitude},{longitude}",
            "key": self.api_key,
            "language": self.language,
        }
        try:
            resp = requests.get(self.BASE_URL, params=params, timeout=self.timeout)
            if resp.status_code != 200:
                logger.warning(f"Google Geocoding returned {resp.status_code} for ({latitude}, {longitude})")
                return empty_result("google")

            data = resp.json()
            if data.get("status") not in (None, "OK"):
                logger.info(f"Google Geocoding status {data.get('status')} for ({latitude}, {longitude})")
                return empty_result("google")

            results = data.get("results") or []
            return parse_google(results[0]) if results else empty_result("google")
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Google Maps reverse-geocode error: {e}")
            return empty_result("google")
