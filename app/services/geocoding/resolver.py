import logging
from typing import Optional

from app.core.settings import settings
from .base import GeocodingProvider, empty_result
from .google_provider import GoogleMapsProvider
from .nominatim_provider import NominatimProvider

logger = logging.getLogger(__name__)

_provider_instance: Optional[GeocodingProvider] = None


class NoOpProvider(GeocodingProvider):
    """GEOCODING_PROVIDER=none: no network lookups at all."""

    def reverse_geocode(self, latitude: float, longitude: float):
        return empty_result("noop")


def get_geocoding_provider() -> GeocodingProvider:
    """
    Resolve the active geocoding provider based on settings (cached).

    - "none": NoOpProvider
    - "google" with GOOGLE_MAPS_API_KEY: GoogleMapsProvider
    - anything else, or "google" without a key: NominatimProvider
    """
    global _provider_instance
    if _provider_instance is not None:
        return _provider_instance

    provider_name = (settings.GEOCODING_PROVIDER or "nominatim").lower()
    language = settings.GEOCODING_LANGUAGE
    timeout = settings.GEOCODING_TIMEOUT_SECONDS

    if provider_name == "none":
        _provider_instance = NoOpProvider()
    elif provider_name == "google" and settings.GOOGLE_MAPS_API_KEY:
        _provider_instance = GoogleMapsProvider(settings.GOOGLE_MAPS_API_KEY, language=language, timeout=timeout)
    else:
        if provider_name == "google":
            logger.warning("GEOCODING_PROVIDER=google but GOOGLE_MAPS_API_KEY is unset. Falling back to Nominatim.")
        _provider_instance = NominatimProvider(
            user_agent=f"{settings.APP_NAME.lower().replace(' ', '-')}/{settings.APP_VERSION}",
            language=language,
            timeout=timeout,
        )

    logger.info(f"Geocoding provider initialized: {type(_provider_instance).__name__}")
    return _provider_instance
