from abc import ABC, abstractmethod
from typing import Dict, Optional

RESULT_KEYS = ("formatted_address", "street", "city", "state", "country", "postal_code")


class GeocodingProvider(ABC):
    """
    Reverse geocoding: (latitude, longitude) → address parts.

    reverse_geocode() returns a dict with RESULT_KEYS (any may be None) plus
    "provider". Lookups are best-effort: network and parse failures come back
    as empty_result(), never as exceptions.
    """

    @abstractmethod
    def reverse_geocode(self, latitude: float, longitude: float) -> Dict[str, Optional[str]]:
        raise NotImplementedError


def empty_result(provider: str) -> Dict[str, Optional[str]]:
    result: Dict[str, Optional[str]] = dict.fromkeys(RESULT_KEYS)
    result["provider"] = provider
    return result
