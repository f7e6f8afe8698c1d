import pytest

from app.services import location_service
from app.services.geocoding.base import GeocodingProvider, empty_result
from app.services.location_service import build_location_info, get_address_from_coordinates


class FakeProvider(GeocodingProvider):

    def __init__(self, result):
        self.result = result
        self.calls = []

    def reverse_geocode(self, latitude, longitude):
        self.calls.append((latitude, longitude))
        return self.result


def test_full_address_composition():
    info = build_location_info(19.05, 72.85, {
        "street": "Mahim Causeway",
        "city": "Mumbai",
        "state": "Maharashtra",
        "country": "India",
        "postal_code": "400016",
        "provider": "fake",
    })

    assert info.full_address == "Mahim Causeway, Mumbai, Maharashtra 400016, India"
    assert info.city == "Mumbai"
    assert info.address == "Mahim Causeway"
    assert info.provider == "fake"


def test_empty_result_falls_back_to_coordinates():
    info = build_location_info(19.05, 72.85, empty_result("noop"))

    assert info.city == "Unknown City"
    assert info.full_address == "19.050000, 72.850000"


def test_city_only():
    info = build_location_info(1, 2, {"city": "Kolkata", "country": "India"})
    assert info.full_address == "Kolkata, India"


def test_reverse_geocode_uses_configured_provider(monkeypatch):
    provider = FakeProvider({"city": "Chennai", "state": "Tamil Nadu", "provider": "fake"})
    monkeypatch.setattr(location_service, "get_geocoding_provider", lambda: provider)

    info = get_address_from_coordinates(13.08, 80.27)

    assert provider.calls == [(13.08, 80.27)]
    assert info.full_address == "Chennai, Tamil Nadu"


def test_reverse_geocode_rejects_invalid_coordinates():
    with pytest.raises(ValueError):
        get_address_from_coordinates(120, 0)


def test_location_route(client, monkeypatch):
    provider = FakeProvider({"city": "Mumbai", "provider": "fake"})
    monkeypatch.setattr(location_service, "get_geocoding_provider", lambda: provider)

    resp = client.get("/location/reverse", params={"latitude": 19.05, "longitude": 72.85})
    assert resp.status_code == 200
    assert resp.json()["city"] == "Mumbai"

    assert client.get("/location/reverse", params={"latitude": 95, "longitude": 0}).status_code == 400
