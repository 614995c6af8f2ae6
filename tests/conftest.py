"""
Shared fixtures: an in-memory stand-in for the Google Maps web services,
plugged into the loader through httpx.MockTransport.
"""
import asyncio
from collections import Counter

import httpx
import pytest

from city_explorer.core.maps_loader import MapsLoader
from city_explorer.services.maps_service import MapsService

BASE_URL = "https://maps.test/maps/api"
PARIS = {"lat": 48.8566, "lng": 2.3522}


def _make_place(i: int) -> dict:
    place = {
        "place_id": f"place-{i}",
        "name": f"Landmark {i}",
        "vicinity": f"{i} Rue de Rivoli, Paris",
        "geometry": {"location": {"lat": PARIS["lat"] + i * 0.001, "lng": PARIS["lng"] - i * 0.001}},
        "photos": [{"photo_reference": f"photo-{i}", "width": 800, "height": 600, "html_attributions": []}],
        "types": ["tourist_attraction", "point_of_interest"],
    }
    # every fifth place has no rating, like many real results
    if i % 5:
        place["rating"] = round(3.5 + (i % 3) * 0.5, 1)
    return place


class FakeMapsProvider:
    def __init__(self, place_count: int = 25):
        self.calls = Counter()
        self.order: list[str] = []
        self.requests: list[httpx.Request] = []

        self.script_failures = 0
        self.script_delay = 0.0
        self.script_error: Exception | None = None
        self.lookup_delay = 0.0
        self.deny_key = False
        self.nearby_status = "OK"
        self.autocomplete_status: str | None = None
        self.missing_details: set[str] = set()
        self.denied_inputs: set[str] = set()
        self.slow_inputs: dict[str, float] = {}

        self.places = {p["place_id"]: p for p in (_make_place(i) for i in range(place_count))}

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "images.test":
            self.calls["image"] += 1
            return httpx.Response(200, content=b"\xff\xd8" + request.url.path.encode(), headers={"content-type": "image/jpeg"})

        endpoint = request.url.path.removeprefix("/maps/api/")
        self.calls[endpoint] += 1
        self.order.append(endpoint)
        self.requests.append(request)

        if endpoint == "js":
            if self.script_delay:
                await asyncio.sleep(self.script_delay)
            if self.script_error is not None:
                raise self.script_error
            if self.script_failures > 0:
                self.script_failures -= 1
                return httpx.Response(503, text="Service Unavailable")
            return httpx.Response(200, text="/* maps bootstrap */")

        if endpoint == "place/photo":
            return self._photo(request.url.params["photo_reference"])

        if self.lookup_delay:
            await asyncio.sleep(self.lookup_delay)

        if self.deny_key:
            return httpx.Response(
                200, json={"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."}
            )

        params = request.url.params
        if endpoint == "geocode/json":
            address = params["address"]
            if address in self.slow_inputs:
                await asyncio.sleep(self.slow_inputs[address])
            if address in self.denied_inputs:
                return httpx.Response(200, json={"status": "REQUEST_DENIED", "error_message": "Key revoked."})
            return self._geocode(address)
        if endpoint == "place/nearbysearch/json":
            return self._nearby()
        if endpoint == "place/details/json":
            return self._details(params["place_id"])
        if endpoint == "place/autocomplete/json":
            return self._autocomplete(params["input"])
        return httpx.Response(404, text="Not Found")

    def _photo(self, reference: str) -> httpx.Response:
        known = {p["photos"][0]["photo_reference"] for p in self.places.values() if p.get("photos")}
        if reference not in known:
            return httpx.Response(400, text="Bad photo reference")
        return httpx.Response(302, headers={"location": f"https://images.test/{reference}.jpg"})

    def _geocode(self, address: str) -> httpx.Response:
        if address.lower().startswith("paris"):
            return httpx.Response(200, json={
                "status": "OK",
                "results": [{"formatted_address": "Paris, France", "geometry": {"location": PARIS}}],
            })
        return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})

    def _nearby(self) -> httpx.Response:
        if self.nearby_status != "OK":
            return httpx.Response(200, json={"status": self.nearby_status, "results": []})
        results = [{k: v for k, v in p.items() if k != "types"} for p in self.places.values()]
        return httpx.Response(200, json={"status": "OK", "results": results})

    def _details(self, place_id: str) -> httpx.Response:
        place = self.places.get(place_id)
        if place is None or place_id in self.missing_details:
            return httpx.Response(200, json={"status": "NOT_FOUND"})
        result = dict(place)
        result["website"] = f"https://example.com/{place_id}"
        result["formatted_address"] = f"{place['vicinity']}, France"
        return httpx.Response(200, json={"status": "OK", "result": result})

    def _autocomplete(self, text: str) -> httpx.Response:
        if self.autocomplete_status:
            return httpx.Response(200, json={"status": self.autocomplete_status, "predictions": []})
        cities = ["Paris, France", "Paraty, Brazil", "Parma, Italy"]
        matches = [c for c in cities if c.lower().startswith(text.lower())]
        if not matches:
            return httpx.Response(200, json={"status": "ZERO_RESULTS", "predictions": []})
        return httpx.Response(200, json={
            "status": "OK",
            "predictions": [{"description": c, "place_id": f"city-{i}"} for i, c in enumerate(matches)],
        })


@pytest.fixture
def provider() -> FakeMapsProvider:
    return FakeMapsProvider()


@pytest.fixture
def make_loader(provider):
    def _make(api_key: str = "test-key") -> MapsLoader:
        return MapsLoader(
            api_key=api_key,
            base_url=BASE_URL,
            transport=httpx.MockTransport(provider.handler),
        )
    return _make


@pytest.fixture
def make_service(make_loader):
    def _make(api_key: str = "test-key") -> MapsService:
        return MapsService(make_loader(api_key))
    return _make
