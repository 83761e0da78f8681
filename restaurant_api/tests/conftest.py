from __future__ import annotations

from typing import Any

import httpx
import pytest

from restaurant_api.places.client import PlacesClient
from restaurant_api.places.config import PlacesConfig
from restaurant_api.restaurants.cache import InMemoryCache
from restaurant_api.restaurants.config import LookupConfig
from restaurant_api.restaurants.data_store import LocalDataSource
from restaurant_api.restaurants.lookup import RestaurantLookupService

BASE_URL = "https://maps.example.test/maps/api"
API_KEY = "AIzaTestKey0123456789"


def place(
    name: str,
    lat: float = 13.80,
    lng: float = 100.54,
    rating: float | None = 4.0,
    types: list[str] | None = None,
    place_id: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build a raw provider place record."""
    raw: dict[str, Any] = {
        "place_id": place_id or f"ChIJ{name.replace(' ', '')}PlaceId0000000",
        "name": name,
        "formatted_address": f"{name} St, Bangkok",
        "vicinity": "Bang Sue",
        "geometry": {"location": {"lat": lat, "lng": lng}},
        "types": types or ["restaurant", "food"],
    }
    if rating is not None:
        raw["rating"] = rating
    raw.update(extra)
    return raw


def ok(results: list[dict[str, Any]]) -> dict[str, Any]:
    return {"status": "OK" if results else "ZERO_RESULTS", "results": results}


class FakeProvider:
    """
    Stand-in for the places provider, served through ``httpx.MockTransport``.

    ``routes`` maps an endpoint path (e.g. ``/place/textsearch/json``) to a
    JSON body, an HTTP status code, or an exception class to raise. A list
    value is consumed one entry per request.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(path)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/maps/api")
        route = self.routes.get(path, ok([]))
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, type) and issubclass(route, Exception):
            raise route("provider unreachable", request=request)
        if isinstance(route, int):
            return httpx.Response(route, json={"error_message": "boom"})
        return httpx.Response(200, json=route)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def make_service(provider: FakeProvider):
    def _make(
        api_key: str = API_KEY,
        cache: Any = None,
        config: LookupConfig | None = None,
    ) -> RestaurantLookupService:
        client = PlacesClient(
            PlacesConfig(api_key=api_key, base_url=BASE_URL),
            transport=httpx.MockTransport(provider.handler),
        )
        return RestaurantLookupService(
            client=client,
            cache=cache if cache is not None else InMemoryCache(),
            data_source=LocalDataSource(),
            config=config or LookupConfig(),
        )

    return _make


@pytest.fixture
def service(make_service) -> RestaurantLookupService:
    return make_service()
