from __future__ import annotations

import json
import logging
from typing import Any

from ..places.client import PlacesClient, ProviderErrorKind
from ..places.normalizer import normalize_details, normalize_nearby, normalize_place
from .cache import Cache, hash_key
from .config import DEFAULT_LOOKUP_CONFIG, LookupConfig
from .data_store import LocalDataSource
from .models import Restaurant, dump_restaurants, load_restaurants

logger = logging.getLogger(__name__)

CUISINES: list[str] = [
    "American",
    "Bakery",
    "Bar",
    "Cafe",
    "Chinese",
    "Fast Food",
    "French",
    "Greek",
    "Indian",
    "Italian",
    "Japanese",
    "Korean",
    "Mediterranean",
    "Mexican",
    "Pizza",
    "Seafood",
    "Steakhouse",
    "Sushi",
    "Thai",
    "Vietnamese",
]

# Provider place ids are long opaque strings; local ids are small integers
_PLACE_ID_MIN_LENGTH = 21

_ANY = "all"


def _filter_value(value: str | None) -> str | None:
    """Treat blank values and the ``"all"`` sentinel as "no filter"."""
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == _ANY:
        return None
    return value


def _key_part(value: Any) -> str:
    return _ANY if value is None else str(value)


def _filter_rating(items: list[Restaurant], min_rating: float | None) -> list[Restaurant]:
    if not min_rating:
        return items
    return [r for r in items if r.rating >= min_rating]


class RestaurantLookupService:
    """
    Keyword, proximity and single-record restaurant lookups.

    Provider-backed results are cached (cache-aside). Keyword search falls
    back to the bundled dataset when the provider is unavailable or returns
    nothing; proximity search returns an empty list instead.
    """

    def __init__(
        self,
        client: PlacesClient,
        cache: Cache,
        data_source: LocalDataSource,
        config: LookupConfig = DEFAULT_LOOKUP_CONFIG,
    ) -> None:
        self.client = client
        self.cache = cache
        self.data_source = data_source
        self.config = config

    # ── Keyword search ───────────────────────────────────────────────────

    def _local_fallback(
        self,
        term: str,
        cuisine: str | None,
        min_rating: float | None,
    ) -> list[Restaurant]:
        if self.config.filter_fallback:
            return self.data_source.filter(term=term, cuisine=cuisine, min_rating=min_rating)
        return self.data_source.all()

    def search_by_term(
        self,
        term: str,
        cuisine: str | None = None,
        min_rating: float | None = None,
    ) -> list[Restaurant]:
        term = (term or "").strip()
        if not term:
            return []

        cuisine = _filter_value(cuisine)
        key = f"restaurants:{term}:{_key_part(cuisine)}:{_key_part(min_rating)}"
        cached = self.cache.get(key)
        if cached is not None:
            return load_restaurants(cached)

        query = f"{term} {cuisine} restaurant" if cuisine else f"{term} restaurant"
        result = self.client.text_search(query)

        if not result.ok:
            logger.warning(
                "Keyword search for %r fell back to local data (%s: %s)",
                query, result.error.value, result.detail,
            )
            return self._local_fallback(term, cuisine, min_rating)

        items = [
            normalize_place(raw, index, self.client.config)
            for index, raw in enumerate(result.results)
        ]
        items = _filter_rating(items, min_rating)

        self.cache.put(key, dump_restaurants(items), self.config.search_ttl)
        return items

    # ── Proximity search ─────────────────────────────────────────────────

    def clamp_radius(self, radius: int | None) -> int:
        if radius is None:
            return self.config.default_radius
        return max(self.config.min_radius, min(self.config.max_radius, int(radius)))

    def search_nearby(
        self,
        lat: float,
        lng: float,
        radius: int | None = None,
        cuisine: str | None = None,
        min_rating: float | None = None,
        term: str | None = None,
    ) -> list[Restaurant]:
        radius = self.clamp_radius(radius)
        cuisine = _filter_value(cuisine)
        term = _filter_value(term)

        key = (
            f"restaurants:nearby:{lat}:{lng}:{radius}:"
            f"{_key_part(cuisine)}:{_key_part(min_rating)}:{_key_part(term)}"
        )
        cached = self.cache.get(key)
        if cached is not None:
            return load_restaurants(cached)

        result = self.client.nearby_search(lat, lng, radius, keyword=cuisine or term)

        if result.error is ProviderErrorKind.empty_result and term:
            logger.info("Nearby search found nothing, retrying as keyword search for %r", term)
            result = self.client.text_search(
                f"{term} restaurant", location=(lat, lng), radius=radius,
            )

        if not result.ok:
            if result.error is not ProviderErrorKind.empty_result:
                logger.warning(
                    "Nearby search at %s,%s failed (%s: %s)",
                    lat, lng, result.error.value, result.detail,
                )
            return []

        items: list[Restaurant] = []
        for index, raw in enumerate(result.results):
            restaurant = normalize_nearby(raw, index, lat, lng, self.client.config)
            if restaurant is None:
                logger.warning("Skipping nearby result without coordinates: %s", raw.get("place_id"))
                continue
            items.append(restaurant)

        items = _filter_rating(items, min_rating)
        items.sort(key=lambda r: r.distance_km)

        self.cache.put(key, dump_restaurants(items), self.config.search_ttl)
        return items

    # ── Single record ────────────────────────────────────────────────────

    def get_by_id(self, restaurant_id: int | str) -> Restaurant | None:
        raw_id = str(restaurant_id).strip()
        if raw_id.isdecimal():
            restaurant = self.data_source.get(int(raw_id))
            if restaurant is not None:
                return restaurant

        if len(raw_id) >= _PLACE_ID_MIN_LENGTH:
            return self.get_details(raw_id)
        return None

    def get_details(self, place_id: str) -> Restaurant | None:
        key = f"restaurant:details:{place_id}"
        cached = self.cache.get(key)
        if cached is not None:
            return Restaurant.model_validate_json(cached)

        result = self.client.place_details(place_id)
        if not result.ok:
            logger.warning(
                "Details lookup for %s failed (%s: %s)",
                place_id, result.error.value, result.detail,
            )
            return None

        restaurant = normalize_details(result.result, place_id, self.client.config)
        self.cache.put(
            key,
            restaurant.model_dump_json(by_alias=True, exclude_none=True).encode(),
            self.config.details_ttl,
        )
        return restaurant

    # ── Reference data ───────────────────────────────────────────────────

    def list_cuisines(self) -> list[str]:
        key = "restaurants:cuisines"
        cached = self.cache.get(key)
        if cached is not None:
            return json.loads(cached)

        cuisines = sorted(set(CUISINES))
        self.cache.put(key, json.dumps(cuisines).encode(), self.config.cuisine_ttl)
        return cuisines

    def geocode(self, address: str) -> tuple[dict[str, Any] | None, str | None]:
        """
        Pass through the provider's geocoding response for ``address``.

        Returns ``(payload, None)`` on success or ``(None, message)`` when the
        credential is missing or the provider call fails.
        """
        key = f"geocode:{hash_key(address)}"
        cached = self.cache.get(key)
        if cached is not None:
            return json.loads(cached), None

        result = self.client.geocode(address)
        if result.error in (
            ProviderErrorKind.missing_credential,
            ProviderErrorKind.transport,
            ProviderErrorKind.http,
        ):
            logger.warning("Geocoding %r failed (%s: %s)", address, result.error.value, result.detail)
            return None, result.detail or "Geocoding failed"

        self.cache.put(key, json.dumps(result.payload).encode(), self.config.geocode_ttl)
        return result.payload, None

    def diagnostics(self) -> dict[str, Any]:
        api_key = self.client.config.api_key
        if not api_key:
            preview = None
        elif len(api_key) <= 8:
            preview = "*" * len(api_key)
        else:
            preview = f"{api_key[:4]}{'*' * (len(api_key) - 8)}{api_key[-4:]}"
        return {
            "message": "API is working",
            "api_key_configured": bool(api_key),
            "api_key_preview": preview,
            "places_base_url": self.client.config.base_url,
            "local_restaurants": len(self.data_source.all()),
        }
