from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from .config import DEFAULT_PLACES_CONFIG, PlacesConfig

logger = logging.getLogger(__name__)

DETAIL_FIELDS = ",".join([
    "place_id", "name", "formatted_address", "vicinity", "geometry",
    "rating", "user_ratings_total", "price_level", "types", "photos",
    "opening_hours", "formatted_phone_number", "website", "url", "reviews",
])

# Provider statuses that still mean "the request worked"
_OK_STATUSES = {"OK", "ZERO_RESULTS"}


class ProviderErrorKind(str, Enum):
    missing_credential = "missing_credential"
    transport = "transport"
    http = "http"
    empty_result = "empty_result"


@dataclass(frozen=True)
class ProviderResult:
    payload: dict[str, Any] = field(default_factory=dict)
    error: ProviderErrorKind | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def results(self) -> list[dict[str, Any]]:
        return self.payload.get("results") or []

    @property
    def result(self) -> dict[str, Any]:
        return self.payload.get("result") or {}


class PlacesClient:
    """
    Thin HTTP client for the places-search and geocoding provider.

    Every call returns a ``ProviderResult``; transport and HTTP failures are
    reported through ``ProviderResult.error`` instead of being raised.
    """

    def __init__(
        self,
        config: PlacesConfig = DEFAULT_PLACES_CONFIG,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self._http = httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )

    @property
    def has_credential(self) -> bool:
        return bool(self.config.api_key)

    @property
    def closed(self) -> bool:
        return self._http.is_closed

    def close(self) -> None:
        self._http.close()

    def _get(self, path: str, params: dict[str, Any], expect: str = "results") -> ProviderResult:
        if not self.has_credential:
            return ProviderResult(
                error=ProviderErrorKind.missing_credential,
                detail="Google Maps API key is not configured",
            )

        query = {k: v for k, v in params.items() if v is not None}
        query["key"] = self.config.api_key

        try:
            response = self._http.get(path, params=query)
        except httpx.TransportError as exc:
            logger.warning("Places request to %s failed", path, exc_info=True)
            return ProviderResult(error=ProviderErrorKind.transport, detail=str(exc))

        if not response.is_success:
            logger.warning("Places request to %s returned HTTP %s", path, response.status_code)
            return ProviderResult(
                error=ProviderErrorKind.http,
                detail=f"HTTP {response.status_code}",
            )

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Places request to %s returned a non-JSON body", path)
            return ProviderResult(error=ProviderErrorKind.http, detail="Invalid JSON body")

        status = payload.get("status", "OK")
        if status not in _OK_STATUSES:
            message = payload.get("error_message") or status
            logger.warning("Places request to %s rejected: %s", path, message)
            return ProviderResult(payload=payload, error=ProviderErrorKind.http, detail=message)

        if not payload.get(expect):
            return ProviderResult(
                payload=payload,
                error=ProviderErrorKind.empty_result,
                detail="No results",
            )

        return ProviderResult(payload=payload)

    def text_search(
        self,
        query: str,
        location: tuple[float, float] | None = None,
        radius: int | None = None,
    ) -> ProviderResult:
        params: dict[str, Any] = {"query": query}
        if location is not None:
            params["location"] = f"{location[0]},{location[1]}"
            params["radius"] = radius
        return self._get("/place/textsearch/json", params)

    def nearby_search(
        self,
        lat: float,
        lng: float,
        radius: int,
        keyword: str | None = None,
    ) -> ProviderResult:
        return self._get(
            "/place/nearbysearch/json",
            {
                "location": f"{lat},{lng}",
                "radius": radius,
                "type": "restaurant",
                "keyword": keyword,
            },
        )

    def place_details(self, place_id: str) -> ProviderResult:
        return self._get(
            "/place/details/json",
            {"place_id": place_id, "fields": DETAIL_FIELDS},
            expect="result",
        )

    def geocode(self, address: str) -> ProviderResult:
        return self._get("/geocode/json", {"address": address})

