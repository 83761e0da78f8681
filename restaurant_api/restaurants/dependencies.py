from __future__ import annotations

from functools import lru_cache

from ..places.client import PlacesClient
from ..places.config import DEFAULT_PLACES_CONFIG
from .cache import InMemoryCache
from .config import DEFAULT_LOOKUP_CONFIG
from .data_store import LocalDataSource
from .lookup import RestaurantLookupService


@lru_cache
def get_lookup_service() -> RestaurantLookupService:
    """Return the process-wide lookup service, building it on first call."""
    return RestaurantLookupService(
        client=PlacesClient(DEFAULT_PLACES_CONFIG),
        cache=InMemoryCache(),
        data_source=LocalDataSource(DEFAULT_LOOKUP_CONFIG.data_path),
        config=DEFAULT_LOOKUP_CONFIG,
    )


def close_lookup_service() -> None:
    """Release the shared service's HTTP connections, if it was ever built."""
    if get_lookup_service.cache_info().currsize:
        get_lookup_service().client.close()
        get_lookup_service.cache_clear()
