from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class LookupConfig:
    """
    Settings for the restaurant lookup service.

    ``filter_fallback`` controls whether keyword-search results served from
    the local dataset (after a provider failure) are still narrowed by the
    requested cuisine and rating. Off by default: fallback rows are returned
    unfiltered.
    """

    data_path: Path = _DATA_DIR / "restaurants.json"
    search_ttl: int = 30 * 60
    details_ttl: int = 30 * 60
    cuisine_ttl: int = 24 * 60 * 60
    geocode_ttl: int = 24 * 60 * 60
    default_radius: int = 1000
    min_radius: int = 500
    max_radius: int = 100_000
    filter_fallback: bool = False


DEFAULT_LOOKUP_CONFIG = LookupConfig()
