from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class _ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Location(_ApiModel):
    lat: float = 0.0
    lng: float = 0.0


class Restaurant(_ApiModel):
    id: int | str
    provider_place_id: str | None = None
    name: str = ""
    address: str = ""
    description: str = ""
    cuisine: str = "Restaurant"
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    image: str = ""
    opening_hours: str = "Hours not available"
    location: Location = Field(default_factory=Location)
    price_level: int = Field(default=0, ge=0, le=4)
    user_ratings_total: int = 0
    price_range: str = "$"
    features: list[str] = Field(default_factory=list)

    # Proximity search only
    distance_km: float | None = None
    distance_text: str | None = None

    # Detail lookups only
    phone_number: str | None = None
    website: str | None = None
    detail_url: str | None = None
    reviews: list[dict[str, Any]] | None = None


class RestaurantListResponse(BaseModel):
    data: list[Restaurant]


class CacheStats(BaseModel):
    size: int
    hits: int
    misses: int
    hit_rate: float


RESTAURANT_LIST = TypeAdapter(list[Restaurant])


def dump_restaurants(items: list[Restaurant]) -> bytes:
    return RESTAURANT_LIST.dump_json(items, by_alias=True, exclude_none=True)


def load_restaurants(raw: bytes) -> list[Restaurant]:
    return RESTAURANT_LIST.validate_json(raw)
