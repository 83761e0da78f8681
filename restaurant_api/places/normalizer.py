from __future__ import annotations

from typing import Any

from ..restaurants.models import Location, Restaurant
from .config import DEFAULT_PLACES_CONFIG, PlacesConfig
from .distance import distance_km, format_distance

CUISINE_TYPES: frozenset[str] = frozenset({
    "bakery",
    "cafe",
    "bar",
    "meal_takeaway",
    "meal_delivery",
    "restaurant",
    "food",
    "italian_restaurant",
    "japanese_restaurant",
    "chinese_restaurant",
    "thai_restaurant",
    "indian_restaurant",
})

DEFAULT_CUISINE = "Restaurant"


def infer_cuisine(types: list[str] | None) -> str:
    """
    Pick a cuisine label from the provider's category tags.

    The first tag (in provider order) that is a known food category wins,
    e.g. ``["bakery", "restaurant"]`` -> ``"Bakery"`` and
    ``["thai_restaurant"]`` -> ``"Thai"``.
    """
    matches = [t for t in types or [] if t in CUISINE_TYPES]
    if not matches:
        return DEFAULT_CUISINE
    label = matches[0].removesuffix("_restaurant").replace("_", " ")
    return label[:1].upper() + label[1:]


def opening_hours_text(opening_hours: dict[str, Any] | None) -> str:
    if not opening_hours:
        return "Hours not available"
    weekday_text = opening_hours.get("weekday_text")
    if weekday_text:
        return ", ".join(weekday_text)
    if "open_now" in opening_hours:
        return "Open now" if opening_hours["open_now"] else "Closed"
    return "Hours not available"


def photo_url(raw: dict[str, Any], config: PlacesConfig = DEFAULT_PLACES_CONFIG) -> str:
    photos = raw.get("photos") or []
    reference = photos[0].get("photo_reference") if photos else None
    if not reference:
        return config.placeholder_image
    return (
        f"{config.base_url}/place/photo"
        f"?maxwidth={config.photo_max_width}"
        f"&photo_reference={reference}"
        f"&key={config.api_key}"
    )


def _location(raw: dict[str, Any]) -> dict[str, float] | None:
    loc = (raw.get("geometry") or {}).get("location")
    if not loc or loc.get("lat") is None or loc.get("lng") is None:
        return None
    return {"lat": float(loc["lat"]), "lng": float(loc["lng"])}


def _base_fields(raw: dict[str, Any], config: PlacesConfig) -> dict[str, Any]:
    price_level = int(raw.get("price_level") or 0)
    return {
        "provider_place_id": raw.get("place_id"),
        "name": raw.get("name") or "",
        "address": raw.get("formatted_address") or raw.get("vicinity") or "",
        "description": raw.get("vicinity") or "",
        "cuisine": infer_cuisine(raw.get("types")),
        "rating": float(raw.get("rating") or 0),
        "image": photo_url(raw, config),
        "opening_hours": opening_hours_text(raw.get("opening_hours")),
        "location": Location(**(_location(raw) or {})),
        "price_level": price_level,
        "user_ratings_total": int(raw.get("user_ratings_total") or 0),
        "price_range": "$" * max(price_level, 1),
    }


def normalize_place(
    raw: dict[str, Any],
    index: int,
    config: PlacesConfig = DEFAULT_PLACES_CONFIG,
) -> Restaurant:
    """Map one keyword-search result into a Restaurant with a 1-based id."""
    return Restaurant(id=index + 1, **_base_fields(raw, config))


def normalize_nearby(
    raw: dict[str, Any],
    index: int,
    origin_lat: float,
    origin_lng: float,
    config: PlacesConfig = DEFAULT_PLACES_CONFIG,
) -> Restaurant | None:
    """
    Map one proximity-search result, annotated with its distance from the origin.

    Returns ``None`` for records without coordinates, since no distance can
    be computed for them.
    """
    loc = _location(raw)
    if loc is None:
        return None

    km = distance_km(origin_lat, origin_lng, loc["lat"], loc["lng"])
    fields = _base_fields(raw, config)
    # Keyword-search records carry no vicinity
    vicinity = raw.get("vicinity") or raw.get("formatted_address") or ""
    fields["address"] = vicinity
    fields["description"] = vicinity
    return Restaurant(
        id=index + 1,
        distance_km=round(km, 2),
        distance_text=format_distance(km),
        **fields,
    )


def normalize_details(
    raw: dict[str, Any],
    place_id: str,
    config: PlacesConfig = DEFAULT_PLACES_CONFIG,
) -> Restaurant:
    """Map a place-details record, keeping contact info and raw reviews."""
    return Restaurant(
        id=place_id,
        phone_number=raw.get("formatted_phone_number") or "",
        website=raw.get("website") or "",
        detail_url=raw.get("url") or "",
        reviews=list(raw.get("reviews") or []),
        **_base_fields(raw, config),
    )
