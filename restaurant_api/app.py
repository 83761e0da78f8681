from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import Field, TypeAdapter, ValidationError

from .restaurants.dependencies import close_lookup_service, get_lookup_service
from .restaurants.lookup import RestaurantLookupService
from .restaurants.models import CacheStats, Restaurant, RestaurantListResponse

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_RATING = TypeAdapter(Annotated[float, Field(ge=1.0, le=5.0)])
_RADIUS = TypeAdapter(int)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_lookup_service()


app = FastAPI(title="Restaurant Finder API", version="1.0.0", lifespan=lifespan)


def _optional_query(name: str, value: str | None, adapter: TypeAdapter) -> Any:
    """Parse an optional query value; a blank value (`?rating=`) means absent."""
    if value is None or not value.strip():
        return None
    try:
        return adapter.validate_python(value.strip())
    except ValidationError as exc:
        raise RequestValidationError([
            {**err, "loc": ("query", name, *err["loc"])}
            for err in exc.errors(include_url=False)
        ]) from exc


@app.middleware("http")
async def cache_control(request: Request, call_next):
    response = await call_next(request)
    if response.headers.get("content-type", "").startswith("application/json"):
        response.headers["Cache-Control"] = "public, max-age=60"
    return response


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"message": str(exc), "code": 500})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/test")
def diagnostics(service: RestaurantLookupService = Depends(get_lookup_service)) -> dict:
    return service.diagnostics()


@app.get("/cache/stats", response_model=CacheStats)
def cache_stats(service: RestaurantLookupService = Depends(get_lookup_service)) -> dict:
    return service.cache.stats()


# ── Restaurant endpoints ─────────────────────────────────────────────────


@app.get(
    "/restaurants",
    response_model=RestaurantListResponse,
    response_model_exclude_none=True,
)
def search_restaurants(
    search: str = "",
    cuisine: str | None = None,
    rating: str | None = None,
    service: RestaurantLookupService = Depends(get_lookup_service),
) -> RestaurantListResponse:
    min_rating = _optional_query("rating", rating, _RATING)
    return RestaurantListResponse(
        data=service.search_by_term(search, cuisine=cuisine, min_rating=min_rating),
    )


@app.get(
    "/restaurants/nearby",
    response_model=RestaurantListResponse,
    response_model_exclude_none=True,
)
def nearby_restaurants(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lng: float = Query(..., ge=-180.0, le=180.0),
    radius: str | None = None,
    cuisine: str | None = None,
    rating: str | None = None,
    term: str | None = None,
    service: RestaurantLookupService = Depends(get_lookup_service),
) -> RestaurantListResponse:
    return RestaurantListResponse(
        data=service.search_nearby(
            lat,
            lng,
            radius=_optional_query("radius", radius, _RADIUS),
            cuisine=cuisine,
            min_rating=_optional_query("rating", rating, _RATING),
            term=term,
        ),
    )


@app.get("/restaurants/cuisines")
def cuisines(service: RestaurantLookupService = Depends(get_lookup_service)) -> list[str]:
    return service.list_cuisines()


@app.get(
    "/restaurants/{restaurant_id}",
    response_model=Restaurant,
    response_model_exclude_none=True,
    responses={404: {"description": "Restaurant not found"}},
)
def show_restaurant(
    restaurant_id: str,
    service: RestaurantLookupService = Depends(get_lookup_service),
):
    restaurant = service.get_by_id(restaurant_id)
    if restaurant is None:
        return JSONResponse(status_code=404, content={"message": "Restaurant not found"})
    return restaurant


@app.get("/geocode")
def geocode(
    address: str = Query(..., min_length=1),
    service: RestaurantLookupService = Depends(get_lookup_service),
):
    payload, error = service.geocode(address)
    if error is not None:
        return JSONResponse(status_code=500, content={"error": error, "results": []})
    return payload
