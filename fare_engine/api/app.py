"""
FastAPI application factory.

* Builds the fare calculator once (catalogs, route provider, optional
  Redis route cache) and stores it on ``app.state``.
* Registers routes for fares, catalog and admin.
* Renders every ``FareEngineError`` and request-validation failure in the
  ``{"success": false, "error": {...}}`` envelope.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from fare_engine.api.middleware import limiter
from fare_engine.api.routes import admin, catalog, fares
from fare_engine.api.schemas import ErrorBody, ErrorResponse
from fare_engine.config import Settings, settings
from fare_engine.domain.exceptions import (
    FareEngineError,
    UnsupportedBookingTypeError,
    ValidationError,
)
from fare_engine.domain.pricing import FareCalculator
from fare_engine.domain.protocols import RouteDistanceProvider
from fare_engine.domain.surcharges import default_surcharge_table
from fare_engine.domain.vehicles import default_vehicle_catalog
from fare_engine.domain.zones import default_zone_registry
from fare_engine.infrastructure.redis_client import close_redis, get_redis
from fare_engine.infrastructure.route_cache import CachedRouteProvider
from fare_engine.infrastructure.routing import (
    MapboxDistanceProvider,
    StraightLineDistanceProvider,
)

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def build_provider(cfg: Settings) -> RouteDistanceProvider:
    if cfg.route_provider == "mapbox":
        provider: RouteDistanceProvider = MapboxDistanceProvider(
            cfg.mapbox_token, cfg.mapbox_base_url, cfg.route_timeout_seconds
        )
    elif cfg.route_provider == "straight-line":
        provider = StraightLineDistanceProvider(
            cfg.straight_line_road_factor, cfg.straight_line_speed_mph
        )
    else:
        raise ValueError(f"Unknown route provider: {cfg.route_provider}")

    if cfg.route_cache_enabled:
        provider = CachedRouteProvider(provider, get_redis(), cfg.route_cache_ttl_seconds)
    return provider


def build_calculator(
    cfg: Settings, provider: Optional[RouteDistanceProvider] = None
) -> FareCalculator:
    tz = ZoneInfo(cfg.operator_timezone)
    return FareCalculator(
        vehicles=default_vehicle_catalog(),
        zones=default_zone_registry(tz),
        surcharges=default_surcharge_table(tz),
        provider=provider or build_provider(cfg),
        currency=cfg.currency,
        rounding=cfg.rounding_mode,
        return_discount_rate=cfg.return_discount_rate,
        hourly_min_hours=cfg.hourly_min_hours,
        hourly_max_hours=cfg.hourly_max_hours,
        route_timeout=cfg.route_timeout_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the Redis pool on shutdown when the route cache is on."""
    logger.info(
        "Fare engine ready (provider=%s, cache=%s)",
        settings.route_provider,
        settings.route_cache_enabled,
    )
    yield
    if settings.route_cache_enabled:
        await close_redis()


# ── Error rendering ───────────────────────────────────────────────────


def _error_response(error: FareEngineError) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorBody(code=error.code, message=error.message, details=error.detail)
    )
    return JSONResponse(status_code=error.status_code, content=body.model_dump())


async def fare_engine_error_handler(request: Request, exc: FareEngineError):
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.code, exc.detail)
    return _error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(e.get("type") == "union_tag_invalid" for e in errors):
        return _error_response(UnsupportedBookingTypeError("Unknown bookingType"))
    details = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in errors
    )
    return _error_response(ValidationError(details))


def create_app(calculator: Optional[FareCalculator] = None) -> FastAPI:
    app = FastAPI(
        title="UK Fare Calculation API",
        description=(
            "Quotes ground-transport fares for every vehicle class: "
            "one-way, hourly and return bookings with slab distance "
            "pricing, time surcharges, airport and zone fees."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.calculator = calculator or build_calculator(settings)
    app.state.timezone = ZoneInfo(settings.operator_timezone)

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Error envelope
    app.add_exception_handler(FareEngineError, fare_engine_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Routers
    app.include_router(fares.router, prefix="/api/v1")
    app.include_router(catalog.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
