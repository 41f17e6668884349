"""Centralised application settings loaded from environment / .env file."""

from pydantic_settings import BaseSettings

from fare_engine.domain.enums import RoundingMode


class Settings(BaseSettings):
    # Pricing
    currency: str = "GBP"
    operator_timezone: str = "Europe/London"
    hourly_min_hours: float = 3  # canonical band, see DESIGN.md
    hourly_max_hours: float = 24
    rounding_mode: RoundingMode = RoundingMode.FLOOR
    return_discount_rate: float = 0.10

    # Route distance provider
    route_provider: str = "mapbox"  # "mapbox" | "straight-line"
    mapbox_token: str = ""
    mapbox_base_url: str = "https://api.mapbox.com/directions/v5/mapbox/driving"
    route_timeout_seconds: float = 10.0
    straight_line_road_factor: float = 1.3
    straight_line_speed_mph: float = 30.0

    # Route cache
    route_cache_enabled: bool = False
    route_cache_ttl_seconds: int = 86_400
    redis_url: str = "redis://localhost:6379/0"

    # API
    rate_limit: str = "100/minute"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
