"""FastAPI dependency injection helpers."""

from zoneinfo import ZoneInfo

from fastapi import Request

from fare_engine.domain.pricing import FareCalculator


def get_calculator(request: Request) -> FareCalculator:
    """The calculator built once at startup by the app factory."""
    return request.app.state.calculator


def get_timezone(request: Request) -> ZoneInfo:
    return request.app.state.timezone
