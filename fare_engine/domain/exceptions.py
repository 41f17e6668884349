"""
Error taxonomy for the fare engine.

Every error carries a machine-readable ``code`` and an HTTP ``status_code``
so the API layer can render it without knowing the concrete class.
Client errors (validation, range, service area) are raised before any
route-provider call; provider errors abort the whole request.
"""

from __future__ import annotations


class FareEngineError(Exception):
    code = "FARE_CALCULATION_ERROR"
    status_code = 500
    message = "Failed to calculate fare estimate"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(FareEngineError):
    code = "VALIDATION_ERROR"
    status_code = 400
    message = "Invalid request format"


class UnsupportedBookingTypeError(ValidationError):
    code = "UNSUPPORTED_BOOKING_TYPE"


class OutOfRangeError(ValidationError):
    code = "OUT_OF_RANGE"


class ServiceAreaError(FareEngineError):
    code = "LOCATION_NOT_SERVICEABLE"
    status_code = 422
    message = "Location is outside our service area"


class VehicleNotFoundError(FareEngineError):
    code = "VEHICLE_NOT_FOUND"
    status_code = 404
    message = "Vehicle type not found"


# ── Route provider ────────────────────────────────────────────────────


class ProviderError(FareEngineError):
    """Route provider failure. Surfaced as a server-side error."""

    code = "ROUTE_PROVIDER_ERROR"
    status_code = 502
    message = "Failed to calculate route distance"


class ProviderTimeoutError(ProviderError):
    code = "ROUTE_PROVIDER_TIMEOUT"
    status_code = 504


class ProviderAuthError(ProviderError):
    code = "ROUTE_PROVIDER_AUTH"


class ProviderRateLimitError(ProviderError):
    code = "ROUTE_PROVIDER_RATE_LIMITED"
    status_code = 503


class NoRouteFoundError(ProviderError):
    code = "NO_ROUTE_FOUND"
