from __future__ import annotations


class GrcMetricsError(Exception):
    """Base exception with user-friendly message."""
    pass


class ConfigError(GrcMetricsError):
    pass


class ApiError(GrcMetricsError):
    pass


class AuthenticationError(ApiError):
    pass


class ValidationError(GrcMetricsError):
    """A risk rating was rejected before it could reach storage."""
    pass
