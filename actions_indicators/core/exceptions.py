"""Custom exception types for the fetch, cache and API layers."""
from __future__ import annotations


class AppError(Exception):
    """Base app exception."""


class TransportError(AppError):
    """Remote fetch failed (network, auth or rate limit)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(AppError):
    """Cron expression could not be parsed or never matches."""
