# -*- coding: utf-8 -*-
"""Exception hierarchy shared by the API client and the session store."""

from __future__ import annotations

from typing import Any, Optional

GENERIC_FAILURE = "Request failed"
NETWORK_FAILURE = "Network error, please try again"
TIMEOUT_FAILURE = "Request timed out"


class HealthPandaError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(HealthPandaError):
    """Input rejected locally, before any network call."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class ConfigurationError(HealthPandaError):
    pass


class ApiError(HealthPandaError):
    """A backend call that did not produce a usable 2xx response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class TransportError(ApiError):
    def __init__(self, message: str = NETWORK_FAILURE) -> None:
        super().__init__(message)


class RequestTimeout(TransportError):
    def __init__(self, message: str = TIMEOUT_FAILURE) -> None:
        super().__init__(message)


class UnauthorizedError(ApiError):
    """HTTP 401. Stored credentials have already been cleared when this is raised."""


class ServerError(ApiError):
    """Any other non-2xx status."""


class AuthError(HealthPandaError):
    """Login or registration failure, with a message fit to show the user verbatim."""


def message_from_payload(payload: Any, fallback: str = GENERIC_FAILURE) -> str:
    """Pick the backend-provided message out of an error body.

    Backends answer with either ``{"message": ...}`` or FastAPI-style ``{"detail": ...}``.
    """
    if isinstance(payload, dict):
        for key in ("message", "detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    if isinstance(payload, str) and payload.strip() and not payload.lstrip().startswith("<"):
        return payload.strip()[:200]
    return fallback
