"""Error taxonomy for the FitTrack HTTP API."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    """Base class for errors that map to a JSON ``{"message": ...}`` response."""

    message: str = "Server error"
    status_code: int = 500

    def __str__(self) -> str:  # pragma: no cover - dataclass convenience
        return self.message


@dataclass
class ValidationError(ApiError):
    """Malformed or missing input."""

    message: str = "Invalid request"
    status_code: int = 400


@dataclass
class InvalidId(ApiError):
    """Identifier is not syntactically valid (distinct from not found)."""

    message: str = "Invalid ID"
    status_code: int = 400


@dataclass
class Unauthorized(ApiError):
    message: str = "Unauthorized"
    status_code: int = 401


@dataclass
class NotFound(ApiError):
    message: str = "Not found"
    status_code: int = 404


@dataclass
class DuplicateEmail(ApiError):
    """An account with this e-mail already exists.

    The client-facing message is the generic credentials error so signup
    cannot be used to enumerate registered addresses.
    """

    message: str = "Invalid credentials"
    status_code: int = 400


@dataclass
class SessionStoreError(ApiError):
    """The server-side session storage failed."""

    message: str = "Server error"
    status_code: int = 500


@dataclass
class InternalError(ApiError):
    message: str = "Server error"
    status_code: int = 500
