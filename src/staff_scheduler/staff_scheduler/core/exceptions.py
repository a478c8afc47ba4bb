from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a domain failure; decides the HTTP status and error code."""

    VALIDATION = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL = "INTERNAL_SERVER_ERROR"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.SERVICE_UNAVAILABLE: 503,
    ErrorKind.INTERNAL: 500,
}


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str, *, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = ErrorKind.VALIDATION


class NotFoundError(DomainError):
    """Raised when a referenced staff, task, schedule or assignment does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainError):
    """Raised when a write collides with existing data (double booking, duplicate email)."""

    kind = ErrorKind.CONFLICT


class ServiceUnavailableError(DomainError):
    """Raised when an external dependency such as the mail transport cannot be reached."""

    kind = ErrorKind.SERVICE_UNAVAILABLE
