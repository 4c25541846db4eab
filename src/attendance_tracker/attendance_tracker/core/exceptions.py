from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 500

    def __init__(self, message: str = "", *, errors: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = dict(errors or {})


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``errors`` maps field names to messages so the client can highlight them.
    """

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class UnauthorizedError(DomainError):
    """Raised when a request carries no valid session."""

    status_code = 401


class NotFoundError(DomainError):
    """Raised when an entity id or natural key does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised on uniqueness violations (username, studentId, course code)."""

    status_code = 409


class PayloadTooLargeError(DomainError):
    """Raised when an upload exceeds the configured ceiling."""

    status_code = 413


class VerificationFailedError(DomainError):
    """Raised when a face match policy rejects a capture."""

    status_code = 422


class InternalError(DomainError):
    """Data-integrity or unexpected failure. Never shown verbatim to clients."""

    status_code = 500
