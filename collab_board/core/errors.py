"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    field: str
    max_length: int
    actual_length: int
    post_id: int
    retry_after: int
    hint: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when a required field is missing or a field is too long."""


class NotFoundAppError(AppError):
    """Raised when the requested post does not exist."""


class ForbiddenAppError(AppError):
    """Raised when a post has no password and therefore cannot be changed."""


class CredentialAppError(AppError):
    """Raised when a supplied password does not match the stored hash."""


class RateLimitedAppError(AppError):
    """Raised when a post has too many recent failed password attempts."""


class ConflictAppError(AppError):
    """Raised when a compare-and-swap update lost against a concurrent writer."""


class StoreAppError(AppError):
    """Raised when the underlying database operation fails."""
