from __future__ import annotations

from typing import Iterable


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, invalid_student_ids: Iterable[int] = ()):
        super().__init__(message)
        self.invalid_student_ids = sorted(set(invalid_student_ids))


class NotFoundError(DomainError):
    """Raised when a class, student or record id does not exist."""


class ConflictError(DomainError):
    """Raised on a storage constraint violation not caught by validation."""


class StorageError(DomainError):
    """Raised when the underlying persistence layer fails."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
