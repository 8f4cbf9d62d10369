from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, errors: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class DuplicateError(ValidationError):
    """Raised when a unique key (employee id, email, license...) already exists."""

    def __init__(self, message: str, *, field: Optional[str] = None, value: object = None):
        super().__init__(message)
        self.field = field
        self.value = value


class NotFoundError(DomainError):
    """Raised when a requested record does not exist in the caller's scope."""


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are invalid."""


class AccountLockedError(AuthenticationError):
    """Raised after too many failed login attempts."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class SubscriptionError(AuthorizationError):
    """Raised when the owner's subscription does not allow an action."""
