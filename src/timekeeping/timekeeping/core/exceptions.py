from __future__ import annotations

from typing import Mapping, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``errors`` maps a field name to its message so the caller can render
    them next to the offending inputs.
    """

    def __init__(self, message: str, errors: Optional[Mapping[str, str]] = None):
        super().__init__(message)
        self.errors = dict(errors or {})


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConflictError(DomainError):
    """A uniqueness constraint rejected a concurrent write."""


class OpenRecordConflict(ConflictError):
    """The employee already has an open attendance record."""


class OpenBreakConflict(ConflictError):
    """The attendance record already has an open break."""


class PersistenceError(Exception):
    """Storage or transport failure. Safe to retry reads; punches must re-fetch status first."""
