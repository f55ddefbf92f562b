"""Exceptions raised by the user model and the user repositories."""

from typing import Dict, Optional


class ValidationError(ValueError):
    """A user record does not satisfy the credential rules."""

    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = errors
        super().__init__('; '.join(f'{field}: {message}'
                                   for field, message in errors.items()))


class HashError(RuntimeError):
    """Failed to derive a password hash."""


class NotFoundError(LookupError):
    """No user matches the requested key."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or 'record not found')


class StoreError(RuntimeError):
    """The user store failed for a reason other than a missing record."""


class ConflictError(StoreError):
    """A uniqueness constraint on the user store was violated."""
