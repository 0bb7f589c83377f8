"""Exception types raised by the inheritance extension."""

from __future__ import annotations

from typing import Any, Iterable, Tuple


class InheritanceError(RuntimeError):
    """Base class for errors raised while declaring or resolving inheritance."""


class DeclarationError(InheritanceError):
    """Raised when ``inherits_from`` cannot be applied to a class."""


class TypeMismatchError(InheritanceError, TypeError):
    """Raised when an object assigned to a scalar association has an incompatible type."""


class MissingParentError(InheritanceError):
    """Raised when a persisted record has no parent row to delegate to."""


class RecordInvalid(InheritanceError):
    """Raised at flush time when a record fails validation."""

    def __init__(self, record: Any, errors: Iterable[Tuple[str, str]]) -> None:
        self.record = record
        self.errors: Tuple[Tuple[str, str], ...] = tuple(errors)
        details = ", ".join(f"{key} {message}" for key, message in self.errors)
        super().__init__(f"Validation failed for {type(record).__name__}: {details}")


__all__ = [
    "InheritanceError",
    "DeclarationError",
    "TypeMismatchError",
    "MissingParentError",
    "RecordInvalid",
]
