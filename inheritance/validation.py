"""Minimal record validation: an error collection and reusable validators."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, List, Tuple

BLANK_MESSAGE = "can't be blank"

Validator = Callable[[Any], None]


class Errors:
    """Ordered ``(key, message)`` entries collected while validating a record."""

    def __init__(self) -> None:
        self._entries: List[Tuple[str, str]] = []

    def add(self, key: str, message: str) -> None:
        self._entries.append((str(key), str(message)))

    def clear(self) -> None:
        self._entries.clear()

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __contains__(self, key: object) -> bool:
        return any(existing == key for existing, _ in self._entries)

    def __getitem__(self, key: str) -> List[str]:
        return [message for existing, message in self._entries if existing == key]

    def __repr__(self) -> str:
        return f"Errors({self._entries!r})"

    def full_messages(self) -> List[str]:
        return [f"{key.replace('_', ' ').capitalize()} {message}" for key, message in self._entries]

    def to_dict(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for key, message in self._entries:
            grouped.setdefault(key, []).append(message)
        return grouped


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def presence_validator(*names: str) -> Validator:
    """Build a validator that flags each blank attribute with ``can't be blank``."""

    def validate_presence(record: Any) -> None:
        for name in names:
            if is_blank(getattr(record, name, None)):
                record.errors.add(name, BLANK_MESSAGE)

    return validate_presence


def associated_validator(*names: str) -> Validator:
    """Build a validator that validates associated records and copies their errors.

    Each association may hold a single record, a collection of records or
    ``None``; missing targets are skipped.  Errors are copied with the same
    key and message onto the owning record.
    """

    def validate_associated(record: Any) -> None:
        for name in names:
            associates = getattr(record, name, None)
            if associates is None:
                continue
            if hasattr(associates, "validate"):
                associates = (associates,)
            elif isinstance(associates, Mapping):
                associates = associates.values()
            for associate in associates:
                if associate is None or associate.validate():
                    continue
                for key, message in associate.errors:
                    record.errors.add(key, message)

    return validate_associated


__all__ = [
    "BLANK_MESSAGE",
    "Errors",
    "Validator",
    "is_blank",
    "presence_validator",
    "associated_validator",
]
