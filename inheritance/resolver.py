"""Delegation table computed once per child type from parent schema metadata.

The table answers one question for a child type: given a name, is it native
to the child, a field forwarded to the parent row, a parent relationship (or
one of its ``build_``/``create_`` builders), or unknown?  It is built from
plain name collections so it can be computed without touching a database.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from core.logging import get_logger

logger = get_logger(__name__)

BUILDER_VERBS: Tuple[str, ...] = ("build", "create")


class FieldOrigin(str, Enum):
    NATIVE = "native"
    DELEGATED_FIELD = "delegated_field"
    DELEGATED_RELATIONSHIP_BUILDER = "delegated_relationship_builder"


@dataclass(frozen=True, slots=True)
class Delegation:
    """How a single name is forwarded to the parent record.

    ``target`` is the name used on the parent: the field name itself, or the
    relationship name for builders.  ``builder`` is ``None`` for plain
    accessors and one of :data:`BUILDER_VERBS` otherwise.
    """

    name: str
    origin: FieldOrigin
    target: str
    builder: Optional[str] = None

    @property
    def is_builder(self) -> bool:
        return self.builder is not None


class DelegationTable(Mapping[str, Delegation]):
    """Immutable mapping of delegated names plus the child's native names."""

    def __init__(self, entries: Mapping[str, Delegation], native: Iterable[str] = ()) -> None:
        self._entries: Mapping[str, Delegation] = MappingProxyType(dict(entries))
        self._native = frozenset(native)

    def __getitem__(self, name: str) -> Delegation:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DelegationTable({sorted(self._entries)!r})"

    @property
    def native(self) -> frozenset:
        return self._native

    def resolve(self, name: str) -> Optional[FieldOrigin]:
        """Return where ``name`` lives, or ``None`` when it is unrecognised."""
        if name in self._native:
            return FieldOrigin.NATIVE
        entry = self._entries.get(name)
        return entry.origin if entry is not None else None

    def accessors(self) -> Tuple[Delegation, ...]:
        return tuple(entry for entry in self._entries.values() if not entry.is_builder)

    def builders(self) -> Tuple[Delegation, ...]:
        return tuple(entry for entry in self._entries.values() if entry.is_builder)


def build_delegation_table(
    native_names: Iterable[str],
    parent_columns: Iterable[str],
    parent_relationships: Iterable[str],
    *,
    discriminator: str,
) -> DelegationTable:
    """Compute the delegation table for a child type.

    Parent columns are delegated unless the child already has the name or the
    column is the discriminator.  Parent relationships are delegated as an
    accessor plus ``build_<name>``/``create_<name>``.  A parent column and
    relationship sharing a name resolve to the relationship, which is
    processed second.
    """

    native = frozenset(native_names)
    entries: Dict[str, Delegation] = {}

    for column in parent_columns:
        if column in native or column == discriminator:
            continue
        entries[column] = Delegation(column, FieldOrigin.DELEGATED_FIELD, column)

    for relationship in parent_relationships:
        if relationship in native:
            continue
        previous = entries.get(relationship)
        if previous is not None and previous.origin is FieldOrigin.DELEGATED_FIELD:
            logger.warning(
                "Parent exposes both a column and a relationship named %r; delegating the relationship.",
                relationship,
            )
        entries[relationship] = Delegation(relationship, FieldOrigin.DELEGATED_RELATIONSHIP_BUILDER, relationship)
        for verb in BUILDER_VERBS:
            builder_name = f"{verb}_{relationship}"
            if builder_name in native:
                continue
            entries[builder_name] = Delegation(
                builder_name,
                FieldOrigin.DELEGATED_RELATIONSHIP_BUILDER,
                relationship,
                builder=verb,
            )

    return DelegationTable(entries, native)


__all__ = [
    "BUILDER_VERBS",
    "FieldOrigin",
    "Delegation",
    "DelegationTable",
    "build_delegation_table",
]
