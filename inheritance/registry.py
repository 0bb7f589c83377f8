"""Process-wide record of ``inherits_from`` declarations."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from inheritance.resolver import DelegationTable


@dataclass(frozen=True, slots=True)
class InheritanceDeclaration:
    """Immutable description of a child type extending a parent table."""

    child_type: type
    association_name: str
    parent_type: type
    foreign_key: str
    discriminator: str
    table: DelegationTable
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def builder_name(self) -> str:
        return f"build_{self.association_name}"


_DECLARATIONS: Dict[type, InheritanceDeclaration] = {}


def register(declaration: InheritanceDeclaration) -> None:
    _DECLARATIONS[declaration.child_type] = declaration


def get_declaration(cls: type) -> Optional[InheritanceDeclaration]:
    """Return the declaration governing ``cls`` (or one of its bases)."""
    for klass in getattr(cls, "__mro__", ()):
        declaration = _DECLARATIONS.get(klass)
        if declaration is not None:
            return declaration
    return None


def declarations_for(parent_type: type) -> Tuple[InheritanceDeclaration, ...]:
    return tuple(decl for decl in _DECLARATIONS.values() if decl.parent_type is parent_type)


__all__ = ["InheritanceDeclaration", "register", "get_declaration", "declarations_for"]
