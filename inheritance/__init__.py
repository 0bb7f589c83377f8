"""Multiple table inheritance for SQLAlchemy declarative models."""

from inheritance import lifecycle  # noqa: F401  registers session hooks
from inheritance.config import InheritanceSettings, get_settings
from inheritance.declaration import declare_inheritance, inherits_from, is_a_superclass
from inheritance.delegation import DelegatedAttribute, DelegatedBuilder, ensure_parent
from inheritance.errors import (
    DeclarationError,
    InheritanceError,
    MissingParentError,
    RecordInvalid,
    TypeMismatchError,
)
from inheritance.record import RecordMixin
from inheritance.registry import InheritanceDeclaration, declarations_for, get_declaration
from inheritance.resolver import Delegation, DelegationTable, FieldOrigin, build_delegation_table
from inheritance.typecheck import is_type_compatible
from inheritance.validation import Errors

__all__ = [
    "InheritanceSettings",
    "get_settings",
    "declare_inheritance",
    "inherits_from",
    "is_a_superclass",
    "DelegatedAttribute",
    "DelegatedBuilder",
    "ensure_parent",
    "DeclarationError",
    "InheritanceError",
    "MissingParentError",
    "RecordInvalid",
    "TypeMismatchError",
    "RecordMixin",
    "InheritanceDeclaration",
    "declarations_for",
    "get_declaration",
    "Delegation",
    "DelegationTable",
    "FieldOrigin",
    "build_delegation_table",
    "is_type_compatible",
    "Errors",
]
