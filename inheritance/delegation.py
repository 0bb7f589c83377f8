"""Descriptors that forward reads, writes and builder calls to the parent record."""

from __future__ import annotations

from typing import Any, Callable

from sqlalchemy import inspect as sa_inspect

from core.logging import get_logger
from inheritance.errors import DeclarationError, MissingParentError
from inheritance.registry import InheritanceDeclaration, get_declaration

logger = get_logger(__name__)


def _declaration_of(record: Any) -> InheritanceDeclaration:
    declaration = get_declaration(type(record))
    if declaration is None:
        raise DeclarationError(f"{type(record).__name__} does not declare inherits_from")
    return declaration


def is_new_record(record: Any) -> bool:
    """True while the record has no persistent identity."""
    state = sa_inspect(record, raiseerr=False)
    return state is None or not state.has_identity


def ensure_parent(record: Any) -> Any:
    """Return the parent record, building a blank one for new records.

    The blank parent is tagged with the child's class name through the
    discriminator attribute.  At most one parent is built per record.
    """

    declaration = _declaration_of(record)
    parent = getattr(record, declaration.association_name)
    if parent is not None:
        return parent
    if not is_new_record(record):
        raise MissingParentError(
            f"{type(record).__name__} has no {declaration.association_name!r} row to delegate to"
        )
    parent = getattr(record, declaration.builder_name)()
    setattr(parent, declaration.discriminator, type(record).__name__)
    logger.debug("Built %s parent for new %s.", declaration.parent_type.__name__, type(record).__name__)
    return parent


class DelegatedAttribute:
    """Data descriptor reading and writing ``name`` on the parent record."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"DelegatedAttribute({self.name!r})"

    def __get__(self, instance: Any, owner: type) -> Any:
        if instance is None:
            return self
        return getattr(ensure_parent(instance), self.name)

    def __set__(self, instance: Any, value: Any) -> None:
        setattr(ensure_parent(instance), self.name, value)


class DelegatedBuilder:
    """Descriptor exposing the parent's ``<verb>_<relationship>`` builder."""

    def __init__(self, verb: str, relationship: str) -> None:
        self.verb = verb
        self.relationship = relationship

    @property
    def target(self) -> str:
        return f"{self.verb}_{self.relationship}"

    def __repr__(self) -> str:
        return f"DelegatedBuilder({self.target!r})"

    def __get__(self, instance: Any, owner: type) -> Any:
        if instance is None:
            return self
        target = self.target

        def invoke(*args: Any, **kwargs: Any) -> Any:
            builder: Callable[..., Any] = getattr(ensure_parent(instance), target)
            return builder(*args, **kwargs)

        invoke.__name__ = target
        return invoke


class LogicalSuperclass:
    """Resolves ``superclass`` to the parent type on both the class and its instances."""

    def __init__(self, parent_type: type) -> None:
        self.parent_type = parent_type

    def __get__(self, instance: Any, owner: type) -> type:
        return self.parent_type


__all__ = [
    "is_new_record",
    "ensure_parent",
    "DelegatedAttribute",
    "DelegatedBuilder",
    "LogicalSuperclass",
]
