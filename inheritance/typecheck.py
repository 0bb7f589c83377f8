"""Inheritance-aware type checks for scalar association assignments."""

from __future__ import annotations

from typing import Any, Set, Tuple

from sqlalchemy import event
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import RelationshipProperty

from core.logging import get_logger
from inheritance.delegation import ensure_parent
from inheritance.errors import TypeMismatchError
from inheritance.registry import get_declaration
from inheritance.schema import relationship_properties

logger = get_logger(__name__)

_INSTALLED: Set[Tuple[type, str]] = set()


def is_type_compatible(value: Any, target_type: type) -> bool:
    """Whether ``value`` may be assigned to an association targeting ``target_type``.

    Records declaring ``inherits_from`` are compatible with their logical
    superclass; everything else falls back to ``isinstance``.
    """

    declaration = get_declaration(type(value))
    if declaration is not None and declaration.parent_type is target_type:
        return True
    return isinstance(value, target_type)


def _make_listener(prop: RelationshipProperty):
    owner = prop.parent.class_

    def check_assignment(target, value, oldvalue, initiator):
        # target class and uselist are only known once the mapper is configured
        if value is None or prop.uselist:
            return value
        target_type = prop.mapper.class_
        if isinstance(value, target_type):
            return value
        if not is_type_compatible(value, target_type):
            raise TypeMismatchError(
                f"{owner.__name__}.{prop.key} expected {target_type.__name__}, got {type(value).__name__}"
            )
        # the association stores the row backing the logical superclass
        return ensure_parent(value)

    return check_assignment


def install_type_checks(cls: type) -> int:
    """Attach ``set`` listeners to the relationships declared on ``cls``.

    Must run before mappers are configured: listeners fire in registration
    order and ``back_populates`` handlers are added at configure time, so the
    check has to be in place first to hand them the parent row.  Safe to call
    repeatedly; already guarded attributes are skipped.  Returns the number of
    listeners added.
    """

    mapper = sa_inspect(cls)
    added = 0
    for prop in relationship_properties(mapper):
        if prop.parent is not mapper or prop.uselist or (cls, prop.key) in _INSTALLED:
            continue
        event.listen(getattr(cls, prop.key), "set", _make_listener(prop), retval=True, propagate=True)
        _INSTALLED.add((cls, prop.key))
        added += 1
    if added:
        logger.debug("Installed %d association type check(s) on %s.", added, cls.__name__)
    return added


__all__ = ["is_type_compatible", "install_type_checks"]
