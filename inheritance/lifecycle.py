"""Session hooks run before records are created or updated."""

from __future__ import annotations

from typing import Any, List

from sqlalchemy import event
from sqlalchemy.orm import Session

from core.logging import get_logger
from inheritance.config import get_settings
from inheritance.delegation import ensure_parent
from inheritance.errors import RecordInvalid
from inheritance.record import RecordMixin
from inheritance.registry import get_declaration

logger = get_logger(__name__)


def _pending_records(session: Session) -> List[Any]:
    return [*session.new, *session.dirty]


def persist_parents(session: Session) -> int:
    """Make sure every new or changed child record has a parent row in the session."""
    count = 0
    for record in _pending_records(session):
        if get_declaration(type(record)) is None:
            continue
        parent = ensure_parent(record)
        session.add(parent)
        count += 1
    return count


def validate_records(session: Session) -> None:
    for record in _pending_records(session):
        if isinstance(record, RecordMixin) and not record.validate():
            raise RecordInvalid(record, record.errors)


@event.listens_for(Session, "before_flush")
def _before_flush(session: Session, flush_context, instances) -> None:  # pragma: no cover - SQLAlchemy callback
    count = persist_parents(session)
    if count:
        logger.debug("Prepared %d parent record(s) before flush.", count)
    if get_settings().validate_on_flush:
        validate_records(session)


__all__ = ["persist_parents", "validate_records"]
