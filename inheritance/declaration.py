"""``inherits_from``: multiple table inheritance for declarative models.

Example::

    class Product(Base):
        __tablename__ = "products"
        id = Column(Integer, primary_key=True)
        name = Column(String, nullable=False)
        type = Column(String)

    @inherits_from("product")
    class Book(Base):
        __tablename__ = "books"
        id = Column(Integer, primary_key=True)
        author = Column(String)

    book = Book(name="Agile Web Development", author="Dave Thomas")
    book.product.type  # "Book"

The decorated class gets a ``product`` many-to-one relationship (and a
``product_id`` column when it does not declare one), accessors for every
parent column it does not define itself, and ``build_<rel>``/``create_<rel>``
forwarding for every parent relationship.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

from sqlalchemy import Column, ForeignKey
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapper, object_session, relationship

from core.logging import get_logger
from inheritance.config import get_settings
from inheritance.delegation import DelegatedAttribute, DelegatedBuilder, LogicalSuperclass
from inheritance.errors import DeclarationError
from inheritance.record import RecordMixin
from inheritance.registry import InheritanceDeclaration, declarations_for, get_declaration, register
from inheritance.resolver import DelegationTable, build_delegation_table
from inheritance.schema import column_names, relationship_properties
from inheritance.typecheck import install_type_checks

logger = get_logger(__name__)

T = TypeVar("T", bound=type)


def camelize(name: str) -> str:
    """``product_line`` -> ``ProductLine``."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def _mapper_of(cls: type) -> Mapper:
    mapper = sa_inspect(cls, raiseerr=False)
    if not isinstance(mapper, Mapper):
        raise DeclarationError(f"{getattr(cls, '__name__', cls)!r} is not a mapped class")
    return mapper


def resolve_parent_type(child_mapper: Mapper, association_name: str) -> type:
    """Find the mapped class named after ``association_name`` in the child's registry."""
    wanted = camelize(association_name)
    candidates: List[type] = [
        mapper.class_ for mapper in child_mapper.registry.mappers if mapper.class_.__name__ == wanted
    ]
    if len(candidates) > 1:
        local = [klass for klass in candidates if klass.__module__ == child_mapper.class_.__module__]
        candidates = local if len(local) == 1 else candidates
    if not candidates:
        raise DeclarationError(
            f"Cannot resolve {association_name!r} on {child_mapper.class_.__name__}: no mapped class named {wanted!r}"
        )
    if len(candidates) > 1:
        raise DeclarationError(f"Ambiguous parent {wanted!r} for {child_mapper.class_.__name__}")
    return candidates[0]


def _schema_names(mapper: Mapper) -> Tuple[List[str], List[str]]:
    """Column and relationship keys of ``mapper`` without configuring mappers."""
    return column_names(mapper), [prop.key for prop in relationship_properties(mapper)]


def _native_names(cls: type, mapper: Mapper) -> Iterable[str]:
    return set(dir(cls)) | set(mapper.columns.keys())


def _belongs_to(cls: type, mapper: Mapper, association_name: str, parent_mapper: Mapper) -> str:
    """Register the child-to-parent many-to-one; returns the foreign key attribute name."""
    primary_key = parent_mapper.primary_key
    if len(primary_key) != 1:
        raise DeclarationError(f"{parent_mapper.class_.__name__} must have a single-column primary key")
    foreign_key = f"{association_name}_id"
    if foreign_key not in mapper.columns:
        setattr(cls, foreign_key, Column(ForeignKey(primary_key[0]), nullable=True, index=True))
    setattr(
        cls,
        association_name,
        relationship(parent_mapper.class_, foreign_keys=[mapper.columns[foreign_key]]),
    )
    return foreign_key


def _install_delegates(cls: type, table: DelegationTable) -> None:
    for entry in table.accessors():
        setattr(cls, entry.name, DelegatedAttribute(entry.target))
    for entry in table.builders():
        setattr(cls, entry.name, DelegatedBuilder(entry.builder, entry.target))


def declare_inheritance(cls: type, association_name: str, **options: Any) -> InheritanceDeclaration:
    """Apply ``inherits_from`` to an already mapped class and return its declaration."""
    mapper = _mapper_of(cls)
    if not issubclass(cls, RecordMixin):
        raise DeclarationError(f"{cls.__name__} must derive from a base that mixes in RecordMixin")
    existing = get_declaration(cls)
    if existing is not None and existing.child_type is cls:
        raise DeclarationError(f"{cls.__name__} already declares inherits_from")
    if hasattr(cls, association_name):
        raise DeclarationError(f"{cls.__name__}.{association_name} is already defined")

    parent_type = resolve_parent_type(mapper, association_name)
    if parent_type is cls:
        raise DeclarationError(f"{cls.__name__} cannot inherit from itself")
    parent_mapper = _mapper_of(parent_type)

    settings = get_settings()
    parent_columns, parent_relationships = _schema_names(parent_mapper)
    table = build_delegation_table(
        _native_names(cls, mapper),
        parent_columns,
        parent_relationships,
        discriminator=settings.discriminator,
    )

    foreign_key = _belongs_to(cls, mapper, association_name, parent_mapper)
    if settings.type_checks:
        install_type_checks(cls)
    cls.validates_associated(association_name)
    _install_delegates(cls, table)
    setattr(cls, "superclass", LogicalSuperclass(parent_type))

    declaration = InheritanceDeclaration(
        child_type=cls,
        association_name=association_name,
        parent_type=parent_type,
        foreign_key=foreign_key,
        discriminator=settings.discriminator,
        table=table,
        options=MappingProxyType(dict(options)),
    )
    setattr(cls, "__inheritance__", declaration)
    register(declaration)
    logger.info(
        "%s inherits from %s via %r (%d delegated names).",
        cls.__name__,
        parent_type.__name__,
        association_name,
        len(table),
    )
    return declaration


def inherits_from(association_name: str, **options: Any) -> Callable[[T], T]:
    """Class decorator declaring that the model extends the ``association_name`` table.

    ``options`` are kept on the declaration as given and are not interpreted.
    """

    def decorate(cls: T) -> T:
        declare_inheritance(cls, association_name, **options)
        return cls

    return decorate


def _child_type_named(parent_type: type, tag: str) -> Optional[Tuple[type, InheritanceDeclaration]]:
    """Mapped class called ``tag`` whose inherited declaration targets ``parent_type``.

    Subclasses of a declaring child qualify too: they tag their parents with
    their own class name.
    """
    for mapper in sa_inspect(parent_type).registry.mappers:
        candidate = mapper.class_
        if candidate.__name__ != tag:
            continue
        declaration = get_declaration(candidate)
        if declaration is not None and declaration.parent_type is parent_type:
            return candidate, declaration
    return None


def _subobject(self: Any) -> Any:
    parent_type = type(self)
    discriminators = sorted({decl.discriminator for decl in declarations_for(parent_type)})
    tag = next((getattr(self, name) for name in discriminators if getattr(self, name, None)), None)
    if not tag:
        return None
    found = _child_type_named(parent_type, tag)
    if found is None:
        raise DeclarationError(f"No {parent_type.__name__} subtype named {tag!r} declares inherits_from")
    session = object_session(self)
    if session is None or sa_inspect(self).identity is None:
        return None
    child, declaration = found
    return (
        session.query(child)
        .filter(getattr(child, declaration.association_name) == self)
        .one_or_none()
    )


def is_a_superclass(cls: T) -> T:
    """Class decorator giving a parent model a ``subobject`` property.

    ``subobject`` loads the child row that owns this parent, chosen by the
    discriminator value.
    """

    _mapper_of(cls)
    setattr(cls, "subobject", property(_subobject))
    return cls


__all__ = [
    "camelize",
    "resolve_parent_type",
    "declare_inheritance",
    "inherits_from",
    "is_a_superclass",
]
