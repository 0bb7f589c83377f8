"""Declarative base mixin supplying validation, builders and column lookup."""

from __future__ import annotations

from functools import partial
from typing import Any, Iterator, List, Mapping, Optional

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import RelationshipProperty, object_session

from inheritance.config import get_settings
from inheritance.delegation import is_new_record
from inheritance.errors import InheritanceError
from inheritance.registry import get_declaration
from inheritance.resolver import BUILDER_VERBS
from inheritance.typecheck import install_type_checks
from inheritance.validation import Errors, Validator, associated_validator, presence_validator


def _relationship(record: Any, name: str) -> Optional[RelationshipProperty]:
    mapper = sa_inspect(type(record), raiseerr=False)
    if mapper is None or not mapper.has_property(name):
        return None
    prop = mapper.get_property(name)
    return prop if isinstance(prop, RelationshipProperty) else None


def build_association(record: Any, name: str, attributes: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Any:
    """Construct the target of relationship ``name`` and attach it to ``record``."""
    prop = _relationship(record, name)
    if prop is None:
        raise AttributeError(f"{type(record).__name__} has no relationship {name!r}")
    values = dict(attributes or {}, **kwargs)
    associate = prop.mapper.class_(**values)
    if prop.uselist:
        collection = getattr(record, name)
        if hasattr(collection, "append"):
            collection.append(associate)
        else:
            collection.add(associate)
    else:
        setattr(record, name, associate)
    return associate


def create_association(record: Any, name: str, attributes: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Any:
    """Build the associate and flush it through the record's session."""
    session = object_session(record)
    if session is None:
        raise InheritanceError(f"{type(record).__name__} is not attached to a session; cannot create {name!r}")
    associate = build_association(record, name, attributes, **kwargs)
    session.add(associate)
    session.flush()
    return associate


_BUILDERS = {"build": build_association, "create": create_association}


def record_constructor(self: Any, **kwargs: Any) -> None:
    """Keyword constructor that assigns the parent association before anything else.

    Delegated keywords such as ``price=`` then land on the given parent instead
    of on a blank one that the association keyword would replace.
    """
    cls_ = type(self)
    items = list(kwargs.items())
    declaration = get_declaration(cls_)
    if declaration is not None:
        items.sort(key=lambda item: item[0] != declaration.association_name)
    for key, value in items:
        if not hasattr(cls_, key):
            raise TypeError(f"{key!r} is an invalid keyword argument for {cls_.__name__}")
        setattr(self, key, value)


record_constructor.__name__ = "__init__"


class RecordMixin:
    """Mixed into the declarative base shared by every model.

    Provides an ``errors`` collection with class-level validators,
    ``build_<relationship>``/``create_<relationship>`` for every mapped
    relationship, and inheritance-aware column lookup.
    """

    @property
    def errors(self) -> Errors:
        errors = self.__dict__.get("_errors")
        if errors is None:
            errors = Errors()
            self.__dict__["_errors"] = errors
        return errors

    @property
    def is_new_record(self) -> bool:
        return is_new_record(self)

    @property
    def is_valid(self) -> bool:
        return self.validate()

    def validate(self) -> bool:
        errors = self.errors
        errors.clear()
        for validator in type(self).validators():
            validator(self)
        return not errors

    @classmethod
    def validators(cls) -> Iterator[Validator]:
        for klass in reversed(cls.__mro__):
            yield from klass.__dict__.get("_validators", ())

    @classmethod
    def add_validator(cls, validator: Validator) -> Validator:
        own: List[Validator] = list(cls.__dict__.get("_validators", ()))
        own.append(validator)
        setattr(cls, "_validators", tuple(own))
        return validator

    @classmethod
    def validates_presence_of(cls, *names: str) -> None:
        cls.add_validator(presence_validator(*names))

    @classmethod
    def validates_associated(cls, *names: str) -> None:
        cls.add_validator(associated_validator(*names))

    @classmethod
    def column_for_attribute(cls, name: str):
        """Column backing ``name``: the model's own first, then its parent table's."""
        column = sa_inspect(cls).columns.get(name)
        if column is not None:
            return column
        declaration = get_declaration(cls)
        if declaration is None:
            return None
        return sa_inspect(declaration.parent_type).columns.get(name)

    def __init_subclass__(cls, **kw: Any) -> None:
        super().__init_subclass__(**kw)
        # a declarative base gets its registry's default constructor; swap in ours
        registry = cls.__dict__.get("registry")
        if registry is not None and cls.__dict__.get("__init__") is getattr(registry, "constructor", None):
            cls.__init__ = record_constructor

    @classmethod
    def __declare_first__(cls) -> None:
        if get_settings().type_checks:
            install_type_checks(cls)

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("_"):
            verb, _, relationship = name.partition("_")
            if verb in BUILDER_VERBS and relationship and _relationship(self, relationship) is not None:
                return partial(_BUILDERS[verb], self, relationship)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")


__all__ = ["RecordMixin", "build_association", "create_association", "record_constructor"]
