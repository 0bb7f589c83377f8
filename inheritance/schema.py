"""Schema introspection that does not trigger mapper configuration."""

from __future__ import annotations

from typing import List

from sqlalchemy.orm import Mapper, RelationshipProperty


def column_names(mapper: Mapper) -> List[str]:
    return list(mapper.columns.keys())


def relationship_properties(mapper: Mapper) -> List[RelationshipProperty]:
    """Relationships visible on ``mapper``, including inherited ones, in declaration order."""
    columns = set(column_names(mapper))
    found: List[RelationshipProperty] = []
    for key in mapper.all_orm_descriptors.keys():
        if key in columns or not mapper.has_property(key):
            continue
        prop = mapper.get_property(key)
        if isinstance(prop, RelationshipProperty):
            found.append(prop)
    return found


__all__ = ["column_names", "relationship_properties"]
