"""
Shared base for the Library Catalog entity records.

Entity records travel as camelCase JSON (``firstName``, ``publisherId``) but
are addressed by snake_case attribute names in Python. Equality is identity
based: two records are equal only when they are the same entity kind and both
carry the same non-null id.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Entity(CamelModel):
    """Base class for persisted entity records."""

    id: int | None = None

    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if type(other) is not type(self):
            return False
        return self.id is not None and other.id is not None and self.id == other.id

    def __hash__(self) -> int:
        # Stable across the transient -> persisted transition
        return hash(type(self).__name__)

    def __str__(self) -> str:
        fields = ", ".join(
            f"{name}={value!r}"
            for name, value in self.model_dump(exclude={"cover"}).items()
        )
        return f"{type(self).__name__}{{{fields}}}"
