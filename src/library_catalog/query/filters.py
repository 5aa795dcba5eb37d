"""
Typed field filters.

A filter describes the constraint on one field, independent of any storage
engine: ``StringFilter(contains="tolk")`` or
``IntegerFilter(greater_than=1, less_than=5)``. Operators are ANDed together;
a filter with no operator set matches everything.

Operator names are camelCase on the wire (``notEquals``, ``greaterThan``,
``doesNotContain``), matching the ``<field>.<operator>=<value>`` query
string syntax. Operators that do not apply to a filter's type cannot be set:
``BooleanFilter(greater_than=True)`` is a validation error.
"""

from datetime import date
from typing import Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class Filter(BaseModel, Generic[T]):
    """
    Equality, set membership and presence operators.

    Attributes:
        equals: field == value
        not_equals: field != value
        in_: field is one of the values; an empty list matches nothing
        not_in: field is none of the values; an empty list matches everything
        specified: True for non-null values, False for nulls
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    equals: T | None = None
    not_equals: T | None = None
    in_: list[T] | None = Field(default=None, alias="in")
    not_in: list[T] | None = Field(default=None, alias="notIn")
    specified: bool | None = None

    def is_empty(self) -> bool:
        """True when no operator is set."""
        return all(getattr(self, name) is None for name in type(self).model_fields)

    def copy(self) -> Self:  # type: ignore[override]
        """Return an independent deep copy."""
        return self.model_copy(deep=True)

    def __str__(self) -> str:
        parts = ", ".join(
            f"{name}={value!r}"
            for name, value in self.model_dump(by_alias=True, exclude_none=True).items()
        )
        return f"{type(self).__name__}[{parts}]"


class RangeFilter(Filter[T], Generic[T]):
    """Filter for ordered values: adds the comparison operators."""

    greater_than: T | None = None
    greater_than_or_equal: T | None = None
    less_than: T | None = None
    less_than_or_equal: T | None = None


class LongFilter(RangeFilter[int]):
    """Filter for 64-bit integer columns, ids included."""


class IntegerFilter(RangeFilter[int]):
    """Filter for integer columns."""


class LocalDateFilter(RangeFilter[date]):
    """Filter for calendar date columns; values are ISO ``YYYY-MM-DD``."""


class BooleanFilter(Filter[bool]):
    """Filter for boolean columns; equality, set and presence only."""


class StringFilter(Filter[str]):
    """
    Filter for text columns.

    ``contains`` and ``does_not_contain`` are case-insensitive substring
    tests; the equality operators compare exactly.
    """

    contains: str | None = None
    does_not_contain: str | None = None
