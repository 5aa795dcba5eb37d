"""
Criteria classes: one optional filter per queryable field of an entity.

A criteria binds directly from list-endpoint query strings such as
``/api/books?name.contains=ring&copies.greaterThan=1&authorId.equals=3``.
Every field is optional; an empty criteria matches every row. Unknown
fields and values of the wrong type are rejected when the criteria is built.
"""

from typing import Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .filters import IntegerFilter, LocalDateFilter, LongFilter, StringFilter


class Criteria(BaseModel):
    """Base class for entity criteria."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    distinct: bool | None = None

    def copy(self) -> Self:  # type: ignore[override]
        """Return a deep copy; mutating it never affects this criteria."""
        return self.model_copy(deep=True)

    def filter_items(self):
        """Yield ``(field_name, filter)`` for every set, non-empty filter in declaration order."""
        for name in type(self).model_fields:
            if name == "distinct":
                continue
            value = getattr(self, name)
            if value is not None and not value.is_empty():
                yield name, value

    def __str__(self) -> str:
        parts = ", ".join(f"{name}={flt}" for name, flt in self.filter_items())
        if self.distinct is not None:
            parts = f"{parts}, distinct={self.distinct}" if parts else f"distinct={self.distinct}"
        return f"{type(self).__name__}{{{parts}}}"


class AuthorCriteria(Criteria):
    """Filters for ``/api/authors``."""

    id: LongFilter | None = None
    first_name: StringFilter | None = None
    last_name: StringFilter | None = None
    book_id: LongFilter | None = None


class BookCriteria(Criteria):
    """Filters for ``/api/books``. ``publish_year`` is free text, so it filters as a string."""

    id: LongFilter | None = None
    isbn: StringFilter | None = None
    name: StringFilter | None = None
    publish_year: StringFilter | None = None
    copies: IntegerFilter | None = None
    publisher_id: LongFilter | None = None
    author_id: LongFilter | None = None


class PublisherCriteria(Criteria):
    """Filters for ``/api/publishers``."""

    id: LongFilter | None = None
    name: StringFilter | None = None


class ClientCriteria(Criteria):
    """Filters for ``/api/clients``."""

    id: LongFilter | None = None
    first_name: StringFilter | None = None
    last_name: StringFilter | None = None
    email: StringFilter | None = None
    address: StringFilter | None = None
    phone: StringFilter | None = None


class BorrowedBookCriteria(Criteria):
    """Filters for ``/api/borrowed-books``."""

    id: LongFilter | None = None
    borrow_date: LocalDateFilter | None = None
    book_id: LongFilter | None = None
    client_id: LongFilter | None = None
