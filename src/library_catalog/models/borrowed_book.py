"""Borrowed book (loan) record for the Library Catalog service."""

from datetime import date

from pydantic import Field

from .base import CamelModel, Entity


class BorrowedBook(Entity):
    """A loan of one book to one client."""

    borrow_date: date | None = Field(
        None,
        description="Day the book was handed out",
        examples=["2024-03-01"],
    )

    book_id: int | None = Field(None, description="Id of the borrowed book")

    client_id: int | None = Field(None, description="Id of the borrowing client")


class BorrowedBookPatch(CamelModel):
    """Merge-patch body for a loan."""

    id: int | None = None
    borrow_date: date | None = None
    book_id: int | None = None
    client_id: int | None = None
