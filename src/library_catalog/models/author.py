"""
Author record for the Library Catalog service.

The author side of the book/author relation is a plain list of book ids;
``add_book`` keeps both sides' id lists in step without either record holding
a reference to the other.
"""

from typing import TYPE_CHECKING

from pydantic import Field

from .base import CamelModel, Entity

if TYPE_CHECKING:
    from .book import Book


class Author(Entity):
    """An author of one or more books."""

    first_name: str = Field(
        ...,
        description="Given name of the author",
        min_length=1,
        max_length=50,
        examples=["Harper", "George"],
    )

    last_name: str = Field(
        ...,
        description="Family name of the author",
        min_length=1,
        max_length=50,
        examples=["Lee", "Orwell"],
    )

    book_ids: list[int] = Field(
        default_factory=list,
        description="Ids of the books written by this author; read-only, books own the link",
    )

    def add_book(self, book: "Book") -> "Author":
        """
        Associate a book with this author, updating both id lists.

        Raises:
            ValueError: If either record has not been persisted yet
        """
        if self.id is None or book.id is None:
            raise ValueError("Both author and book must be persisted before linking them")
        if book.id not in self.book_ids:
            self.book_ids.append(book.id)
        if self.id not in book.author_ids:
            book.author_ids.append(self.id)
        return self

    def remove_book(self, book: "Book") -> "Author":
        """Dissociate a book from this author, updating both id lists."""
        if book.id in self.book_ids:
            self.book_ids.remove(book.id)
        if self.id in book.author_ids:
            book.author_ids.remove(self.id)
        return self


class AuthorPatch(CamelModel):
    """Merge-patch body for an author; absent or null fields are left untouched."""

    id: int | None = None
    first_name: str | None = Field(None, min_length=1, max_length=50)
    last_name: str | None = Field(None, min_length=1, max_length=50)
