"""
Book record for the Library Catalog service.

Books own the book/author association: saving a book writes its
``author_ids`` to the association table. The cover image travels as base64
in JSON and as raw bytes everywhere else.
"""

import base64
import binascii
from typing import TYPE_CHECKING, Any

from pydantic import Field, field_serializer, field_validator

from .base import CamelModel, Entity

if TYPE_CHECKING:
    from .author import Author


def _decode_cover(v: Any) -> Any:
    if isinstance(v, str):
        try:
            return base64.b64decode(v, validate=True)
        except binascii.Error as e:
            raise ValueError("cover must be base64 encoded") from e
    return v


class Book(Entity):
    """A catalog entry."""

    isbn: str = Field(
        ...,
        description="ISBN of the edition",
        min_length=5,
        max_length=13,
        examples=["9780061120084"],
    )

    name: str = Field(
        ...,
        description="Title of the book",
        min_length=1,
        max_length=100,
        examples=["To Kill a Mockingbird"],
    )

    publish_year: str = Field(
        ...,
        description="Year (or free-form period) of publication",
        min_length=4,
        max_length=50,
        examples=["1960", "circa 1850"],
    )

    copies: int = Field(
        ...,
        description="Number of copies owned by the library",
        examples=[1, 3],
    )

    cover: bytes | None = Field(
        None,
        description="Cover image, base64 encoded in JSON",
    )

    cover_content_type: str | None = Field(
        None,
        description="MIME type of the cover image",
        max_length=255,
        examples=["image/png"],
    )

    publisher_id: int | None = Field(
        None,
        description="Id of the publisher of this book",
    )

    author_ids: list[int] = Field(
        default_factory=list,
        description="Ids of the authors of this book",
    )

    @field_validator("cover", mode="before")
    @classmethod
    def decode_cover(cls, v: Any) -> Any:
        """Accept base64 text for the cover image."""
        return _decode_cover(v)

    @field_serializer("cover", when_used="json-unless-none")
    def encode_cover(self, v: bytes) -> str:
        return base64.b64encode(v).decode("ascii")

    def add_author(self, author: "Author") -> "Book":
        """Associate an author with this book, updating both id lists."""
        author.add_book(self)
        return self

    def remove_author(self, author: "Author") -> "Book":
        """Dissociate an author from this book, updating both id lists."""
        author.remove_book(self)
        return self


class BookPatch(CamelModel):
    """Merge-patch body for a book; absent or null fields are left untouched."""

    id: int | None = None
    isbn: str | None = Field(None, min_length=5, max_length=13)
    name: str | None = Field(None, min_length=1, max_length=100)
    publish_year: str | None = Field(None, min_length=4, max_length=50)
    copies: int | None = None
    cover: bytes | None = None
    cover_content_type: str | None = Field(None, max_length=255)
    publisher_id: int | None = None
    author_ids: list[int] | None = None

    @field_validator("cover", mode="before")
    @classmethod
    def decode_cover(cls, v: Any) -> Any:
        return _decode_cover(v)
