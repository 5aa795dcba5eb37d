"""
Book repository for the Library Catalog service.

Books own the book/author relation: ``save`` replaces the book's rows in the
association table with its ``author_ids``, and a merge patch does so only
when it carries ``authorIds``. Reads fill ``author_ids`` with one extra query
per batch of books.
"""

from collections.abc import Sequence
from typing import Any

from ..database.schema import Book as BookDB
from ..database.schema import book_author
from ..models.book import Book as BookModel
from ..models.book import BookPatch
from .repository import BaseRepository, load_links, remove_links, replace_links


class BookRepository(BaseRepository[BookDB, BookModel, BookPatch]):
    """CRUD access to books and their author links."""

    @property
    def model_class(self):
        return BookDB

    @property
    def response_schema(self):
        return BookModel

    def to_response_models(self, db_objs: Sequence[BookDB]) -> list[BookModel]:
        authors = load_links(
            self.session, book_author, "book_id", (book.id for book in db_objs), "author_id"
        )
        return [self._to_response_model(book, author_ids=authors[book.id]) for book in db_objs]

    def _write_links(self, entity_id: int, values: dict[str, Any]) -> None:
        author_ids = values.get("author_ids")
        if author_ids is not None:
            replace_links(self.session, book_author, "book_id", entity_id, "author_id", author_ids)

    def _delete_links(self, entity_id: int) -> None:
        remove_links(self.session, book_author, "book_id", entity_id)
