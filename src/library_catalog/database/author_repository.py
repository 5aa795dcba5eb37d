"""
Author repository for the Library Catalog service.

The book/author relation is owned by books, so ``book_ids`` on an author
record is read-only here: it is loaded on every read and ignored on writes.
Link an author to a book by saving the book with the author's id in its
``author_ids``.
"""

from collections.abc import Sequence

from ..database.schema import Author as AuthorDB
from ..database.schema import book_author
from ..models.author import Author as AuthorModel
from ..models.author import AuthorPatch
from .repository import BaseRepository, load_links, remove_links


class AuthorRepository(BaseRepository[AuthorDB, AuthorModel, AuthorPatch]):
    """CRUD access to authors."""

    @property
    def model_class(self):
        return AuthorDB

    @property
    def response_schema(self):
        return AuthorModel

    def to_response_models(self, db_objs: Sequence[AuthorDB]) -> list[AuthorModel]:
        books = load_links(
            self.session, book_author, "author_id", (author.id for author in db_objs), "book_id"
        )
        return [
            self._to_response_model(author, book_ids=books[author.id]) for author in db_objs
        ]

    def _delete_links(self, entity_id: int) -> None:
        remove_links(self.session, book_author, "author_id", entity_id)
