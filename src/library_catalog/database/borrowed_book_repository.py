"""
Borrowed book repository for the Library Catalog service.

A loan references its book and client by id. Both references are unique, so
saving a second loan for the same book (or the same client) raises
``DuplicateError``.
"""

from ..database.schema import BorrowedBook as BorrowedBookDB
from ..models.borrowed_book import BorrowedBook as BorrowedBookModel
from ..models.borrowed_book import BorrowedBookPatch
from .repository import BaseRepository


class BorrowedBookRepository(
    BaseRepository[BorrowedBookDB, BorrowedBookModel, BorrowedBookPatch]
):
    """CRUD access to loans."""

    @property
    def model_class(self):
        return BorrowedBookDB

    @property
    def response_schema(self):
        return BorrowedBookModel
