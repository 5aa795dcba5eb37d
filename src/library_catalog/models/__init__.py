"""
Library Catalog entity records.

Pydantic models used by the repositories, the query services and the REST
layer. Each entity has a full record (used for create and replace) and a
``*Patch`` model (used for merge-patch updates).
"""

from .author import Author, AuthorPatch
from .base import CamelModel, Entity
from .book import Book, BookPatch
from .borrowed_book import BorrowedBook, BorrowedBookPatch
from .client import Client, ClientPatch
from .publisher import Publisher, PublisherPatch

__all__ = [
    "Author",
    "AuthorPatch",
    "Book",
    "BookPatch",
    "BorrowedBook",
    "BorrowedBookPatch",
    "CamelModel",
    "Client",
    "ClientPatch",
    "Entity",
    "Publisher",
    "PublisherPatch",
]
