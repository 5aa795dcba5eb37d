"""
Database package for the Library Catalog service.

This package provides:
- SQLAlchemy schema definitions (schema.py)
- Session management and connection handling (session.py)
- One repository per entity, the CRUD service of that entity
- Deterministic sample data (seed.py)
"""

from .author_repository import AuthorRepository
from .book_repository import BookRepository
from .borrowed_book_repository import BorrowedBookRepository
from .client_repository import ClientRepository
from .publisher_repository import PublisherRepository
from .repository import (
    BaseRepository,
    DuplicateError,
    InvalidPageRequestError,
    InvalidReferenceError,
    NotFoundError,
    PaginatedResponse,
    PaginationParams,
    RepositoryException,
    SortOrder,
)
from .schema import (
    Author,
    Base,
    Book,
    BorrowedBook,
    Client,
    Publisher,
    book_author,
)
from .seed import seed_database
from .session import (
    DatabaseManager,
    commit_or_rollback,
    get_db_manager,
    reset_db_manager,
    run_query,
)

__all__ = [
    "Author",
    "AuthorRepository",
    "Base",
    "BaseRepository",
    "Book",
    "BookRepository",
    "BorrowedBook",
    "BorrowedBookRepository",
    "Client",
    "ClientRepository",
    "DatabaseManager",
    "DuplicateError",
    "InvalidPageRequestError",
    "InvalidReferenceError",
    "NotFoundError",
    "PaginatedResponse",
    "PaginationParams",
    "Publisher",
    "PublisherRepository",
    "RepositoryException",
    "SortOrder",
    "book_author",
    "commit_or_rollback",
    "get_db_manager",
    "reset_db_manager",
    "run_query",
    "seed_database",
]
