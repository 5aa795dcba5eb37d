"""
SQLAlchemy database schema for the Library Catalog service.

The tables mirror the Pydantic records in ``library_catalog.models``. The
book/author many-to-many relation is kept in the ``rel_book__author``
association table and is read and written by id only; no ORM relationship
objects point back and forth between books and authors.
"""

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    Table,
)
from sqlalchemy.orm import declarative_base

# Base class for all SQLAlchemy models
Base = declarative_base()


# Owned by books; rows disappear with either side
book_author = Table(
    "rel_book__author",
    Base.metadata,
    Column("book_id", Integer, ForeignKey("book.id", ondelete="CASCADE"), primary_key=True),
    Column("author_id", Integer, ForeignKey("author.id", ondelete="CASCADE"), primary_key=True),
    Index("idx_rel_book_author_author", "author_id"),
)


class Author(Base):
    """Authors table."""

    __tablename__ = "author"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False, index=True)


class Publisher(Base):
    """Publishers table - one publisher per book at most."""

    __tablename__ = "publisher"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)


class Book(Base):
    """
    Books table - the library's catalog.

    ``publisher_id`` is a unique foreign key: a publisher row belongs to at
    most one book. The cover image is stored inline next to its content type.
    """

    __tablename__ = "book"

    id = Column(Integer, primary_key=True, autoincrement=True)
    isbn = Column(String(13), nullable=False, unique=True)
    name = Column(String(100), nullable=False, index=True)
    publish_year = Column(String(50), nullable=False)
    copies = Column(Integer, nullable=False)
    cover = Column(LargeBinary, nullable=True)
    cover_content_type = Column(String(255), nullable=True)
    publisher_id = Column(
        Integer, ForeignKey("publisher.id", ondelete="SET NULL"), nullable=True, unique=True
    )


class Client(Base):
    """Clients table - library members."""

    __tablename__ = "client"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False, index=True)
    email = Column(String(50), nullable=True, unique=True)
    address = Column(String(50), nullable=True)
    phone = Column(String(20), nullable=True)


class BorrowedBook(Base):
    """
    Borrowed books table - one loan links one book to one client.

    Both foreign keys are unique, matching the one-to-one mapping of a loan.
    """

    __tablename__ = "borrowed_book"

    id = Column(Integer, primary_key=True, autoincrement=True)
    borrow_date = Column(Date, nullable=True)
    book_id = Column(
        Integer, ForeignKey("book.id", ondelete="SET NULL"), nullable=True, unique=True
    )
    client_id = Column(
        Integer, ForeignKey("client.id", ondelete="SET NULL"), nullable=True, unique=True
    )

    __table_args__ = (Index("idx_borrowed_book_date", "borrow_date"),)
