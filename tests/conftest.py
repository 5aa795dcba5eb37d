"""Test configuration and fixtures for the Library Catalog service.

Every test gets its own in-memory SQLite database (one shared connection, so
the data survives across sessions) and a freshly loaded configuration.
"""

import os
from collections.abc import Generator
from dataclasses import dataclass, field
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from library_catalog.api import create_app
from library_catalog.config import reset_config
from library_catalog.database import (
    AuthorRepository,
    BookRepository,
    BorrowedBookRepository,
    ClientRepository,
    DatabaseManager,
    PublisherRepository,
)
from library_catalog.models import Author, Book, BorrowedBook, Client, Publisher
from library_catalog.observability import ObservabilityConfig, initialize_observability


@pytest.fixture(scope="session", autouse=True)
def observability() -> None:
    """Configure Logfire locally: spans are created but never exported."""
    initialize_observability(
        ObservabilityConfig(enabled=True, send_to_logfire=False, console_output=False)
    )


# === Configuration Fixtures ===


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None, None, None]:
    """Run each test without LIBRARY_CATALOG_* variables and with a fresh config."""
    original_env = os.environ.copy()
    for key in list(os.environ):
        if key.startswith("LIBRARY_CATALOG_"):
            del os.environ[key]
    os.environ["LOGFIRE_SEND"] = "false"
    reset_config()

    yield

    os.environ.clear()
    os.environ.update(original_env)
    reset_config()


# === Database Fixtures ===


@pytest.fixture
def db_manager() -> Generator[DatabaseManager, None, None]:
    manager = DatabaseManager("sqlite://")
    manager.init_database()
    yield manager
    manager.close()


@pytest.fixture
def session(db_manager: DatabaseManager) -> Generator[Session, None, None]:
    session = db_manager.create_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_manager: DatabaseManager) -> Generator[TestClient, None, None]:
    """HTTP client for the REST API, bound to the test database."""
    with TestClient(create_app(db_manager)) as test_client:
        yield test_client


# === Sample Catalog ===


@dataclass
class Catalog:
    """A small catalog with known contents, for query tests."""

    authors: dict[str, Author] = field(default_factory=dict)
    publishers: dict[str, Publisher] = field(default_factory=dict)
    books: dict[str, Book] = field(default_factory=dict)
    clients: dict[str, Client] = field(default_factory=dict)
    loans: dict[str, BorrowedBook] = field(default_factory=dict)


@pytest.fixture
def catalog(session: Session) -> Catalog:
    """
    Four authors, two publishers, four books, two clients, two loans.

    - tolkien wrote fellowship; pratchett wrote good_omens and colour;
      gaiman wrote good_omens; le_guin wrote nothing; neverwhere has no
      author link
    - fellowship is published by unwin, good_omens by gollancz
    - ada has an email, alan does not
    """
    authors = AuthorRepository(session)
    publishers = PublisherRepository(session)
    books = BookRepository(session)
    clients = ClientRepository(session)
    loans = BorrowedBookRepository(session)

    result = Catalog()
    result.authors = {
        "tolkien": authors.save(Author(first_name="John Ronald", last_name="Tolkien")),
        "pratchett": authors.save(Author(first_name="Terry", last_name="Pratchett")),
        "gaiman": authors.save(Author(first_name="Neil", last_name="Gaiman")),
        "le_guin": authors.save(Author(first_name="Ursula", last_name="Le Guin")),
    }
    result.publishers = {
        "unwin": publishers.save(Publisher(name="Allen & Unwin")),
        "gollancz": publishers.save(Publisher(name="Gollancz")),
    }
    result.books = {
        "fellowship": books.save(
            Book(
                isbn="9780261103573",
                name="The Fellowship of the Ring",
                publish_year="1954",
                copies=3,
                publisher_id=result.publishers["unwin"].id,
                author_ids=[result.authors["tolkien"].id],
            )
        ),
        "good_omens": books.save(
            Book(
                isbn="9780552166591",
                name="Good Omens",
                publish_year="1990",
                copies=1,
                publisher_id=result.publishers["gollancz"].id,
                author_ids=[result.authors["pratchett"].id, result.authors["gaiman"].id],
            )
        ),
        "colour": books.save(
            Book(
                isbn="9780552124751",
                name="The Colour of Magic",
                publish_year="1983",
                copies=5,
                author_ids=[result.authors["pratchett"].id],
            )
        ),
        "neverwhere": books.save(
            Book(isbn="9780380789030", name="Neverwhere", publish_year="1996", copies=2)
        ),
    }
    result.clients = {
        "ada": clients.save(
            Client(
                first_name="Ada",
                last_name="Lovelace",
                email="ada@example.org",
                address="12 St James's Square",
                phone="+44 20 7946 0000",
            )
        ),
        "alan": clients.save(Client(first_name="Alan", last_name="Turing")),
    }
    result.loans = {
        "ada_fellowship": loans.save(
            BorrowedBook(
                borrow_date=date(2024, 3, 1),
                book_id=result.books["fellowship"].id,
                client_id=result.clients["ada"].id,
            )
        ),
        "alan_colour": loans.save(
            BorrowedBook(
                borrow_date=date(2024, 4, 15),
                book_id=result.books["colour"].id,
                client_id=result.clients["alan"].id,
            )
        ),
    }
    return result
