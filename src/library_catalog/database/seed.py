"""
Sample data for the Library Catalog service.

Generates a deterministic catalog with Faker: authors, publishers, books
(each with one to three authors), clients and loans. The same ``seed``
always produces the same rows, which keeps demo databases reproducible.

Unique foreign keys shape the data: a publisher is attached to at most one
book, and a book or a client appears in at most one loan.
"""

import logging
import random
from datetime import date

from faker import Faker
from sqlalchemy import insert
from sqlalchemy.orm import Session

from .schema import Author, Book, BorrowedBook, Client, Publisher, book_author

logger = logging.getLogger(__name__)

# Fixed so that generated rows do not depend on the current date
LATEST_PUBLISH_YEAR = 2024
LOAN_PERIOD = (date(2024, 1, 1), date(2024, 12, 31))


def generate_isbn13(rng: random.Random) -> str:
    """Generate a valid ISBN-13 number."""
    body = f"978{rng.randint(0, 9)}{rng.randint(1000, 9999)}{rng.randint(1000, 9999)}"
    total = sum(int(digit) * (3 if i % 2 else 1) for i, digit in enumerate(body))
    return f"{body}{(10 - total % 10) % 10}"


def generate_authors(fake: Faker, count: int) -> list[Author]:
    return [
        Author(first_name=fake.first_name()[:50], last_name=fake.last_name()[:50])
        for _ in range(count)
    ]


def generate_publishers(fake: Faker, count: int) -> list[Publisher]:
    return [Publisher(name=fake.unique.company()[:100]) for _ in range(count)]


def generate_books(
    fake: Faker, rng: random.Random, count: int, publishers: list[Publisher]
) -> list[Book]:
    """Books with unique ISBNs; the first ``len(publishers)`` books get a publisher."""
    isbns: set[str] = set()
    books = []
    for i in range(count):
        isbn = generate_isbn13(rng)
        while isbn in isbns:
            isbn = generate_isbn13(rng)
        isbns.add(isbn)

        books.append(
            Book(
                isbn=isbn,
                name=fake.catch_phrase().title()[:100],
                publish_year=str(rng.randint(1850, LATEST_PUBLISH_YEAR)),
                copies=rng.randint(1, 10),
                publisher_id=publishers[i].id if i < len(publishers) else None,
            )
        )
    return books


def generate_clients(fake: Faker, count: int) -> list[Client]:
    return [
        Client(
            first_name=fake.first_name()[:50],
            last_name=fake.last_name()[:50],
            email=fake.unique.email()[:50],
            address=fake.street_address()[:50],
            phone=fake.numerify("+1 ###-###-####"),
        )
        for _ in range(count)
    ]


def generate_loans(
    fake: Faker, rng: random.Random, books: list[Book], clients: list[Client], count: int
) -> list[BorrowedBook]:
    """Loans pairing distinct books with distinct clients."""
    count = min(count, len(books), len(clients))
    loaned_books = rng.sample(books, count)
    borrowers = rng.sample(clients, count)
    return [
        BorrowedBook(
            borrow_date=fake.date_between(start_date=LOAN_PERIOD[0], end_date=LOAN_PERIOD[1]),
            book_id=book.id,
            client_id=client.id,
        )
        for book, client in zip(loaned_books, borrowers, strict=True)
    ]


def seed_database(
    session: Session,
    num_authors: int = 20,
    num_books: int = 40,
    num_clients: int = 15,
    seed: int = 42,
) -> dict[str, int]:
    """
    Add a sample catalog to ``session``.

    The rows are flushed, not committed; run this inside
    ``DatabaseManager.session_scope()`` to persist them.

    Returns:
        Number of rows created per table
    """
    fake = Faker()
    fake.seed_instance(seed)
    rng = random.Random(seed)

    authors = generate_authors(fake, num_authors)
    publishers = generate_publishers(fake, num_books // 2)
    session.add_all(authors + publishers)
    session.flush()

    books = generate_books(fake, rng, num_books, publishers)
    clients = generate_clients(fake, num_clients)
    session.add_all(books + clients)
    session.flush()

    links = []
    if authors:
        for book in books:
            for author in rng.sample(authors, rng.randint(1, min(3, len(authors)))):
                links.append({"book_id": book.id, "author_id": author.id})
    if links:
        session.execute(insert(book_author), links)

    loans = generate_loans(fake, rng, books, clients, num_clients // 2)
    session.add_all(loans)
    session.flush()

    counts = {
        "author": len(authors),
        "publisher": len(publishers),
        "book": len(books),
        "client": len(clients),
        "borrowed_book": len(loans),
        "rel_book__author": len(links),
    }
    logger.info("Seeded sample data: %s", counts)
    return counts
