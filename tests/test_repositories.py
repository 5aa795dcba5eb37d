"""
Tests for the repositories (the CRUD services).

Covers insert/replace, merge-patch semantics, deletion and the id-based
book/author links.
"""

from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.pool import StaticPool

from library_catalog.database import (
    AuthorRepository,
    BookRepository,
    BorrowedBookRepository,
    ClientRepository,
    DatabaseManager,
    DuplicateError,
    InvalidPageRequestError,
    InvalidReferenceError,
    NotFoundError,
    PaginationParams,
    PublisherRepository,
    SortOrder,
)
from library_catalog.database.schema import Publisher as PublisherRow
from library_catalog.models import (
    Author,
    AuthorPatch,
    Book,
    BookPatch,
    BorrowedBook,
    Client,
    ClientPatch,
    Publisher,
    PublisherPatch,
)


@pytest.fixture
def publishers(session):
    return PublisherRepository(session)


@pytest.fixture
def books(session):
    return BookRepository(session)


@pytest.fixture
def authors(session):
    return AuthorRepository(session)


def make_book(**overrides) -> Book:
    values = {"isbn": "9780441013593", "name": "Dune", "publish_year": "1965", "copies": 2}
    values.update(overrides)
    return Book(**values)


class TestSave:
    def test_insert_assigns_id(self, publishers):
        saved = publishers.save(Publisher(name="Chilton Books"))

        assert saved.id is not None
        assert publishers.find_one(saved.id).name == "Chilton Books"

    def test_replace_overwrites_every_column(self, books):
        saved = books.save(make_book(cover_content_type="image/png", cover=b"\x89PNG"))

        replaced = books.save(
            Book(id=saved.id, isbn="9780441013593", name="Dune", publish_year="1965", copies=7)
        )

        assert replaced.copies == 7
        assert replaced.cover is None
        assert replaced.cover_content_type is None

    def test_insert_with_unknown_id_keeps_it(self, publishers):
        saved = publishers.save(Publisher(id=42, name="Ace"))

        assert saved.id == 42
        assert publishers.exists(42)

    def test_unique_violation(self, publishers):
        publishers.save(Publisher(name="Ace"))

        with pytest.raises(DuplicateError):
            publishers.save(Publisher(name="Ace"))

        # Session is usable after the rollback
        assert publishers.find_all().total == 1

    def test_unknown_foreign_key(self, books):
        with pytest.raises(InvalidReferenceError):
            books.save(make_book(publisher_id=999))

        assert books.find_all().total == 0

    def test_unknown_author_id(self, books):
        with pytest.raises(InvalidReferenceError):
            books.save(make_book(author_ids=[999]))

        assert books.find_all().total == 0

    def test_cover_round_trips_as_bytes(self, books):
        saved = books.save(make_book(cover=b"\x00\x01binary", cover_content_type="image/png"))

        assert books.find_one(saved.id).cover == b"\x00\x01binary"


class TestPartialUpdate:
    def test_only_set_fields_change(self, session):
        clients = ClientRepository(session)
        saved = clients.save(
            Client(first_name="Ada", last_name="Lovelace", email="ada@example.org", phone="1")
        )

        updated = clients.partial_update(ClientPatch(id=saved.id, phone="2", email=None))

        assert updated.phone == "2"
        assert updated.email == "ada@example.org"
        assert updated.first_name == "Ada"

    def test_idempotent(self, publishers):
        saved = publishers.save(Publisher(name="Ace"))
        patch = PublisherPatch(id=saved.id, name="Ace Books")

        once = publishers.partial_update(patch)
        twice = publishers.partial_update(patch)

        assert once.model_dump() == twice.model_dump()
        assert publishers.find_one(saved.id).name == "Ace Books"

    def test_missing_id(self, publishers):
        with pytest.raises(NotFoundError):
            publishers.partial_update(PublisherPatch(id=12345, name="Nobody"))

    def test_null_id(self, publishers):
        with pytest.raises(NotFoundError):
            publishers.partial_update(PublisherPatch(name="Nobody"))

    def test_author_ids_left_alone_unless_sent(self, books, authors):
        author = authors.save(Author(first_name="Frank", last_name="Herbert"))
        saved = books.save(make_book(author_ids=[author.id]))

        renamed = books.partial_update(BookPatch(id=saved.id, name="Dune Messiah"))
        unlinked = books.partial_update(BookPatch(id=saved.id, author_ids=[]))

        assert renamed.author_ids == [author.id]
        assert unlinked.author_ids == []

    def test_author_patch_changes_name(self, authors):
        saved = authors.save(Author(first_name="Frank", last_name="Herbert"))

        updated = authors.partial_update(AuthorPatch(id=saved.id, first_name="F."))

        assert (updated.first_name, updated.last_name) == ("F.", "Herbert")


class TestReads:
    def test_find_one_missing(self, publishers):
        assert publishers.find_one(1) is None

    def test_find_all_pages_and_sorts(self, publishers):
        for name in ["Tor", "Ace", "Orbit"]:
            publishers.save(Publisher(name=name))

        page = publishers.find_all(
            PaginationParams(page=0, page_size=2, sort=[SortOrder.parse("name,asc")])
        )

        assert [p.name for p in page.items] == ["Ace", "Orbit"]
        assert page.total == 3
        assert page.has_next

    @pytest.mark.parametrize(
        "pagination",
        [
            PaginationParams(page=-1),
            PaginationParams(page_size=0),
            PaginationParams(sort=[SortOrder(property="genre")]),
        ],
    )
    def test_invalid_pagination(self, publishers, pagination):
        with pytest.raises(InvalidPageRequestError):
            publishers.find_all(pagination)


class TestDelete:
    def test_delete(self, publishers):
        saved = publishers.save(Publisher(name="Ace"))

        assert publishers.delete(saved.id) is True
        assert publishers.find_one(saved.id) is None

    def test_delete_missing_is_noop(self, publishers):
        assert publishers.delete(999) is False

    def test_delete_publisher_detaches_book(self, publishers, books):
        publisher = publishers.save(Publisher(name="Ace"))
        book = books.save(make_book(publisher_id=publisher.id))

        publishers.delete(publisher.id)

        assert books.find_one(book.id).publisher_id is None

    def test_delete_book_removes_links_and_loans_keep_rows(self, session, books, authors):
        author = authors.save(Author(first_name="Frank", last_name="Herbert"))
        book = books.save(make_book(author_ids=[author.id]))
        loans = BorrowedBookRepository(session)
        loan = loans.save(BorrowedBook(borrow_date=date(2024, 1, 2), book_id=book.id))

        books.delete(book.id)

        assert authors.find_one(author.id).book_ids == []
        assert loans.find_one(loan.id).book_id is None


class TestLinks:
    def test_book_owns_author_links(self, books, authors):
        herbert = authors.save(Author(first_name="Frank", last_name="Herbert"))
        anderson = authors.save(Author(first_name="Kevin", last_name="Anderson"))

        book = books.save(make_book(author_ids=[anderson.id, herbert.id, herbert.id]))

        assert book.author_ids == sorted([herbert.id, anderson.id])
        assert authors.find_one(herbert.id).book_ids == [book.id]

    def test_author_book_ids_are_read_only(self, books, authors):
        herbert = authors.save(Author(first_name="Frank", last_name="Herbert"))
        book = books.save(make_book())

        stored = authors.save(
            Author(id=herbert.id, first_name="Frank", last_name="Herbert", book_ids=[book.id])
        )

        assert stored.book_ids == []

    def test_add_author_then_save(self, books, authors):
        herbert = authors.save(Author(first_name="Frank", last_name="Herbert"))
        book = books.save(make_book())

        book.add_author(herbert)
        saved = books.save(book)

        assert saved.author_ids == [herbert.id]
        assert authors.find_one(herbert.id).book_ids == [book.id]

    def test_delete_author_unlinks_books(self, books, authors):
        herbert = authors.save(Author(first_name="Frank", last_name="Herbert"))
        book = books.save(make_book(author_ids=[herbert.id]))

        authors.delete(herbert.id)

        assert books.find_one(book.id).author_ids == []


class TestSessions:
    def test_in_memory_database_shares_one_connection(self):
        manager = DatabaseManager("sqlite://")

        assert isinstance(manager.engine.pool, StaticPool)
        manager.close()

    def test_file_database_sessions_are_independent(self, tmp_path):
        manager = DatabaseManager(f"sqlite:///{tmp_path / 'catalog.db'}")
        manager.init_database()
        assert not isinstance(manager.engine.pool, StaticPool)

        writer = manager.create_session()
        reader = manager.create_session()
        try:
            writer.add(PublisherRow(name="Ace"))
            writer.flush()
            seen_by_reader = reader.execute(
                select(func.count()).select_from(PublisherRow)
            ).scalar()
            # Closing the reader rolls back its own connection only
            reader.close()
            writer.commit()
        finally:
            reader.close()
            writer.close()

        with manager.session_scope() as session:
            stored = session.execute(select(func.count()).select_from(PublisherRow)).scalar()
        manager.close()

        assert seen_by_reader == 0
        assert stored == 1
