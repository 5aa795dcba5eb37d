"""
Query services: criteria in, entities (or a count) out.

Each entity has a query service that declares, next to its criteria class,
which column every scalar criteria field filters and which join path every
relation criteria field follows. The declarations are checked against the
criteria class when the service class is created, so a criteria field with
no column (or a column with no criteria field) fails at import time.
"""

import logging
from typing import ClassVar, Generic, TypeVar

from sqlalchemy import ColumnElement, func, select

from ..database.author_repository import AuthorRepository
from ..database.book_repository import BookRepository
from ..database.borrowed_book_repository import BorrowedBookRepository
from ..database.client_repository import ClientRepository
from ..database.publisher_repository import PublisherRepository
from ..database.repository import BaseRepository, PaginatedResponse, PaginationParams
from ..database.schema import Author as AuthorDB
from ..database.schema import Book as BookDB
from ..database.schema import BorrowedBook as BorrowedBookDB
from ..database.schema import Client as ClientDB
from ..database.schema import Publisher as PublisherDB
from ..database.schema import book_author
from ..database.session import run_query
from ..observability import trace_query
from .criteria import (
    AuthorCriteria,
    BookCriteria,
    BorrowedBookCriteria,
    ClientCriteria,
    Criteria,
    PublisherCriteria,
)
from .specification import RelationPath, Specification

logger = logging.getLogger(__name__)

CriteriaType = TypeVar("CriteriaType", bound=Criteria)


class QueryService(Generic[CriteriaType]):
    """
    Base class for criteria queries over one entity.

    Subclasses set ``criteria_class``, ``repository_class``, ``fields`` and
    ``relations``.
    """

    criteria_class: ClassVar[type[Criteria]]
    repository_class: ClassVar[type[BaseRepository]]
    fields: ClassVar[dict[str, ColumnElement]] = {}
    relations: ClassVar[dict[str, RelationPath]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        criteria_class = cls.__dict__.get("criteria_class")
        if criteria_class is None:
            return

        declared = set(criteria_class.model_fields) - {"distinct"}
        mapped = set(cls.fields) | set(cls.relations)
        if declared != mapped:
            raise TypeError(
                f"{cls.__name__} does not map the fields of {criteria_class.__name__}: "
                f"unmapped={sorted(declared - mapped)}, unknown={sorted(mapped - declared)}"
            )
        overlap = set(cls.fields) & set(cls.relations)
        if overlap:
            raise TypeError(f"{cls.__name__} maps {sorted(overlap)} both as field and relation")

    def __init__(self, repository: BaseRepository):
        self.repository = repository
        self.session = repository.session

    @classmethod
    def for_session(cls, session) -> "QueryService[CriteriaType]":
        return cls(cls.repository_class(session))

    @property
    def entity_name(self) -> str:
        return self.repository.entity_name

    @property
    def model_class(self):
        return self.repository.model_class

    def create_specification(self, criteria: CriteriaType | None) -> Specification:
        """
        Convert a criteria into a ``Specification``.

        Scalar filters are applied first, then relation filters, each group
        in the criteria's field declaration order.
        """
        specification = Specification(self.model_class.id)
        if criteria is None:
            return specification

        relation_filters = []
        for name, flt in criteria.filter_items():
            if name in self.fields:
                specification.and_field(flt, self.fields[name])
            else:
                relation_filters.append((name, flt))

        for name, flt in relation_filters:
            specification.and_relation(flt, self.relations[name])

        return specification

    def _select_matching(self, criteria: CriteriaType | None):
        ids = self.create_specification(criteria).matching_ids()
        return select(self.model_class).where(self.model_class.id.in_(ids))

    @trace_query("list")
    def find_by_criteria(self, criteria: CriteriaType | None = None) -> list:
        """
        Return every entity matching the criteria, ordered by id.

        Args:
            criteria: Filters the entities must match; None matches all
        """
        logger.debug("find by criteria : %s", criteria)
        query = self._select_matching(criteria).order_by(self.model_class.id)
        results = run_query(
            self.session,
            lambda s: s.execute(query).scalars().all(),
            f"Failed to find {self.entity_name} by criteria",
        )
        return self.repository.to_response_models(results)

    @trace_query("page")
    def find_page_by_criteria(
        self, criteria: CriteriaType | None, pagination: PaginationParams | None = None
    ) -> PaginatedResponse:
        """
        Return one page of the entities matching the criteria.

        The page's ``total`` is ``count_by_criteria(criteria)``.

        Raises:
            InvalidPageRequestError: On invalid pagination or an unknown sort property
        """
        logger.debug("find by criteria : %s, page: %s", criteria, pagination)
        pagination = pagination or PaginationParams()
        pagination.validate_params()

        total = self._count(criteria)
        query = (
            self._select_matching(criteria)
            .order_by(*self.repository.order_by_clauses(pagination))
            .offset(pagination.offset)
            .limit(pagination.page_size)
        )
        results = run_query(
            self.session,
            lambda s: s.execute(query).scalars().all(),
            f"Failed to page {self.entity_name} by criteria",
        )
        return PaginatedResponse.build(
            self.repository.to_response_models(results), total, pagination
        )

    @trace_query("count")
    def count_by_criteria(self, criteria: CriteriaType | None = None) -> int:
        """Return the number of entities matching the criteria."""
        logger.debug("count by criteria : %s", criteria)
        return self._count(criteria)

    def _count(self, criteria: CriteriaType | None) -> int:
        ids = self.create_specification(criteria).matching_ids().subquery()
        query = select(func.count()).select_from(ids)
        return (
            run_query(
                self.session,
                lambda s: s.execute(query).scalar(),
                f"Failed to count {self.entity_name} by criteria",
            )
            or 0
        )


class AuthorQueryService(QueryService[AuthorCriteria]):
    criteria_class = AuthorCriteria
    repository_class = AuthorRepository
    fields = {
        "id": AuthorDB.id,
        "first_name": AuthorDB.first_name,
        "last_name": AuthorDB.last_name,
    }
    relations = {
        "book_id": RelationPath(book_author, AuthorDB.id, "author_id", "book_id"),
    }


class BookQueryService(QueryService[BookCriteria]):
    criteria_class = BookCriteria
    repository_class = BookRepository
    fields = {
        "id": BookDB.id,
        "isbn": BookDB.isbn,
        "name": BookDB.name,
        "publish_year": BookDB.publish_year,
        "copies": BookDB.copies,
    }
    relations = {
        "publisher_id": RelationPath(PublisherDB.__table__, BookDB.publisher_id, "id", "id"),
        "author_id": RelationPath(book_author, BookDB.id, "book_id", "author_id"),
    }


class PublisherQueryService(QueryService[PublisherCriteria]):
    criteria_class = PublisherCriteria
    repository_class = PublisherRepository
    fields = {
        "id": PublisherDB.id,
        "name": PublisherDB.name,
    }


class ClientQueryService(QueryService[ClientCriteria]):
    criteria_class = ClientCriteria
    repository_class = ClientRepository
    fields = {
        "id": ClientDB.id,
        "first_name": ClientDB.first_name,
        "last_name": ClientDB.last_name,
        "email": ClientDB.email,
        "address": ClientDB.address,
        "phone": ClientDB.phone,
    }


class BorrowedBookQueryService(QueryService[BorrowedBookCriteria]):
    criteria_class = BorrowedBookCriteria
    repository_class = BorrowedBookRepository
    fields = {
        "id": BorrowedBookDB.id,
        "borrow_date": BorrowedBookDB.borrow_date,
    }
    relations = {
        "book_id": RelationPath(BookDB.__table__, BorrowedBookDB.book_id, "id", "id"),
        "client_id": RelationPath(ClientDB.__table__, BorrowedBookDB.client_id, "id", "id"),
    }
