"""
Repository pattern implementation for the Library Catalog service.

Repositories are the CRUD service of each entity: they translate between the
Pydantic records in ``library_catalog.models`` and the SQLAlchemy tables, and
own the write transactions. Every write either commits as a whole or is rolled
back; database errors other than constraint violations are logged and
re-raised unchanged.

Many-to-many links are written and read by id through the association
helpers at the bottom of this module.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field
from sqlalchemy import Table, asc, delete, desc, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database.schema import Base
from ..database.session import commit_or_rollback, run_query
from ..models.base import CamelModel, Entity

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
ResponseSchemaType = TypeVar("ResponseSchemaType", bound=Entity)
PatchSchemaType = TypeVar("PatchSchemaType", bound=CamelModel)


class RepositoryException(Exception):
    """Base exception for repository operations."""


class NotFoundError(RepositoryException):
    """Raised when an entity is not found."""


class DuplicateError(RepositoryException):
    """Raised when a write violates a unique constraint."""


class InvalidReferenceError(RepositoryException):
    """Raised when a write references a row that does not exist."""


class InvalidPageRequestError(RepositoryException, ValueError):
    """Raised on a malformed page number, page size or sort order."""


def constraint_error(entity_name: str, error: IntegrityError) -> RepositoryException:
    """Map an ``IntegrityError`` to the matching repository exception."""
    message = f"{entity_name} violates a constraint: {error.orig}"
    # SQLite, PostgreSQL and MySQL all name the constraint kind in the message
    if "foreign key" in str(error.orig).lower():
        return InvalidReferenceError(message)
    return DuplicateError(message)



class SortOrder(BaseModel):
    """One ``property,direction`` pair of a sort request."""

    property: str
    direction: Literal["asc", "desc"] = "asc"

    @classmethod
    def parse(cls, value: str) -> "SortOrder":
        """
        Parse ``"name"``, ``"name,desc"`` or ``"name,ASC"``.

        Raises:
            InvalidPageRequestError: On an empty property or an unknown direction
        """
        prop, _, direction = value.partition(",")
        prop = prop.strip()
        direction = direction.strip().lower() or "asc"
        if not prop:
            raise InvalidPageRequestError(f"Invalid sort parameter: {value!r}")
        if direction not in ("asc", "desc"):
            raise InvalidPageRequestError(f"Invalid sort direction: {direction!r}")
        return cls(property=prop, direction=direction)


class PaginationParams(BaseModel):
    """Page request for list operations. Pages are zero-based."""

    page: int = 0
    page_size: int = 20
    sort: list[SortOrder] = Field(default_factory=list)

    @property
    def offset(self) -> int:
        """Calculate offset for SQL queries."""
        return self.page * self.page_size

    def validate_params(self, max_page_size: int = 2000) -> None:
        """Validate pagination parameters."""
        if self.page < 0:
            raise InvalidPageRequestError("Page must be >= 0")
        if self.page_size < 1 or self.page_size > max_page_size:
            raise InvalidPageRequestError(f"Page size must be between 1 and {max_page_size}")


class PaginatedResponse(BaseModel, Generic[ResponseSchemaType]):
    """One page of results plus the total number of matches."""

    items: list[ResponseSchemaType]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(
        cls, items: list[ResponseSchemaType], total: int, pagination: PaginationParams
    ) -> "PaginatedResponse[ResponseSchemaType]":
        return cls(
            items=items,
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            total_pages=(total + pagination.page_size - 1) // pagination.page_size,
            has_next=(pagination.page + 1) * pagination.page_size < total,
            has_previous=pagination.page > 0,
        )


class BaseRepository(ABC, Generic[ModelType, ResponseSchemaType, PatchSchemaType]):
    """
    Abstract base repository providing the CRUD operations.

    Subclasses name their table, record and patch classes; entities with
    association lists override ``_write_links`` and ``to_response_models``.
    """

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        self.session = session

    @property
    @abstractmethod
    def model_class(self) -> type[ModelType]:
        """Return the SQLAlchemy model class."""

    @property
    @abstractmethod
    def response_schema(self) -> type[ResponseSchemaType]:
        """Return the Pydantic record class."""

    @property
    def entity_name(self) -> str:
        return self.response_schema.__name__

    @property
    def column_names(self) -> list[str]:
        """Names of the table's columns, which double as record field names."""
        return [column.key for column in self.model_class.__table__.columns]

    # --- conversion -------------------------------------------------------

    def _to_response_model(self, db_obj: ModelType, **extra: Any) -> ResponseSchemaType:
        """Convert a database row to its Pydantic record."""
        values = {name: getattr(db_obj, name) for name in self.column_names}
        values.update(extra)
        return self.response_schema.model_validate(values)

    def to_response_models(self, db_objs: Sequence[ModelType]) -> list[ResponseSchemaType]:
        """Convert a batch of rows; overridden where links must be loaded."""
        return [self._to_response_model(db_obj) for db_obj in db_objs]

    def _write_links(self, entity_id: int, values: dict[str, Any]) -> None:
        """Persist association lists found in ``values``. No-op by default."""

    def sort_column(self, prop: str):
        """
        Resolve a sort property (snake_case or camelCase) to a column.

        Raises:
            InvalidPageRequestError: If the property is not a column of the table
        """
        columns = self.model_class.__table__.columns
        for column in columns:
            if prop in (column.key, _camel(column.key)):
                return getattr(self.model_class, column.key)
        raise InvalidPageRequestError(f"Unknown sort property: {prop}")

    def order_by_clauses(self, pagination: PaginationParams | None) -> list:
        """ORDER BY clauses for a page request; id is always the final tie-breaker."""
        clauses = []
        sorted_by_id = False
        for order in pagination.sort if pagination else []:
            column = self.sort_column(order.property)
            sorted_by_id = sorted_by_id or column.key == "id"
            clauses.append(desc(column) if order.direction == "desc" else asc(column))
        if not sorted_by_id:
            clauses.append(asc(self.model_class.id))
        return clauses

    # --- reads ------------------------------------------------------------

    def _get_row(self, id: int, for_update: bool = False) -> ModelType | None:
        query = select(self.model_class).where(self.model_class.id == id)
        if for_update:
            query = query.with_for_update()
        return run_query(
            self.session,
            lambda s: s.execute(query).scalar_one_or_none(),
            f"Failed to get {self.entity_name} by ID",
        )

    def find_one(self, id: int) -> ResponseSchemaType | None:
        """
        Get entity by ID.

        Returns:
            Pydantic record or None if not found
        """
        logger.debug("Request to get %s : %s", self.entity_name, id)
        db_obj = self._get_row(id)
        if db_obj is None:
            return None
        return self.to_response_models([db_obj])[0]

    def find_all(self, pagination: PaginationParams | None = None) -> PaginatedResponse:
        """
        Get one page of all entities.

        Raises:
            InvalidPageRequestError: On invalid pagination or an unknown sort property
        """
        logger.debug("Request to get all %ss", self.entity_name)
        pagination = pagination or PaginationParams()
        pagination.validate_params()

        count_query = select(func.count()).select_from(self.model_class)
        total = (
            run_query(
                self.session,
                lambda s: s.execute(count_query).scalar(),
                f"Failed to count {self.entity_name}",
            )
            or 0
        )

        query = (
            select(self.model_class)
            .order_by(*self.order_by_clauses(pagination))
            .offset(pagination.offset)
            .limit(pagination.page_size)
        )
        results = run_query(
            self.session,
            lambda s: s.execute(query).scalars().all(),
            f"Failed to get paginated {self.entity_name} results",
        )
        return PaginatedResponse.build(self.to_response_models(results), total, pagination)

    def exists(self, id: int) -> bool:
        """Check if entity exists by ID."""
        query = (
            select(func.count()).select_from(self.model_class).where(self.model_class.id == id)
        )
        count = run_query(
            self.session, lambda s: s.execute(query).scalar(), "Failed to check existence"
        )
        return count > 0

    # --- writes -----------------------------------------------------------

    def save(self, entity: ResponseSchemaType) -> ResponseSchemaType:
        """
        Insert the entity when it has no id, otherwise replace the stored row.

        A record whose id does not exist yet is inserted with that id.

        Raises:
            DuplicateError: If a unique constraint is violated
            InvalidReferenceError: If a foreign key points at a missing row
        """
        logger.debug("Request to save %s : %s", self.entity_name, entity)
        values = entity.model_dump()
        columns = {name: values[name] for name in self.column_names if name != "id"}

        try:
            db_obj = None if entity.id is None else self._get_row(entity.id)
            if db_obj is None:
                db_obj = self.model_class(**columns)
                if entity.id is not None:
                    db_obj.id = entity.id
                self.session.add(db_obj)
            else:
                for field, value in columns.items():
                    setattr(db_obj, field, value)

            self.session.flush()
            self._write_links(db_obj.id, values)
            commit_or_rollback(self.session, f"save {self.entity_name}")
        except IntegrityError as e:
            self.session.rollback()
            raise constraint_error(self.entity_name, e) from e

        return self.to_response_models([db_obj])[0]

    def partial_update(self, patch: PatchSchemaType) -> ResponseSchemaType:
        """
        Merge the non-null fields of ``patch`` onto the stored entity.

        The row is read with a write lock and rewritten in the same
        transaction. There is no version check: two concurrent patches of the
        same row may overwrite each other's untouched fields.

        Raises:
            NotFoundError: If no entity has the patch's id
            DuplicateError: If a unique constraint is violated
            InvalidReferenceError: If a foreign key points at a missing row
        """
        logger.debug("Request to partially update %s : %s", self.entity_name, patch)
        entity_id = getattr(patch, "id", None)
        if entity_id is None:
            raise NotFoundError(f"{self.entity_name} without id cannot be updated")

        db_obj = self._get_row(entity_id, for_update=True)
        if db_obj is None:
            raise NotFoundError(f"{self.entity_name} {entity_id} not found")

        values = patch.model_dump(exclude_unset=True, exclude_none=True, exclude={"id"})
        try:
            for field, value in values.items():
                if field in self.column_names:
                    setattr(db_obj, field, value)
            self.session.flush()
            self._write_links(db_obj.id, values)
            commit_or_rollback(self.session, f"partial update {self.entity_name}")
        except IntegrityError as e:
            self.session.rollback()
            raise constraint_error(self.entity_name, e) from e

        return self.to_response_models([db_obj])[0]

    def delete(self, id: int) -> bool:
        """
        Delete entity by ID.

        Returns:
            True if deleted, False if there was nothing to delete
        """
        logger.debug("Request to delete %s : %s", self.entity_name, id)
        db_obj = self._get_row(id)
        if db_obj is None:
            return False

        self._delete_links(id)
        self.session.delete(db_obj)
        commit_or_rollback(self.session, f"delete {self.entity_name}")
        # Rows pointing here may have been nulled by the database
        self.session.expire_all()
        return True

    def _delete_links(self, entity_id: int) -> None:
        """Remove association rows of an entity about to be deleted. No-op by default."""


# --- association helpers ----------------------------------------------------


def replace_links(
    session: Session,
    table: Table,
    owner_column: str,
    owner_id: int,
    other_column: str,
    other_ids: Iterable[int],
) -> None:
    """Replace every link of ``owner_id`` in ``table`` with links to ``other_ids``."""
    session.execute(delete(table).where(table.c[owner_column] == owner_id))
    rows = [
        {owner_column: owner_id, other_column: other_id} for other_id in dict.fromkeys(other_ids)
    ]
    if rows:
        session.execute(insert(table), rows)


def remove_links(session: Session, table: Table, column: str, entity_id: int) -> None:
    """Delete every link row that references ``entity_id`` through ``column``."""
    session.execute(delete(table).where(table.c[column] == entity_id))


def load_links(
    session: Session,
    table: Table,
    owner_column: str,
    owner_ids: Iterable[int],
    other_column: str,
) -> dict[int, list[int]]:
    """Map each owner id to the sorted list of ids it is linked to."""
    owner_ids = list(owner_ids)
    links: dict[int, list[int]] = {owner_id: [] for owner_id in owner_ids}
    if not owner_ids:
        return links

    query = (
        select(table.c[owner_column], table.c[other_column])
        .where(table.c[owner_column].in_(owner_ids))
        .order_by(table.c[owner_column], table.c[other_column])
    )
    rows = run_query(session, lambda s: s.execute(query).all(), "Failed to load links")
    for owner_id, other_id in rows:
        links[owner_id].append(other_id)
    return links


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)
