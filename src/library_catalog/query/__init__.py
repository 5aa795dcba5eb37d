"""
Criteria queries for the Library Catalog service.

- filters.py: typed single-field filters (``StringFilter``, ``LongFilter``...)
- criteria.py: one criteria class per entity
- specification.py: filter -> predicate translation and composition
- services.py: per-entity query services (list, page, count)
"""

from .criteria import (
    AuthorCriteria,
    BookCriteria,
    BorrowedBookCriteria,
    ClientCriteria,
    Criteria,
    PublisherCriteria,
)
from .filters import (
    BooleanFilter,
    Filter,
    IntegerFilter,
    LocalDateFilter,
    LongFilter,
    RangeFilter,
    StringFilter,
)
from .services import (
    AuthorQueryService,
    BookQueryService,
    BorrowedBookQueryService,
    ClientQueryService,
    PublisherQueryService,
    QueryService,
)
from .specification import RelationPath, Specification, filter_predicates

__all__ = [
    "AuthorCriteria",
    "AuthorQueryService",
    "BookCriteria",
    "BookQueryService",
    "BooleanFilter",
    "BorrowedBookCriteria",
    "BorrowedBookQueryService",
    "ClientCriteria",
    "ClientQueryService",
    "Criteria",
    "Filter",
    "IntegerFilter",
    "LocalDateFilter",
    "LongFilter",
    "PublisherCriteria",
    "PublisherQueryService",
    "QueryService",
    "RangeFilter",
    "RelationPath",
    "Specification",
    "StringFilter",
    "filter_predicates",
]
