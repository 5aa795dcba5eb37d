"""
Predicate composition: turning filters into SQLAlchemy conditions.

A ``Specification`` accumulates the sub-predicates built from a criteria and
the LEFT OUTER JOINs that relation filters need. It renders as one statement
selecting the distinct ids of matching rows; list, page and count queries are
all built on that statement so they always agree on the matched set.

Fields are resolved through explicit tables (field name -> column, relation
name -> ``RelationPath``) rather than by attribute lookup on the ORM class.
"""

from dataclasses import dataclass

from sqlalchemy import ColumnElement, Select, Table, and_, select, true
from sqlalchemy.sql.expression import FromClause

from .filters import Filter, RangeFilter, StringFilter


@dataclass(frozen=True)
class RelationPath:
    """
    How to reach a related entity's id from the root table.

    ``target`` is joined with ``target.c[target_key] == local_column`` and the
    filter applies to ``target.c[id_column]``. For a to-one relation the
    target is the related table (``target_key`` and ``id_column`` are both
    ``"id"``); for a many-to-many relation it is the association table.

    Attributes:
        target: Table to join
        local_column: Column of the root table the join starts from
        target_key: Column of ``target`` matched against ``local_column``
        id_column: Column of ``target`` holding the related entity's id
    """

    target: Table
    local_column: ColumnElement
    target_key: str
    id_column: str

    def join(self) -> tuple[FromClause, ColumnElement[bool], ColumnElement]:
        """Return a fresh alias of the target, its ON clause and its id column."""
        alias = self.target.alias()
        return alias, alias.c[self.target_key] == self.local_column, alias.c[self.id_column]


def filter_predicates(flt: Filter, column: ColumnElement) -> list[ColumnElement[bool]]:
    """
    Build one predicate per operator set on ``flt``.

    The predicates are returned in a fixed operator order; ANDed together
    they express the whole filter. An empty filter yields no predicates.
    """
    predicates: list[ColumnElement[bool]] = []

    if flt.equals is not None:
        predicates.append(column == flt.equals)
    if flt.not_equals is not None:
        predicates.append(column != flt.not_equals)
    if flt.in_ is not None:
        # An empty IN renders as an always-false expression
        predicates.append(column.in_(flt.in_))
    if flt.not_in is not None:
        predicates.append(column.not_in(flt.not_in))
    if flt.specified is not None:
        predicates.append(column.is_not(None) if flt.specified else column.is_(None))

    if isinstance(flt, RangeFilter):
        if flt.greater_than is not None:
            predicates.append(column > flt.greater_than)
        if flt.greater_than_or_equal is not None:
            predicates.append(column >= flt.greater_than_or_equal)
        if flt.less_than is not None:
            predicates.append(column < flt.less_than)
        if flt.less_than_or_equal is not None:
            predicates.append(column <= flt.less_than_or_equal)

    if isinstance(flt, StringFilter):
        if flt.contains is not None:
            predicates.append(column.icontains(flt.contains, autoescape=True))
        if flt.does_not_contain is not None:
            predicates.append(~column.icontains(flt.does_not_contain, autoescape=True))

    return predicates


class Specification:
    """
    A conjunction of predicates over one root table plus the joins it needs.

    Starts as match-all; ``and_`` narrows it.
    """

    def __init__(self, id_column: ColumnElement):
        self.id_column = id_column
        self.predicate: ColumnElement[bool] = true()
        self.joins: list[tuple[FromClause, ColumnElement[bool]]] = []

    def and_(self, *predicates: ColumnElement[bool]) -> "Specification":
        for predicate in predicates:
            self.predicate = and_(self.predicate, predicate)
        return self

    def and_field(self, flt: Filter, column: ColumnElement) -> "Specification":
        """AND the predicates of a filter on a column of the root table."""
        return self.and_(*filter_predicates(flt, column))

    def and_relation(self, flt: Filter, path: RelationPath) -> "Specification":
        """
        AND the predicates of an id filter over a related entity.

        Each call outer-joins its own alias, so two filters on the same
        relation never share a joined row.
        """
        target, onclause, id_column = path.join()
        self.joins.append((target, onclause))
        return self.and_(*filter_predicates(flt, id_column))

    def matching_ids(self) -> Select:
        """SELECT DISTINCT the root ids satisfying the predicate."""
        query = select(self.id_column)
        for target, onclause in self.joins:
            query = query.outerjoin(target, onclause)
        return query.where(self.predicate).distinct()
