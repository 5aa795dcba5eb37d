"""Tests for the per-entity criteria classes."""

import pytest
from pydantic import ValidationError

from library_catalog.query import (
    AuthorCriteria,
    BookCriteria,
    BorrowedBookCriteria,
    IntegerFilter,
    LongFilter,
    StringFilter,
)


class TestCriteriaConstruction:
    def test_binds_camel_case_fields(self):
        criteria = BookCriteria.model_validate(
            {
                "publishYear": {"equals": "1954"},
                "authorId": {"in": [1, 2]},
                "copies": {"greaterThan": 1},
            }
        )

        assert criteria.publish_year == StringFilter(equals="1954")
        assert criteria.author_id.in_ == [1, 2]
        assert criteria.copies.greater_than == 1

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            AuthorCriteria.model_validate({"nickname": {"equals": "JRR"}})

    def test_wrong_filter_type_rejected(self):
        # borrowDate is a date filter
        with pytest.raises(ValidationError):
            BorrowedBookCriteria.model_validate({"borrowDate": {"equals": "yesterday"}})

    def test_distinct_is_carried(self):
        criteria = AuthorCriteria.model_validate({"distinct": "true"})

        assert criteria.distinct is True
        assert list(criteria.filter_items()) == []


class TestFilterItems:
    def test_declaration_order_and_empty_filters_skipped(self):
        criteria = BookCriteria(
            author_id=LongFilter(equals=1),
            name=StringFilter(),
            copies=IntegerFilter(less_than=2),
            id=LongFilter(specified=True),
        )

        assert [name for name, _ in criteria.filter_items()] == ["id", "copies", "author_id"]

    def test_str(self):
        criteria = AuthorCriteria(first_name=StringFilter(contains="terry"), distinct=True)

        assert str(criteria) == (
            "AuthorCriteria{first_name=StringFilter[contains='terry'], distinct=True}"
        )


class TestCriteriaCopy:
    def test_mutating_copy_leaves_original_untouched(self):
        original = BookCriteria(
            name=StringFilter(contains="ring"),
            author_id=LongFilter(in_=[1]),
        )
        duplicate = original.copy()

        duplicate.name.contains = "omens"
        duplicate.author_id.in_.append(2)
        duplicate.copies = IntegerFilter(equals=1)

        assert original.name.contains == "ring"
        assert original.author_id.in_ == [1]
        assert original.copies is None

    def test_copy_is_equal_but_not_shared(self):
        original = AuthorCriteria(book_id=LongFilter(equals=3))
        duplicate = original.copy()

        assert duplicate == original
        assert duplicate.book_id is not original.book_id
