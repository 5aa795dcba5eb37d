"""
Query string binding for list and count endpoints.

Filters use ``<field>.<operator>=<value>``::

    /api/authors?firstName.contains=jo&bookId.in=1,2&id.greaterThan=5

``in`` and ``notIn`` take comma separated values and may be repeated; any
other operator takes its last value. Parameters without a dot (other than
``distinct``) are not filters and are left to the endpoint. Unknown fields,
unknown operators and malformed values make the criteria fail validation.
"""

from collections import defaultdict
from typing import Any

from starlette.datastructures import QueryParams

from ..config import get_config
from ..database.repository import InvalidPageRequestError, PaginationParams, SortOrder
from ..query.criteria import Criteria

LIST_OPERATORS = {"in", "notIn"}


def bind_criteria(criteria_class: type[Criteria], params: QueryParams) -> Criteria:
    """
    Build a criteria from query parameters.

    Raises:
        pydantic.ValidationError: On unknown fields or operators and on
            values that do not convert to the filter's type
    """
    data: dict[str, Any] = defaultdict(dict)
    for key, value in params.multi_items():
        if key == "distinct":
            data["distinct"] = value
            continue
        field, dot, operator = key.partition(".")
        if not dot or field == "distinct":
            continue
        if operator in LIST_OPERATORS:
            values = [item.strip() for item in value.split(",") if item.strip()]
            data[field].setdefault(operator, []).extend(values)
        else:
            data[field][operator] = value
    return criteria_class.model_validate(dict(data))


def bind_pagination(params: QueryParams) -> PaginationParams:
    """
    Read ``page`` (zero-based), ``size`` and repeated ``sort=<prop>,<dir>``.

    Raises:
        InvalidPageRequestError: On non-numeric or out of range values
    """
    config = get_config()
    page = _int_param(params, "page", 0)
    size = _int_param(params, "size", config.default_page_size)
    sort = [SortOrder.parse(value) for value in params.getlist("sort")]

    pagination = PaginationParams(page=page, page_size=size, sort=sort)
    pagination.validate_params(max_page_size=config.max_page_size)
    return pagination


def _int_param(params: QueryParams, name: str, default: int) -> int:
    raw = params.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidPageRequestError(f"Query parameter '{name}' must be an integer") from e
