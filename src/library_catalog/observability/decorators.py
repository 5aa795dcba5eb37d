"""Decorators for tracing query service calls."""

import functools
from collections.abc import Callable
from datetime import datetime
from typing import Any

import logfire


def trace_query(operation: str):
    """Wrap a query service method in a ``query.<entity>.<operation>`` span."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            with logfire.span(
                "query.{entity}.{operation}",
                entity=self.entity_name,
                operation=operation,
                criteria=_truncate(str(args[0])) if args else None,
            ) as span:
                start_time = datetime.now()
                try:
                    result = func(self, *args, **kwargs)
                except Exception as e:
                    span.set_attribute("query.success", False)
                    span.set_attribute("query.error", str(e))
                    raise

                span.set_attribute("query.success", True)
                span.set_attribute(
                    "query.duration_ms", (datetime.now() - start_time).total_seconds() * 1000
                )
                span.set_attribute("query.result_size", _result_size(result))
                return result

        return wrapper

    return decorator


def _truncate(value: str) -> str:
    from . import get_config

    limit = get_config().max_attribute_length
    return value if len(value) <= limit else value[:limit] + "..."


def _result_size(result: Any) -> int:
    if isinstance(result, int):
        return result
    items = getattr(result, "items", result)
    try:
        return len(items)
    except TypeError:
        return 0
