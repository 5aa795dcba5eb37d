"""Response headers: entity alerts and pagination links."""

from starlette.datastructures import URL

from ..config import get_config
from ..database.repository import PaginatedResponse


def alert_headers(action: str, entity_name: str, param: object) -> dict[str, str]:
    """
    Headers announcing a create/update/delete.

    ``alert_headers("created", "book", 3)`` yields
    ``X-libraryApp-alert: libraryApp.book.created`` and
    ``X-libraryApp-params: 3``.
    """
    app_name = get_config().app_name
    return {
        f"X-{app_name}-alert": f"{app_name}.{entity_name}.{action}",
        f"X-{app_name}-params": str(param),
    }


def pagination_headers(url: URL, page: PaginatedResponse) -> dict[str, str]:
    """``X-Total-Count`` plus an RFC 5988 ``Link`` header for next/prev/last/first."""
    last_page = max(page.total_pages - 1, 0)
    links = []
    if page.has_next:
        links.append(_link(url, page.page + 1, page.page_size, "next"))
    if page.has_previous:
        links.append(_link(url, page.page - 1, page.page_size, "prev"))
    links.append(_link(url, last_page, page.page_size, "last"))
    links.append(_link(url, 0, page.page_size, "first"))
    return {"X-Total-Count": str(page.total), "Link": ",".join(links)}


def _link(url: URL, page: int, size: int, rel: str) -> str:
    target = url.include_query_params(page=page, size=size)
    return f'<{target}>; rel="{rel}"'
