"""Collection of cursor-paginated listings into a single list."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a paginated listing."""

    items: List[T] = field(default_factory=list)
    next_cursor: Optional[str] = None
    has_more: bool = False

    @staticmethod
    def from_marker_response(response: Dict[str, Any], items_key: str) -> "Page[Any]":
        """Build a page from an IAM list response (``IsTruncated`` + ``Marker``).

        Args:
            response: Raw response of e.g. ``list_role_policies``
            items_key: Member holding the page items, e.g. ``"PolicyNames"``

        Returns:
            Page with the response's items and continuation state
        """
        return Page(
            items=list(response.get(items_key, [])),
            next_cursor=response.get("Marker"),
            has_more=bool(response.get("IsTruncated", False)),
        )


def collect_pages(fetch: Callable[[Optional[str]], Page[T]], label: str = "items") -> List[T]:
    """Fetch every page of a listing and concatenate the items in order.

    ``fetch`` is called with ``None`` for the first page and with the previous
    page's cursor afterwards. Collection stops at the first page that is not
    truncated or that carries no cursor to continue from.

    Exceptions raised by ``fetch`` propagate unchanged; nothing collected so
    far is returned.

    Args:
        fetch: Function returning the page for a cursor
        label: Name of the listing, used in log events

    Returns:
        All items of all pages, page order and within-page order preserved
    """
    items: List[T] = []
    cursor: Optional[str] = None
    page_count = 0

    while True:
        page = fetch(cursor)
        page_count += 1
        items.extend(page.items)

        logger.debug(
            "Fetched page",
            listing=label,
            page=page_count,
            items_on_page=len(page.items),
            has_more=page.has_more,
        )

        if not page.has_more:
            break
        if not page.next_cursor:
            logger.warning("Truncated page without a cursor, stopping", listing=label, page=page_count)
            break
        cursor = page.next_cursor

    logger.debug("Pagination complete", listing=label, total_items=len(items), pages=page_count)
    return items
