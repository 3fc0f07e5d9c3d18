"""
Search filtering and page slicing for report views.

Works on both per-store ReportItem lists and AggregatedItem lists.
"""

import math
from decimal import Decimal
from typing import Sequence, Union

from models.base import PaginatedResponse
from models.report import AggregatedItem, ReportItem
from utils.text_utils import contains_term, normalize_search_term

ViewItem = Union[ReportItem, AggregatedItem]


def matches_search(item: ViewItem, term: str) -> bool:
    """
    Case-insensitive substring match on sku, description and type.

    Aggregated rows also match on any contributing store.
    """
    term = normalize_search_term(term)
    values = [item.sku, item.description, item.type.value]
    if isinstance(item, AggregatedItem):
        values.extend(item.stores)
    return contains_term(term, values)


def filter_items(items: Sequence[ViewItem], term: str) -> list[ViewItem]:
    """Items matching the search term; all items for an empty term."""
    if not normalize_search_term(term):
        return list(items)
    return [item for item in items if matches_search(item, term)]


def total_pages_for(count: int, page_size: int) -> int:
    """At least one page, even when empty."""
    return max(1, math.ceil(count / page_size))


def _quantities(item: ViewItem) -> tuple[Decimal, Decimal, Decimal]:
    if isinstance(item, AggregatedItem):
        return item.total_store_order, item.total_delivered, item.total_undelivered
    return item.store_order, item.delivered, item.undelivered


def paginate(items: Sequence[ViewItem], page: int, page_size: int) -> PaginatedResponse:
    """
    Slice one page out of already-filtered items.

    A page beyond the last is clamped to the last page.
    """
    total = len(items)
    total_pages = total_pages_for(total, page_size)
    page = min(max(1, page), total_pages)

    start_index = (page - 1) * page_size
    end_index = min(start_index + page_size, total)
    data = list(items[start_index:end_index])

    page_store_order = Decimal("0")
    page_delivered = Decimal("0")
    page_undelivered = Decimal("0")
    for item in data:
        ordered, delivered, undelivered = _quantities(item)
        page_store_order += ordered
        page_delivered += delivered
        page_undelivered += undelivered

    return PaginatedResponse(
        data=data,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        start_index=start_index,
        end_index=end_index,
        page_store_order=page_store_order,
        page_delivered=page_delivered,
        page_undelivered=page_undelivered,
    )


class ViewState:
    """
    Search term and current page of one view.

    Changing the search term always returns to page 1. The current page
    is clamped whenever a render finds fewer pages than before.
    """

    def __init__(self, page_size: int):
        self.page_size = page_size
        self.search_term = ""
        self.page = 1

    def set_search(self, term: str) -> None:
        self.search_term = term or ""
        self.page = 1

    def set_page(self, page: int) -> None:
        self.page = max(1, page)

    def render(self, items: Sequence[ViewItem]) -> PaginatedResponse:
        filtered = filter_items(items, self.search_term)
        result = paginate(filtered, self.page, self.page_size)
        self.page = result.page
        return result
