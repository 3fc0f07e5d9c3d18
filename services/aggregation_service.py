"""
Cross-store aggregation.

Rolls every store's windowed items up into one row per SKU. The
aggregated fill rate comes from the summed quantities, not from the
mean of per-store rates.
"""

from typing import Mapping, Optional
import structlog

from models.report import AggregatedItem, ReportItem, WeekWindow
from services.classification_service import fill_rate_remarks
from services.fill_rate_service import calculate_fill_rate

logger = structlog.get_logger(__name__)


def aggregate(
    windowed: Mapping[str, list[ReportItem]],
    window: Optional[WeekWindow] = None
) -> list[AggregatedItem]:
    """
    Aggregate report items by SKU across stores.

    Descriptive fields (description, type, um, price) come from the
    first item seen for a SKU. Stores are listed once each, in the
    order they were first seen.

    Args:
        windowed: Items per store, all from the same week
        window: Week to stamp on rows; defaults to each SKU's first item

    Returns:
        Aggregated rows sorted by SKU
    """
    by_sku: dict[str, AggregatedItem] = {}

    for store, items in windowed.items():
        for item in items:
            row = by_sku.get(item.sku)
            if row is None:
                week = window or item
                row = AggregatedItem(
                    sku=item.sku,
                    description=item.description,
                    type=item.type,
                    um=item.um,
                    price=item.price,
                    week_start_date=week.week_start_date,
                    week_end_date=week.week_end_date,
                    week_number=week.week_number,
                    year=week.year,
                )
                by_sku[item.sku] = row

            row.total_store_order += item.store_order
            row.total_delivered += item.delivered
            row.total_undelivered += item.undelivered
            row.store_count += 1
            contributor = item.store or store
            if contributor not in row.stores:
                row.stores.append(contributor)

    for row in by_sku.values():
        row.fill_rate = calculate_fill_rate(row.total_delivered, row.total_store_order)
        row.remarks = fill_rate_remarks(row.fill_rate)

    aggregated = [by_sku[sku] for sku in sorted(by_sku)]

    logger.debug(
        "report_items_aggregated",
        stores=len(windowed),
        skus=len(aggregated)
    )

    return aggregated
