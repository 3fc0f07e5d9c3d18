"""
Derived report fields.

recompute() is the only place undelivered, fill_rate and remarks are
set. Every mutation path (add, edit, row recompute, initialize, copy)
goes through it before persisting.
"""

from decimal import Decimal, ROUND_HALF_UP

from models.report import ReportItem
from services.classification_service import fill_rate_remarks

ZERO = Decimal("0")


def calculate_fill_rate(delivered: Decimal, ordered: Decimal) -> int:
    """
    Percentage of the ordered quantity delivered, rounded half up.

    Returns 0 when nothing was ordered.

    Examples:
        (9, 12) -> 75
        (1, 8) -> 13  (12.5 rounds up)
        (0, 0) -> 0
    """
    if ordered <= 0:
        return 0
    rate = (Decimal(delivered) * 100 / Decimal(ordered)).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return min(100, max(0, int(rate)))


def recompute(item: ReportItem) -> ReportItem:
    """
    Return a copy of the item with derived fields enforced.

    - delivered is clamped to store_order
    - undelivered = store_order - delivered
    - fill_rate from the row's own quantities
    - remarks from fill_rate
    """
    store_order = item.store_order
    delivered = min(item.delivered, store_order)
    undelivered = max(ZERO, store_order - delivered)
    fill_rate = calculate_fill_rate(delivered, store_order)

    return item.model_copy(update={
        "delivered": delivered,
        "undelivered": undelivered,
        "fill_rate": fill_rate,
        "remarks": fill_rate_remarks(fill_rate),
    })
