"""
Dashboard summary schemas.
"""

from datetime import date
from decimal import Decimal

from models.base import BaseSchema


class LowFillRateAlert(BaseSchema):
    """Store/SKU row performing below the alert threshold."""

    sku: str
    description: str = ""
    store: str
    store_order: Decimal
    delivered: Decimal
    undelivered: Decimal
    fill_rate: int
    week_number: int
    week_start_date: date


class DashboardSummary(BaseSchema):
    """Week-level KPIs across every store."""

    week_start_date: date
    week_end_date: date
    week_number: int
    year: int
    all_stores_fill_rate: int = 0
    stores_reporting: int = 0
    total_stores: int = 0
    active_skus: int = 0
    low_fill_rate: list[LowFillRateAlert] = []
