"""
Dashboard summary service.

Week-level KPIs across every store:
- all-stores fill rate: rounded mean of row fill rates (rows with orders)
- stores reporting: distinct stores with rows this week
- low fill-rate alerts: rows under the threshold, worst first
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
import structlog

from config import settings
from models.dashboard import DashboardSummary, LowFillRateAlert
from models.report import ReportItem, WeekWindow
from services.report_gateway import ReportGateway, get_report_gateway
from services.week_service import current_week

logger = structlog.get_logger(__name__)


def build_summary(
    items: list[ReportItem],
    window: WeekWindow,
    threshold: int,
    known_stores: Optional[list[str]] = None
) -> DashboardSummary:
    """
    Summarize one week of report items.

    Rows with neither orders nor deliveries carry no signal and are
    never reported as alerts.
    """
    ordered_rows = [item for item in items if item.store_order > 0]
    if ordered_rows:
        mean = Decimal(sum(item.fill_rate for item in ordered_rows)) / len(ordered_rows)
        all_stores_fill_rate = int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    else:
        all_stores_fill_rate = 0

    reporting = {item.store for item in items}

    alerts = [
        LowFillRateAlert(
            sku=item.sku,
            description=item.description,
            store=item.store,
            store_order=item.store_order,
            delivered=item.delivered,
            undelivered=item.undelivered,
            fill_rate=item.fill_rate,
            week_number=item.week_number,
            week_start_date=item.week_start_date,
        )
        for item in items
        if not (item.store_order == 0 and item.delivered == 0)
        and item.fill_rate < threshold
    ]
    alerts.sort(key=lambda alert: alert.fill_rate)

    return DashboardSummary(
        week_start_date=window.week_start_date,
        week_end_date=window.week_end_date,
        week_number=window.week_number,
        year=window.year,
        all_stores_fill_rate=all_stores_fill_rate,
        stores_reporting=len(reporting),
        total_stores=len(reporting | set(known_stores or [])),
        active_skus=len({item.sku for item in items}),
        low_fill_rate=alerts,
    )


class DashboardService:
    """Reads one week from the gateway and summarizes it."""

    def __init__(self, gateway: Optional[ReportGateway] = None):
        self.gateway = gateway or get_report_gateway()

    def get_summary(
        self,
        window: Optional[WeekWindow] = None,
        threshold: Optional[int] = None
    ) -> DashboardSummary:
        window = window or current_week()
        threshold = settings.low_fill_rate_threshold if threshold is None else threshold

        items = self.gateway.select_window(window)
        summary = build_summary(items, window, threshold, settings.known_stores)

        logger.info(
            "dashboard_summary_built",
            week_start_date=str(window.week_start_date),
            rows=len(items),
            alerts=len(summary.low_fill_rate)
        )

        return summary


# Singleton instance
_dashboard_service: Optional[DashboardService] = None


def get_dashboard_service() -> DashboardService:
    """Get or create DashboardService instance."""
    global _dashboard_service
    if _dashboard_service is None:
        _dashboard_service = DashboardService()
    return _dashboard_service
