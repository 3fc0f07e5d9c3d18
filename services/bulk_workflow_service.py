"""
Bulk report workflows.

Multi-step operations over many report items:
- initialize a store's week from the SKU catalog
- copy a store's previous week into the active week
- clear one store's week
- clear every store's week

Per-item failures are counted and logged; only a failure to start
(no store selected, source week unreadable) aborts a workflow.
Callers confirm intent before invoking these.
"""

from decimal import Decimal
from typing import Optional
import structlog

from models.report import (
    ALL_STORES,
    CatalogEntry,
    ClearResult,
    CopyResult,
    InitializeResult,
    ReportItem,
    WeekWindow,
)
from services.batch_runner import BatchRunner
from services.report_store import ReportStore
from services.week_service import previous_week
from exceptions import StoreNotSelectedError

logger = structlog.get_logger(__name__)


def _require_store(store: Optional[str], operation: str) -> str:
    if not store or store == ALL_STORES:
        raise StoreNotSelectedError(operation)
    return store


def _item_key(item: ReportItem) -> str:
    return item.sku


class BulkWorkflowService:
    """
    Bulk operations composed from the report store and its gateway.

    All remote writes go through ReportStore.upsert so every record is
    validated and recomputed the same way as single-item edits.
    """

    def __init__(self, report_store: ReportStore, runner: Optional[BatchRunner] = None):
        self.report_store = report_store
        self.gateway = report_store.gateway
        self.runner = runner or BatchRunner()

    # ===================
    # SEEDING
    # ===================

    def initialize_week_from_catalog(
        self,
        store: str,
        window: WeekWindow,
        catalog: list[CatalogEntry]
    ) -> InitializeResult:
        """
        Create a zero-valued report item for every catalog SKU the
        store does not have yet in this week.

        Args:
            store: Target store
            window: Target week
            catalog: Catalog entries, in catalog order

        Returns:
            InitializeResult with inserted, skipped and failed counts
        """
        store = _require_store(store, "initialize_week")

        logger.info(
            "initializing_week_from_catalog",
            store=store,
            week_start_date=str(window.week_start_date),
            catalog_size=len(catalog)
        )

        pending: list[ReportItem] = []
        seen: set[str] = set()
        skipped = 0
        for entry in catalog:
            if entry.sku in seen or self.report_store.find(store, entry.sku, window):
                skipped += 1
                continue
            seen.add(entry.sku)
            pending.append(ReportItem(
                store=store,
                sku=entry.sku,
                description=entry.description,
                type=entry.type,
                um=entry.um,
                price=entry.price,
                week_start_date=window.week_start_date,
                week_end_date=window.week_end_date,
                week_number=window.week_number,
                year=window.year,
            ))

        result = self.runner.run(
            pending,
            self.report_store.upsert,
            key=_item_key,
            operation="initialize_week"
        )

        logger.info(
            "week_initialized_from_catalog",
            store=store,
            inserted=result.succeeded,
            skipped=skipped,
            failed=result.failed
        )

        return InitializeResult(
            inserted_count=result.succeeded,
            skipped_count=skipped,
            failed_count=result.failed,
        )

    def copy_from_previous_week(self, store: str, window: WeekWindow) -> CopyResult:
        """
        Copy the store's items from the week before into `window`.

        Copies keep SKU details and store order; delivered quantities,
        fill rate and remarks start over. Ids are never carried over.

        Returns:
            CopyResult with saved and failed counts
        """
        store = _require_store(store, "copy_previous_week")
        source = previous_week(window)

        logger.info(
            "copying_previous_week",
            store=store,
            source_week_start_date=str(source.week_start_date),
            target_week_start_date=str(window.week_start_date)
        )

        source_items = self.gateway.select_window(source, store=store)

        clones = [
            item.model_copy(update={
                "id": None,
                "created_at": None,
                "delivered": Decimal("0"),
                "undelivered": Decimal("0"),
                "fill_rate": 0,
                "remarks": "",
                "week_start_date": window.week_start_date,
                "week_end_date": window.week_end_date,
                "week_number": window.week_number,
                "year": window.year,
            })
            for item in source_items
        ]

        result = self.runner.run(
            clones,
            self.report_store.upsert,
            key=_item_key,
            operation="copy_previous_week"
        )

        logger.info(
            "previous_week_copied",
            store=store,
            saved=result.succeeded,
            failed=result.failed
        )

        return CopyResult(
            saved_count=result.succeeded,
            failed_count=result.failed,
            source_week_start_date=source.week_start_date,
        )

    # ===================
    # CLEARING
    # ===================

    def clear_store_for_week(self, store: str, window: WeekWindow) -> ClearResult:
        """Delete one store's items for a week, remotely then from cache."""
        store = _require_store(store, "clear_store_week")

        deleted = self.gateway.delete_window(window, store=store)
        dropped = self.report_store.drop_window(window, store=store)

        logger.info(
            "store_week_cleared",
            store=store,
            week_start_date=str(window.week_start_date),
            deleted=deleted,
            dropped_from_cache=dropped
        )

        return ClearResult(
            deleted_count=deleted,
            store=store,
            week_start_date=window.week_start_date,
        )

    def clear_all_stores_for_week(self, window: WeekWindow) -> ClearResult:
        """Delete every store's items for a week, remotely then from cache."""
        deleted = self.gateway.delete_window(window)
        dropped = self.report_store.drop_window(window)

        logger.info(
            "all_stores_week_cleared",
            week_start_date=str(window.week_start_date),
            deleted=deleted,
            dropped_from_cache=dropped
        )

        return ClearResult(
            deleted_count=deleted,
            week_start_date=window.week_start_date,
        )
