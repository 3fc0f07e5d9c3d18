"""
Report session: the state and commands behind the report screen.

Holds the selected scope (one store or ALL_STORES), the active week and
the view's search/page state, and routes commands to the report store
and the bulk workflows. One session serves one active user.
"""

from datetime import date
from typing import Optional
import structlog

from config import settings
from models.base import PaginatedResponse
from models.report import (
    ALL_STORES,
    ClearResult,
    CopyResult,
    InitializeResult,
    ReportItem,
    ReportItemCreate,
    ReportItemUpdate,
    WeekWindow,
)
from services.aggregation_service import aggregate
from services.bulk_workflow_service import BulkWorkflowService
from services.catalog_service import CatalogService, get_catalog_service
from services.pagination_service import ViewState
from services.report_store import ReportStore
from services.week_service import current_week, week_for_date, week_options
from exceptions import NotFoundError, ReportItemNotFoundError, StoreNotSelectedError

logger = structlog.get_logger(__name__)


class ReportSessionService:
    """
    Report screen state and commands.

    Per-store scope shows the store's windowed items; ALL_STORES shows
    the cross-store aggregation of every store's windowed items.
    """

    def __init__(
        self,
        report_store: Optional[ReportStore] = None,
        catalog_service: Optional[CatalogService] = None,
        workflows: Optional[BulkWorkflowService] = None,
        today: Optional[date] = None,
    ):
        self.report_store = report_store or ReportStore()
        self._catalog_service = catalog_service
        self.workflows = workflows or BulkWorkflowService(self.report_store)
        self.view = ViewState(settings.report_page_size)

        stores = self.report_store.known_stores()
        self.scope = stores[0] if stores else ALL_STORES
        self.report_store.refilter_to_window(current_week(today))

    @property
    def catalog_service(self) -> CatalogService:
        if self._catalog_service is None:
            self._catalog_service = get_catalog_service()
        return self._catalog_service

    @property
    def window(self) -> WeekWindow:
        return self.report_store.window

    @property
    def is_aggregate(self) -> bool:
        return self.scope == ALL_STORES

    def _selected_store(self, operation: str) -> str:
        if self.is_aggregate:
            raise StoreNotSelectedError(operation)
        return self.scope

    # ===================
    # SELECTION
    # ===================

    def load(self) -> int:
        """Reload all report items and re-derive the active week."""
        return self.report_store.load_all()

    def select_scope(self, store: str) -> str:
        """
        Select a store or the aggregate scope.

        Raises:
            NotFoundError: store is not registered
        """
        if store != ALL_STORES and store not in self.report_store.known_stores():
            raise NotFoundError("Store", store, code="STORE_NOT_FOUND")
        self.scope = store
        logger.info("scope_selected", store=store)
        return store

    def select_week(self, day: date) -> WeekWindow:
        """Activate the week containing `day`. Local only."""
        window = week_for_date(day)
        self.report_store.refilter_to_window(window)
        logger.info(
            "week_selected",
            week_start_date=str(window.week_start_date),
            week_number=window.week_number
        )
        return window

    def week_options(
        self,
        past_count: Optional[int] = None,
        future_count: Optional[int] = None
    ) -> list[WeekWindow]:
        return week_options(
            self.window,
            settings.week_options_past if past_count is None else past_count,
            settings.week_options_future if future_count is None else future_count,
        )

    def set_search(self, term: str) -> None:
        self.view.set_search(term)

    def set_page(self, page: int) -> None:
        self.view.set_page(page)

    # ===================
    # VIEW
    # ===================

    def current_items(self) -> list:
        """Unfiltered rows of the active scope and week."""
        if self.is_aggregate:
            return aggregate(self.report_store.all_windowed(), self.window)
        return self.report_store.windowed_for(self.scope)

    def render(self) -> PaginatedResponse:
        """Current page after search filtering."""
        return self.view.render(self.current_items())

    # ===================
    # ITEM COMMANDS
    # ===================

    def add_item(self, data: ReportItemCreate) -> ReportItem:
        """Add a SKU to the selected store for the active week."""
        store = self._selected_store("add_item")
        window = self.window
        item = ReportItem(
            store=store,
            sku=data.sku,
            description=data.description,
            type=data.type,
            um=data.um,
            price=data.price,
            store_order=data.store_order,
            delivered=data.delivered,
            week_start_date=window.week_start_date,
            week_end_date=window.week_end_date,
            week_number=window.week_number,
            year=window.year,
        )
        return self.report_store.upsert(item)

    def _cached_item(self, item_id: str, operation: str) -> ReportItem:
        store = self._selected_store(operation)
        existing = self.report_store.find_by_id(item_id, store)
        if existing is None:
            raise ReportItemNotFoundError(item_id)
        return existing

    def edit_item(self, item_id: str, data: ReportItemUpdate) -> ReportItem:
        """Apply the provided fields to a cached item and save it."""
        existing = self._cached_item(item_id, "edit_item")
        changes = data.model_dump(exclude_none=True)
        if not changes:
            return existing
        updated = ReportItem.model_validate({**existing.model_dump(), **changes})
        return self.report_store.upsert(updated)

    def recompute_row(self, item_id: str, store_order, delivered) -> ReportItem:
        """Set a row's quantities; derived fields follow on save."""
        existing = self._cached_item(item_id, "recompute_row")
        updated = ReportItem.model_validate({
            **existing.model_dump(),
            "store_order": store_order,
            "delivered": delivered,
        })
        return self.report_store.upsert(updated)

    def delete_item(self, item_id: str) -> None:
        existing = self._cached_item(item_id, "delete_item")
        self.report_store.remove(existing.id, existing.store)

    # ===================
    # BULK COMMANDS
    # ===================

    def initialize_week(self) -> InitializeResult:
        """Seed the selected store's week from the catalog."""
        store = self._selected_store("initialize_week")
        catalog = self.catalog_service.get_all()
        return self.workflows.initialize_week_from_catalog(store, self.window, catalog)

    def copy_previous_week(self) -> CopyResult:
        store = self._selected_store("copy_previous_week")
        return self.workflows.copy_from_previous_week(store, self.window)

    def clear_store_week(self) -> ClearResult:
        store = self._selected_store("clear_store_week")
        return self.workflows.clear_store_for_week(store, self.window)

    def clear_all_stores_week(self) -> ClearResult:
        return self.workflows.clear_all_stores_for_week(self.window)


# Singleton instance
_report_session_service: Optional[ReportSessionService] = None


def get_report_session_service() -> ReportSessionService:
    """Get or create ReportSessionService instance."""
    global _report_session_service
    if _report_session_service is None:
        _report_session_service = ReportSessionService()
    return _report_session_service
