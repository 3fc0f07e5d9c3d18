"""
Report gateway: persistence boundary for report items.

Wraps the Supabase `production_reports` relation. Every call either
returns canonical rows (as ReportItem) or raises a typed AppError:

- unique (store, sku, week) violation -> ReportItemExistsError (409)
- relation missing / schema cache stale -> SchemaNotReadyError (503)
- transport failure -> ConnectivityError (503)
- update/delete matching no row -> ReportItemNotFoundError (404)
- anything else -> DatabaseError (500)
"""

from typing import Optional
import httpx
import structlog
from postgrest.exceptions import APIError

from config import get_supabase_client, settings
from models.report import ReportItem, WeekWindow
from exceptions import (
    AppError,
    ConflictError,
    ConnectivityError,
    DatabaseError,
    ReportItemExistsError,
    ReportItemNotFoundError,
    SchemaNotReadyError,
)

logger = structlog.get_logger(__name__)

# PostgreSQL / PostgREST error codes
UNIQUE_VIOLATION = "23505"
UNDEFINED_TABLE = "42P01"
SCHEMA_NOT_READY_CODES = {UNDEFINED_TABLE, "PGRST204", "PGRST205"}

# PostgREST caps a single response; select-all pages through
FETCH_PAGE_SIZE = 1000


def map_client_error(e: Exception, operation: str, relation: str) -> AppError:
    """
    Translate a Supabase client exception into the application taxonomy.

    Unique violations are left to the caller, which knows the record.
    """
    if isinstance(e, AppError):
        return e

    if isinstance(e, APIError):
        code = str(e.code or "")
        message = e.message or str(e)
        if code == UNIQUE_VIOLATION:
            return ConflictError(message, details={"relation": relation})
        if code in SCHEMA_NOT_READY_CODES or "schema cache" in message.lower():
            return SchemaNotReadyError(relation, details={"code": code})
        return DatabaseError(operation, message, details={"code": code})

    if isinstance(e, httpx.HTTPError):
        return ConnectivityError(
            f"Could not reach {relation} during {operation}",
            details={"error": str(e)}
        )

    return DatabaseError(operation, str(e))


class ReportGateway:
    """
    Remote store operations for report items.

    The report store is its only caller.
    """

    def __init__(self, client=None):
        self.db = client or get_supabase_client()
        self.table = settings.reports_table

    # ===================
    # ERROR MAPPING
    # ===================

    def _map_error(
        self,
        e: Exception,
        operation: str,
        item: Optional[ReportItem] = None
    ) -> AppError:
        if isinstance(e, APIError) and str(e.code or "") == UNIQUE_VIOLATION:
            if item is not None:
                return ReportItemExistsError(
                    item.store, item.sku, item.week_start_date.isoformat()
                )
            return ConflictError(e.message or str(e), code="REPORT_ITEM_EXISTS")
        return map_client_error(e, operation, self.table)

    def _fail(self, e: Exception, operation: str, item: Optional[ReportItem] = None, **context):
        error = self._map_error(e, operation, item)
        logger.error(
            "report_gateway_failed",
            operation=operation,
            code=error.code,
            error=str(e),
            **context
        )
        if error is e:
            raise error
        raise error from e

    # ===================
    # READ OPERATIONS
    # ===================

    def select_all(self) -> list[ReportItem]:
        """
        Get every report item across all stores and weeks.

        Pages through the relation in FETCH_PAGE_SIZE chunks.
        """
        logger.info("getting_all_report_items")

        items: list[ReportItem] = []
        offset = 0
        try:
            while True:
                result = (
                    self.db.table(self.table)
                    .select("*")
                    .order("id")
                    .range(offset, offset + FETCH_PAGE_SIZE - 1)
                    .execute()
                )
                rows = result.data or []
                items.extend(ReportItem(**row) for row in rows)
                if len(rows) < FETCH_PAGE_SIZE:
                    break
                offset += FETCH_PAGE_SIZE
        except Exception as e:
            self._fail(e, "select")

        logger.info("report_items_retrieved", count=len(items))
        return items

    def select_window(
        self,
        window: WeekWindow,
        store: Optional[str] = None
    ) -> list[ReportItem]:
        """
        Get report items for one week, optionally for one store.

        Args:
            window: Week to match (exact start and end dates)
            store: Store filter; None for every store
        """
        logger.debug(
            "getting_report_items_for_window",
            store=store,
            week_start_date=str(window.week_start_date)
        )

        try:
            query = (
                self.db.table(self.table)
                .select("*")
                .eq("week_start_date", window.week_start_date.isoformat())
                .eq("week_end_date", window.week_end_date.isoformat())
            )
            if store:
                query = query.eq("store", store)

            result = query.order("sku").execute()
            return [ReportItem(**row) for row in result.data or []]

        except Exception as e:
            self._fail(e, "select", store=store)

    # ===================
    # WRITE OPERATIONS
    # ===================

    def insert(self, item: ReportItem) -> ReportItem:
        """
        Insert a new report item.

        Returns:
            Canonical row including the database-assigned id
        """
        logger.info("inserting_report_item", store=item.store, sku=item.sku)

        try:
            result = (
                self.db.table(self.table)
                .insert(item.to_row())
                .execute()
            )
            if not result.data:
                raise DatabaseError("insert", "no row returned")

            return ReportItem(**result.data[0])

        except Exception as e:
            self._fail(e, "insert", item=item, store=item.store, sku=item.sku)

    def update(self, item: ReportItem) -> ReportItem:
        """
        Update an existing report item by id.

        Raises:
            ReportItemNotFoundError: If no row has this id
        """
        logger.info("updating_report_item", item_id=item.id, store=item.store)

        try:
            result = (
                self.db.table(self.table)
                .update(item.to_row())
                .eq("id", item.id)
                .execute()
            )
            if not result.data:
                raise ReportItemNotFoundError(item.id)

            return ReportItem(**result.data[0])

        except Exception as e:
            self._fail(e, "update", item=item, item_id=item.id)

    def delete(self, item_id: str) -> bool:
        """
        Delete a report item by id.

        Raises:
            ReportItemNotFoundError: If no row has this id
        """
        logger.info("deleting_report_item", item_id=item_id)

        try:
            result = (
                self.db.table(self.table)
                .delete()
                .eq("id", item_id)
                .execute()
            )
            if not result.data:
                raise ReportItemNotFoundError(item_id)

            return True

        except Exception as e:
            self._fail(e, "delete", item_id=item_id)

    def delete_window(
        self,
        window: WeekWindow,
        store: Optional[str] = None
    ) -> int:
        """
        Delete every report item in a week, optionally for one store.

        Returns:
            Number of rows deleted
        """
        logger.info(
            "deleting_report_items_for_window",
            store=store,
            week_start_date=str(window.week_start_date)
        )

        try:
            query = (
                self.db.table(self.table)
                .delete()
                .eq("week_start_date", window.week_start_date.isoformat())
                .eq("week_end_date", window.week_end_date.isoformat())
            )
            if store:
                query = query.eq("store", store)

            result = query.execute()
            deleted = len(result.data) if result.data else 0

            logger.info("report_items_deleted_for_window", store=store, count=deleted)
            return deleted

        except Exception as e:
            self._fail(e, "delete", store=store)


# Singleton instance
_report_gateway: Optional[ReportGateway] = None


def get_report_gateway() -> ReportGateway:
    """Get or create ReportGateway instance."""
    global _report_gateway
    if _report_gateway is None:
        _report_gateway = ReportGateway()
    return _report_gateway
