"""
Unit tests for the report session.

Tests scope and week selection, view rendering in per-store and
aggregate scope, and item and bulk commands.
"""

from datetime import date
from decimal import Decimal
import httpx
import pytest

from models.report import ALL_STORES, ReportItemCreate, ReportItemUpdate
from services.bulk_workflow_service import BulkWorkflowService
from services.catalog_service import CatalogService
from services.report_session_service import ReportSessionService
from exceptions import (
    ConnectivityError,
    NotFoundError,
    ReportItemNotFoundError,
    StoreNotSelectedError,
)
from tests.conftest import REPORT_UNIQUE_KEY
from tests.factories import CatalogFactory, ReportRowFactory

TODAY = date(2026, 10, 14)


@pytest.fixture
def session(mock_supabase, report_store, runner):
    mock_supabase.set_table_data("production_reports", [
        ReportRowFactory.create(id="1", store="Makati", sku="FG-1001", store_order=10, delivered=10, fill_rate=100, description="Pork BBQ"),
        ReportRowFactory.create(id="2", store="Makati", sku="FG-1002", store_order=12, delivered=9, fill_rate=75, description="Chicken Adobo"),
        ReportRowFactory.create(id="3", store="Ortigas", sku="FG-1001", store_order=10, delivered=5, fill_rate=50, description="Pork BBQ"),
        ReportRowFactory.create(
            id="4", store="Makati", sku="FG-1001", store_order=8, delivered=8, fill_rate=100,
            week_start=date(2026, 10, 5), week_number=41
        ),
    ], REPORT_UNIQUE_KEY)
    mock_supabase.set_table_data("sku_catalog", [
        CatalogFactory.create_row("FG-1001", description="Pork BBQ"),
        CatalogFactory.create_row("FG-1003", description="Beef Tapa"),
    ])
    service = ReportSessionService(
        report_store=report_store,
        catalog_service=CatalogService(client=mock_supabase),
        workflows=BulkWorkflowService(report_store, runner=runner),
        today=TODAY,
    )
    service.load()
    return service


# ===================
# SELECTION
# ===================

class TestSelection:
    """Tests for scope and week selection."""

    def test_defaults_to_first_store_and_current_week(self, session):
        assert session.scope == "Makati"
        assert session.window.week_start_date == date(2026, 10, 12)

    def test_defaults_to_aggregate_without_stores(self, gateway):
        from services.report_store import ReportStore

        service = ReportSessionService(
            report_store=ReportStore(gateway=gateway, known_stores=[]),
            today=TODAY,
        )

        assert service.scope == ALL_STORES
        assert service.is_aggregate

    def test_select_unknown_store(self, session):
        with pytest.raises(NotFoundError) as exc_info:
            session.select_scope("Nowhere")

        assert exc_info.value.code == "STORE_NOT_FOUND"
        assert session.scope == "Makati"

    def test_select_week_refilters_locally(self, mock_supabase, session):
        calls_before = len(mock_supabase.table("production_reports").calls)

        window = session.select_week(date(2026, 10, 8))

        assert window.week_number == 41
        assert [item.id for item in session.current_items()] == ["4"]
        assert len(mock_supabase.table("production_reports").calls) == calls_before

    def test_week_options(self, session):
        options = session.week_options(past_count=1, future_count=1)

        assert [option.week_number for option in options] == [42, 41, 43]


# ===================
# VIEW
# ===================

class TestView:
    """Tests for render in per-store and aggregate scope."""

    def test_store_scope_shows_windowed_items(self, session):
        page = session.render()

        assert [item.sku for item in page.data] == ["FG-1001", "FG-1002"]
        assert page.total == 2

    def test_aggregate_scope_rolls_up(self, session):
        session.select_scope(ALL_STORES)

        page = session.render()

        pork = next(row for row in page.data if row.sku == "FG-1001")
        assert pork.total_store_order == Decimal("20")
        assert pork.total_delivered == Decimal("15")
        assert pork.fill_rate == 75
        assert pork.stores == ["Makati", "Ortigas"]

    def test_search_filters_and_resets_page(self, session):
        session.set_page(5)
        session.set_search("adobo")

        page = session.render()

        assert page.page == 1
        assert [item.sku for item in page.data] == ["FG-1002"]

    def test_aggregate_search_matches_store(self, session):
        session.select_scope(ALL_STORES)
        session.set_search("ortigas")

        page = session.render()

        assert [row.sku for row in page.data] == ["FG-1001"]


# ===================
# ITEM COMMANDS
# ===================

class TestItemCommands:
    """Tests for add, edit, recompute and delete."""

    def test_add_item_to_selected_store(self, session):
        saved = session.add_item(ReportItemCreate(sku="FG-1003", store_order=8, delivered=2))

        assert saved.store == "Makati"
        assert saved.week_number == 42
        assert saved.fill_rate == 25
        assert saved.remarks == "Needs Attention"
        assert "FG-1003" in [item.sku for item in session.current_items()]

    def test_add_item_in_aggregate_scope(self, session):
        session.select_scope(ALL_STORES)

        with pytest.raises(StoreNotSelectedError):
            session.add_item(ReportItemCreate(sku="FG-1003"))

    def test_edit_item_recomputes(self, session):
        saved = session.edit_item("2", ReportItemUpdate(delivered=Decimal("12")))

        assert saved.fill_rate == 100
        assert saved.undelivered == Decimal("0")
        assert saved.description == "Chicken Adobo"

    def test_edit_without_changes_returns_cached(self, mock_supabase, session):
        calls_before = len(mock_supabase.table("production_reports").calls)

        item = session.edit_item("2", ReportItemUpdate())

        assert item.id == "2"
        assert len(mock_supabase.table("production_reports").calls) == calls_before

    def test_edit_item_of_other_store(self, session):
        with pytest.raises(ReportItemNotFoundError):
            session.edit_item("3", ReportItemUpdate(delivered=Decimal("1")))

    def test_recompute_row(self, session):
        saved = session.recompute_row("1", Decimal("10"), Decimal("15"))

        assert saved.delivered == Decimal("10")
        assert saved.fill_rate == 100
        assert session.report_store.find_by_id("1", "Makati").delivered == Decimal("10")

    def test_delete_item(self, session):
        session.delete_item("2")

        assert [item.id for item in session.current_items()] == ["1"]

    def test_delete_unknown_item(self, session):
        with pytest.raises(ReportItemNotFoundError):
            session.delete_item("missing")


# ===================
# BULK COMMANDS
# ===================

class TestBulkCommands:
    """Tests for the bulk commands."""

    def test_initialize_week_uses_catalog(self, session):
        result = session.initialize_week()

        assert result.inserted_count == 1
        assert result.skipped_count == 1
        assert "FG-1003" in [item.sku for item in session.current_items()]

    def test_copy_previous_week(self, session):
        session.clear_store_week()

        result = session.copy_previous_week()

        assert result.saved_count == 1
        [copy] = session.current_items()
        assert copy.sku == "FG-1001"
        assert copy.store_order == Decimal("8")
        assert copy.delivered == Decimal("0")

    def test_clear_store_week(self, session):
        result = session.clear_store_week()

        assert result.deleted_count == 2
        assert session.current_items() == []

    def test_clear_all_stores_week(self, session):
        result = session.clear_all_stores_week()

        assert result.deleted_count == 3
        session.select_scope(ALL_STORES)
        assert session.current_items() == []

    def test_initialize_week_with_unreachable_catalog(self, mock_supabase, session):
        mock_supabase.fail("sku_catalog", "select", httpx.ConnectError("down"))

        with pytest.raises(ConnectivityError):
            session.initialize_week()

        assert len(session.current_items()) == 2

    def test_bulk_commands_need_a_store(self, session):
        session.select_scope(ALL_STORES)

        with pytest.raises(StoreNotSelectedError):
            session.initialize_week()
        with pytest.raises(StoreNotSelectedError):
            session.copy_previous_week()
        with pytest.raises(StoreNotSelectedError):
            session.clear_store_week()
