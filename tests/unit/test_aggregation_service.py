"""
Unit tests for cross-store aggregation.
"""

from decimal import Decimal

from models.report import ProductType
from services.aggregation_service import aggregate
from tests.factories import ReportRowFactory


def _item(store, sku, store_order, delivered, **kwargs):
    return ReportRowFactory.create_item(
        store=store, sku=sku, store_order=store_order, delivered=delivered, **kwargs
    )


class TestAggregate:
    """Tests for aggregate."""

    def test_sums_quantities_across_stores(self, week):
        windowed = {
            "Makati": [_item("Makati", "FG-1001", 10, 10)],
            "Ortigas": [_item("Ortigas", "FG-1001", 10, 5)],
        }

        [row] = aggregate(windowed, week)

        assert row.total_store_order == Decimal("20")
        assert row.total_delivered == Decimal("15")
        assert row.total_undelivered == Decimal("5")
        assert row.fill_rate == 75
        assert row.remarks == "Fair"
        assert row.store_count == 2
        assert row.stores == ["Makati", "Ortigas"]

    def test_fill_rate_from_totals_not_mean(self, week):
        """Per-store rates 100 and 10 average to 55; totals 20/110 give 18."""
        windowed = {
            "Makati": [_item("Makati", "FG-1001", 10, 10)],
            "Ortigas": [_item("Ortigas", "FG-1001", 100, 10)],
        }

        [row] = aggregate(windowed, week)

        assert row.fill_rate == 18

    def test_rows_sorted_by_sku(self, week):
        windowed = {
            "Makati": [_item("Makati", "FG-2000", 1, 1), _item("Makati", "FG-1000", 1, 1)],
            "Ortigas": [_item("Ortigas", "AB-0001", 1, 0)],
        }

        rows = aggregate(windowed, week)

        assert [row.sku for row in rows] == ["AB-0001", "FG-1000", "FG-2000"]

    def test_descriptive_fields_from_first_item(self, week):
        windowed = {
            "Makati": [_item("Makati", "FG-1001", 5, 5, description="Pork BBQ", price=120)],
            "Ortigas": [_item("Ortigas", "FG-1001", 5, 5, description="Pork BBQ (old)", price=99, type="packaging")],
        }

        [row] = aggregate(windowed, week)

        assert row.description == "Pork BBQ"
        assert row.price == Decimal("120")
        assert row.type == ProductType.FINISHED_GOODS

    def test_store_listed_once(self, week):
        windowed = {
            "Makati": [
                _item("Makati", "FG-1001", 5, 5),
                _item("Makati", "FG-1001", 5, 0),
            ],
        }

        [row] = aggregate(windowed, week)

        assert row.stores == ["Makati"]
        assert row.store_count == 2

    def test_stamps_window(self, week):
        [row] = aggregate({"Makati": [_item("Makati", "FG-1001", 1, 1)]}, week)

        assert row.week_start_date == week.week_start_date
        assert row.week_end_date == week.week_end_date
        assert row.week_number == 42

    def test_zero_orders_give_zero_rate(self, week):
        [row] = aggregate({"Makati": [_item("Makati", "FG-1001", 0, 0)]}, week)

        assert row.fill_rate == 0
        assert row.remarks == ""

    def test_empty_input(self, week):
        assert aggregate({}, week) == []
        assert aggregate({"Makati": [], "Ortigas": []}, week) == []
