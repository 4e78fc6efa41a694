"""Tests for the dashboard summary."""

from decimal import Decimal

import pytest

from gharkhata.models import Helper, HelperRole, MilkEntry
from gharkhata.statements import build_dashboard, compute_monthly_statement, daily_milk_series


def entry(entry_id, entry_date, liters, price=50):
    return MilkEntry(id=entry_id, date=entry_date, liters=liters, price_per_liter=price)


class TestDailyMilkSeries:
    """Tests for the per-day chart series."""

    def test_one_slot_per_day(self):
        assert len(daily_milk_series("2024-02", [])) == 29
        assert len(daily_milk_series("2023-02", [])) == 28
        assert len(daily_milk_series("2024-05", [])) == 31

    def test_sums_by_day(self):
        series = daily_milk_series("2024-05", [
            entry("m1", "2024-05-01", 2),
            entry("m2", "2024-05-01", "1.5"),
            entry("m3", "2024-05-31", 1),
            entry("m4", "2024-06-01", 9),
        ])
        assert series[0] == Decimal("3.5")
        assert series[30] == Decimal("1")
        assert sum(series) == Decimal("4.5")

    def test_invalid_days_ignored(self):
        series = daily_milk_series("2024-04", [
            entry("m1", "2024-04-31", 2),
            entry("m2", "2024-04-00", 2),
            entry("m3", "2024-04-xx", 2),
        ])
        assert sum(series) == Decimal("0")

    @pytest.mark.parametrize("month", ["2024-5", "2024-13", "2024-00"])
    def test_invalid_month_raises(self, month):
        with pytest.raises(ValueError):
            daily_milk_series(month, [])


class TestBuildDashboard:
    """Tests for the headline numbers."""

    def test_figures_come_from_statement(self):
        helpers = [
            Helper(id="h_1", name="Sunita", role=HelperRole.MAID, monthly_salary=3000),
            Helper(id="h_2", name="Ramu", role=HelperRole.MILKMAN),
        ]
        milk = [entry("m1", "2024-05-02", 10, 40), entry("m2", "2024-05-03", 5, 50)]
        statement = compute_monthly_statement("2024-05", helpers, [], milk, [])

        summary = build_dashboard("2024-05", statement, milk, helper_count=len(helpers))

        assert summary.active_helpers == 2
        assert summary.milk_liters == Decimal("15")
        assert summary.milk_cost == Decimal("650")
        assert summary.milk_outstanding == Decimal("650")
        assert summary.salary_outstanding == Decimal("0")
        assert summary.daily_milk_liters[1] == Decimal("10")
        assert summary.daily_milk_liters[2] == Decimal("5")
