"""Dashboard figures for one month, taken from the monthly statement."""

import calendar
from decimal import Decimal
from typing import Iterable

from pydantic import BaseModel, Field

from gharkhata.models.household import ZERO, MilkEntry
from gharkhata.models.statement import MonthlyStatement
from gharkhata.statements.engine import in_month
from gharkhata.validation.validator import is_month_key


class DashboardSummary(BaseModel):
    """Headline numbers and the daily milk chart series."""

    month: str
    active_helpers: int = Field(ge=0)
    milk_liters: Decimal
    milk_cost: Decimal
    salary_outstanding: Decimal
    milk_outstanding: Decimal
    daily_milk_liters: list[Decimal] = Field(
        default_factory=list,
        description="Liters per day; index 0 is the 1st of the month"
    )


def daily_milk_series(month: str, milk_entries: Iterable[MilkEntry]) -> list[Decimal]:
    """Liters delivered on each calendar day of the month."""
    if not is_month_key(month):
        raise ValueError(f"Month must be in YYYY-MM form, got {month!r}")
    year, month_number = int(month[:4]), int(month[5:7])
    days_in_month = calendar.monthrange(year, month_number)[1]
    series = [ZERO] * days_in_month

    for entry in milk_entries:
        if not in_month(entry.date, month):
            continue
        day_part = entry.date[len(month) + 1:]
        if not day_part.isdigit():
            continue
        day = int(day_part)
        if 1 <= day <= days_in_month:
            series[day - 1] += entry.liters
    return series


def build_dashboard(
    month: str,
    statement: MonthlyStatement,
    milk_entries: Iterable[MilkEntry],
    helper_count: int,
) -> DashboardSummary:
    return DashboardSummary(
        month=month,
        active_helpers=helper_count,
        milk_liters=statement.milk_totals.liters,
        milk_cost=statement.milk_totals.cost,
        salary_outstanding=statement.salary_totals.outstanding,
        milk_outstanding=statement.milk_totals.outstanding,
        daily_milk_liters=daily_milk_series(month, milk_entries),
    )
