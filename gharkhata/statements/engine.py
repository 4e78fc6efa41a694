"""
Monthly Aggregation Engine

Turns the four ledgers into one MonthlyStatement for a YYYY-MM month.

DESIGN DECISION: This is the ONLY place salary and milk figures are
computed. The dashboard, the payments page and both exports read the
statement it returns.

The function is pure: it takes already-read ledger records, touches no
store and keeps no state, so calling it twice on the same inputs gives
the same statement.

Rules:
- A date belongs to a month when it starts with "<month>-". Dates are
  never parsed, so a malformed "2024-013-05" matches no month.
- Milkmen get no salary line; they are settled through the milk bill.
- Monthly pay is prorated by present / recorded days and is 0 when no
  day was recorded. Daily pay is the stored rate times present days.
- Outstanding is max(0, owed - paid); anything within PAID_TOLERANCE
  counts as Paid.
- Ids missing from the registry are kept and labelled "Unknown".
"""

from collections import Counter, defaultdict
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from gharkhata.logger import get_logger
from gharkhata.models.household import (
    ZERO,
    AttendanceMark,
    AttendanceStatus,
    Helper,
    HelperRole,
    MilkEntry,
    Payment,
    PaymentKind,
    PaymentType,
)
from gharkhata.models.statement import (
    UNASSIGNED_LABEL,
    UNKNOWN_LABEL,
    MaidsSummary,
    MilkBucket,
    MilkTotals,
    MonthlyStatement,
    SalaryLine,
    SalaryTotals,
    SettlementStatus,
    bucket_for,
)
from gharkhata.validation.validator import is_month_key


logger = get_logger(__name__)


def in_month(date_key: str, month: str) -> bool:
    """True when a YYYY-MM-DD key falls in a YYYY-MM month."""
    return isinstance(date_key, str) and date_key.startswith(f"{month}-")


def outstanding_amount(owed: Decimal, paid: Decimal) -> Decimal:
    return max(ZERO, owed - paid)


def calculate_salary(helper: Helper, present_days: int, recorded_days: int) -> Decimal:
    """
    Salary earned by a helper in one month.

    DAILY helpers store their per-day rate in monthly_salary.
    """
    if helper.payment_type is PaymentType.DAILY:
        return helper.monthly_salary * present_days
    if recorded_days == 0:
        return ZERO
    return helper.monthly_salary * present_days / recorded_days


# =============================================================================
# STEP HELPERS
# =============================================================================

def _summarize_attendance(
    month: str,
    attendance: Iterable[AttendanceMark],
) -> tuple[Counter, Counter, list[str]]:
    """Present and recorded day counts per helper, plus first-seen ids."""
    present = Counter()
    recorded = Counter()
    seen = []
    for mark in attendance:
        if not in_month(mark.date, month) or not mark.status.is_recorded:
            continue
        if mark.helper_id not in recorded:
            seen.append(mark.helper_id)
        recorded[mark.helper_id] += 1
        if mark.status is AttendanceStatus.PRESENT:
            present[mark.helper_id] += 1
    return present, recorded, seen


def _sum_payments(
    payments: Sequence[Payment],
    kind: PaymentKind,
) -> tuple[dict[Optional[str], Decimal], list[Optional[str]]]:
    """Amounts per helper id (None for no helper), plus first-seen ids."""
    totals = defaultdict(lambda: ZERO)
    seen = []
    for payment in payments:
        if payment.kind is not kind:
            continue
        if payment.helper_id not in totals:
            seen.append(payment.helper_id)
        totals[payment.helper_id] += payment.amount
    return totals, seen


def _salary_lines(
    helpers: Sequence[Helper],
    present: Counter,
    recorded: Counter,
    attendance_ids: list[str],
    salary_paid: dict[Optional[str], Decimal],
    salary_payee_ids: list[Optional[str]],
) -> list[SalaryLine]:
    lines = []
    registry_ids = set()

    for helper in helpers:
        registry_ids.add(helper.id)
        if helper.is_milkman:
            continue
        calculated = calculate_salary(helper, present[helper.id], recorded[helper.id])
        paid = salary_paid.get(helper.id, ZERO)
        outstanding = outstanding_amount(calculated, paid)
        lines.append(SalaryLine(
            helper_id=helper.id,
            label=helper.name,
            role=helper.role,
            payment_type=helper.payment_type,
            in_registry=True,
            present_days=present[helper.id],
            recorded_days=recorded[helper.id],
            calculated_salary=calculated,
            paid_salary=paid,
            outstanding_salary=outstanding,
            status=SettlementStatus.from_outstanding(outstanding),
        ))

    # Deleted helpers keep their payments and attendance on record.
    orphans = []
    for helper_id in salary_payee_ids + attendance_ids:
        if helper_id is None or helper_id in registry_ids or helper_id in orphans:
            continue
        orphans.append(helper_id)

    for helper_id in orphans:
        paid = salary_paid.get(helper_id, ZERO)
        lines.append(SalaryLine(
            helper_id=helper_id,
            label=UNKNOWN_LABEL,
            in_registry=False,
            present_days=present[helper_id],
            recorded_days=recorded[helper_id],
            calculated_salary=ZERO,
            paid_salary=paid,
            outstanding_salary=ZERO,
            status=SettlementStatus.PAID,
        ))

    return lines


def _milk_buckets(
    month: str,
    milk_entries: Iterable[MilkEntry],
    names: dict[str, str],
    milk_paid: dict[Optional[str], Decimal],
) -> list[MilkBucket]:
    liters = defaultdict(lambda: ZERO)
    cost = defaultdict(lambda: ZERO)
    order = []

    for entry in milk_entries:
        if not in_month(entry.date, month):
            continue
        key = bucket_for(entry.helper_id)
        if key not in liters:
            order.append(key)
        liters[key] += entry.liters
        # Priced per entry; the rate may change within a month.
        cost[key] += entry.cost

    buckets = []
    for key in order:
        if key.helper_id is None:
            label = UNASSIGNED_LABEL
        else:
            label = names.get(key.helper_id, UNKNOWN_LABEL)
        paid = milk_paid.get(key.helper_id, ZERO)
        outstanding = outstanding_amount(cost[key], paid)
        buckets.append(MilkBucket(
            bucket_key=key,
            label=label,
            liters=liters[key],
            cost=cost[key],
            paid=paid,
            outstanding=outstanding,
            status=SettlementStatus.from_outstanding(outstanding),
        ))
    return buckets


def _maids_summary(lines: list[SalaryLine]) -> MaidsSummary:
    maids = [line for line in lines if line.role is HelperRole.MAID]
    calculated = sum((line.calculated_salary for line in maids), ZERO)
    paid = sum((line.paid_salary for line in maids), ZERO)
    return MaidsSummary(
        count=len(maids),
        present_days=sum(line.present_days for line in maids),
        recorded_days=sum(line.recorded_days for line in maids),
        calculated=calculated,
        paid=paid,
        outstanding=outstanding_amount(calculated, paid),
    )


# =============================================================================
# ENTRY POINT
# =============================================================================

def compute_monthly_statement(
    month: str,
    helpers: Sequence[Helper],
    attendance: Iterable[AttendanceMark],
    milk_entries: Iterable[MilkEntry],
    payments: Iterable[Payment],
) -> MonthlyStatement:
    """
    Compute salary, milk and payment figures for one month.

    Args:
        month: Target month as YYYY-MM
        helpers: The full helper registry, in display order
        attendance: Every attendance mark
        milk_entries: Every milk entry
        payments: Every payment

    Returns:
        MonthlyStatement for the month

    Raises:
        ValueError: If month is not a YYYY-MM string
    """
    if not is_month_key(month):
        raise ValueError(f"Month must be in YYYY-MM form, got {month!r}")

    month_payments = [p for p in payments if p.month == month]

    present, recorded, attendance_ids = _summarize_attendance(month, attendance)
    salary_paid, salary_payee_ids = _sum_payments(month_payments, PaymentKind.SALARY)
    milk_paid, _ = _sum_payments(month_payments, PaymentKind.MILK)

    lines = _salary_lines(
        helpers, present, recorded, attendance_ids, salary_paid, salary_payee_ids
    )
    helper_names = {h.id: h.name for h in helpers}
    buckets = _milk_buckets(month, milk_entries, helper_names, milk_paid)

    # Every milk payment of the month counts here, whichever bucket it
    # names, so this can differ from the per-bucket outstanding amounts.
    milk_cost = sum((b.cost for b in buckets), ZERO)
    milk_paid_total = sum(milk_paid.values(), ZERO)
    milk_totals = MilkTotals(
        liters=sum((b.liters for b in buckets), ZERO),
        cost=milk_cost,
        paid=milk_paid_total,
        outstanding=outstanding_amount(milk_cost, milk_paid_total),
    )

    salary_calculated = sum((line.calculated_salary for line in lines), ZERO)
    salary_paid_total = sum((line.paid_salary for line in lines), ZERO)
    salary_totals = SalaryTotals(
        calculated=salary_calculated,
        paid=salary_paid_total,
        outstanding=outstanding_amount(salary_calculated, salary_paid_total),
    )

    statement = MonthlyStatement(
        month=month,
        per_helper_salary=lines,
        milk_by_bucket=buckets,
        milk_totals=milk_totals,
        salary_totals=salary_totals,
        maids_summary=_maids_summary(lines),
        payments_in_month=sorted(month_payments, key=lambda p: p.date, reverse=True),
        helper_names=helper_names,
    )

    logger.debug(
        "statement_computed",
        month=month,
        salary_lines=len(lines),
        milk_buckets=len(buckets),
        payments=len(month_payments),
    )
    return statement
