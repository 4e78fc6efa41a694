"""
Statement Service

Reads the four ledgers of one profile and hands them to the engine.
Every call re-reads the store, so a statement always reflects the
latest committed edit.
"""

from gharkhata.ledgers import AttendanceLedger, HelperRegistry, MilkLedger, PaymentLedger
from gharkhata.models.statement import MonthlyStatement
from gharkhata.statements.dashboard import DashboardSummary, build_dashboard
from gharkhata.statements.engine import compute_monthly_statement


class StatementService:
    """Monthly statements for the profile the ledgers are bound to."""

    def __init__(
        self,
        registry: HelperRegistry,
        attendance: AttendanceLedger,
        milk: MilkLedger,
        payments: PaymentLedger,
    ):
        self.registry = registry
        self.attendance = attendance
        self.milk = milk
        self.payments = payments

    def compute_monthly_statement(self, month: str) -> MonthlyStatement:
        return compute_monthly_statement(
            month,
            helpers=self.registry.list_helpers(),
            attendance=self.attendance.list_marks(),
            milk_entries=self.milk.list_entries(),
            payments=self.payments.list_payments(),
        )

    def dashboard(self, month: str) -> DashboardSummary:
        """Dashboard figures, computed from a fresh statement."""
        statement = self.compute_monthly_statement(month)
        return build_dashboard(
            month,
            statement,
            milk_entries=self.milk.list_entries(),
            helper_count=len(self.registry.list_helpers()),
        )
