"""Monthly statement: the aggregation engine and everything that reads it."""

from gharkhata.statements.dashboard import DashboardSummary, build_dashboard, daily_milk_series
from gharkhata.statements.engine import calculate_salary, compute_monthly_statement, in_month
from gharkhata.statements.export import (
    build_statement_workbook,
    export_statement_workbook,
    format_money,
    payment_recipient,
    render_statement_html,
)
from gharkhata.statements.service import StatementService

__all__ = [
    "DashboardSummary",
    "StatementService",
    "build_dashboard",
    "build_statement_workbook",
    "calculate_salary",
    "compute_monthly_statement",
    "daily_milk_series",
    "export_statement_workbook",
    "format_money",
    "in_month",
    "payment_recipient",
    "render_statement_html",
]
