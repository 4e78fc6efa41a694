"""
Statement Export

Two renderings of a MonthlyStatement:
- a standalone HTML page for printing (or saving as PDF from the browser)
- an Excel workbook with Salary, Milk and Payments sheets

Both read only the statement. Amounts are rounded to two decimals here
and nowhere earlier.
"""

from decimal import Decimal
from html import escape
from pathlib import Path
from typing import Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from gharkhata.logger import get_logger
from gharkhata.models.household import Payment, PaymentKind
from gharkhata.models.statement import MonthlyStatement


logger = get_logger(__name__)

DEFAULT_TITLE = "Singhi GharKhata Monthly Statement"

SALARY_HEADERS = ["Helper", "Role", "Present / Days", "Calculated Salary", "Paid", "Outstanding"]
MILK_HEADERS = ["Milkman", "Total Liters", "Total Amount", "Paid", "Outstanding"]
PAYMENT_HEADERS = ["Date", "Type", "To / For", "Month", "Amount"]


def format_money(value: Optional[Union[Decimal, int, float]]) -> str:
    """Format an amount as rupees, e.g. ₹1,234.50."""
    if value is None:
        value = 0
    return f"₹{Decimal(str(value)):,.2f}"


def format_liters(value: Decimal) -> str:
    return f"{value:.1f}"


def payment_recipient(payment: Payment, statement: MonthlyStatement) -> str:
    """Who a payment went to, as shown in the payment history."""
    if payment.kind is PaymentKind.MILK:
        return "Milk bill"
    return statement.helper_name(payment.helper_id)


def _role_text(line) -> str:
    return line.role.value if line.role else "-"


# =============================================================================
# HTML
# =============================================================================

def _html_rows(rows: list[list[str]], columns: int, placeholder: str) -> str:
    if not rows:
        return f'<tr><td colspan="{columns}">{escape(placeholder)}</td></tr>'
    return "\n".join(
        "<tr>" + "".join(f"<td>{escape(cell)}</td>" for cell in row) + "</tr>"
        for row in rows
    )


def _html_table(label: str, headers: list[str], body: str) -> str:
    head = "".join(f"<th>{escape(h)}</th>" for h in headers)
    return (
        f'<table class="table" aria-label="{escape(label)}">\n'
        f"<thead><tr>{head}</tr></thead>\n"
        f"<tbody>\n{body}\n</tbody>\n"
        f"</table>"
    )


def render_statement_html(statement: MonthlyStatement, title: str = DEFAULT_TITLE) -> str:
    """
    Render a printable monthly statement.

    Args:
        statement: Output of compute_monthly_statement()
        title: Page heading

    Returns:
        A complete HTML document
    """
    salary_rows = [
        [
            line.label,
            _role_text(line),
            f"{line.present_days}/{line.recorded_days}",
            format_money(line.calculated_salary),
            format_money(line.paid_salary),
            format_money(line.outstanding_salary),
        ]
        for line in statement.per_helper_salary
    ]
    milk_rows = [
        [
            bucket.label,
            format_liters(bucket.liters),
            format_money(bucket.cost),
            format_money(bucket.paid),
            format_money(bucket.outstanding),
        ]
        for bucket in statement.milk_by_bucket
    ]
    payment_rows = [
        [
            payment.date,
            payment.kind.value.title(),
            payment_recipient(payment, statement),
            payment.month,
            format_money(payment.amount),
        ]
        for payment in statement.payments_in_month
    ]

    salary_table = _html_table(
        "Salary overview",
        SALARY_HEADERS,
        _html_rows(salary_rows, len(SALARY_HEADERS), "No helpers for this month."),
    )
    milk_table = _html_table(
        "Milk overview",
        MILK_HEADERS,
        _html_rows(milk_rows, len(MILK_HEADERS), "No milk entries for this month."),
    )
    payment_table = _html_table(
        "Payment history",
        PAYMENT_HEADERS,
        _html_rows(payment_rows, len(PAYMENT_HEADERS), "No payments recorded for this month."),
    )

    totals = statement.milk_totals
    month = escape(statement.month)
    page_title = escape(title)

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8" />
<title>{page_title} - {month}</title>
<style>
  body {{ font-family: sans-serif; padding: 2rem; background: #fff; }}
  h1, h2 {{ margin-top: 0; }}
  .section {{ margin-bottom: 2rem; }}
  .muted {{ font-size: 0.85rem; color: #64748b; }}
  table {{ border-collapse: collapse; width: 100%; }}
  th, td {{ border: 1px solid #cbd5e1; padding: 0.35rem 0.5rem; text-align: left; }}
  @media print {{ body {{ padding: 0.5in; }} }}
</style>
</head>
<body>
<h1>{page_title}</h1>
<p class="muted">Month: <strong>{month}</strong></p>

<div class="section">
<h2>Salary Overview</h2>
{salary_table}
</div>

<div class="section">
<h2>Milk Bill</h2>
<p class="muted">Total liters: {format_liters(totals.liters)} &bull; Total amount: {format_money(totals.cost)} &bull; Outstanding: {format_money(totals.outstanding)}</p>
{milk_table}
</div>

<div class="section">
<h2>Payment History</h2>
{payment_table}
</div>
</body>
</html>
"""


# =============================================================================
# EXCEL
# =============================================================================

def _style_header(ws, row=1):
    """Bold white text on a blue band."""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        longest = max((len(str(c.value)) for c in ws[letter] if c.value is not None), default=0)
        ws.column_dimensions[letter].width = max(min_width, min(max_width, longest + 2))


def _money_cell(value: Decimal) -> float:
    return float(round(value, 2))


def _add_sheet(wb: Workbook, name: str, headers: list[str], rows: list[list]) -> None:
    ws = wb.create_sheet(name)
    ws.append(headers)
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for row in rows:
        ws.append(row)
    _autosize_columns(ws)


def build_statement_workbook(statement: MonthlyStatement) -> Workbook:
    """Workbook with one sheet per statement section."""
    wb = Workbook()
    wb.remove(wb.active)

    _add_sheet(wb, "Salary", SALARY_HEADERS, [
        [
            line.label,
            _role_text(line),
            f"{line.present_days}/{line.recorded_days}",
            _money_cell(line.calculated_salary),
            _money_cell(line.paid_salary),
            _money_cell(line.outstanding_salary),
        ]
        for line in statement.per_helper_salary
    ])

    milk_rows = [
        [
            bucket.label,
            float(bucket.liters),
            _money_cell(bucket.cost),
            _money_cell(bucket.paid),
            _money_cell(bucket.outstanding),
        ]
        for bucket in statement.milk_by_bucket
    ]
    totals = statement.milk_totals
    milk_rows.append([
        "TOTAL",
        float(totals.liters),
        _money_cell(totals.cost),
        _money_cell(totals.paid),
        _money_cell(totals.outstanding),
    ])
    _add_sheet(wb, "Milk", MILK_HEADERS, milk_rows)
    milk_sheet = wb["Milk"]
    for cell in milk_sheet[milk_sheet.max_row]:
        cell.font = Font(bold=True)

    _add_sheet(wb, "Payments", PAYMENT_HEADERS, [
        [
            payment.date,
            payment.kind.value.title(),
            payment_recipient(payment, statement),
            payment.month,
            _money_cell(payment.amount),
        ]
        for payment in statement.payments_in_month
    ])

    return wb


def export_statement_workbook(statement: MonthlyStatement, path: Union[str, Path]) -> Path:
    """
    Write the statement to an .xlsx file.

    Returns:
        The path written
    """
    path = Path(path)
    build_statement_workbook(statement).save(path)
    logger.info("statement_exported", month=statement.month, path=str(path), format="xlsx")
    return path
