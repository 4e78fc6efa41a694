"""
Streamlit Frontend for GharKhata

The household bookkeeping screen: who worked which day, how much milk
came, what is owed and what has been paid.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every figure comes from the monthly statement - no page does its own math
3. Clear error messages in simple language
4. Nothing is deleted without an explicit button press

The profile is picked in the sidebar and passed into every ledger call.
"""

from datetime import date
from io import BytesIO

import streamlit as st

from gharkhata.config import get_settings, validate_all_settings
from gharkhata.ledgers import HelperRegistry
from gharkhata.logger import configure_logging
from gharkhata.models import (
    AttendanceStatus,
    HelperRole,
    PaymentKind,
    PaymentType,
)
from gharkhata.orchestrator import Household, create_app_components
from gharkhata.services import BackupFormatError, StorageError
from gharkhata.services.backup import backup_file_name
from gharkhata.statements import build_statement_workbook, format_money, render_statement_html
from gharkhata.statements.export import payment_recipient
from gharkhata.validation import EntryRejectedError


# Page configuration
st.set_page_config(
    page_title="Singhi GharKhata",
    page_icon="🏠",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .paid-pill {
        color: #166534;
        font-weight: bold;
    }
    .due-pill {
        color: #b91c1c;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_components():
    """Get or create the store and backup service (cached)."""
    settings = get_settings()
    configure_logging(settings.app.log_level, settings.app.log_json)
    try:
        return create_app_components(settings, use_storage=True)
    except StorageError as e:
        show_failure(f"Failed to open your data: {e}", e)
        return create_app_components(settings, use_storage=False)


def show_failure(message: str, error: Exception):
    """Report a failed operation; with debug_mode on, include the traceback."""
    st.error(message)
    if get_settings().app.debug_mode:
        st.exception(error)


def show_rejection(error: EntryRejectedError):
    """Show every problem with a rejected entry."""
    for issue in error.issues:
        if issue.severity == "error":
            st.error(issue.message)
        else:
            st.warning(issue.message)


def month_key(value: date) -> str:
    return value.strftime("%Y-%m")


def main():
    """Main application entry point."""
    store, backup = get_components()
    settings = get_settings()

    st.sidebar.title("🏠 Singhi GharKhata")
    st.sidebar.markdown("---")

    profile_id = st.sidebar.text_input(
        "Profile",
        value=settings.storage.default_profile,
        help="Each profile keeps its own helpers, milk and payments",
    ).strip() or settings.storage.default_profile

    picked = st.sidebar.date_input("Month", value=date.today(), help="Any day in the month")
    month = month_key(picked)

    st.sidebar.markdown("---")
    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "👥 Helpers", "🗓️ Attendance", "🥛 Milk", "💰 Payments", "⚙️ Settings"],
        index=0,
    )

    household = Household(store, profile_id)

    if page == "📊 Dashboard":
        render_dashboard_page(household, month)
    elif page == "👥 Helpers":
        render_helpers_page(household)
    elif page == "🗓️ Attendance":
        render_attendance_page(household)
    elif page == "🥛 Milk":
        render_milk_page(household, month)
    elif page == "💰 Payments":
        render_payments_page(household, month)
    elif page == "⚙️ Settings":
        render_settings_page(backup)


def render_dashboard_page(household: Household, month: str):
    """Headline numbers for the month."""
    st.title("📊 Dashboard")
    st.caption(f"Month: {month}")

    summary = household.dashboard(month)

    col1, col2, col3 = st.columns(3)
    col1.metric("Active Helpers", summary.active_helpers)
    col2.metric("Milk (Liters)", f"{summary.milk_liters:.1f} L")
    col3.metric("Milk Cost", format_money(summary.milk_cost))

    col1, col2 = st.columns(2)
    col1.metric("Salary Outstanding", format_money(summary.salary_outstanding))
    col2.metric("Milk Outstanding", format_money(summary.milk_outstanding))

    st.markdown("### Daily milk")
    st.line_chart({"Liters": [float(v) for v in summary.daily_milk_liters]})


def render_helpers_page(household: Household):
    """Add, edit and remove helpers."""
    st.title("👥 Helpers")

    helpers = household.helpers.list_helpers()
    if helpers:
        st.dataframe(
            [
                {
                    "Name": h.name,
                    "Role": h.role.value,
                    "Pay": h.payment_type.value,
                    "Salary / Rate": format_money(h.monthly_salary),
                    "Milk price / L": format_money(h.default_price_per_liter),
                    "Since": h.start_date or "-",
                }
                for h in helpers
            ],
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("No helpers yet. Add your first helper below.")

    st.markdown("---")
    editing = st.selectbox(
        "Add or edit",
        options=[None] + helpers,
        format_func=lambda h: "➕ New helper" if h is None else f"✏️ {h.name}",
    )

    with st.form("helper_form", clear_on_submit=editing is None):
        name = st.text_input("Name", value=editing.name if editing else "")
        roles = list(HelperRole)
        role = st.selectbox(
            "Role",
            options=roles,
            index=roles.index(editing.role) if editing else 0,
            format_func=lambda r: r.value,
        )
        pay_types = list(PaymentType)
        payment_type = st.selectbox(
            "Payment type",
            options=pay_types,
            index=pay_types.index(editing.payment_type) if editing else 0,
            format_func=lambda p: p.value,
            help="Daily helpers are paid the amount below for each present day",
        )
        salary = st.text_input(
            "Monthly salary (or day rate)",
            value=str(editing.monthly_salary) if editing else "",
        )
        price = st.text_input(
            "Default milk price per liter",
            value=str(editing.default_price_per_liter) if editing else "",
        )
        start_date = st.text_input(
            "Start date (YYYY-MM-DD)",
            value=(editing.start_date or "") if editing else date.today().isoformat(),
        )
        submitted = st.form_submit_button("💾 Save helper", type="primary")

    if submitted:
        try:
            helper = household.helpers.save_helper(
                name=name,
                role=role,
                monthly_salary=salary,
                default_price_per_liter=price,
                payment_type=payment_type,
                start_date=start_date,
                helper_id=editing.id if editing else None,
            )
            st.success(f"Saved {helper.name}.")
            st.rerun()
        except EntryRejectedError as e:
            show_rejection(e)

    if editing is not None:
        st.warning("Deleting keeps this helper's past attendance, milk and payments.")
        if st.button(f"🗑️ Delete {editing.name}"):
            household.helpers.delete(editing.id)
            st.rerun()


def render_attendance_page(household: Household):
    """Mark Present / Absent for a day."""
    st.title("🗓️ Attendance")

    day = st.date_input("Date", value=date.today())
    day_key = day.isoformat()

    workers = [h for h in household.helpers.list_helpers() if not h.is_milkman]
    if not workers:
        st.info("Add a maid or other helper first.")
        return

    marks = household.attendance.marks_for_date(day_key)
    statuses = [AttendanceStatus.UNSET, AttendanceStatus.PRESENT, AttendanceStatus.ABSENT]

    with st.form("attendance_form"):
        choices = {}
        for helper in workers:
            current = marks.get(helper.id, AttendanceStatus.UNSET)
            choices[helper.id] = st.radio(
                helper.name,
                options=statuses,
                index=statuses.index(current),
                format_func=lambda s: "Not marked" if s is AttendanceStatus.UNSET else s.label,
                horizontal=True,
                key=f"att_{day_key}_{helper.id}",
            )
        submitted = st.form_submit_button("💾 Save attendance", type="primary")

    if submitted:
        try:
            for helper_id, status in choices.items():
                if marks.get(helper_id, AttendanceStatus.UNSET) != status:
                    household.attendance.set_status(day_key, helper_id, status)
            st.success("Attendance saved.")
        except EntryRejectedError as e:
            show_rejection(e)


def _milkman_label(registry: HelperRegistry, helper_id):
    if helper_id is None:
        return "Unassigned / General"
    helper = registry.find(helper_id)
    return helper.name if helper else "Unknown"


def render_milk_page(household: Household, month: str):
    """Record deliveries and list the month's entries."""
    st.title("🥛 Milk")

    milkmen = household.helpers.milkmen()
    with st.expander("➕ Quick add milkman"):
        new_name = st.text_input("Milkman name", key="quick_milkman")
        if st.button("Add milkman"):
            if household.helpers.quick_add_milkman(new_name) is None:
                st.error("Please enter the milkman's name")
            else:
                st.rerun()

    with st.form("milk_form", clear_on_submit=True):
        entry_date = st.date_input("Date", value=date.today())
        helper_id = st.selectbox(
            "Milkman",
            options=[None] + [m.id for m in milkmen],
            format_func=lambda hid: _milkman_label(household.helpers, hid),
        )
        liters = st.text_input("Liters")
        price = st.text_input("Price per liter", help="Leave blank to use the milkman's usual price")
        submitted = st.form_submit_button("💾 Save entry", type="primary")

    if submitted:
        try:
            household.milk.add_entry(
                entry_date=entry_date.isoformat(),
                liters=liters,
                price_per_liter=price or None,
                helper_id=helper_id,
            )
            st.success("Milk entry saved.")
        except EntryRejectedError as e:
            show_rejection(e)

    st.markdown(f"### Entries for {month}")
    entries = household.milk.entries_for_month(month)
    if not entries:
        st.info("No milk entries for this month.")
        return

    for entry in entries:
        col1, col2, col3, col4 = st.columns([2, 3, 3, 1])
        col1.write(entry.date)
        col2.write(_milkman_label(household.helpers, entry.helper_id))
        col3.write(f"{entry.liters} L × {format_money(entry.price_per_liter)} = {format_money(entry.cost)}")
        if col4.button("🗑️", key=f"del_milk_{entry.id}"):
            household.milk.delete(entry.id)
            st.rerun()


def _status_html(status) -> str:
    css = "paid-pill" if status.value == "Paid" else "due-pill"
    return f'<span class="{css}">{status.value}</span>'


def render_payments_page(household: Household, month: str):
    """Statement for the month, payment entry and downloads."""
    st.title("💰 Payments")
    statement = household.statement(month)

    st.markdown("### Salary")
    if statement.per_helper_salary:
        for line in statement.per_helper_salary:
            col1, col2, col3 = st.columns([3, 4, 1])
            col1.markdown(f"**{line.label}**  \n{line.role.value if line.role else '-'}")
            col2.markdown(
                f"{line.present_days}/{line.recorded_days} days · "
                f"Salary {format_money(line.calculated_salary)} · "
                f"Paid {format_money(line.paid_salary)} · "
                f"Outstanding {format_money(line.outstanding_salary)}"
            )
            col3.markdown(_status_html(line.status), unsafe_allow_html=True)
    else:
        st.info("No helpers for this month.")

    maids = statement.maids_summary
    if maids.count:
        st.caption(
            f"Maids: {maids.present_days}/{maids.recorded_days or '-'} present-days across "
            f"{maids.count} maid(s). Salary: {format_money(maids.calculated)}, "
            f"Paid: {format_money(maids.paid)}, Outstanding: {format_money(maids.outstanding)}."
        )

    st.markdown("### Milk bill")
    totals = statement.milk_totals
    col1, col2, col3 = st.columns(3)
    col1.metric("Total liters", f"{totals.liters:.1f}")
    col2.metric("Total amount", format_money(totals.cost))
    col3.metric("Outstanding", format_money(totals.outstanding))
    for bucket in statement.milk_by_bucket:
        col1, col2, col3 = st.columns([3, 4, 1])
        col1.markdown(f"**{bucket.label}**")
        col2.markdown(
            f"{bucket.liters:.1f} L · {format_money(bucket.cost)} · "
            f"Paid {format_money(bucket.paid)} · Outstanding {format_money(bucket.outstanding)}"
        )
        col3.markdown(_status_html(bucket.status), unsafe_allow_html=True)

    st.markdown("---")
    st.markdown("### Add payment")
    with st.form("payment_form", clear_on_submit=True):
        kind = st.selectbox("Type", options=list(PaymentKind), format_func=lambda k: k.value.title())
        payees = (
            [(None, "Unassigned / General")]
            + [(line.helper_id, line.label) for line in statement.per_helper_salary]
            + [(b.helper_id, b.label) for b in statement.milk_by_bucket if b.helper_id]
        )
        payee = st.selectbox("Paid to", options=payees, format_func=lambda p: p[1])
        amount = st.text_input("Amount")
        notes = st.text_input("Notes")
        submitted = st.form_submit_button("💾 Save payment", type="primary")

    if submitted:
        try:
            household.payments.record_payment(
                kind=kind,
                month=month,
                amount=amount,
                helper_id=payee[0],
                notes=notes,
            )
            st.success("Payment saved.")
            st.rerun()
        except EntryRejectedError as e:
            show_rejection(e)

    st.markdown("### Payment history")
    if not statement.payments_in_month:
        st.info("No payments recorded for this month.")
    for payment in statement.payments_in_month:
        col1, col2, col3, col4 = st.columns([2, 3, 2, 1])
        col1.write(payment.date)
        col2.write(f"{payment.kind.value.title()} · {payment_recipient(payment, statement)}")
        col3.write(format_money(payment.amount))
        if col4.button("🗑️", key=f"del_pay_{payment.id}"):
            household.payments.delete(payment.id)
            st.rerun()

    st.markdown("---")
    st.markdown("### Download statement")
    title = get_settings().app.statement_title
    col1, col2 = st.columns(2)
    col1.download_button(
        "📄 Printable statement (HTML)",
        data=render_statement_html(statement, title),
        file_name=f"gharkhata-statement-{month}.html",
        mime="text/html",
    )
    buffer = BytesIO()
    build_statement_workbook(statement).save(buffer)
    col2.download_button(
        "📊 Excel workbook",
        data=buffer.getvalue(),
        file_name=f"gharkhata-statement-{month}.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


def render_settings_page(backup):
    """Backup, restore, clear and configuration status."""
    st.title("⚙️ Settings")

    st.markdown("### Backup")
    st.download_button(
        "⬇️ Download backup",
        data=backup.dumps(),
        file_name=backup_file_name(),
        mime="application/json",
    )

    uploaded = st.file_uploader("Restore from a backup file", type=["json"])
    if uploaded and st.button("♻️ Restore backup"):
        try:
            restored = backup.loads(uploaded.getvalue().decode("utf-8"))
            st.success(f"Backup restored ({restored} items).")
        except (BackupFormatError, UnicodeDecodeError) as e:
            show_failure("Invalid backup file.", e)
        except StorageError as e:
            show_failure(f"Could not restore: {e}", e)

    st.markdown("### Clear data")
    confirm = st.checkbox(
        "I understand this deletes all GharKhata data (helpers, attendance, milk, payments)"
    )
    if st.button("🗑️ Clear all data", disabled=not confirm):
        removed = backup.clear_all()
        st.success(f"All data cleared ({removed} items).")

    st.markdown("---")
    st.markdown("### Configuration Status")
    app_settings = get_settings().app
    st.caption(
        f"Environment: {app_settings.app_environment}"
        + (" · debug mode" if app_settings.debug_mode else "")
    )
    status = validate_all_settings()
    for name, key in [("Storage", "storage"), ("Application", "app")]:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")


if __name__ == "__main__":
    main()
