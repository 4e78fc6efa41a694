"""
Tests for the profile-scoped ledgers

All tests run against the in-memory store.
"""

from datetime import date
from decimal import Decimal

import pytest

from gharkhata.ledgers import AttendanceLedger, HelperRegistry, MilkLedger, PaymentLedger
from gharkhata.models import AttendanceStatus, Helper, HelperRole, PaymentKind, PaymentType
from gharkhata.services.storage import InMemoryKeyValueStore
from gharkhata.validation import EntryRejectedError


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def registry(store):
    return HelperRegistry(store, "default")


class TestHelperRegistry:
    """Tests for helper CRUD."""

    def test_save_and_list(self, registry):
        helper = registry.save_helper("Sunita", "Maid", monthly_salary="3000")
        assert helper.id.startswith("h_")
        assert registry.list_helpers() == [helper]
        assert registry.find(helper.id).monthly_salary == Decimal("3000")

    def test_edit_keeps_position(self, registry):
        """Test that editing replaces the helper in place."""
        first = registry.save_helper("A", "Maid")
        registry.save_helper("B", "Other")
        registry.save_helper("A2", "Maid", helper_id=first.id)
        assert [h.name for h in registry.list_helpers()] == ["A2", "B"]

    def test_blank_name_rejected(self, registry):
        with pytest.raises(EntryRejectedError):
            registry.save_helper("  ", "Maid")
        assert registry.list_helpers() == []

    def test_junk_salary_stored_as_zero(self, registry):
        helper = registry.save_helper("A", "Maid", monthly_salary="lots")
        assert helper.monthly_salary == Decimal("0")

    def test_ids_are_unique(self, registry):
        ids = {registry.generate_id() for _ in range(100)}
        assert len(ids) == 100

    def test_delete(self, registry):
        helper = registry.save_helper("A", "Maid")
        assert registry.delete(helper.id)
        assert not registry.delete(helper.id)
        assert registry.find(helper.id) is None

    def test_quick_add_milkman(self, registry):
        """Test the one-field milkman shortcut."""
        milkman = registry.quick_add_milkman(" Ramu ", today=date(2024, 5, 1))
        assert milkman.role is HelperRole.MILKMAN
        assert milkman.name == "Ramu"
        assert milkman.monthly_salary == Decimal("0")
        assert milkman.payment_type is PaymentType.MONTHLY
        assert milkman.start_date == "2024-05-01"
        assert registry.milkmen() == [milkman]

    def test_quick_add_blank_name_returns_none(self, registry):
        assert registry.quick_add_milkman("   ") is None
        assert registry.list_helpers() == []

    def test_malformed_rows_are_skipped(self, store, registry):
        """Test that rows without an id are ignored on read."""
        store.save("default", "helpers", [
            {"id": "h_1", "name": "Good", "role": "Maid"},
            {"name": "No id"},
            "not a row",
        ])
        assert [h.id for h in registry.list_helpers()] == ["h_1"]

    def test_non_list_storage_reads_empty(self, store, registry):
        store.save("default", "helpers", {"oops": True})
        assert registry.list_helpers() == []

    def test_profiles_are_separate(self, store):
        HelperRegistry(store, "alice").save_helper("A", "Maid")
        assert HelperRegistry(store, "bob").list_helpers() == []

    def test_upsert_record(self, registry):
        helper = registry.upsert(Helper(id="h_x", name="X", role=HelperRole.OTHER))
        assert registry.find("h_x") == helper


class TestAttendanceLedger:
    """Tests for attendance marks."""

    @pytest.fixture
    def ledger(self, store):
        return AttendanceLedger(store, "default")

    def test_set_and_read(self, ledger):
        ledger.set_status("2024-05-01", "h_1", AttendanceStatus.PRESENT)
        ledger.set_status("2024-05-01", "h_2", AttendanceStatus.ABSENT)
        assert ledger.marks_for_date("2024-05-01") == {
            "h_1": AttendanceStatus.PRESENT,
            "h_2": AttendanceStatus.ABSENT,
        }

    def test_storage_shape(self, store, ledger):
        """Test attendance is stored as {date: {helperId: status}}."""
        ledger.set_status("2024-05-01", "h_1", "P")
        assert store.load("default", "attendance", {}) == {"2024-05-01": {"h_1": "P"}}

    def test_unset_removes_mark_and_empty_date(self, store, ledger):
        ledger.set_status("2024-05-01", "h_1", AttendanceStatus.PRESENT)
        ledger.set_status("2024-05-01", "h_1", AttendanceStatus.UNSET)
        assert store.load("default", "attendance", {}) == {}
        assert ledger.status_for("2024-05-01", "h_1") is AttendanceStatus.UNSET

    def test_list_sorted_by_date_then_helper(self, ledger):
        ledger.set_status("2024-05-02", "h_b", AttendanceStatus.PRESENT)
        ledger.set_status("2024-05-01", "h_b", AttendanceStatus.ABSENT)
        ledger.set_status("2024-05-01", "h_a", AttendanceStatus.PRESENT)
        assert [m.key for m in ledger.list_marks()] == [
            ("2024-05-01", "h_a"),
            ("2024-05-01", "h_b"),
            ("2024-05-02", "h_b"),
        ]

    def test_cycle_status(self, ledger):
        """Test the toggle button order."""
        assert ledger.cycle_status("2024-05-01", "h_1") is AttendanceStatus.PRESENT
        assert ledger.cycle_status("2024-05-01", "h_1") is AttendanceStatus.ABSENT
        assert ledger.cycle_status("2024-05-01", "h_1") is AttendanceStatus.UNSET
        assert ledger.list_marks() == []

    def test_delete(self, ledger):
        ledger.set_status("2024-05-01", "h_1", AttendanceStatus.ABSENT)
        assert ledger.delete("2024-05-01", "h_1")
        assert not ledger.delete("2024-05-01", "h_1")

    def test_invalid_date_rejected(self, ledger):
        with pytest.raises(EntryRejectedError):
            ledger.set_status("2024-013-05", "h_1", AttendanceStatus.PRESENT)

    def test_junk_status_reads_as_unset(self, store, ledger):
        store.save("default", "attendance", {"2024-05-01": {"h_1": "X", "h_2": "P"}, "bad": []})
        assert [m.helper_id for m in ledger.list_marks()] == ["h_2"]


class TestMilkLedger:
    """Tests for milk entries."""

    @pytest.fixture
    def ledger(self, store, registry):
        return MilkLedger(store, "default", registry=registry)

    def test_add_entry(self, ledger):
        entry = ledger.add_entry("2024-05-01", "2", "60")
        assert entry.id.startswith("m_")
        assert entry.helper_id is None
        assert entry.cost == Decimal("120")

    def test_default_price_from_milkman(self, ledger, registry):
        """Test that a blank price uses the milkman's usual rate."""
        milkman = registry.save_helper("Ramu", "Milkman", default_price_per_liter="55")
        entry = ledger.add_entry("2024-05-01", 2, helper_id=milkman.id)
        assert entry.price_per_liter == Decimal("55")

    def test_explicit_price_wins(self, ledger, registry):
        milkman = registry.save_helper("Ramu", "Milkman", default_price_per_liter="55")
        entry = ledger.add_entry("2024-05-01", 2, price_per_liter="50", helper_id=milkman.id)
        assert entry.price_per_liter == Decimal("50")

    @pytest.mark.parametrize("liters", [0, "", "abc"])
    def test_liters_must_be_positive(self, ledger, liters):
        with pytest.raises(EntryRejectedError):
            ledger.add_entry("2024-05-01", liters, 60)
        assert ledger.list_entries() == []

    def test_entries_for_month_newest_first(self, ledger):
        ledger.add_entry("2024-05-01", 1, 60)
        ledger.add_entry("2024-05-20", 1, 60)
        ledger.add_entry("2024-06-01", 1, 60)
        assert [e.date for e in ledger.entries_for_month("2024-05")] == ["2024-05-20", "2024-05-01"]

    def test_edit_and_delete(self, ledger):
        entry = ledger.add_entry("2024-05-01", 1, 60)
        ledger.add_entry("2024-05-01", 3, 60, entry_id=entry.id)
        assert ledger.find(entry.id).liters == Decimal("3")
        assert len(ledger.list_entries()) == 1
        assert ledger.delete(entry.id)
        assert ledger.list_entries() == []


class TestPaymentLedger:
    """Tests for payments."""

    @pytest.fixture
    def ledger(self, store):
        return PaymentLedger(store, "default")

    def test_record_payment(self, ledger):
        payment = ledger.record_payment(
            "salary", "2024-05", "2700", helper_id="h_1", paid_on=date(2024, 6, 2)
        )
        assert payment.id.startswith("p_")
        assert payment.kind is PaymentKind.SALARY
        assert payment.date == "2024-06-02"
        assert payment.amount == Decimal("2700")
        assert ledger.list_payments() == [payment]

    def test_paid_on_defaults_to_today(self, ledger):
        payment = ledger.record_payment("milk", "2024-05", 100)
        assert payment.date == date.today().isoformat()

    @pytest.mark.parametrize("amount", [0, -5, "abc", ""])
    def test_bad_amount_not_stored(self, ledger, amount):
        with pytest.raises(EntryRejectedError):
            ledger.record_payment("salary", "2024-05", amount)
        assert ledger.list_payments() == []

    def test_for_month_newest_first(self, ledger):
        ledger.record_payment("salary", "2024-05", 100, paid_on=date(2024, 5, 10))
        ledger.record_payment("salary", "2024-05", 100, paid_on=date(2024, 6, 1))
        ledger.record_payment("salary", "2024-04", 100, paid_on=date(2024, 5, 20))
        assert [p.date for p in ledger.for_month("2024-05")] == ["2024-06-01", "2024-05-10"]

    def test_delete(self, ledger):
        payment = ledger.record_payment("milk", "2024-05", 100)
        assert ledger.delete(payment.id)
        assert ledger.find(payment.id) is None

    def test_unknown_kind_row_skipped(self, store, ledger):
        store.save("default", "payments", [
            {"id": "p_1", "date": "2024-05-01", "type": "bonus", "amount": 5},
            {"id": "p_2", "date": "2024-05-01", "type": "milk", "amount": 5, "month": "2024-05"},
        ])
        assert [p.id for p in ledger.list_payments()] == ["p_2"]
