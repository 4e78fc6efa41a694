"""
Tests for GharKhata models

Test strategy:
1. Ledger records read leniently from stored JSON
2. Records write back with the camelCase field names
3. Statement value types (bucket keys, settlement status) behave as keys
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from gharkhata.models import (
    PAID_TOLERANCE,
    AttendanceStatus,
    Helper,
    HelperBucket,
    HelperRole,
    MilkEntry,
    Payment,
    PaymentKind,
    PaymentType,
    SettlementStatus,
    UnassignedBucket,
    ValidationIssue,
    ValidationResult,
    bucket_for,
    coerce_amount,
)


class TestCoerceAmount:
    """Tests for the read-side number coercion."""

    @pytest.mark.parametrize("value,expected", [
        (3000, Decimal("3000")),
        (12.5, Decimal("12.5")),
        ("45", Decimal("45")),
        (" 7.25 ", Decimal("7.25")),
        (Decimal("10"), Decimal("10")),
    ])
    def test_numbers_pass_through(self, value, expected):
        """Test that numeric values and numeric strings are kept."""
        assert coerce_amount(value) == expected

    @pytest.mark.parametrize("value", [
        None, "", "abc", "NaN", "Infinity", float("nan"), True, [], {}, -5, "-1",
    ])
    def test_junk_becomes_zero(self, value):
        """Test that non-numeric, non-finite and negative values read as 0."""
        assert coerce_amount(value) == Decimal("0")


class TestHelper:
    """Tests for the Helper record."""

    def test_reads_camel_case_storage(self):
        """Test reading a helper as the browser version stores it."""
        helper = Helper.model_validate({
            "id": "h_1",
            "name": "  Sunita ",
            "role": "Maid",
            "monthlySalary": "3000",
            "defaultPricePerLiter": "",
            "paymentType": "Monthly",
            "startDate": "2024-01-01",
        })
        assert helper.name == "Sunita"
        assert helper.role is HelperRole.MAID
        assert helper.monthly_salary == Decimal("3000")
        assert helper.default_price_per_liter == Decimal("0")
        assert helper.payment_type is PaymentType.MONTHLY
        assert helper.start_date == "2024-01-01"

    def test_writes_camel_case_storage(self):
        """Test that to_storage() uses the on-disk field names."""
        helper = Helper(
            id="h_1",
            name="Ramu",
            role=HelperRole.MILKMAN,
            monthly_salary=Decimal("0"),
            default_price_per_liter=Decimal("55.5"),
        )
        stored = helper.to_storage()
        assert stored["monthlySalary"] == 0
        assert stored["defaultPricePerLiter"] == 55.5
        assert stored["paymentType"] == "Monthly"
        assert stored["role"] == "Milkman"
        assert "monthly_salary" not in stored

    def test_unknown_role_reads_as_other(self):
        """Test that an unrecognised role does not reject the record."""
        helper = Helper.model_validate({"id": "h_1", "name": "X", "role": "Cook"})
        assert helper.role is HelperRole.OTHER

    def test_non_monthly_payment_type_reads_as_daily(self):
        """Test that anything except 'Monthly' is paid per day."""
        for raw in ["Daily", "daily", "", None, "Weekly"]:
            helper = Helper.model_validate({"id": "h_1", "paymentType": raw})
            assert helper.payment_type is PaymentType.DAILY

    def test_missing_id_is_rejected(self):
        """Test that a helper without an id fails shape validation."""
        with pytest.raises(ValidationError):
            Helper.model_validate({"name": "No Id"})

    def test_numeric_id_is_kept_as_text(self):
        """Test that old numeric ids read as strings."""
        helper = Helper.model_validate({"id": 17, "name": "Old"})
        assert helper.id == "17"

    def test_is_milkman(self):
        """Test the milkman role shortcut."""
        assert Helper(id="h", role=HelperRole.MILKMAN).is_milkman
        assert not Helper(id="h", role=HelperRole.MAID).is_milkman


class TestMilkEntry:
    """Tests for the MilkEntry record."""

    def test_cost_is_liters_times_price(self):
        """Test per-entry cost."""
        entry = MilkEntry(id="m_1", date="2024-05-01", liters="2.5", price_per_liter=60)
        assert entry.cost == Decimal("150.0")

    def test_blank_helper_is_unassigned(self):
        """Test that a blank helperId means no milkman."""
        entry = MilkEntry.model_validate({"id": "m_1", "date": "2024-05-01", "helperId": ""})
        assert entry.helper_id is None

    def test_missing_date_is_rejected(self):
        """Test that an entry without a date fails shape validation."""
        with pytest.raises(ValidationError):
            MilkEntry.model_validate({"id": "m_1", "liters": 2})


class TestPayment:
    """Tests for the Payment record."""

    def test_kind_is_stored_as_type(self):
        """Test that the payment kind round-trips under the 'type' key."""
        payment = Payment.model_validate({
            "id": "p_1",
            "date": "2024-06-02",
            "type": "salary",
            "helperId": "h_1",
            "month": "2024-05",
            "amount": 2700,
            "notes": None,
        })
        assert payment.kind is PaymentKind.SALARY
        assert payment.notes == ""
        assert payment.to_storage()["type"] == "salary"

    def test_unknown_kind_is_rejected(self):
        """Test that a payment of unknown kind fails shape validation."""
        with pytest.raises(ValidationError):
            Payment.model_validate({"id": "p_1", "date": "2024-06-02", "type": "bonus"})


class TestAttendanceStatus:
    """Tests for attendance status values."""

    def test_unset_is_not_recorded(self):
        """Test that only Present and Absent count as recorded days."""
        assert AttendanceStatus.PRESENT.is_recorded
        assert AttendanceStatus.ABSENT.is_recorded
        assert not AttendanceStatus.UNSET.is_recorded

    def test_toggle_order(self):
        """Test the unset -> Present -> Absent -> unset cycle."""
        status = AttendanceStatus.UNSET
        seen = []
        for _ in range(3):
            status = status.next()
            seen.append(status)
        assert seen == [AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.UNSET]


class TestStatementTypes:
    """Tests for statement value types."""

    def test_bucket_for_none_is_unassigned(self):
        """Test that null helper ids map to the unassigned bucket."""
        assert bucket_for(None) == UnassignedBucket()
        assert bucket_for(None).helper_id is None

    def test_unassigned_never_collides_with_a_helper_id(self):
        """Test that a helper literally named '__unassigned' gets its own bucket."""
        assert bucket_for("__unassigned") != bucket_for(None)
        assert bucket_for("__unassigned") == HelperBucket(helper_id="__unassigned")

    def test_bucket_keys_are_hashable(self):
        """Test that bucket keys can be used as dict keys."""
        keys = {bucket_for(None): 1, bucket_for("h_1"): 2}
        assert keys[UnassignedBucket()] == 1
        assert keys[HelperBucket(helper_id="h_1")] == 2

    def test_settlement_tolerance(self):
        """Test that up to one unit outstanding counts as Paid."""
        assert SettlementStatus.from_outstanding(Decimal("0")) is SettlementStatus.PAID
        assert SettlementStatus.from_outstanding(PAID_TOLERANCE) is SettlementStatus.PAID
        assert SettlementStatus.from_outstanding(Decimal("1.01")) is SettlementStatus.DUE


class TestValidationModels:
    """Tests for validation result models."""

    def test_warnings_do_not_invalidate(self):
        """Test that only error-level issues make a result invalid."""
        result = ValidationResult(
            entity_type="helper",
            issues=[ValidationIssue(
                field="start_date",
                issue_type="future_date",
                message="Start date is in the future",
                severity="warning",
            )],
        )
        assert result.is_valid
        assert result.error_count == 0
        assert len(result.warnings) == 1

    def test_invalid_severity_rejected(self):
        """Test that severity must be error, warning or info."""
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")
