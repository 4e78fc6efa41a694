"""
Payment Ledger

Money paid against a (kind, helper, month) triple. The month a payment
is FOR is recorded separately from the date it was MADE, so a May
salary paid on 2 June still settles May.

Zero or negative amounts are rejected here, at entry. The aggregation
engine assumes every stored payment is positive.
"""

from datetime import date
from typing import Any, Optional

from gharkhata.ledgers.base import ProfileLedger
from gharkhata.logger import get_logger
from gharkhata.models.household import Payment, PaymentKind
from gharkhata.validation import ensure_valid


logger = get_logger(__name__)


class PaymentLedger(ProfileLedger):
    """Payments of one profile."""

    KEY = "payments"
    ID_PREFIX = "p"

    def list_payments(self) -> list[Payment]:
        """All readable payments, in stored order."""
        return self._parse_rows(self._load_rows(), Payment)

    def find(self, payment_id: str) -> Optional[Payment]:
        for payment in self.list_payments():
            if payment.id == payment_id:
                return payment
        return None

    def for_month(self, month: str) -> list[Payment]:
        """Payments made for a month, newest payment date first."""
        payments = [p for p in self.list_payments() if p.month == month]
        payments.sort(key=lambda p: p.date, reverse=True)
        return payments

    def upsert(self, payment: Payment) -> Payment:
        """
        Insert or replace a payment by id.

        Raises:
            EntryRejectedError: If kind, month or amount is invalid
        """
        ensure_valid(self._validator.validate_payment(
            kind=payment.kind,
            month=payment.month,
            amount=payment.amount,
        ))
        self._upsert_row(payment, payment.id)
        logger.info(
            "payment_recorded",
            profile_id=self.profile_id,
            payment_id=payment.id,
            kind=payment.kind.value,
            helper_id=payment.helper_id,
            month=payment.month,
            amount=str(payment.amount),
        )
        return payment

    def record_payment(
        self,
        kind: Any,
        month: Any,
        amount: Any,
        helper_id: Optional[str] = None,
        notes: str = "",
        paid_on: Optional[date] = None,
    ) -> Payment:
        """
        Record a payment from form input.

        Raises:
            EntryRejectedError: If the amount is not a number above zero,
                the month is not YYYY-MM, or kind is not salary/milk
        """
        ensure_valid(self._validator.validate_payment(
            kind=kind,
            month=month,
            amount=amount,
        ))
        payment = Payment(
            id=self.generate_id(),
            date=(paid_on or date.today()).isoformat(),
            kind=PaymentKind(kind),
            helper_id=helper_id,
            month=month,
            amount=amount,
            notes=notes or "",
        )
        return self.upsert(payment)

    def delete(self, payment_id: str) -> bool:
        removed = self._delete_row(payment_id)
        logger.info(
            "payment_deleted",
            profile_id=self.profile_id,
            payment_id=payment_id,
            removed=removed,
        )
        return removed
