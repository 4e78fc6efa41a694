"""Profile-scoped ledgers over the key-value store."""

from gharkhata.ledgers.attendance import AttendanceLedger
from gharkhata.ledgers.base import ProfileLedger
from gharkhata.ledgers.helpers import HelperRegistry
from gharkhata.ledgers.milk import MilkLedger
from gharkhata.ledgers.payments import PaymentLedger

__all__ = [
    "AttendanceLedger",
    "HelperRegistry",
    "MilkLedger",
    "PaymentLedger",
    "ProfileLedger",
]
