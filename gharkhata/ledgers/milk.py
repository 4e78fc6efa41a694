"""
Milk Ledger

One row per delivery: date, liters, price per liter and (optionally)
the milkman who delivered it. Entries without a milkman are billed
under the "unassigned" bucket.
"""

from typing import Any, Optional

from gharkhata.ledgers.base import ProfileLedger
from gharkhata.ledgers.helpers import HelperRegistry
from gharkhata.logger import get_logger
from gharkhata.models.household import MilkEntry
from gharkhata.validation import ensure_valid


logger = get_logger(__name__)


class MilkLedger(ProfileLedger):
    """Milk deliveries of one profile."""

    KEY = "milk"
    ID_PREFIX = "m"

    def __init__(self, *args, registry: Optional[HelperRegistry] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._registry = registry

    def list_entries(self) -> list[MilkEntry]:
        """All readable entries, in stored order."""
        return self._parse_rows(self._load_rows(), MilkEntry)

    def find(self, entry_id: str) -> Optional[MilkEntry]:
        for entry in self.list_entries():
            if entry.id == entry_id:
                return entry
        return None

    def entries_for_month(self, month: str) -> list[MilkEntry]:
        """Entries dated in a YYYY-MM month, newest first."""
        prefix = f"{month}-"
        entries = [e for e in self.list_entries() if e.date.startswith(prefix)]
        entries.sort(key=lambda e: e.date, reverse=True)
        return entries

    def upsert(self, entry: MilkEntry) -> MilkEntry:
        """
        Insert or replace an entry by id.

        Raises:
            EntryRejectedError: If the date or liters are invalid
        """
        ensure_valid(self._validator.validate_milk_entry(
            entry_date=entry.date,
            liters=entry.liters,
        ))
        replaced = self._upsert_row(entry, entry.id)
        logger.info(
            "milk_entry_saved",
            profile_id=self.profile_id,
            entry_id=entry.id,
            date=entry.date,
            liters=str(entry.liters),
            updated=replaced,
        )
        return entry

    def add_entry(
        self,
        entry_date: str,
        liters: Any,
        price_per_liter: Any = None,
        helper_id: Optional[str] = None,
        entry_id: Optional[str] = None,
    ) -> MilkEntry:
        """
        Add (or, with entry_id, edit) a delivery from form input.

        With no price given, the milkman's default price is used.
        """
        if (price_per_liter is None or price_per_liter == "") and helper_id and self._registry:
            helper = self._registry.find(helper_id)
            if helper and helper.default_price_per_liter:
                price_per_liter = helper.default_price_per_liter

        ensure_valid(self._validator.validate_milk_entry(
            entry_date=entry_date,
            liters=liters,
            price_per_liter=price_per_liter,
        ))

        entry = MilkEntry(
            id=entry_id or self.generate_id(),
            date=entry_date,
            helper_id=helper_id,
            liters=liters,
            price_per_liter=price_per_liter,
        )
        return self.upsert(entry)

    def delete(self, entry_id: str) -> bool:
        removed = self._delete_row(entry_id)
        logger.info(
            "milk_entry_deleted",
            profile_id=self.profile_id,
            entry_id=entry_id,
            removed=removed,
        )
        return removed
