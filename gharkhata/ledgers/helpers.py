"""
Helper Registry

CRUD over the household's helpers (maids, milkmen, others).

Deleting a helper does NOT touch their attendance, milk or payment
history. Those rows keep the old id and show up as "Unknown".
"""

from datetime import date
from typing import Any, Optional

from gharkhata.ledgers.base import ProfileLedger
from gharkhata.logger import get_logger
from gharkhata.models.household import Helper, HelperRole, PaymentType
from gharkhata.validation import ensure_valid


logger = get_logger(__name__)


class HelperRegistry(ProfileLedger):
    """Helpers of one profile."""

    KEY = "helpers"
    ID_PREFIX = "h"

    def list_helpers(self) -> list[Helper]:
        """All readable helpers, in stored order."""
        return self._parse_rows(self._load_rows(), Helper)

    def find(self, helper_id: Optional[str]) -> Optional[Helper]:
        if not helper_id:
            return None
        for helper in self.list_helpers():
            if helper.id == helper_id:
                return helper
        return None

    def milkmen(self) -> list[Helper]:
        return [h for h in self.list_helpers() if h.is_milkman]

    def upsert(self, helper: Helper) -> Helper:
        """
        Insert or replace a helper by id.

        Raises:
            EntryRejectedError: If name or role is missing
            StorageError: If the write fails
        """
        ensure_valid(self._validator.validate_helper(
            name=helper.name,
            role=helper.role,
            start_date=helper.start_date,
        ))
        replaced = self._upsert_row(helper, helper.id)
        logger.info(
            "helper_saved",
            profile_id=self.profile_id,
            helper_id=helper.id,
            role=helper.role.value,
            updated=replaced,
        )
        return helper

    def save_helper(
        self,
        name: Any,
        role: Any,
        monthly_salary: Any = None,
        default_price_per_liter: Any = None,
        payment_type: Any = PaymentType.MONTHLY,
        start_date: Optional[str] = None,
        helper_id: Optional[str] = None,
    ) -> Helper:
        """
        Create or edit a helper from form input.

        Non-numeric salary/price input is stored as 0.
        """
        ensure_valid(self._validator.validate_helper(
            name=name,
            role=role,
            monthly_salary=monthly_salary,
            default_price_per_liter=default_price_per_liter,
            start_date=start_date,
        ))
        helper = Helper(
            id=helper_id or self.generate_id(),
            name=name.strip(),
            role=role,
            monthly_salary=monthly_salary,
            default_price_per_liter=default_price_per_liter,
            payment_type=payment_type,
            start_date=start_date or None,
        )
        return self.upsert(helper)

    def quick_add_milkman(
        self,
        name: Any,
        today: Optional[date] = None,
    ) -> Optional[Helper]:
        """
        Add a milkman by name alone, from the milk entry screen.

        Returns None for a blank name.
        """
        if not isinstance(name, str) or not name.strip():
            return None
        return self.save_helper(
            name=name,
            role=HelperRole.MILKMAN,
            monthly_salary=0,
            payment_type=PaymentType.MONTHLY,
            start_date=(today or date.today()).isoformat(),
        )

    def delete(self, helper_id: str) -> bool:
        """
        Delete a helper. History is kept.

        Returns:
            True if a helper was removed
        """
        removed = self._delete_row(helper_id)
        logger.info(
            "helper_deleted",
            profile_id=self.profile_id,
            helper_id=helper_id,
            removed=removed,
        )
        return removed
