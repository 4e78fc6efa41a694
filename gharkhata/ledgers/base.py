"""
Shared plumbing for the profile-scoped ledgers.

Each ledger owns one logical key in the store and reads it fresh on
every call - there is no cache to invalidate. Rows that fail basic
shape validation (no id, no date) are skipped and logged, never raised.

Writes work on the raw stored rows so that a malformed row written by an
older version survives an unrelated edit untouched.
"""

from typing import Any, Optional, TypeVar
from uuid import uuid4

from pydantic import ValidationError

from gharkhata.logger import get_logger
from gharkhata.models.household import LedgerRecord
from gharkhata.services.storage import DEFAULT_PROFILE, KeyValueStoreInterface
from gharkhata.validation import EntryValidator


logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=LedgerRecord)


class ProfileLedger:
    """
    Base class for a list-shaped ledger stored under one key.

    Subclasses set KEY (the logical storage key) and ID_PREFIX.
    """

    KEY: str = ""
    ID_PREFIX: str = ""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        profile_id: str = DEFAULT_PROFILE,
        validator: Optional[EntryValidator] = None,
    ):
        self._store = store
        self._profile_id = profile_id or DEFAULT_PROFILE
        self._validator = validator or EntryValidator()

    @property
    def profile_id(self) -> str:
        return self._profile_id

    def generate_id(self) -> str:
        """Opaque, never-reused record id."""
        return f"{self.ID_PREFIX}_{uuid4().hex}"

    # -------------------------------------------------------------------------
    # Raw row access
    # -------------------------------------------------------------------------

    def _load_rows(self) -> list[Any]:
        rows = self._store.load(self._profile_id, self.KEY, [])
        if not isinstance(rows, list):
            logger.warning(
                "ledger_shape_invalid",
                key=self.KEY,
                profile_id=self._profile_id,
                found=type(rows).__name__,
            )
            return []
        return rows

    def _save_rows(self, rows: list[Any]) -> None:
        self._store.save(self._profile_id, self.KEY, rows)

    def _parse_rows(self, rows: list[Any], model: type[RecordT]) -> list[RecordT]:
        records = []
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                logger.warning("record_skipped", key=self.KEY, index=index, reason="not an object")
                continue
            try:
                records.append(model.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    "record_skipped",
                    key=self.KEY,
                    index=index,
                    record_id=row.get("id"),
                    reason=str(e.errors()[0]["msg"]) if e.errors() else str(e),
                )
        return records

    def _upsert_row(self, record: LedgerRecord, record_id: str) -> bool:
        """
        Replace the row with the same id, or append.

        Returns:
            True if an existing row was replaced
        """
        rows = self._load_rows()
        payload = record.to_storage()
        for index, row in enumerate(rows):
            if isinstance(row, dict) and str(row.get("id")) == record_id:
                rows[index] = payload
                self._save_rows(rows)
                return True
        rows.append(payload)
        self._save_rows(rows)
        return False

    def _delete_row(self, record_id: str) -> bool:
        rows = self._load_rows()
        kept = [
            row for row in rows
            if not (isinstance(row, dict) and str(row.get("id")) == record_id)
        ]
        if len(kept) == len(rows):
            return False
        self._save_rows(kept)
        return True
