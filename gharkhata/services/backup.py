"""
Backup Service

Whole-store export and restore, in the same JSON shape the browser
version of the app downloads:

    {
      "app": "Singhi GharKhata",
      "version": 1,
      "exportedAt": "2024-05-31T18:30:00+00:00",
      "data": {"default_helpers": [...], "default_milk": [...], ...}
    }

Keys under "data" are short keys (<profile>_<key>), so one backup
carries every profile.
"""

import json
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

from gharkhata.logger import get_logger
from gharkhata.services.storage import KeyValueStoreInterface


logger = get_logger(__name__)

BACKUP_APP_NAME = "Singhi GharKhata"
BACKUP_VERSION = 1


class BackupFormatError(ValueError):
    """The uploaded file is not a GharKhata backup."""
    pass


def backup_file_name(today: Optional[date] = None) -> str:
    return f"singhi-gharkhata-backup-{(today or date.today()).isoformat()}.json"


class BackupService:
    """Export, restore and wipe everything in a store."""

    def __init__(self, store: KeyValueStoreInterface):
        self._store = store

    def export_payload(self, now: Optional[datetime] = None) -> dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        data = self._store.dump()
        logger.info("backup_exported", keys=len(data))
        return {
            "app": BACKUP_APP_NAME,
            "version": BACKUP_VERSION,
            "exportedAt": now.isoformat(),
            "data": data,
        }

    def restore_payload(self, payload: Any) -> int:
        """
        Write every key of a backup back into the store.

        Accepts the wrapped export or a bare {short_key: value} mapping.
        Keys not in the backup are left alone.

        Returns:
            Number of keys restored

        Raises:
            BackupFormatError: If the payload is not a mapping
            StorageError: If a write fails
        """
        if not isinstance(payload, Mapping):
            raise BackupFormatError("Invalid backup file")

        data = payload["data"] if "data" in payload else payload
        if not isinstance(data, Mapping):
            raise BackupFormatError("Backup 'data' must be an object")

        for short_key, value in data.items():
            self._store.restore(str(short_key), value)

        logger.info("backup_restored", keys=len(data))
        return len(data)

    def clear_all(self) -> int:
        """Delete every application key. Returns the number removed."""
        removed = self._store.clear()
        logger.warning("store_cleared", keys=removed)
        return removed

    # -------------------------------------------------------------------------
    # File body helpers
    # -------------------------------------------------------------------------

    def dumps(self, now: Optional[datetime] = None) -> str:
        return json.dumps(self.export_payload(now), indent=2, ensure_ascii=False)

    def loads(self, text: str) -> int:
        """
        Restore from the text of a backup file.

        Raises:
            BackupFormatError: If the text is not JSON or not a backup
        """
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise BackupFormatError(f"Invalid backup file: {e}") from e
        return self.restore_payload(payload)
