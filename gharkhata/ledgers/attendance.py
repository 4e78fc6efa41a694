"""
Attendance Ledger

Per-date, per-helper presence marks, stored as

    {"2024-05-01": {"h_1": "P", "h_2": "A"}, ...}

A helper with no entry for a date is UNSET. Setting a mark back to
UNSET removes the entry (and the date, once empty) rather than storing
a blank - so UNSET is never confused with ABSENT.
"""

from typing import Any, Optional

from gharkhata.ledgers.base import ProfileLedger
from gharkhata.logger import get_logger
from gharkhata.models.household import AttendanceMark, AttendanceStatus
from gharkhata.validation import ensure_valid


logger = get_logger(__name__)


def _read_status(value: Any) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        return AttendanceStatus.UNSET


class AttendanceLedger(ProfileLedger):
    """
    Attendance of one profile.

    Marks are identified by (date, helper_id); there are no record ids.
    """

    KEY = "attendance"

    def _load_days(self) -> dict[str, dict[str, Any]]:
        days = self._store.load(self._profile_id, self.KEY, {})
        if not isinstance(days, dict):
            logger.warning(
                "ledger_shape_invalid",
                key=self.KEY,
                profile_id=self._profile_id,
                found=type(days).__name__,
            )
            return {}
        return days

    def _save_days(self, days: dict[str, dict[str, Any]]) -> None:
        self._store.save(self._profile_id, self.KEY, days)

    def list_marks(self) -> list[AttendanceMark]:
        """Every recorded (Present/Absent) mark, by date then helper."""
        marks = []
        days = self._load_days()
        for mark_date in sorted(days):
            by_helper = days[mark_date]
            if not isinstance(by_helper, dict):
                logger.warning("record_skipped", key=self.KEY, date=mark_date, reason="not an object")
                continue
            for helper_id in sorted(by_helper):
                status = _read_status(by_helper[helper_id])
                if not status.is_recorded or not mark_date or not helper_id:
                    continue
                marks.append(AttendanceMark(
                    date=mark_date,
                    helper_id=helper_id,
                    status=status,
                ))
        return marks

    def marks_for_date(self, mark_date: str) -> dict[str, AttendanceStatus]:
        """Recorded marks for one date, by helper id."""
        by_helper = self._load_days().get(mark_date)
        if not isinstance(by_helper, dict):
            return {}
        statuses = {}
        for helper_id, value in by_helper.items():
            status = _read_status(value)
            if status.is_recorded:
                statuses[helper_id] = status
        return statuses

    def status_for(self, mark_date: str, helper_id: str) -> AttendanceStatus:
        return self.marks_for_date(mark_date).get(helper_id, AttendanceStatus.UNSET)

    def set_status(
        self,
        mark_date: str,
        helper_id: str,
        status: AttendanceStatus,
    ) -> AttendanceMark:
        """
        Record a mark. UNSET removes any existing mark.

        Raises:
            EntryRejectedError: If the date or helper id is malformed
        """
        ensure_valid(self._validator.validate_attendance(mark_date, helper_id))
        status = AttendanceStatus(status)

        days = self._load_days()
        by_helper = days.get(mark_date)
        if not isinstance(by_helper, dict):
            by_helper = {}

        if status.is_recorded:
            by_helper[helper_id] = status.value
        else:
            by_helper.pop(helper_id, None)

        if by_helper:
            days[mark_date] = by_helper
        else:
            days.pop(mark_date, None)

        self._save_days(days)
        logger.info(
            "attendance_marked",
            profile_id=self.profile_id,
            date=mark_date,
            helper_id=helper_id,
            status=status.name,
        )
        return AttendanceMark(date=mark_date, helper_id=helper_id, status=status)

    def upsert(self, mark: AttendanceMark) -> AttendanceMark:
        return self.set_status(mark.date, mark.helper_id, mark.status)

    def delete(self, mark_date: str, helper_id: str) -> bool:
        """
        Clear a mark.

        Returns:
            True if a recorded mark was removed
        """
        existed = self.status_for(mark_date, helper_id).is_recorded
        if existed:
            self.set_status(mark_date, helper_id, AttendanceStatus.UNSET)
        return existed

    def cycle_status(self, mark_date: str, helper_id: str) -> AttendanceStatus:
        """Advance a mark: unset -> Present -> Absent -> unset."""
        new_status = self.status_for(mark_date, helper_id).next()
        self.set_status(mark_date, helper_id, new_status)
        return new_status

    def find(self, mark_date: str, helper_id: str) -> Optional[AttendanceMark]:
        status = self.status_for(mark_date, helper_id)
        if not status.is_recorded:
            return None
        return AttendanceMark(date=mark_date, helper_id=helper_id, status=status)
