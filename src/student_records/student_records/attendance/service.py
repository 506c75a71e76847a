from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence

from ..core.enums import Period
from ..core.exceptions import ValidationError
from ..records.store import RecordStore
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionEntry:
    """Hours one student attended during a recorded session."""

    student_id: str
    hours_present: float
    hours_absent: Optional[float] = None
    notes: Optional[str] = None


class AttendanceService:
    """Use case: record one session's attendance for a whole class."""

    def __init__(self, store: RecordStore):
        self._store = store

    def record_session(
        self,
        class_id: str,
        *,
        session_date: date,
        total_hours: float,
        period: Period,
        academic_year: str,
        entries: Iterable[SessionEntry],
        semester: Optional[str] = None,
    ) -> List[AttendanceRecord]:
        if not self._store.get_class_by_id(class_id):
            raise ValidationError("Class does not exist")

        period = Period(period)
        if period == Period.SEMESTER and not semester:
            raise ValidationError("semester is required when period is 'semester'")

        rows = []
        for entry in entries:
            absent = entry.hours_absent
            if absent is None:
                absent = max(0.0, float(total_hours) - float(entry.hours_present))

            rows.append(
                {
                    "student_id": entry.student_id,
                    "class_id": class_id,
                    "date": session_date,
                    "period": period.value,
                    "semester": semester if period == Period.SEMESTER else None,
                    "academic_year": academic_year,
                    "hours_present": float(entry.hours_present),
                    "hours_absent": float(absent),
                    "total_hours": float(total_hours),
                    "notes": entry.notes,
                }
            )

        # One write for the whole session.
        created = list(self._store.add_attendance_records(rows))
        logger.info("Attendance saved for %d students of class %s", len(created), class_id)
        return created

    @staticmethod
    def mark_all_present(student_ids: Sequence[str], total_hours: float) -> List[SessionEntry]:
        return [SessionEntry(student_id=s, hours_present=total_hours, hours_absent=0.0) for s in student_ids]

    @staticmethod
    def mark_all_absent(student_ids: Sequence[str], total_hours: float) -> List[SessionEntry]:
        return [SessionEntry(student_id=s, hours_present=0.0, hours_absent=total_hours) for s in student_ids]
