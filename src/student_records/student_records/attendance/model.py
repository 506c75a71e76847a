from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Union

from ..common.datetime_utils import coerce_date, format_iso_date
from ..core.enums import Period
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: hours attended by one student in one class on one date.

    ``hours_present + hours_absent == total_hours`` is expected but not enforced.
    """

    id: str
    student_id: str
    class_id: str
    date: date
    period: Period
    academic_year: str
    hours_present: float
    hours_absent: float
    total_hours: float
    semester: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "student_id": self.student_id,
            "class_id": self.class_id,
            "date": format_iso_date(self.date),
            "period": self.period.value,
            "semester": self.semester,
            "academic_year": self.academic_year,
            "hours_present": self.hours_present,
            "hours_absent": self.hours_absent,
            "total_hours": self.total_hours,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttendanceRecord":
        return cls(
            id=str(data["id"]),
            student_id=str(data["student_id"]),
            class_id=str(data["class_id"]),
            date=coerce_date(data["date"]),
            period=Period(data["period"]),
            academic_year=str(data.get("academic_year") or ""),
            hours_present=float(data["hours_present"]),
            hours_absent=float(data["hours_absent"]),
            total_hours=float(data["total_hours"]),
            semester=data.get("semester") or None,
            notes=data.get("notes") or None,
        )


@dataclass(frozen=True)
class SemesterPeriod:
    """Report over a single semester, identified by its label (e.g. "Fall")."""

    label: str

    @property
    def period(self) -> Period:
        return Period.SEMESTER

    @property
    def semester(self) -> Optional[str]:
        return self.label

    def matches(self, record: AttendanceRecord) -> bool:
        return record.period == Period.SEMESTER and record.semester == self.label


@dataclass(frozen=True)
class YearPeriod:
    """Report over a full academic year; semester labels are ignored."""

    @property
    def period(self) -> Period:
        return Period.YEAR

    @property
    def semester(self) -> Optional[str]:
        return None

    def matches(self, record: AttendanceRecord) -> bool:
        return record.period == Period.YEAR


ReportPeriod = Union[SemesterPeriod, YearPeriod]


def parse_report_period(period: Union[str, Period, None], semester: Optional[str] = None) -> ReportPeriod:
    """Build a report selector from raw request values."""

    try:
        kind = Period(period)
    except ValueError:
        raise ValidationError(f"Unknown period: {period!r}") from None

    if kind == Period.SEMESTER:
        if not semester or not str(semester).strip():
            raise ValidationError("semester is required when period is 'semester'")
        return SemesterPeriod(label=str(semester).strip())
    return YearPeriod()
