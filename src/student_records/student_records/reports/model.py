from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..core.enums import Period


@dataclass(frozen=True)
class StudentFrequencyReport:
    """One row of a frequency report: sums over one student's matching records."""

    student_id: str
    student_name: str
    total_hours_present: float
    total_hours_absent: float
    total_hours: float
    presence_percentage: float
    absence_percentage: float

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "total_hours_present": self.total_hours_present,
            "total_hours_absent": self.total_hours_absent,
            "total_hours": self.total_hours,
            "presence_percentage": self.presence_percentage,
            "absence_percentage": self.absence_percentage,
        }


@dataclass(frozen=True)
class FrequencyReport:
    """Read-model for a class over a period (not persisted).

    ``total_class_hours`` is the total of the first matching record, not a sum.
    """

    class_id: str
    class_name: str
    period: Period
    academic_year: str
    semester: Optional[str]
    total_class_hours: float
    student_reports: Tuple[StudentFrequencyReport, ...]
    class_average_presence: float
    class_average_absence: float
    generated_at: datetime

    def to_dict(self) -> dict:
        return {
            "class_id": self.class_id,
            "class_name": self.class_name,
            "period": self.period.value,
            "academic_year": self.academic_year,
            "semester": self.semester,
            "total_class_hours": self.total_class_hours,
            "student_reports": [r.to_dict() for r in self.student_reports],
            "class_average_presence": self.class_average_presence,
            "class_average_absence": self.class_average_absence,
            "generated_at": self.generated_at.isoformat(),
        }
