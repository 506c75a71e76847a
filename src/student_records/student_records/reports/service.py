from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Protocol, Sequence

from ..attendance.model import AttendanceRecord, ReportPeriod, parse_report_period
from ..common.datetime_utils import now_local
from ..students.model import Student, StudentClass
from .model import FrequencyReport, StudentFrequencyReport

logger = logging.getLogger(__name__)


class RecordReader(Protocol):
    """The read side of the record store that reporting depends on."""

    def get_class_by_id(self, class_id: str) -> Optional[StudentClass]:
        raise NotImplementedError

    def get_students_by_class(self, class_id: str) -> Sequence[Student]:
        raise NotImplementedError

    def get_attendance_by_class(self, class_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError


def _percentage(part: float, total: float) -> float:
    return (part / total) * 100 if total > 0 else 0.0


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class FrequencyReportService:
    """Use case: presence/absence frequency of a class over a semester or a year.

    Reads a snapshot of the store and never mutates it.
    """

    def __init__(self, records: RecordReader, *, clock: Callable[[], datetime] = now_local):
        self._records = records
        self._clock = clock

    def generate_frequency_report(self, class_id: str, period: ReportPeriod) -> Optional[FrequencyReport]:
        student_class = self._records.get_class_by_id(class_id)
        if not student_class:
            logger.info("Frequency report requested for unknown class %s", class_id)
            return None

        students = self._records.get_students_by_class(class_id)
        filtered = [r for r in self._records.get_attendance_by_class(class_id) if period.matches(r)]

        # Representative value only; records are assumed to share one total per class/period.
        total_class_hours = filtered[0].total_hours if filtered else 0.0

        student_reports = tuple(self._student_row(student, filtered) for student in students)

        report = FrequencyReport(
            class_id=class_id,
            class_name=student_class.name,
            period=period.period,
            academic_year=student_class.academic_year,
            semester=period.semester,
            total_class_hours=total_class_hours,
            student_reports=student_reports,
            class_average_presence=_mean([r.presence_percentage for r in student_reports]),
            class_average_absence=_mean([r.absence_percentage for r in student_reports]),
            generated_at=self._clock(),
        )
        logger.debug(
            "Generated %s report for class %s (%d students, %d records)",
            report.period.value,
            class_id,
            len(student_reports),
            len(filtered),
        )
        return report

    def generate_for_request(
        self, class_id: str, period: Optional[str], semester: Optional[str] = None
    ) -> Optional[FrequencyReport]:
        """Same as :meth:`generate_frequency_report` but from raw query values.

        Raises ``ValidationError`` when the period/semester pair is malformed.
        """

        return self.generate_frequency_report(class_id, parse_report_period(period, semester))

    def _student_row(self, student: Student, records: Sequence[AttendanceRecord]) -> StudentFrequencyReport:
        own = [r for r in records if r.student_id == student.id]
        present = sum(r.hours_present for r in own)
        absent = sum(r.hours_absent for r in own)
        total = sum(r.total_hours for r in own)

        # Present and absent percentages are independent; they need not sum to 100.
        return StudentFrequencyReport(
            student_id=student.id,
            student_name=student.full_name,
            total_hours_present=float(present),
            total_hours_absent=float(absent),
            total_hours=float(total),
            presence_percentage=_percentage(present, total),
            absence_percentage=_percentage(absent, total),
        )
