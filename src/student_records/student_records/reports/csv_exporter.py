from __future__ import annotations

from datetime import datetime

from ..common.datetime_utils import epoch_millis
from ..core.constants import CSV_HEADERS, CSV_SUMMARY_LABEL
from .model import FrequencyReport


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def render_csv(report: FrequencyReport) -> str:
    """Render a frequency report as comma-separated text.

    Fields are joined with a bare comma and never quoted, so a name containing a comma
    shifts its row's columns.
    """

    rows = [list(CSV_HEADERS)]
    for r in report.student_reports:
        rows.append(
            [
                r.student_name,
                _fmt(r.total_hours_present),
                _fmt(r.total_hours_absent),
                _fmt(r.total_hours),
                _fmt(r.presence_percentage),
                _fmt(r.absence_percentage),
            ]
        )

    rows.append([])
    rows.append(
        [
            CSV_SUMMARY_LABEL,
            "",
            "",
            "",
            _fmt(report.class_average_presence),
            _fmt(report.class_average_absence),
        ]
    )
    return "\n".join(",".join(row) for row in rows)


def export_filename(report: FrequencyReport, now: datetime) -> str:
    return f"frequency-report-{report.class_name}-{epoch_millis(now)}.csv"
