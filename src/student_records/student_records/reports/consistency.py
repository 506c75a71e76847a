from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from ..attendance.model import AttendanceRecord
from ..core.enums import Period

HOURS_TOLERANCE = 1e-9


class AnomalyKind(str, Enum):
    HOURS_MISMATCH = "HOURS_MISMATCH"
    NEGATIVE_HOURS = "NEGATIVE_HOURS"
    MISSING_SEMESTER = "MISSING_SEMESTER"
    INCONSISTENT_TOTAL = "INCONSISTENT_TOTAL"


@dataclass(frozen=True)
class Anomaly:
    kind: AnomalyKind
    message: str
    record_id: Optional[str] = None
    class_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "record_id": self.record_id,
            "class_id": self.class_id,
        }


def find_anomalies(records: Iterable[AttendanceRecord]) -> List[Anomaly]:
    """Report data-entry problems that aggregation deliberately tolerates."""

    anomalies: List[Anomaly] = []
    totals: Dict[Tuple[str, Period, Optional[str]], Dict[float, str]] = {}

    for r in records:
        if min(r.hours_present, r.hours_absent, r.total_hours) < 0:
            anomalies.append(
                Anomaly(AnomalyKind.NEGATIVE_HOURS, "hours must not be negative", r.id, r.class_id)
            )

        if abs(r.hours_present + r.hours_absent - r.total_hours) > HOURS_TOLERANCE:
            anomalies.append(
                Anomaly(
                    AnomalyKind.HOURS_MISMATCH,
                    f"present {r.hours_present:g} + absent {r.hours_absent:g} != total {r.total_hours:g}",
                    r.id,
                    r.class_id,
                )
            )

        if r.period == Period.SEMESTER and not r.semester:
            anomalies.append(
                Anomaly(AnomalyKind.MISSING_SEMESTER, "semester record without semester label", r.id, r.class_id)
            )

        group = (r.class_id, r.period, r.semester if r.period == Period.SEMESTER else None)
        totals.setdefault(group, {}).setdefault(r.total_hours, r.id)

    for (class_id, period, semester), seen in totals.items():
        if len(seen) > 1:
            values = ", ".join(f"{v:g}" for v in sorted(seen))
            scope = f"{period.value} {semester}" if semester else period.value
            anomalies.append(
                Anomaly(
                    AnomalyKind.INCONSISTENT_TOTAL,
                    f"total hours differ within {scope}: {values}",
                    class_id=class_id,
                )
            )

    return anomalies
