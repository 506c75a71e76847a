from __future__ import annotations

from dataclasses import asdict, dataclass

from ..records.store import RecordStore


@dataclass(frozen=True)
class DashboardStats:
    total_students: int
    active_students: int
    total_classes: int
    active_classes: int
    attendance_records: int

    def to_dict(self) -> dict:
        return asdict(self)


class DashboardService:
    def __init__(self, store: RecordStore):
        self._store = store

    def get_stats(self) -> DashboardStats:
        students = self._store.get_students()
        classes = self._store.get_classes()
        return DashboardStats(
            total_students=len(students),
            active_students=sum(1 for s in students if s.is_active),
            total_classes=len(classes),
            active_classes=sum(1 for c in classes if c.is_active),
            attendance_records=len(self._store.get_attendance_records()),
        )
