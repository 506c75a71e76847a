from __future__ import annotations

from datetime import date, datetime

import pytest

from student_records.records.store import RecordStore
from student_records.storage.memory_storage import InMemoryKeyValueStorage


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 1, 15, 10, 30, 0)


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def store(storage) -> RecordStore:
    return RecordStore(storage)


def class_data(**overrides) -> dict:
    data = {
        "name": "Math 101",
        "academic_year": "2024-2025",
        "semester": "Fall",
        "created_at": date(2024, 9, 1),
        "is_active": True,
    }
    data.update(overrides)
    return data


def student_data(class_id: str, **overrides) -> dict:
    data = {
        "first_name": "John",
        "last_name": "Doe",
        "class_id": class_id,
        "enrollment_date": date(2024, 9, 1),
        "is_active": True,
    }
    data.update(overrides)
    return data


def attendance_data(student_id: str, class_id: str, **overrides) -> dict:
    data = {
        "student_id": student_id,
        "class_id": class_id,
        "date": date(2024, 9, 10),
        "period": "semester",
        "semester": "Fall",
        "academic_year": "2024-2025",
        "hours_present": 8,
        "hours_absent": 0,
        "total_hours": 8,
    }
    data.update(overrides)
    return data
