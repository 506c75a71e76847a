"""Demonstration data for a fresh install."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from ..core.constants import DEFAULT_SESSION_HOURS
from ..core.enums import Period
from ..records.store import RecordStore
from ..students.model import StudentClass

logger = logging.getLogger(__name__)

SAMPLE_CLASSES = [
    {
        "name": "Mathematics 101",
        "description": "Introduction to Calculus and Algebra",
        "academic_year": "2024-2025",
        "semester": "Fall",
        "created_at": date(2024, 9, 1),
        "is_active": True,
    },
    {
        "name": "Physics 201",
        "description": "Classical Mechanics",
        "academic_year": "2024-2025",
        "semester": "Fall",
        "created_at": date(2024, 9, 1),
        "is_active": True,
    },
    {
        "name": "Computer Science 301",
        "description": "Data Structures and Algorithms",
        "academic_year": "2024-2025",
        "semester": "Fall",
        "created_at": date(2024, 9, 1),
        "is_active": True,
    },
    {
        "name": "English Literature 101",
        "description": "Introduction to Classic Literature",
        "academic_year": "2024-2025",
        "semester": "Spring",
        "created_at": date(2024, 9, 1),
        "is_active": True,
    },
]

SAMPLE_STUDENTS = [
    ("Emma", "Johnson", date(2024, 9, 1)),
    ("Liam", "Williams", date(2024, 9, 1)),
    ("Olivia", "Brown", date(2024, 9, 1)),
    ("Noah", "Davis", date(2024, 9, 2)),
    ("Ava", "Miller", date(2024, 9, 2)),
]

RECORDS_PER_STUDENT = 10


@dataclass(frozen=True)
class SeedSummary:
    classes: int
    students: int
    attendance_records: int


def seed_sample_data(
    store: RecordStore,
    *,
    with_attendance: bool = False,
    rng: Optional[random.Random] = None,
) -> SeedSummary:
    """Wipe the store and fill it with sample classes, students and (optionally) attendance."""

    rng = rng or random.Random()

    logger.info("Clearing existing data")
    store.clear_all_data()

    logger.info("Adding sample classes")
    classes = [store.add_class(data) for data in SAMPLE_CLASSES]

    logger.info("Adding sample students")
    student_count = 0
    attendance_count = 0
    for class_index, student_class in enumerate(classes):
        for student_index, (first, last, enrolled) in enumerate(SAMPLE_STUDENTS):
            student = store.add_student(
                {
                    "first_name": first,
                    "last_name": last,
                    "email": f"{first.lower()}.{last.lower()}@school.edu",
                    "student_number": f"STU{class_index * 10 + student_index + 1:03d}",
                    "class_id": student_class.id,
                    "enrollment_date": enrolled,
                    "is_active": True,
                }
            )
            student_count += 1
            if with_attendance:
                attendance_count += len(_sample_attendance(store, student_class, student.id, rng))

    summary = SeedSummary(classes=len(classes), students=student_count, attendance_records=attendance_count)
    logger.info(
        "Sample data seeded: %d classes, %d students, %d attendance records",
        summary.classes,
        summary.students,
        summary.attendance_records,
    )
    return summary


def _sample_attendance(store: RecordStore, student_class: StudentClass, student_id: str, rng: random.Random) -> List:
    created = []
    for i in range(RECORDS_PER_STUDENT):
        present = rng.randint(0, DEFAULT_SESSION_HOURS)
        created.append(
            store.add_attendance_record(
                {
                    "student_id": student_id,
                    "class_id": student_class.id,
                    # Spread across September-October.
                    "date": date(2024, 9 + i // 5, 1 + (i % 5) * 3),
                    "period": Period.SEMESTER.value,
                    "semester": student_class.semester,
                    "academic_year": student_class.academic_year,
                    "hours_present": present,
                    "hours_absent": DEFAULT_SESSION_HOURS - present,
                    "total_hours": DEFAULT_SESSION_HOURS,
                    "notes": f"Sample attendance record {i + 1}",
                }
            )
        )
    return created
