from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_date, format_iso_date


@dataclass(frozen=True)
class Student:
    """Domain entity: a student enrolled in exactly one class."""

    id: str
    first_name: str
    last_name: str
    class_id: str
    enrollment_date: date
    is_active: bool = True
    email: Optional[str] = None
    student_number: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "class_id": self.class_id,
            "enrollment_date": format_iso_date(self.enrollment_date),
            "is_active": self.is_active,
            "student_number": self.student_number,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Student":
        return cls(
            id=str(data["id"]),
            first_name=str(data["first_name"]),
            last_name=str(data["last_name"]),
            class_id=str(data["class_id"]),
            enrollment_date=coerce_date(data["enrollment_date"]),
            is_active=bool(data.get("is_active", True)),
            email=data.get("email") or None,
            student_number=data.get("student_number") or None,
        )


@dataclass(frozen=True)
class StudentClass:
    """Domain entity: a class (course group) students belong to."""

    id: str
    name: str
    academic_year: str
    semester: str
    created_at: date
    is_active: bool = True
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "academic_year": self.academic_year,
            "semester": self.semester,
            "created_at": format_iso_date(self.created_at),
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StudentClass":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            academic_year=str(data["academic_year"]),
            semester=str(data["semester"]),
            created_at=coerce_date(data["created_at"]),
            is_active=bool(data.get("is_active", True)),
            description=data.get("description") or None,
        )
