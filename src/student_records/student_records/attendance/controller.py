from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import coerce_date
from ..common.validators import require_non_empty, require_number
from ..container import Container
from ..core.enums import Period
from ..core.exceptions import NotFoundError, ValidationError
from .service import SessionEntry
from .validation import validate_attendance_input

RECORD_FIELDS = {
    "student_id",
    "class_id",
    "date",
    "period",
    "semester",
    "academic_year",
    "hours_present",
    "hours_absent",
    "total_hours",
    "notes",
}


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register(app: Flask, container: Container) -> None:
    store = container.store
    attendance_service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    def list_attendance():
        class_id = request.args.get("class_id")
        student_id = request.args.get("student_id")

        if class_id:
            records = store.get_attendance_by_class(class_id)
        elif student_id:
            records = store.get_attendance_by_student(student_id)
        else:
            records = store.get_attendance_records()

        if class_id and student_id:
            records = [r for r in records if r.student_id == student_id]
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance", methods=["POST"], endpoint="create_attendance")
    def create_attendance():
        data = validate_attendance_input({k: v for k, v in _json_body().items() if k in RECORD_FIELDS})
        if not store.get_class_by_id(data["class_id"]):
            raise ValidationError("Class does not exist")
        if not store.get_student_by_id(data["student_id"]):
            raise ValidationError("Student does not exist")

        record = store.add_attendance_record(data)
        return jsonify(record.to_dict()), 201

    @app.route("/api/attendance/<record_id>", methods=["PATCH"], endpoint="update_attendance")
    def update_attendance(record_id: str):
        existing = store.get_attendance_record_by_id(record_id)
        if not existing:
            raise NotFoundError("Attendance record not found")

        fields = {k: v for k, v in _json_body().items() if k in RECORD_FIELDS}
        merged = validate_attendance_input({**existing.to_dict(), **fields})
        changes = {k: merged[k] for k in fields}

        store.update_attendance_record(record_id, **changes)
        return jsonify(store.get_attendance_record_by_id(record_id).to_dict())

    @app.route("/api/attendance/<record_id>", methods=["DELETE"], endpoint="delete_attendance")
    def delete_attendance(record_id: str):
        if not store.delete_attendance_record(record_id):
            raise NotFoundError("Attendance record not found")
        return jsonify({"success": True})

    @app.route("/api/classes/<class_id>/attendance/session", methods=["POST"], endpoint="record_session")
    def record_session(class_id: str):
        """Record one session for a class.

        Either pass ``entries`` explicitly or ``mark`` = "present" / "absent" to fill every
        student of the class.
        """

        student_class = store.get_class_by_id(class_id)
        if not student_class:
            raise NotFoundError("Class not found")

        data = _json_body()
        total_hours = require_number(data.get("total_hours"), "total_hours")
        try:
            session_date = coerce_date(data.get("date"))
        except (TypeError, ValueError):
            raise ValidationError("date must be an ISO date (YYYY-MM-DD)") from None
        try:
            period = Period(data.get("period", Period.SEMESTER.value))
        except ValueError:
            raise ValidationError(f"Unknown period: {data.get('period')!r}") from None

        semester = data.get("semester")
        if period == Period.SEMESTER and not semester:
            semester = student_class.semester

        mark = data.get("mark")
        student_ids = [s.id for s in store.get_students_by_class(class_id)]
        if mark == "present":
            entries = attendance_service.mark_all_present(student_ids, total_hours)
        elif mark == "absent":
            entries = attendance_service.mark_all_absent(student_ids, total_hours)
        elif mark is None:
            raw_entries = data.get("entries")
            if not isinstance(raw_entries, list):
                raise ValidationError("entries must be a list")
            entries = []
            for raw in raw_entries:
                if not isinstance(raw, dict):
                    raise ValidationError("each entry must be an object")
                student_id = require_non_empty(raw.get("student_id"), "student_id")
                if student_id not in student_ids:
                    raise ValidationError(f"Student {student_id} is not in this class")
                absent = raw.get("hours_absent")
                entries.append(
                    SessionEntry(
                        student_id=student_id,
                        hours_present=require_number(raw.get("hours_present"), "hours_present"),
                        hours_absent=None if absent is None else require_number(absent, "hours_absent"),
                        notes=raw.get("notes") or None,
                    )
                )
        else:
            raise ValidationError("mark must be 'present' or 'absent'")

        created = attendance_service.record_session(
            class_id,
            session_date=session_date,
            total_hours=total_hours,
            period=period,
            semester=semester,
            academic_year=data.get("academic_year") or student_class.academic_year,
            entries=entries,
        )
        return jsonify({"success": True, "saved": len(created), "records": [r.to_dict() for r in created]}), 201
