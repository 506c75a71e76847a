from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import coerce_date, now_local
from ..common.validators import require_bool, require_non_empty
from ..container import Container
from ..core.exceptions import IntegrityError, NotFoundError, ValidationError

STUDENT_REQUIRED = ("first_name", "last_name", "class_id")
CLASS_REQUIRED = ("name", "academic_year", "semester")

STUDENT_FIELDS = {"first_name", "last_name", "email", "class_id", "enrollment_date", "is_active", "student_number"}
CLASS_FIELDS = {"name", "description", "academic_year", "semester", "created_at", "is_active"}


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _parse_date_field(data: dict, field: str, *, default=None) -> None:
    value = data.get(field) or default
    if value is None:
        raise ValidationError(f"{field} is required")
    try:
        data[field] = coerce_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)") from None


def register(app: Flask, container: Container) -> None:
    store = container.store

    # Students

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    def list_students():
        return jsonify([s.to_dict() for s in store.get_students()])

    @app.route("/api/students", methods=["POST"], endpoint="create_student")
    def create_student():
        data = _json_body()
        for field in STUDENT_REQUIRED:
            data[field] = require_non_empty(data.get(field), field)
        if not store.get_class_by_id(data["class_id"]):
            raise ValidationError("Class does not exist")
        _parse_date_field(data, "enrollment_date", default=now_local().date())
        data["is_active"] = require_bool(data.get("is_active", True), "is_active")

        student = store.add_student(data)
        return jsonify(student.to_dict()), 201

    @app.route("/api/students/<student_id>", methods=["GET"], endpoint="get_student")
    def get_student(student_id: str):
        student = store.get_student_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return jsonify(student.to_dict())

    @app.route("/api/students/<student_id>", methods=["PATCH"], endpoint="update_student")
    def update_student(student_id: str):
        data = {k: v for k, v in _json_body().items() if k in STUDENT_FIELDS}
        if "is_active" in data:
            data["is_active"] = require_bool(data["is_active"], "is_active")
        if "enrollment_date" in data:
            _parse_date_field(data, "enrollment_date")
        if "class_id" in data and not store.get_class_by_id(str(data["class_id"])):
            raise ValidationError("Class does not exist")

        if not store.update_student(student_id, **data):
            raise NotFoundError("Student not found")
        return jsonify(store.get_student_by_id(student_id).to_dict())

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="delete_student")
    def delete_student(student_id: str):
        if not store.delete_student(student_id):
            raise NotFoundError("Student not found")
        return jsonify({"success": True})

    # Classes

    @app.route("/api/classes", methods=["GET"], endpoint="list_classes")
    def list_classes():
        return jsonify(
            [
                {**c.to_dict(), "student_count": len(store.get_students_by_class(c.id))}
                for c in store.get_classes()
            ]
        )

    @app.route("/api/classes", methods=["POST"], endpoint="create_class")
    def create_class():
        data = _json_body()
        for field in CLASS_REQUIRED:
            data[field] = require_non_empty(data.get(field), field)
        _parse_date_field(data, "created_at", default=now_local().date())
        data["is_active"] = require_bool(data.get("is_active", True), "is_active")

        student_class = store.add_class(data)
        return jsonify(student_class.to_dict()), 201

    @app.route("/api/classes/<class_id>", methods=["GET"], endpoint="get_class")
    def get_class(class_id: str):
        student_class = store.get_class_by_id(class_id)
        if not student_class:
            raise NotFoundError("Class not found")
        return jsonify(student_class.to_dict())

    @app.route("/api/classes/<class_id>", methods=["PATCH"], endpoint="update_class")
    def update_class(class_id: str):
        data = {k: v for k, v in _json_body().items() if k in CLASS_FIELDS}
        if "is_active" in data:
            data["is_active"] = require_bool(data["is_active"], "is_active")
        if "created_at" in data:
            _parse_date_field(data, "created_at")

        if not store.update_class(class_id, **data):
            raise NotFoundError("Class not found")
        return jsonify(store.get_class_by_id(class_id).to_dict())

    @app.route("/api/classes/<class_id>", methods=["DELETE"], endpoint="delete_class")
    def delete_class(class_id: str):
        if not store.get_class_by_id(class_id):
            raise NotFoundError("Class not found")
        if not store.delete_class(class_id):
            raise IntegrityError("Cannot delete a class that still has students")
        return jsonify({"success": True})

    @app.route("/api/classes/<class_id>/students", methods=["GET"], endpoint="list_class_students")
    def list_class_students(class_id: str):
        if not store.get_class_by_id(class_id):
            raise NotFoundError("Class not found")
        return jsonify([s.to_dict() for s in store.get_students_by_class(class_id)])
