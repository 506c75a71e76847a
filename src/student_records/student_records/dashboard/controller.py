from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ValidationError
from ..seed.sample_data import seed_sample_data


def register(app: Flask, container: Container) -> None:
    store = container.store

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    def dashboard():
        return jsonify(container.dashboard_service.get_stats().to_dict())

    @app.route("/api/export", methods=["GET"], endpoint="export_data")
    def export_data():
        return jsonify(store.export_data())

    @app.route("/api/import", methods=["POST"], endpoint="import_data")
    def import_data():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        store.import_data(payload)
        return jsonify({"success": True, **container.dashboard_service.get_stats().to_dict()})

    @app.route("/api/seed", methods=["POST"], endpoint="seed_data")
    def seed_data():
        data = request.get_json(silent=True) or {}
        summary = seed_sample_data(store, with_attendance=bool(data.get("with_attendance", False)))
        return jsonify(
            {
                "success": True,
                "classes": summary.classes,
                "students": summary.students,
                "attendance_records": summary.attendance_records,
            }
        ), 201
