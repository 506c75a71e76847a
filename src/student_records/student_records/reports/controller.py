from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..container import Container
from ..core.exceptions import NotFoundError
from .consistency import find_anomalies
from .csv_exporter import export_filename, render_csv


def register(app: Flask, container: Container) -> None:
    store = container.store
    reports = container.frequency_report_service

    def _build_report(class_id: str):
        report = reports.generate_for_request(
            class_id,
            request.args.get("period", "semester"),
            request.args.get("semester"),
        )
        if report is None:
            raise NotFoundError("Class not found")
        return report

    @app.route("/api/classes/<class_id>/frequency", methods=["GET"], endpoint="frequency_report")
    def frequency_report(class_id: str):
        return jsonify(_build_report(class_id).to_dict())

    @app.route("/api/classes/<class_id>/frequency.csv", methods=["GET"], endpoint="frequency_report_csv")
    def frequency_report_csv(class_id: str):
        report = _build_report(class_id)
        filename = export_filename(report, now_local())

        csv_bytes = render_csv(report).encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.route("/api/classes/<class_id>/anomalies", methods=["GET"], endpoint="attendance_anomalies")
    def attendance_anomalies(class_id: str):
        if not store.get_class_by_id(class_id):
            raise NotFoundError("Class not found")
        anomalies = find_anomalies(store.get_attendance_by_class(class_id))
        return jsonify([a.to_dict() for a in anomalies])
