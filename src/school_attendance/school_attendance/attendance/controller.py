from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_user_id, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @login_required
    def list_attendance():
        if (request.args.get("export") or "").lower() in {"1", "true", "yes"}:
            return jsonify(container.attendance_service.absence_export())

        records = container.attendance_service.monthly_records(
            student_id=request.args.get("studentId"),
            month=request.args.get("month"),
        )
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance", methods=["POST"], endpoint="record_attendance")
    @login_required
    def record_attendance():
        data = json_body()
        record = container.attendance_service.record_attendance(
            student_id=data.get("studentId"),
            day=data.get("date"),
            status=data.get("status"),
            reason=data.get("reason"),
            recording_user_id=current_user_id(),
        )
        return jsonify(record.to_dict())

    @app.route("/api/attendance/byDate", methods=["GET"], endpoint="attendance_by_date")
    @login_required
    def attendance_by_date():
        raw_ids = request.args.get("studentIds") or ""
        student_ids = [s.strip() for s in raw_ids.split(",") if s.strip()]
        records = container.attendance_service.records_for_day(
            student_ids=student_ids,
            day=request.args.get("date"),
        )
        return jsonify([r.to_dict() for r in records])
