from __future__ import annotations

import io
from datetime import timedelta
from typing import Optional

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import parse_iso_date, utcnow
from ..common.http import login_required
from ..common.validators import require_positive_int
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    def _grade_arg() -> Optional[int]:
        grade = request.args.get("grade")
        return require_positive_int(grade, "Grade") if grade else None

    def _range_args():
        today = utcnow().date()
        start_s = request.args.get("start")
        end_s = request.args.get("end")

        start = parse_iso_date(start_s) if start_s else today - timedelta(days=DEFAULT_REPORT_DAYS)
        end = parse_iso_date(end_s) if end_s else today
        return start, end

    def _send_xlsx(content: bytes, filename: str):
        return send_file(
            io.BytesIO(content),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=filename,
        )

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="attendance_report")
    @login_required
    def attendance_report():
        start, end = _range_args()
        data = container.report_service.build_report(start=start, end=end, grade=_grade_arg())
        return jsonify(
            {
                "start": start.isoformat(),
                "end": end.isoformat(),
                "rows": data.rows,
                "summary": data.summary,
            }
        )

    @app.route("/api/export/students.xlsx", methods=["GET"], endpoint="export_students")
    @login_required
    def export_students():
        grade = _grade_arg()
        content = container.report_service.students_sheet(grade=grade)
        suffix = f"grade_{grade}" if grade else "all"
        return _send_xlsx(content, f"students_{suffix}.xlsx")

    @app.route("/api/export/attendance.xlsx", methods=["GET"], endpoint="export_attendance")
    @login_required
    def export_attendance():
        start, end = _range_args()
        content = container.report_service.attendance_sheet(start=start, end=end, grade=_grade_arg())
        filename = f"attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.xlsx"
        return _send_xlsx(content, filename)
