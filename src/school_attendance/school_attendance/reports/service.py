from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import date
from typing import Optional

import pandas as pd

from ..attendance.repository import AttendanceRepository
from ..core.enums import AttendanceStatus, SEX_SORT_ORDER, Sex
from ..core.exceptions import ValidationError
from ..students.model import sort_students
from ..students.repository import StudentRepository

STUDENT_SHEET_COLUMNS = ["First Name", "Last Name", "Full Name", "Sex", "Grade", "LRN", "Status"]
ATTENDANCE_SHEET_COLUMNS = ["Student Name", "Grade", "Sex", "Total Absences", "Status"]
SHEET_NAME = "Data"


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def _status_key(status: AttendanceStatus) -> str:
    return status.value.lower()


def _to_xlsx(records: list[dict], columns: list[str]) -> bytes:
    df = pd.DataFrame(records, columns=columns)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
    return output.getvalue()


class AttendanceReportService:
    """Read-side reporting over the attendance ledger."""

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository):
        self._attendance = attendance
        self._students = students

    def build_report(self, *, start: date, end: date, grade: Optional[int] = None) -> ReportData:
        if start > end:
            raise ValidationError("start must be on or before end")

        query_rows = self._attendance.get_report_rows(start_date=start, end_date=end, grade=grade)

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            out_rows.append(
                {
                    "date": r.date.isoformat(),
                    "studentId": r.student_id,
                    "studentName": r.student_name,
                    "grade": r.grade,
                    "sex": r.sex.value,
                    "status": r.status.value,
                    "reason": r.reason or "",
                }
            )

            s = summary_map.get(r.student_id)
            if not s:
                s = {
                    "studentId": r.student_id,
                    "studentName": r.student_name,
                    "grade": r.grade,
                    "sex": r.sex.value,
                    **{_status_key(st): 0 for st in AttendanceStatus},
                }
                summary_map[r.student_id] = s
            s[_status_key(r.status)] += 1

        summary = sorted(
            summary_map.values(),
            key=lambda x: (x["grade"], SEX_SORT_ORDER.get(Sex(x["sex"]), 0), x["studentName"].casefold()),
        )
        return ReportData(rows=out_rows, summary=summary)

    def students_sheet(self, *, grade: Optional[int] = None) -> bytes:
        students = sort_students(self._students.list_students(grade=grade, is_active=None))
        records = [
            {
                "First Name": s.first_name,
                "Last Name": s.last_name,
                "Full Name": s.full_name,
                "Sex": s.sex.value,
                "Grade": s.grade,
                "LRN": s.lrn or "",
                "Status": "Active" if s.is_active else "Archived",
            }
            for s in students
        ]
        return _to_xlsx(records, STUDENT_SHEET_COLUMNS)

    def attendance_sheet(self, *, start: date, end: date, grade: Optional[int] = None) -> bytes:
        data = self.build_report(start=start, end=end, grade=grade)
        absences = {s["studentId"]: s[_status_key(AttendanceStatus.ABSENT)] for s in data.summary}

        students = sort_students(self._students.list_students(grade=grade, is_active=None))
        records = [
            {
                "Student Name": s.full_name,
                "Grade": s.grade,
                "Sex": s.sex.value,
                "Total Absences": absences.get(s.student_id, 0),
                "Status": "Active" if s.is_active else "Archived",
            }
            for s in students
        ]
        return _to_xlsx(records, ATTENDANCE_SHEET_COLUMNS)
