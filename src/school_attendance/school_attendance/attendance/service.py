from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import month_range, to_utc_day
from ..common.validators import optional_str, require_positive_int
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..logs import model as actions
from ..logs.service import AuditLogService
from ..students.repository import StudentRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository


def parse_status(value: Any) -> AttendanceStatus:
    if value in (None, ""):
        return AttendanceStatus.PRESENT
    try:
        return AttendanceStatus(str(value).upper())
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"Invalid status {value!r} (expected one of {allowed})")


class AttendanceService:
    """Use case: the attendance ledger (mark, read by month/day, export absences)."""

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository, audit: AuditLogService):
        self._attendance = attendance
        self._students = students
        self._audit = audit

    def record_attendance(
        self,
        *,
        student_id: Any,
        day: date | datetime | str,
        status: Any = None,
        reason: Any = None,
        recording_user_id: Optional[int],
    ) -> AttendanceRecord:
        """Upsert the mark for (student, UTC day) and append one audit entry.

        The supplied reason replaces whatever was stored; omitting it clears it.
        """

        if student_id in (None, "") or day in (None, ""):
            raise ValidationError("studentId and date are required")

        student_id = require_positive_int(student_id, "studentId")
        normalized = to_utc_day(day)
        status_e = parse_status(status)
        reason = optional_str(reason)

        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")

        record = self._attendance.upsert(
            student_id=student.student_id,
            day=normalized,
            status=status_e,
            reason=reason,
            student_name=student.full_name,
            recorded_by_user_id=recording_user_id,
        )

        verb = actions.MARKED_ABSENT if status_e == AttendanceStatus.ABSENT else actions.ATTENDANCE_UPDATED
        self._audit.append(
            actions.action_label(verb, student.full_name),
            user_id=recording_user_id,
            entity_type="Attendance",
            entity_id=record.attendance_id,
            after={
                "studentId": student.student_id,
                "studentName": student.full_name,
                "date": normalized.isoformat(),
                "status": status_e.value,
                "reason": reason,
                "sex": student.sex.value,
            },
        )
        return record

    def monthly_records(self, *, student_id: Any, month: Any) -> list[AttendanceRecord]:
        if not student_id or not month:
            raise ValidationError("studentId and month are required")
        start, end = month_range(str(month))
        return list(
            self._attendance.list_for_student_between(require_positive_int(student_id, "studentId"), start, end)
        )

    def records_for_day(self, *, student_ids: Sequence[Any], day: Any) -> list[AttendanceRecord]:
        if not day or not student_ids:
            raise ValidationError("Date and studentIds are required")
        ids = [require_positive_int(i, "studentId") for i in student_ids]
        return list(self._attendance.list_for_students_on(ids, to_utc_day(day)))

    def absence_export(self) -> list[dict]:
        return [
            {
                "studentId": r.student_id,
                "studentName": r.student_name,
                "date": r.date.isoformat(),
                "status": r.status.value,
            }
            for r in self._attendance.list_by_status(AttendanceStatus.ABSENT)
        ]
