from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, Sex


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark per (student, UTC day).

    ``student_name`` and ``recorded_by_user_id`` are snapshots taken at write
    time so later renames or account deletions do not rewrite history.
    """

    attendance_id: int
    student_id: int
    date: date
    status: AttendanceStatus
    student_name: str
    recorded_by_user_id: Optional[int] = None
    reason: Optional[str] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "reason": self.reason,
            "studentName": self.student_name,
            "recordedByUserId": self.recorded_by_user_id,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports (attendance joined with the student)."""

    student_id: int
    student_name: str
    grade: int
    sex: Sex
    date: date
    status: AttendanceStatus
    reason: Optional[str] = None
