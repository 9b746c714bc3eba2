from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def upsert(
        self,
        *,
        student_id: int,
        day: date,
        status: AttendanceStatus,
        reason: Optional[str],
        student_name: str,
        recorded_by_user_id: Optional[int],
    ) -> AttendanceRecord:
        """Atomic insert-or-update keyed on (student_id, day).

        On insert the snapshot fields are written; on update status, reason
        and the name snapshot change but the original recorder is kept.
        """

        raise NotImplementedError

    def list_for_student_between(self, student_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_students_on(self, student_ids: Sequence[int], day: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_by_status(self, status: AttendanceStatus) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def student_ids_recorded_by(self, user_id: int) -> set[int]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        grade: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
