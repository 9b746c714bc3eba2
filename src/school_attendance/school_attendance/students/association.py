"""Which students does a teacher manage?

Students carry no owner column, so the answer is rebuilt from two signals:
attendance rows the teacher recorded, and "Student Created" audit entries the
teacher authored. The result is best-effort: a student the teacher neither
created nor ever marked will not appear.
"""

from __future__ import annotations

import re
from typing import Any

from ..attendance.repository import AttendanceRepository
from ..common.validators import require_positive_int
from ..logs.repository import LogRepository
from .model import Student, sort_students
from .repository import StudentRepository

CREATED_ACTION_RE = re.compile(r"^Student (Created|Added)\b")


class TeacherStudentResolver:
    def __init__(self, students: StudentRepository, attendance: AttendanceRepository, logs: LogRepository):
        self._students = students
        self._attendance = attendance
        self._logs = logs

    def created_student_ids(self, teacher_id: int) -> set[int]:
        ids: set[int] = set()
        for entry in self._logs.list_by_user(teacher_id, action_prefix="Student "):
            if not CREATED_ACTION_RE.match(entry.action or ""):
                continue
            after = entry.after if isinstance(entry.after, dict) else {}
            student_id = after.get("id")
            if student_id is None:
                continue
            try:
                ids.add(int(student_id))
            except (TypeError, ValueError):
                continue
        return ids

    def students_managed_by(self, teacher_id: Any) -> list[Student]:
        teacher_id = require_positive_int(teacher_id, "Teacher ID")
        ids = self.created_student_ids(teacher_id) | self._attendance.student_ids_recorded_by(teacher_id)
        if not ids:
            return []

        unique = {s.student_id: s for s in self._students.get_many(ids)}
        return sort_students(unique.values())
