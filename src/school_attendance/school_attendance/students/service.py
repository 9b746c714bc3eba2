from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import optional_str, require_non_empty, require_positive_int
from ..core.enums import Sex
from ..core.exceptions import NotFoundError, ValidationError
from ..grades.repository import GradeRepository
from ..logs import model as actions
from ..logs.service import AuditLogService
from .model import NewStudent, Student, sort_students
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def _parse_sex(value: Any) -> Sex:
    if isinstance(value, str):
        for sex in Sex:
            if value.strip().lower() in {sex.value.lower(), sex.value[0].lower()}:
                return sex
    raise ValidationError("Sex must be Male or Female")


class StudentService:
    """Use case: student directory (create/import, edit, archive, delete)."""

    def __init__(self, students: StudentRepository, grades: GradeRepository, audit: AuditLogService):
        self._students = students
        self._grades = grades
        self._audit = audit

    def list_students(self, *, grade: Any = None, archived: bool = False) -> list[Student]:
        grade_n = require_positive_int(grade, "Grade") if grade not in (None, "") else None
        return sort_students(self._students.list_students(grade=grade_n, is_active=not archived))

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def create_students(self, payload: Any, *, actor_id: Optional[int]) -> list[Student]:
        """Create one student (dict payload) or many (list payload).

        Every row is validated before anything is written, so a bad row in a
        bulk import leaves the directory untouched.
        """

        items = payload if isinstance(payload, list) else [payload]
        if not items:
            raise ValidationError("At least one student is required")

        rows = [self._parse_new_student(item, index) for index, item in enumerate(items)]
        ids = self._students.create_many(rows)

        created: list[Student] = []
        for student_id in ids:
            student = self.get_student(student_id)
            self._audit.append(
                actions.action_label(actions.STUDENT_CREATED, student.full_name),
                user_id=actor_id,
                entity_type="Student",
                entity_id=student.student_id,
                after=student.to_dict(),
            )
            created.append(student)

        logger.info("Created %d student(s)", len(created))
        return created

    def update_student(
        self,
        student_id: int,
        *,
        actor_id: Optional[int],
        first_name: Any = None,
        last_name: Any = None,
        lrn: Any = None,
    ) -> Student:
        before = self.get_student(student_id)
        self._students.update_details(
            before.student_id,
            first_name=require_non_empty(first_name, "First name") if first_name is not None else before.first_name,
            last_name=require_non_empty(last_name, "Last name") if last_name is not None else before.last_name,
            lrn=optional_str(lrn) if lrn is not None else before.lrn,
        )
        after = self.get_student(before.student_id)
        self._audit.append(
            actions.action_label(actions.STUDENT_UPDATED, after.full_name),
            user_id=actor_id,
            entity_type="Student",
            entity_id=after.student_id,
            before=before.to_dict(),
            after=after.to_dict(),
        )
        return after

    def set_archived(self, student_ids: Sequence[Any], archived: bool, *, actor_id: Optional[int]) -> list[Student]:
        if not student_ids:
            raise ValidationError("At least one student id is required")

        students = [self.get_student(require_positive_int(i, "Student id")) for i in student_ids]
        self._students.set_active([s.student_id for s in students], is_active=not archived)

        verb = actions.STUDENT_ARCHIVED if archived else actions.STUDENT_UNARCHIVED
        updated: list[Student] = []
        for before in students:
            after = self.get_student(before.student_id)
            self._audit.append(
                actions.action_label(verb, after.full_name),
                user_id=actor_id,
                entity_type="Student",
                entity_id=after.student_id,
                before={"isActive": before.is_active},
                after=after.to_dict(),
            )
            updated.append(after)
        return updated

    def delete_student(self, student_id: int, *, actor_id: Optional[int]) -> None:
        student = self.get_student(student_id)
        if not self._students.delete(student.student_id):
            raise NotFoundError("Student not found")
        self._audit.append(
            actions.action_label(actions.STUDENT_DELETED, student.full_name),
            user_id=actor_id,
            entity_type="Student",
            entity_id=student.student_id,
            before=student.to_dict(),
        )

    def reset_grade(self, grade: Any, *, actor_id: Optional[int]) -> int:
        grade_n = require_positive_int(grade, "Grade")
        deleted = self._students.delete_by_grade(grade_n)
        self._audit.append(
            f"{actions.STUDENTS_RESET} - Grade {grade_n}",
            user_id=actor_id,
            entity_type="Student",
            after={"grade": grade_n, "deletedCount": deleted},
        )
        return deleted

    def _parse_new_student(self, item: Any, index: int) -> NewStudent:
        if not isinstance(item, dict):
            raise ValidationError(f"Student #{index + 1}: expected an object")

        try:
            first_name = require_non_empty(item.get("firstName"), "First name")
            last_name = require_non_empty(item.get("lastName"), "Last name")
            sex = _parse_sex(item.get("sex"))
            grade = require_positive_int(item.get("grade"), "Grade")
        except ValidationError as e:
            raise ValidationError(f"Student #{index + 1}: {e}")

        if not self._grades.get_active_by_number(grade):
            raise ValidationError(f"Student #{index + 1}: Grade {grade} does not exist")

        return NewStudent(
            first_name=first_name,
            last_name=last_name,
            sex=sex,
            grade=grade,
            lrn=optional_str(item.get("lrn")),
        )
