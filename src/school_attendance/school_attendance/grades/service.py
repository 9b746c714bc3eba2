from __future__ import annotations

from typing import Any, Optional

from ..common.validators import require_non_empty, require_positive_int
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..logs import model as actions
from ..logs.service import AuditLogService
from ..students.repository import StudentRepository
from .model import Grade
from .repository import GradeRepository


class GradeService:
    """Use case: grade lifecycle.

    Grades are rows of their own (not derived from student values). Name and
    number are unique among active grades; deleting is a soft delete, and
    re-creating a deleted name/number revives the old row.
    """

    def __init__(self, grades: GradeRepository, students: StudentRepository, audit: AuditLogService):
        self._grades = grades
        self._students = students
        self._audit = audit

    def list_grades(self) -> list[Grade]:
        return list(self._grades.list_active())

    def create_grade(self, *, name: Any, number: Any, actor_id: Optional[int]) -> Grade:
        if not name or not number:
            raise ValidationError("Name and number are required")
        name = require_non_empty(name, "Name")
        number = require_positive_int(number, "Number")

        if self._grades.find_by_name_or_number(name=name, number=number, is_active=True):
            raise ConflictError("Grade with this name or number already exists")

        inactive = self._grades.find_by_name_or_number(name=name, number=number, is_active=False)
        if inactive:
            self._grades.reactivate(inactive.grade_id, name=name, number=number)
            grade_id = inactive.grade_id
        else:
            grade_id = self._grades.create(name=name, number=number)

        grade = self._grades.get_by_id(grade_id)
        self._audit.append(
            actions.action_label(actions.GRADE_CREATED, grade.name),
            user_id=actor_id,
            entity_type="Grade",
            entity_id=grade.grade_id,
            after=grade.to_dict(),
        )
        return grade

    def delete_grade(self, grade_id: Any, *, actor_id: Optional[int]) -> None:
        if grade_id in (None, ""):
            raise ValidationError("Grade ID is required")

        grade = self._grades.get_by_id(require_positive_int(grade_id, "Grade ID"))
        if not grade or not grade.is_active:
            raise NotFoundError("Grade not found")

        if self._students.count_by_grade(grade.number) > 0:
            raise ConflictError("Cannot delete grade with existing students")

        if self._grades.count_active() <= 1:
            raise ConflictError("Cannot delete the last grade")

        self._grades.deactivate(grade.grade_id)
        self._audit.append(
            actions.action_label(actions.GRADE_DELETED, grade.name),
            user_id=actor_id,
            entity_type="Grade",
            entity_id=grade.grade_id,
            before=grade.to_dict(),
        )
