from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import NewStudent, Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_many(self, student_ids: Iterable[int]) -> Sequence[Student]:
        raise NotImplementedError

    def list_students(self, *, grade: Optional[int] = None, is_active: Optional[bool] = None) -> Sequence[Student]:
        raise NotImplementedError

    def create_many(self, rows: Sequence[NewStudent]) -> list[int]:
        """Insert all rows in one transaction; returns ids in input order."""

        raise NotImplementedError

    def update_details(self, student_id: int, *, first_name: str, last_name: str, lrn: Optional[str]) -> bool:
        raise NotImplementedError

    def set_active(self, student_ids: Sequence[int], *, is_active: bool) -> int:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        """Delete a student together with its attendance records."""

        raise NotImplementedError

    def delete_by_grade(self, grade: int) -> int:
        raise NotImplementedError

    def count_by_grade(self, grade: int) -> int:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
