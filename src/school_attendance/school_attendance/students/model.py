from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import SEX_SORT_ORDER, Sex


@dataclass(frozen=True)
class Student:
    """Domain entity: Student."""

    student_id: int
    first_name: str
    last_name: str
    sex: Sex
    grade: int
    lrn: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    def sort_key(self) -> tuple:
        """Grade ascending, then Male before Female, then full name."""
        return (self.grade, SEX_SORT_ORDER.get(self.sex, len(SEX_SORT_ORDER)), self.full_name.casefold())

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "name": self.full_name,
            "sex": self.sex.value,
            "grade": self.grade,
            "lrn": self.lrn,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class NewStudent:
    """Validated input for a single student insert."""

    first_name: str
    last_name: str
    sex: Sex
    grade: int
    lrn: Optional[str] = None


def sort_students(students) -> list[Student]:
    return sorted(students, key=Student.sort_key)
