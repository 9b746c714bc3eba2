from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Grade:
    """Domain entity: a grade level students are enrolled in (e.g. "Grade 3" / 3)."""

    grade_id: int
    name: str
    number: int
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.grade_id,
            "name": self.name,
            "number": self.number,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
