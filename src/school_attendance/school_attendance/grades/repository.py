from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Grade


class GradeRepository(Protocol):
    def get_by_id(self, grade_id: int) -> Optional[Grade]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Grade]:
        raise NotImplementedError

    def find_by_name_or_number(self, *, name: str, number: int, is_active: bool) -> Optional[Grade]:
        raise NotImplementedError

    def get_active_by_number(self, number: int) -> Optional[Grade]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def create(self, *, name: str, number: int) -> int:
        raise NotImplementedError

    def reactivate(self, grade_id: int, *, name: str, number: int) -> bool:
        raise NotImplementedError

    def deactivate(self, grade_id: int) -> bool:
        raise NotImplementedError
