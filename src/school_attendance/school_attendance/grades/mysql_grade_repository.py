from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Grade
from .repository import GradeRepository

_COLUMNS = "id, name, number, is_active, created_at"


def _row_to_grade(r: dict) -> Grade:
    return Grade(
        grade_id=int(r["id"]),
        name=r["name"],
        number=int(r["number"]),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


class MySQLGradeRepository(GradeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, grade_id: int) -> Optional[Grade]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM grades WHERE id=%s", (int(grade_id),))
            r = fetchone(cur)
            return _row_to_grade(r) if r else None

    def list_active(self) -> Sequence[Grade]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM grades WHERE is_active=1 ORDER BY number ASC")
            return [_row_to_grade(r) for r in fetchall(cur)]

    def find_by_name_or_number(self, *, name: str, number: int, is_active: bool) -> Optional[Grade]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM grades
                WHERE is_active=%s AND (name=%s OR number=%s)
                ORDER BY updated_at DESC, id DESC
                LIMIT 1
                """,
                (1 if is_active else 0, name, int(number)),
            )
            r = fetchone(cur)
            return _row_to_grade(r) if r else None

    def get_active_by_number(self, number: int) -> Optional[Grade]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM grades WHERE is_active=1 AND number=%s", (int(number),))
            r = fetchone(cur)
            return _row_to_grade(r) if r else None

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM grades WHERE is_active=1")
            return int(fetchone(cur)["n"])

    def create(self, *, name: str, number: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO grades(name, number, is_active) VALUES(%s,%s,1)", (name, int(number)))
            return int(cur.lastrowid)

    def reactivate(self, grade_id: int, *, name: str, number: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE grades SET name=%s, number=%s, is_active=1 WHERE id=%s",
                (name, int(number), int(grade_id)),
            )
            return cur.rowcount > 0

    def deactivate(self, grade_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE grades SET is_active=0 WHERE id=%s AND is_active=1", (int(grade_id),))
            return cur.rowcount > 0
