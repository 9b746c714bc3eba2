from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import Sex
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import NewStudent, Student, sort_students
from .repository import StudentRepository

_COLUMNS = "id, first_name, last_name, sex, grade, lrn, is_active, created_at"


def _row_to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        sex=Sex(r["sex"]),
        grade=int(r["grade"]),
        lrn=r.get("lrn"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (int(student_id),))
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def get_many(self, student_ids: Iterable[int]) -> Sequence[Student]:
        ids = sorted({int(i) for i in student_ids})
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id IN ({in_clause(ids)})", tuple(ids))
            return [_row_to_student(r) for r in fetchall(cur)]

    def list_students(self, *, grade: Optional[int] = None, is_active: Optional[bool] = None) -> Sequence[Student]:
        clauses: list[str] = []
        params: list[object] = []
        if grade is not None:
            clauses.append("grade=%s")
            params.append(int(grade))
        if is_active is not None:
            clauses.append("is_active=%s")
            params.append(1 if is_active else 0)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students {where}", tuple(params))
            return sort_students(_row_to_student(r) for r in fetchall(cur))

    def create_many(self, rows: Sequence[NewStudent]) -> list[int]:
        ids: list[int] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for row in rows:
                cur.execute(
                    """
                    INSERT INTO students(first_name, last_name, sex, grade, lrn, is_active)
                    VALUES(%s,%s,%s,%s,%s,1)
                    """,
                    (row.first_name, row.last_name, row.sex.value, int(row.grade), row.lrn),
                )
                ids.append(int(cur.lastrowid))
        return ids

    def update_details(self, student_id: int, *, first_name: str, last_name: str, lrn: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET first_name=%s, last_name=%s, lrn=%s WHERE id=%s",
                (first_name, last_name, lrn, int(student_id)),
            )
            return cur.rowcount > 0

    def set_active(self, student_ids: Sequence[int], *, is_active: bool) -> int:
        ids = [int(i) for i in student_ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE students SET is_active=%s WHERE id IN ({in_clause(ids)})",
                (1 if is_active else 0, *ids),
            )
            return cur.rowcount

    def delete(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE student_id=%s", (int(student_id),))
            cur.execute("DELETE FROM students WHERE id=%s", (int(student_id),))
            return cur.rowcount > 0

    def delete_by_grade(self, grade: int) -> int:
        # attendance rows go with ON DELETE CASCADE
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE grade=%s", (int(grade),))
            return cur.rowcount

    def count_by_grade(self, grade: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students WHERE grade=%s", (int(grade),))
            return int(fetchone(cur)["n"])

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students")
            return int(fetchone(cur)["n"])
