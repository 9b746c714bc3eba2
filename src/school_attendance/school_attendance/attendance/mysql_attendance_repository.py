from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, Sex
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, iter_ids
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = "id, student_id, date, status, reason, recorded_by_user_id, student_name, updated_at"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["id"]),
        student_id=int(r["student_id"]),
        date=r["date"],
        status=AttendanceStatus(r["status"]),
        reason=r.get("reason"),
        recorded_by_user_id=int(r["recorded_by_user_id"]) if r.get("recorded_by_user_id") is not None else None,
        student_name=r.get("student_name") or "",
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            # LAST_INSERT_ID(id) makes lastrowid point at the existing row on update.
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, date, status, reason, recorded_by_user_id, student_name)
                VALUES(%s,%s,%s,%s,%s,%s) AS new
                ON DUPLICATE KEY UPDATE
                    id=LAST_INSERT_ID(attendance_records.id),
                    status=new.status,
                    reason=new.reason,
                    student_name=new.student_name
                """,
                (int(student_id), day, status.value, reason, recorded_by_user_id, student_name),
            )

            if cur.lastrowid:
                cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE id=%s", (int(cur.lastrowid),))
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s AND date=%s",
                    (int(student_id), day),
                )
            return _row_to_record(fetchone(cur))

    def list_for_student_between(self, student_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE student_id=%s AND date BETWEEN %s AND %s
                ORDER BY date ASC
                """,
                (int(student_id), start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_students_on(self, student_ids: Sequence[int], day: date) -> Sequence[AttendanceRecord]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE date=%s AND student_id IN ({in_clause(ids)})",
                (day, *ids),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_by_status(self, status: AttendanceStatus) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE status=%s ORDER BY date ASC, student_id ASC",
                (status.value,),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def student_ids_recorded_by(self, user_id: int) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT student_id FROM attendance_records WHERE recorded_by_user_id=%s",
                (int(user_id),),
            )
            return set(iter_ids(fetchall(cur), "student_id"))

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        grade: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if grade is not None:
            clauses.append("s.grade=%s")
            params.append(int(grade))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    ar.student_id, ar.student_name, ar.date, ar.status, ar.reason,
                    s.grade, s.sex
                FROM attendance_records ar
                JOIN students s ON s.id = ar.student_id
                WHERE {where}
                ORDER BY ar.date ASC, s.grade ASC, ar.student_name ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceReportRow(
                    student_id=int(r["student_id"]),
                    student_name=r.get("student_name") or "",
                    grade=int(r["grade"]),
                    sex=Sex(r["sex"]),
                    date=r["date"],
                    status=AttendanceStatus(r["status"]),
                    reason=r.get("reason"),
                )
                for r in rows
            ]
