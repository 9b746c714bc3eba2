from __future__ import annotations

from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, load_json
from .model import LogEntry
from .repository import LogRepository

_COLUMNS = "id, user_id, action, entity_type, entity_id, before_data, after_data, created_at"


def _row_to_entry(r: dict) -> LogEntry:
    return LogEntry(
        log_id=int(r["id"]),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        action=r["action"],
        entity_type=r.get("entity_type"),
        entity_id=int(r["entity_id"]) if r.get("entity_id") is not None else None,
        before=load_json(r.get("before_data")),
        after=load_json(r.get("after_data")),
        created_at=r["created_at"],
    )


class MySQLLogRepository(LogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(
        self,
        *,
        action: str,
        user_id: Optional[int] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        before: Any = None,
        after: Any = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO logs(user_id, action, entity_type, entity_id, before_data, after_data)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (user_id, action[:255], entity_type, entity_id, dump_json(before), dump_json(after)),
            )
            return int(cur.lastrowid)

    def list_recent(self, limit: int) -> Sequence[LogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM logs ORDER BY created_at DESC, id DESC LIMIT %s",
                (int(limit),),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def list_by_user(self, user_id: int, *, action_prefix: Optional[str] = None) -> Sequence[LogEntry]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]
        if action_prefix:
            clauses.append("action LIKE %s")
            params.append(action_prefix.replace("%", r"\%").replace("_", r"\_") + "%")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM logs WHERE {' AND '.join(clauses)} ORDER BY id ASC",
                tuple(params),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]
