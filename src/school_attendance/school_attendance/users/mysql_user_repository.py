from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Credential, PasswordCredential, PinCredential, User
from .repository import UserRepository

_COLUMNS = "id, name, email, role, password_hash, pin_hash, is_active, created_at"


def _row_to_user(r: dict) -> User:
    role = Role(r["role"])
    if role == Role.ADMIN:
        credential: Credential = PasswordCredential(password_hash=r.get("password_hash") or "")
    else:
        credential = PinCredential(pin_hash=r.get("pin_hash") or "")
    return User(
        user_id=int(r["id"]),
        name=r["name"],
        email=r.get("email"),
        role=role,
        credential=credential,
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


def _credential_columns(credential: Credential) -> tuple[Optional[str], Optional[str]]:
    """(password_hash, pin_hash) for the variant; the other column is always NULL."""
    if isinstance(credential, PasswordCredential):
        return credential.password_hash, None
    return None, credential.pin_hash


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_by_role(self, role: Role, *, active_only: bool = True) -> Sequence[User]:
        sql = f"SELECT {_COLUMNS} FROM users WHERE role=%s"
        if active_only:
            sql += " AND is_active=1"
        sql += " ORDER BY id ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (role.value,))
            return [_row_to_user(r) for r in fetchall(cur)]

    def list_all(self, *, role: Optional[Role] = None) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            if role is None:
                cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY created_at DESC, id DESC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY created_at DESC, id DESC",
                    (role.value,),
                )
            return [_row_to_user(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        name: str,
        email: Optional[str],
        role: Role,
        credential: Credential,
    ) -> int:
        password_hash, pin_hash = _credential_columns(credential)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, role, password_hash, pin_hash, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (name, email, role.value, password_hash, pin_hash),
            )
            return int(cur.lastrowid)

    def update_profile(self, user_id: int, *, name: str, email: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET name=%s, email=%s WHERE id=%s", (name, email, int(user_id)))
            return cur.rowcount > 0

    def set_credential(self, user_id: int, credential: Credential) -> bool:
        password_hash, pin_hash = _credential_columns(credential)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET password_hash=%s, pin_hash=%s WHERE id=%s",
                (password_hash, pin_hash, int(user_id)),
            )
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        # attendance_records.recorded_by_user_id and logs.user_id are ON DELETE SET NULL
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (int(user_id),))
            return cur.rowcount > 0
