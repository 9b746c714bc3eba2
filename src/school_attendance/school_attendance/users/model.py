from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from werkzeug.security import check_password_hash

from ..core.enums import Role


def _safe_check(stored_hash: str, secret: str) -> bool:
    try:
        return check_password_hash(stored_hash, secret)
    except Exception:
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


@dataclass(frozen=True)
class PasswordCredential:
    """Admin secret."""

    password_hash: str

    def verify(self, secret: str) -> bool:
        return _safe_check(self.password_hash, secret)


@dataclass(frozen=True)
class PinCredential:
    """Teacher secret (6-digit PIN, stored hashed)."""

    pin_hash: str

    def verify(self, secret: str) -> bool:
        return _safe_check(self.pin_hash, secret)


Credential = Union[PasswordCredential, PinCredential]

CREDENTIAL_FOR_ROLE = {
    Role.ADMIN: PasswordCredential,
    Role.TEACHER: PinCredential,
}


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Pure data object (no DB access). The credential variant must match
    the role, so "exactly one secret per role" cannot be violated in memory.
    """

    user_id: int
    name: str
    role: Role
    credential: Credential
    email: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        expected = CREDENTIAL_FOR_ROLE[self.role]
        if not isinstance(self.credential, expected):
            raise ValueError(f"{self.role.value} accounts require a {expected.__name__}")

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "archived": not self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
