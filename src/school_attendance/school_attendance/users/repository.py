from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Credential, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role, *, active_only: bool = True) -> Sequence[User]:
        """Users of one role in id order (login scans rely on this order)."""

        raise NotImplementedError

    def list_all(self, *, role: Optional[Role] = None) -> Sequence[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: Optional[str],
        role: Role,
        credential: Credential,
    ) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, *, name: str, email: Optional[str]) -> bool:
        raise NotImplementedError

    def set_credential(self, user_id: int, credential: Credential) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
