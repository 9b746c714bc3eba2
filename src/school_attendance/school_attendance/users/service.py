from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from werkzeug.security import generate_password_hash

from ..common.validators import optional_str, require_min_length, require_non_empty, require_pin
from ..core.constants import INVALID_CREDENTIALS_MESSAGE, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..logs import model as actions
from ..logs.service import AuditLogService
from .model import Credential, PasswordCredential, PinCredential, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    role: Role

    def to_dict(self) -> dict:
        return {"id": self.user_id, "name": self.name, "role": self.role.value}


class AuthService:
    """Use case: authenticate user (login).

    Teachers submit only a PIN, admins only a password. Every failure raises
    the same AuthenticationError so callers cannot tell "wrong secret" from
    "no such user".
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, *, pin: Optional[str] = None, password: Optional[str] = None) -> SessionUser:
        if pin and not password:
            return self.authenticate_teacher(pin)
        if password and not pin:
            return self.authenticate_admin(password)
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    def authenticate_teacher(self, pin: str) -> SessionUser:
        return self._first_match(Role.TEACHER, pin)

    def authenticate_admin(self, password: str) -> SessionUser:
        return self._first_match(Role.ADMIN, password)

    def _first_match(self, role: Role, secret: Optional[str]) -> SessionUser:
        if not isinstance(secret, str) or not secret.strip():
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        # PINs are not unique historically; first match in id order wins.
        for user in self._users.list_by_role(role, active_only=True):
            if user.credential.verify(secret):
                return SessionUser(user_id=user.user_id, name=user.name, role=user.role)

        logger.info("Failed %s login attempt", role.value)
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)


class UserService:
    """Use case: manage teacher/admin accounts (admin)."""

    def __init__(self, users: UserRepository, audit: AuditLogService):
        self._users = users
        self._audit = audit

    def list_users(self, *, role: Optional[str] = None) -> list[User]:
        return list(self._users.list_all(role=self._parse_role(role) if role else None))

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_user(
        self,
        *,
        actor_id: Optional[int],
        name: Any,
        role: Any = Role.TEACHER.value,
        email: Any = None,
        password: Any = None,
        pin: Any = None,
    ) -> User:
        name = require_non_empty(name, "Name")
        email = optional_str(email)
        role_e = self._parse_role(role or Role.TEACHER.value)

        if role_e == Role.ADMIN:
            if pin:
                raise ValidationError("Admin accounts use a password, not a PIN")
            credential: Credential = self._password_credential(password, "Password")
        else:
            if password:
                raise ValidationError("Teacher accounts use a PIN, not a password")
            credential = self._pin_credential(pin, "PIN")

        if email and self._users.get_by_email(email):
            raise ConflictError("User with this email already exists")

        user_id = self._users.create_user(name=name, email=email, role=role_e, credential=credential)
        user = self.get_user(user_id)
        self._audit.append(
            actions.action_label(actions.USER_CREATED, user.name),
            user_id=actor_id,
            entity_type="User",
            entity_id=user.user_id,
            after=user.to_public_dict(),
        )
        return user

    def update_user(self, user_id: int, *, actor_id: Optional[int], name: Any = None, email: Any = None) -> User:
        before = self.get_user(user_id)
        new_name = require_non_empty(name, "Name") if name is not None else before.name
        new_email = optional_str(email) if email is not None else before.email

        if new_email and new_email != before.email:
            other = self._users.get_by_email(new_email)
            if other and other.user_id != before.user_id:
                raise ConflictError("User with this email already exists")

        self._users.update_profile(before.user_id, name=new_name, email=new_email)
        after = self.get_user(before.user_id)
        self._audit.append(
            actions.action_label(actions.USER_UPDATED, after.name),
            user_id=actor_id,
            entity_type="User",
            entity_id=after.user_id,
            before=before.to_public_dict(),
            after=after.to_public_dict(),
        )
        return after

    def change_password(self, user_id: int, new_password: Any, *, actor_id: Optional[int]) -> User:
        user = self.get_user(user_id)
        if user.role != Role.ADMIN:
            raise ValidationError("This endpoint is only for admins")
        credential = self._password_credential(
            new_password, "New password", message="New password is required and must be at least 6 characters long"
        )
        self._users.set_credential(user.user_id, credential)
        self._audit.append(
            actions.action_label(actions.PASSWORD_CHANGED, user.name),
            user_id=actor_id,
            entity_type="User",
            entity_id=user.user_id,
        )
        return user

    def change_pin(self, user_id: int, new_pin: Any, *, actor_id: Optional[int]) -> User:
        user = self.get_user(user_id)
        if user.role != Role.TEACHER:
            raise ValidationError("This endpoint is only for teachers")
        credential = self._pin_credential(new_pin, "New PIN", exclude_user_id=user.user_id)
        self._users.set_credential(user.user_id, credential)
        self._audit.append(
            actions.action_label(actions.PIN_CHANGED, user.name),
            user_id=actor_id,
            entity_type="User",
            entity_id=user.user_id,
        )
        return user

    def set_archived(self, user_id: int, archived: bool, *, actor_id: Optional[int]) -> User:
        user = self.get_user(user_id)
        if archived and user.user_id == actor_id:
            raise ValidationError("You cannot archive your own account")
        self._users.set_active(user.user_id, is_active=not archived)
        verb = actions.USER_ARCHIVED if archived else actions.USER_UNARCHIVED
        self._audit.append(
            actions.action_label(verb, user.name),
            user_id=actor_id,
            entity_type="User",
            entity_id=user.user_id,
            before={"archived": not user.is_active},
            after={"archived": archived},
        )
        return self.get_user(user.user_id)

    def delete_user(self, user_id: int, *, actor_id: Optional[int]) -> None:
        user = self.get_user(user_id)
        if user.user_id == actor_id:
            raise ValidationError("You cannot delete your own account")
        if not self._users.delete_by_id(user.user_id):
            raise NotFoundError("User not found")
        self._audit.append(
            actions.action_label(actions.USER_DELETED, user.name),
            user_id=actor_id,
            entity_type="User",
            entity_id=user.user_id,
            before=user.to_public_dict(),
        )

    @staticmethod
    def _parse_role(value: Any) -> Role:
        try:
            return Role(str(value).lower())
        except ValueError:
            raise ValidationError("Invalid role")

    @staticmethod
    def _password_credential(value: Any, field: str, *, message: Optional[str] = None) -> PasswordCredential:
        try:
            password = require_min_length(value, field, MIN_PASSWORD_LENGTH)
        except ValidationError:
            if message:
                raise ValidationError(message)
            raise
        return PasswordCredential(password_hash=generate_password_hash(password))

    def _pin_credential(self, value: Any, field: str, *, exclude_user_id: Optional[int] = None) -> PinCredential:
        pin = require_pin(value, field)
        # Archived teachers count too: unarchiving must not revive a duplicate PIN.
        for teacher in self._users.list_by_role(Role.TEACHER, active_only=False):
            if teacher.user_id != exclude_user_id and teacher.credential.verify(pin):
                raise ConflictError("This PIN is already used by another teacher")
        return PinCredential(pin_hash=generate_password_hash(pin))
