from __future__ import annotations

import pytest

from src.school_attendance.school_attendance.core.enums import Role
from src.school_attendance.school_attendance.core.exceptions import AuthenticationError
from src.school_attendance.school_attendance.users.service import AuthService


def test_teacher_logs_in_with_pin(repos):
    teacher_id = repos.users.add_teacher("Ana Cruz", "123456")

    s_user = AuthService(repos.users).authenticate(pin="123456")

    assert s_user.user_id == teacher_id
    assert s_user.role == Role.TEACHER
    assert s_user.to_dict() == {"id": teacher_id, "name": "Ana Cruz", "role": "teacher"}


def test_admin_logs_in_with_password(repos):
    admin_id = repos.users.add_admin("Principal", "s3cret-pass")

    s_user = AuthService(repos.users).authenticate(password="s3cret-pass")

    assert s_user.user_id == admin_id
    assert s_user.role == Role.ADMIN


def test_wrong_pin_and_unknown_teacher_fail_identically(repos):
    repos.users.add_teacher("Ana Cruz", "123456")
    svc = AuthService(repos.users)

    with pytest.raises(AuthenticationError) as wrong:
        svc.authenticate(pin="654321")

    repos.users.users.clear()
    with pytest.raises(AuthenticationError) as unknown:
        svc.authenticate(pin="123456")

    assert str(wrong.value) == str(unknown.value) == "Invalid credentials"


def test_pin_never_authenticates_an_admin(repos):
    repos.users.add_admin("Principal", "123456")

    with pytest.raises(AuthenticationError):
        AuthService(repos.users).authenticate(pin="123456")


def test_first_matching_teacher_wins(repos):
    first = repos.users.add_teacher("First", "111111")
    repos.users.add_teacher("Second", "111111")

    assert AuthService(repos.users).authenticate(pin="111111").user_id == first


def test_archived_teacher_cannot_log_in(repos):
    teacher_id = repos.users.add_teacher("Ana Cruz", "123456")
    repos.users.set_active(teacher_id, is_active=False)

    with pytest.raises(AuthenticationError):
        AuthService(repos.users).authenticate(pin="123456")


@pytest.mark.parametrize("kwargs", [{}, {"pin": ""}, {"password": "   "}, {"pin": "123456", "password": "x"}])
def test_missing_or_ambiguous_credentials_are_rejected(repos, kwargs):
    repos.users.add_teacher("Ana Cruz", "123456")

    with pytest.raises(AuthenticationError):
        AuthService(repos.users).authenticate(**kwargs)
