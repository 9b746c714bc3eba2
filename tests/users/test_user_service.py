from __future__ import annotations

import pytest

from src.school_attendance.school_attendance.core.enums import Role
from src.school_attendance.school_attendance.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.school_attendance.school_attendance.users.model import PinCredential
from src.school_attendance.school_attendance.users.service import AuthService, UserService


@pytest.fixture()
def svc(repos, audit):
    return UserService(repos.users, audit)


def test_create_teacher_stores_hashed_pin_and_logs(repos, svc):
    admin_id = repos.users.add_admin("Principal", "s3cret-pass")

    user = svc.create_user(actor_id=admin_id, name="Ana Cruz", pin="246810")

    assert user.role == Role.TEACHER
    assert isinstance(user.credential, PinCredential)
    assert user.credential.pin_hash != "246810"
    assert user.credential.verify("246810")
    assert repos.logs.entries[-1].action == "User Created - Ana Cruz"
    assert repos.logs.entries[-1].user_id == admin_id


def test_teacher_requires_six_digit_pin(svc):
    with pytest.raises(ValidationError):
        svc.create_user(actor_id=None, name="Ana", pin="12ab56")


def test_teacher_cannot_be_given_a_password(svc):
    with pytest.raises(ValidationError):
        svc.create_user(actor_id=None, name="Ana", pin="123456", password="password1")


def test_admin_requires_password_of_min_length(svc):
    with pytest.raises(ValidationError):
        svc.create_user(actor_id=None, name="Boss", role="admin", password="short")


def test_duplicate_pin_is_a_conflict(repos, svc):
    repos.users.add_teacher("Ana", "123456")

    with pytest.raises(ConflictError):
        svc.create_user(actor_id=None, name="Ben", pin="123456")


def test_duplicate_email_is_a_conflict(repos, svc):
    repos.users.add_admin("Principal", "s3cret-pass", email="boss@school.test")

    with pytest.raises(ConflictError):
        svc.create_user(actor_id=None, name="Other", role="admin", email="boss@school.test", password="another-pass")


def test_change_pin_only_for_teachers(repos, svc):
    admin_id = repos.users.add_admin("Principal", "s3cret-pass")

    with pytest.raises(ValidationError):
        svc.change_pin(admin_id, "123456", actor_id=admin_id)


def test_change_pin_allows_keeping_own_pin_and_updates_login(repos, svc):
    teacher_id = repos.users.add_teacher("Ana", "123456")

    svc.change_pin(teacher_id, "123456", actor_id=None)
    svc.change_pin(teacher_id, "999999", actor_id=None)

    assert AuthService(repos.users).authenticate(pin="999999").user_id == teacher_id
    assert repos.logs.actions()[-1] == "PIN Changed - Ana"


def test_change_password_only_for_admins(repos, svc):
    teacher_id = repos.users.add_teacher("Ana", "123456")

    with pytest.raises(ValidationError):
        svc.change_password(teacher_id, "new-password", actor_id=None)


def test_change_password_message_on_short_value(repos, svc):
    admin_id = repos.users.add_admin("Principal", "s3cret-pass")

    with pytest.raises(ValidationError) as exc:
        svc.change_password(admin_id, "123", actor_id=admin_id)

    assert str(exc.value) == "New password is required and must be at least 6 characters long"


def test_archive_and_unarchive(repos, svc):
    admin_id = repos.users.add_admin("Principal", "s3cret-pass")
    teacher_id = repos.users.add_teacher("Ana", "123456")

    assert svc.set_archived(teacher_id, True, actor_id=admin_id).is_active is False
    assert svc.set_archived(teacher_id, False, actor_id=admin_id).is_active is True
    assert repos.logs.actions()[-2:] == ["User Archived - Ana", "User Unarchived - Ana"]


def test_cannot_archive_or_delete_self(repos, svc):
    admin_id = repos.users.add_admin("Principal", "s3cret-pass")

    with pytest.raises(ValidationError):
        svc.set_archived(admin_id, True, actor_id=admin_id)
    with pytest.raises(ValidationError):
        svc.delete_user(admin_id, actor_id=admin_id)


def test_delete_unknown_user(svc):
    with pytest.raises(NotFoundError):
        svc.delete_user(42, actor_id=1)


def test_update_user_profile(repos, svc):
    teacher_id = repos.users.add_teacher("Ana", "123456")

    user = svc.update_user(teacher_id, actor_id=None, name="Ana Reyes")

    assert user.name == "Ana Reyes"
    assert repos.logs.entries[-1].before["name"] == "Ana"


def test_archived_teacher_pin_cannot_be_reused(repos, svc):
    first = repos.users.add_teacher("Ana", "123456")
    svc.set_archived(first, True, actor_id=None)

    with pytest.raises(ConflictError):
        svc.create_user(actor_id=None, name="Ben", pin="123456")


def test_unarchive_leaves_a_single_teacher_per_pin(repos, svc):
    first = repos.users.add_teacher("Ana", "123456")
    svc.set_archived(first, True, actor_id=None)
    with pytest.raises(ConflictError):
        svc.create_user(actor_id=None, name="Ben", pin="123456")

    svc.set_archived(first, False, actor_id=None)

    active = repos.users.list_by_role(Role.TEACHER, active_only=True)
    assert [u.user_id for u in active if u.credential.verify("123456")] == [first]
    assert AuthService(repos.users).authenticate(pin="123456").user_id == first


def test_change_pin_to_an_archived_teachers_pin_is_a_conflict(repos, svc):
    archived = repos.users.add_teacher("Ana", "123456")
    other = repos.users.add_teacher("Ben", "654321")
    svc.set_archived(archived, True, actor_id=None)

    with pytest.raises(ConflictError):
        svc.change_pin(other, "123456", actor_id=None)
