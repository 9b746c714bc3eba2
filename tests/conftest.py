from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

import pytest
from werkzeug.security import generate_password_hash

from src.school_attendance.school_attendance.attendance.model import AttendanceRecord, AttendanceReportRow
from src.school_attendance.school_attendance.attendance.service import AttendanceService
from src.school_attendance.school_attendance.container import Container
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, Role, Sex
from src.school_attendance.school_attendance.grades.model import Grade
from src.school_attendance.school_attendance.grades.service import GradeService
from src.school_attendance.school_attendance.logs.model import LogEntry
from src.school_attendance.school_attendance.logs.service import AuditLogService
from src.school_attendance.school_attendance.main import create_app
from src.school_attendance.school_attendance.reports.service import AttendanceReportService
from src.school_attendance.school_attendance.students.association import TeacherStudentResolver
from src.school_attendance.school_attendance.students.model import NewStudent, Student
from src.school_attendance.school_attendance.students.service import StudentService
from src.school_attendance.school_attendance.users.model import PasswordCredential, PinCredential, User
from src.school_attendance.school_attendance.users.service import AuthService, UserService

# Cheap hash so fixtures stay fast; production code uses werkzeug's default.
FAST_HASH = "pbkdf2:sha256:1000"

NOW = datetime(2026, 1, 15, 8, 0, 0)


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        for u in self.users.values():
            if u.email == email:
                return u
        return None

    def list_by_role(self, role: Role, *, active_only: bool = True) -> Sequence[User]:
        return [
            u
            for _, u in sorted(self.users.items())
            if u.role == role and (u.is_active or not active_only)
        ]

    def list_all(self, *, role: Optional[Role] = None) -> Sequence[User]:
        return [u for _, u in sorted(self.users.items(), reverse=True) if role is None or u.role == role]

    def create_user(self, *, name: str, email: Optional[str], role: Role, credential) -> int:
        self._id += 1
        self.users[self._id] = User(
            user_id=self._id,
            name=name,
            role=role,
            credential=credential,
            email=email,
            is_active=True,
            created_at=NOW,
        )
        return self._id

    def update_profile(self, user_id: int, *, name: str, email: Optional[str]) -> bool:
        self.users[user_id] = replace(self.users[user_id], name=name, email=email)
        return True

    def set_credential(self, user_id: int, credential) -> bool:
        self.users[user_id] = replace(self.users[user_id], credential=credential)
        return True

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        self.users[user_id] = replace(self.users[user_id], is_active=is_active)
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self.users.pop(user_id, None) is not None

    # test helpers

    def add_teacher(self, name: str, pin: str) -> int:
        credential = PinCredential(pin_hash=generate_password_hash(pin, method=FAST_HASH))
        return self.create_user(name=name, email=None, role=Role.TEACHER, credential=credential)

    def add_admin(self, name: str, password: str, email: Optional[str] = None) -> int:
        credential = PasswordCredential(password_hash=generate_password_hash(password, method=FAST_HASH))
        return self.create_user(name=name, email=email, role=Role.ADMIN, credential=credential)


class InMemoryLogs:
    def __init__(self):
        self.entries: list[LogEntry] = []

    def append(self, *, action: str, user_id=None, entity_type=None, entity_id=None, before=None, after=None) -> int:
        entry = LogEntry(
            log_id=len(self.entries) + 1,
            action=action,
            created_at=NOW,
            user_id=user_id,
            entity_type=entity_type,
            entity_id=entity_id,
            before=before,
            after=after,
        )
        self.entries.append(entry)
        return entry.log_id

    def list_recent(self, limit: int) -> Sequence[LogEntry]:
        return list(reversed(self.entries))[:limit]

    def list_by_user(self, user_id: int, *, action_prefix: Optional[str] = None) -> Sequence[LogEntry]:
        return [
            e
            for e in self.entries
            if e.user_id == user_id and (action_prefix is None or e.action.startswith(action_prefix))
        ]

    def actions(self) -> list[str]:
        return [e.action for e in self.entries]


class InMemoryGrades:
    def __init__(self):
        self.grades: dict[int, Grade] = {}
        self._id = 0

    def get_by_id(self, grade_id: int) -> Optional[Grade]:
        return self.grades.get(int(grade_id))

    def list_active(self) -> Sequence[Grade]:
        return sorted((g for g in self.grades.values() if g.is_active), key=lambda g: g.number)

    def find_by_name_or_number(self, *, name: str, number: int, is_active: bool) -> Optional[Grade]:
        for _, g in sorted(self.grades.items()):
            if g.is_active == is_active and (g.name == name or g.number == number):
                return g
        return None

    def get_active_by_number(self, number: int) -> Optional[Grade]:
        for g in self.grades.values():
            if g.is_active and g.number == number:
                return g
        return None

    def count_active(self) -> int:
        return sum(1 for g in self.grades.values() if g.is_active)

    def create(self, *, name: str, number: int) -> int:
        self._id += 1
        self.grades[self._id] = Grade(grade_id=self._id, name=name, number=number, is_active=True, created_at=NOW)
        return self._id

    def reactivate(self, grade_id: int, *, name: str, number: int) -> bool:
        self.grades[grade_id] = replace(self.grades[grade_id], name=name, number=number, is_active=True)
        return True

    def deactivate(self, grade_id: int) -> bool:
        self.grades[grade_id] = replace(self.grades[grade_id], is_active=False)
        return True


class InMemoryAttendance:
    def __init__(self, students: "InMemoryStudents"):
        self._students = students
        self.records: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0

    def upsert(self, *, student_id, day, status, reason, student_name, recorded_by_user_id) -> AttendanceRecord:
        existing = self.records.get((student_id, day))
        if existing:
            record = replace(existing, status=status, reason=reason, student_name=student_name, updated_at=NOW)
        else:
            self._id += 1
            record = AttendanceRecord(
                attendance_id=self._id,
                student_id=student_id,
                date=day,
                status=status,
                student_name=student_name,
                recorded_by_user_id=recorded_by_user_id,
                reason=reason,
                updated_at=NOW,
            )
        self.records[(student_id, day)] = record
        return record

    def list_for_student_between(self, student_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        items = [r for r in self.records.values() if r.student_id == student_id and start <= r.date <= end]
        return sorted(items, key=lambda r: r.date)

    def list_for_students_on(self, student_ids: Sequence[int], day: date) -> Sequence[AttendanceRecord]:
        wanted = set(student_ids)
        return [r for r in self.records.values() if r.student_id in wanted and r.date == day]

    def list_by_status(self, status: AttendanceStatus) -> Sequence[AttendanceRecord]:
        items = [r for r in self.records.values() if r.status == status]
        return sorted(items, key=lambda r: (r.date, r.student_id))

    def student_ids_recorded_by(self, user_id: int) -> set[int]:
        return {r.student_id for r in self.records.values() if r.recorded_by_user_id == user_id}

    def get_report_rows(self, *, start_date: date, end_date: date, grade: Optional[int] = None):
        rows = []
        for r in sorted(self.records.values(), key=lambda r: (r.date, r.student_name)):
            student = self._students.get_by_id(r.student_id)
            if not (start_date <= r.date <= end_date) or student is None:
                continue
            if grade is not None and student.grade != grade:
                continue
            rows.append(
                AttendanceReportRow(
                    student_id=r.student_id,
                    student_name=r.student_name,
                    grade=student.grade,
                    sex=student.sex,
                    date=r.date,
                    status=r.status,
                    reason=r.reason,
                )
            )
        return rows

    def delete_for_students(self, student_ids: Iterable[int]) -> None:
        wanted = set(student_ids)
        for key in [k for k in self.records if k[0] in wanted]:
            del self.records[key]


class InMemoryStudents:
    def __init__(self):
        self.students: dict[int, Student] = {}
        self.attendance: Optional[InMemoryAttendance] = None
        self._id = 0

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.students.get(int(student_id))

    def get_many(self, student_ids: Iterable[int]) -> Sequence[Student]:
        return [self.students[i] for i in student_ids if i in self.students]

    def list_students(self, *, grade: Optional[int] = None, is_active: Optional[bool] = None) -> Sequence[Student]:
        return [
            s
            for s in self.students.values()
            if (grade is None or s.grade == grade) and (is_active is None or s.is_active == is_active)
        ]

    def create_many(self, rows: Sequence[NewStudent]) -> list[int]:
        ids = []
        for row in rows:
            self._id += 1
            self.students[self._id] = Student(
                student_id=self._id,
                first_name=row.first_name,
                last_name=row.last_name,
                sex=row.sex,
                grade=row.grade,
                lrn=row.lrn,
                is_active=True,
                created_at=NOW,
            )
            ids.append(self._id)
        return ids

    def update_details(self, student_id: int, *, first_name: str, last_name: str, lrn: Optional[str]) -> bool:
        self.students[student_id] = replace(
            self.students[student_id], first_name=first_name, last_name=last_name, lrn=lrn
        )
        return True

    def set_active(self, student_ids: Sequence[int], *, is_active: bool) -> int:
        for i in student_ids:
            self.students[i] = replace(self.students[i], is_active=is_active)
        return len(student_ids)

    def delete(self, student_id: int) -> bool:
        if student_id not in self.students:
            return False
        if self.attendance:
            self.attendance.delete_for_students([student_id])
        del self.students[student_id]
        return True

    def delete_by_grade(self, grade: int) -> int:
        ids = [i for i, s in self.students.items() if s.grade == grade]
        if self.attendance:
            self.attendance.delete_for_students(ids)
        for i in ids:
            del self.students[i]
        return len(ids)

    def count_by_grade(self, grade: int) -> int:
        return sum(1 for s in self.students.values() if s.grade == grade)

    def count_all(self) -> int:
        return len(self.students)

    # test helper

    def add(self, first_name: str, last_name: str, *, sex: Sex = Sex.MALE, grade: int = 1) -> Student:
        (student_id,) = self.create_many(
            [NewStudent(first_name=first_name, last_name=last_name, sex=sex, grade=grade)]
        )
        return self.students[student_id]


@dataclass
class Repos:
    users: InMemoryUsers
    grades: InMemoryGrades
    students: InMemoryStudents
    attendance: InMemoryAttendance
    logs: InMemoryLogs


@pytest.fixture()
def repos() -> Repos:
    students = InMemoryStudents()
    attendance = InMemoryAttendance(students)
    students.attendance = attendance

    grades = InMemoryGrades()
    for n in (1, 2, 3):
        grades.create(name=f"Grade {n}", number=n)

    return Repos(
        users=InMemoryUsers(),
        grades=grades,
        students=students,
        attendance=attendance,
        logs=InMemoryLogs(),
    )


@pytest.fixture()
def audit(repos: Repos) -> AuditLogService:
    return AuditLogService(repos.logs)


@pytest.fixture()
def container(repos: Repos, audit: AuditLogService) -> Container:
    return Container(
        conn=None,
        users_repo=repos.users,
        grades_repo=repos.grades,
        students_repo=repos.students,
        attendance_repo=repos.attendance,
        logs_repo=repos.logs,
        audit_service=audit,
        auth_service=AuthService(repos.users),
        user_service=UserService(repos.users, audit),
        grade_service=GradeService(repos.grades, repos.students, audit),
        student_service=StudentService(repos.students, repos.grades, audit),
        teacher_student_resolver=TeacherStudentResolver(repos.students, repos.attendance, repos.logs),
        attendance_service=AttendanceService(repos.attendance, repos.students, audit),
        report_service=AttendanceReportService(repos.attendance, repos.students),
    )


@pytest.fixture()
def app(container: Container, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def login(client):
    def _login(*, user_id: int, role: Role, name: str = "Someone") -> None:
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["name"] = name
            sess["role"] = role.value

    return _login


@pytest.fixture()
def as_admin(login, repos: Repos):
    admin_id = repos.users.add_admin("Admin", "secret-pass")
    login(user_id=admin_id, role=Role.ADMIN, name="Admin")
    return admin_id


@pytest.fixture()
def as_teacher(login, repos: Repos):
    teacher_id = repos.users.add_teacher("Teacher", "123456")
    login(user_id=teacher_id, role=Role.TEACHER, name="Teacher")
    return teacher_id
