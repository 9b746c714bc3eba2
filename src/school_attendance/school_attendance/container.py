from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .grades.mysql_grade_repository import MySQLGradeRepository
from .grades.service import GradeService
from .logs.mysql_log_repository import MySQLLogRepository
from .logs.service import AuditLogService
from .reports.service import AttendanceReportService
from .students.association import TeacherStudentResolver
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    grades_repo: MySQLGradeRepository
    students_repo: MySQLStudentRepository
    attendance_repo: MySQLAttendanceRepository
    logs_repo: MySQLLogRepository

    audit_service: AuditLogService
    auth_service: AuthService
    user_service: UserService
    grade_service: GradeService
    student_service: StudentService
    teacher_student_resolver: TeacherStudentResolver
    attendance_service: AttendanceService
    report_service: AttendanceReportService


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    users_repo = MySQLUserRepository(conn)
    grades_repo = MySQLGradeRepository(conn)
    students_repo = MySQLStudentRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    logs_repo = MySQLLogRepository(conn)

    audit_service = AuditLogService(logs_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        grades_repo=grades_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        logs_repo=logs_repo,
        audit_service=audit_service,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, audit_service),
        grade_service=GradeService(grades_repo, students_repo, audit_service),
        student_service=StudentService(students_repo, grades_repo, audit_service),
        teacher_student_resolver=TeacherStudentResolver(students_repo, attendance_repo, logs_repo),
        attendance_service=AttendanceService(attendance_repo, students_repo, audit_service),
        report_service=AttendanceReportService(attendance_repo, students_repo),
    )
