from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

# Action verbs. Labels are "<verb> - <display name>" so the admin log page can
# colour them by prefix.
STUDENT_CREATED = "Student Created"
STUDENT_UPDATED = "Student Updated"
STUDENT_ARCHIVED = "Student Archived"
STUDENT_UNARCHIVED = "Student Unarchived"
STUDENT_DELETED = "Student Deleted"
STUDENTS_RESET = "Students Reset"
MARKED_ABSENT = "Student Marked Absent"
ATTENDANCE_UPDATED = "Attendance Updated"
USER_CREATED = "User Created"
USER_UPDATED = "User Updated"
USER_ARCHIVED = "User Archived"
USER_UNARCHIVED = "User Unarchived"
USER_DELETED = "User Deleted"
PASSWORD_CHANGED = "Password Changed"
PIN_CHANGED = "PIN Changed"
GRADE_CREATED = "Grade Created"
GRADE_DELETED = "Grade Deleted"


def action_label(verb: str, subject: str) -> str:
    return f"{verb} - {subject}" if subject else verb


@dataclass(frozen=True)
class LogEntry:
    """Immutable audit entry. ``after`` is the authoritative snapshot."""

    log_id: int
    action: str
    created_at: datetime
    user_id: Optional[int] = None
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    before: Any = None
    after: Any = None

    def to_dict(self) -> dict:
        return {
            "id": self.log_id,
            "userId": self.user_id,
            "action": self.action,
            "entityType": self.entity_type,
            "entityId": self.entity_id,
            "before": self.before,
            "after": self.after,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
