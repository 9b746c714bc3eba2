from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    ADMIN = "admin"
    TEACHER = "teacher"


class AttendanceStatus(str, Enum):
    """Attendance status stored per (student, day)."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"


class Sex(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


# Student lists always show boys first; the UI tables rely on this order.
SEX_SORT_ORDER = {Sex.MALE: 0, Sex.FEMALE: 1}
