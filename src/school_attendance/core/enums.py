from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles used for authorization."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    PARENT = "PARENT"


class AttendanceStatus(str, Enum):
    """Closed set of statuses stored per (student, date)."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"


class NotificationType(str, Enum):
    ABSENCE = "ABSENCE"
