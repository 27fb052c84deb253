from __future__ import annotations

from ..core.exceptions import NotFoundError
from .model import AttendanceSettings
from .repository import SchoolRepository


class SchoolService:
    def __init__(self, schools: SchoolRepository):
        self._schools = schools

    def get_attendance_settings(self, school_id: int) -> AttendanceSettings:
        """Stored settings for a school, or the defaults when none are stored."""
        if not self._schools.get_by_id(int(school_id)):
            raise NotFoundError(f"School {school_id} not found")
        return self._schools.get_settings(int(school_id)) or AttendanceSettings(school_id=int(school_id))
