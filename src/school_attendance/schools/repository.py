from __future__ import annotations

from typing import Optional, Protocol

from .model import AttendanceSettings, School


class SchoolRepository(Protocol):
    def get_by_id(self, school_id: int) -> Optional[School]:
        raise NotImplementedError

    def get_settings(self, school_id: int) -> Optional[AttendanceSettings]:
        raise NotImplementedError
