from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        student_id: int,
        class_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        remarks: Optional[str],
        marked_by: int,
        marked_at: datetime,
    ) -> Optional[AttendanceStatus]:
        """Insert or overwrite the (student_id, attendance_date) row atomically.

        Returns the status stored before the write, or None if the row is new.
        """

        raise NotImplementedError

    def delete(self, record_id: int) -> bool:
        raise NotImplementedError

    def list_for_class_and_date(self, class_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        class_id: Optional[int] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_marked_dates(
        self,
        *,
        class_id: int,
        start_date: Optional[date],
        end_date: Optional[date],
        limit: int,
        offset: int,
    ) -> Sequence[date]:
        """Distinct dates with records for the class, newest first."""

        raise NotImplementedError

    def count_marked_dates(self, *, class_id: int, start_date: Optional[date], end_date: Optional[date]) -> int:
        raise NotImplementedError

    def list_for_class_on_dates(self, class_id: int, dates: Iterable[date]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
