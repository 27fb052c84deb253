from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional

from ..core.enums import AttendanceStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceChanged:
    """A stored status differs from what was stored before (None on first mark)."""

    student_id: int
    attendance_date: date
    old_status: Optional[AttendanceStatus]
    new_status: AttendanceStatus
    class_id: int
    remarks: Optional[str] = None


Listener = Callable[[AttendanceChanged], None]


class AttendanceEventBus:
    """In-process fan-out of attendance changes.

    Listeners run synchronously after the row is written. A failing listener
    is logged and skipped; it never fails the write that produced the event.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def publish(self, event: AttendanceChanged) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Attendance listener %r failed for student_id=%s date=%s",
                    listener,
                    event.student_id,
                    event.attendance_date,
                )
