from __future__ import annotations

import logging

from ..attendance.events import AttendanceChanged
from ..classes.repository import ClassRepository
from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_HISTORY_LIMIT, MAX_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, NotificationType
from ..core.exceptions import NotFoundError
from ..schools.repository import SchoolRepository
from ..students.repository import StudentRepository
from .model import ParentNotification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class AbsenceNotifier:
    """Attendance listener: tells the parent when a child becomes ABSENT.

    Skipped when the school's attendance settings disable notifications.
    """

    def __init__(
        self,
        notifications: NotificationRepository,
        students: StudentRepository,
        classes: ClassRepository,
        schools: SchoolRepository,
    ):
        self._notifications = notifications
        self._students = students
        self._classes = classes
        self._schools = schools

    def __call__(self, event: AttendanceChanged) -> None:
        if event.new_status != AttendanceStatus.ABSENT:
            return

        student = self._students.get_by_id(event.student_id)
        if not student:
            logger.warning("Absence for unknown student_id=%s", event.student_id)
            return

        school_class = self._classes.get_by_id(event.class_id)
        if school_class:
            settings = self._schools.get_settings(school_class.school_id)
            if settings and not settings.notification_enabled:
                return
            class_name = school_class.display_name
        else:
            class_name = "Unknown Class"

        day = event.attendance_date.strftime("%A, %B %d, %Y")
        message = f"Your child {student.name} was marked absent in {class_name} on {day}."
        if event.remarks:
            message += f" Remarks: {event.remarks}"

        self._notifications.create(
            parent_id=student.parent_id,
            student_id=student.student_id,
            type=NotificationType.ABSENCE,
            title=f"{student.name} was absent",
            message=message,
        )
        logger.info("Absence notification queued for parent_id=%s student_id=%s", student.parent_id, student.student_id)


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def list_for_parent(self, parent_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[ParentNotification]:
        limit = min(require_positive_int(limit, "limit"), MAX_HISTORY_LIMIT)
        return list(self._notifications.list_for_parent(int(parent_id), limit=limit))

    def mark_read(self, parent_id: int, notification_id: int) -> None:
        notification = self._notifications.get_by_id(int(notification_id))
        # another parent's notification is reported as missing
        if not notification or notification.parent_id != int(parent_id):
            raise NotFoundError(f"Notification {notification_id} not found")
        self._notifications.mark_read(notification.notification_id)

    def mark_all_read(self, parent_id: int) -> int:
        updated = self._notifications.mark_all_read(int(parent_id))
        logger.info("Marked %s notifications read for parent_id=%s", updated, parent_id)
        return updated
