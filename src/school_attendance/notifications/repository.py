from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import ParentNotification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        parent_id: int,
        student_id: Optional[int],
        type: NotificationType,
        title: str,
        message: str,
    ) -> int:
        raise NotImplementedError

    def list_for_parent(self, parent_id: int, *, limit: int) -> Sequence[ParentNotification]:
        raise NotImplementedError

    def get_by_id(self, notification_id: int) -> Optional[ParentNotification]:
        raise NotImplementedError

    def mark_read(self, notification_id: int) -> bool:
        raise NotImplementedError

    def mark_all_read(self, parent_id: int) -> int:
        """Returns how many unread notifications were marked."""

        raise NotImplementedError
