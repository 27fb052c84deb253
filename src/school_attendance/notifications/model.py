from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class ParentNotification:
    notification_id: int
    parent_id: int
    student_id: Optional[int]
    type: NotificationType
    title: str
    message: str
    is_read: bool
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "studentId": self.student_id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "isRead": self.is_read,
            "createdAt": self.created_at.isoformat(timespec="seconds"),
        }
