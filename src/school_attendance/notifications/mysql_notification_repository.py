from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ParentNotification
from .repository import NotificationRepository

_COLUMNS = "notification_id, parent_id, student_id, type, title, message, is_read, created_at"


def _to_notification(r: dict) -> ParentNotification:
    return ParentNotification(
        notification_id=int(r["notification_id"]),
        parent_id=int(r["parent_id"]),
        student_id=r.get("student_id"),
        type=NotificationType(r["type"]),
        title=r["title"],
        message=r["message"],
        is_read=bool(r["is_read"]),
        created_at=r["created_at"],
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        parent_id: int,
        student_id: Optional[int],
        type: NotificationType,
        title: str,
        message: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO parent_notifications(parent_id, student_id, type, title, message)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(parent_id), student_id, type.value, title, message),
            )
            return int(cur.lastrowid)

    def list_for_parent(self, parent_id: int, *, limit: int) -> Sequence[ParentNotification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM parent_notifications
                WHERE parent_id=%s
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                (int(parent_id), int(limit)),
            )
            return [_to_notification(r) for r in fetchall(cur)]

    def get_by_id(self, notification_id: int) -> Optional[ParentNotification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM parent_notifications WHERE notification_id=%s",
                (int(notification_id),),
            )
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def mark_read(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE parent_notifications SET is_read=1 WHERE notification_id=%s AND is_read=0",
                (int(notification_id),),
            )
            return cur.rowcount > 0

    def mark_all_read(self, parent_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE parent_notifications SET is_read=1 WHERE parent_id=%s AND is_read=0",
                (int(parent_id),),
            )
            return int(cur.rowcount)
