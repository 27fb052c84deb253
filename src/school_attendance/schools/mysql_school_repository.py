from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import AttendanceSettings, School
from .repository import SchoolRepository


class MySQLSchoolRepository(SchoolRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, school_id: int) -> Optional[School]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT school_id, name, address, is_active FROM schools WHERE school_id=%s",
                (int(school_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return School(
                school_id=int(r["school_id"]),
                name=r["name"],
                address=r.get("address"),
                is_active=bool(r.get("is_active", True)),
            )

    def get_settings(self, school_id: int) -> Optional[AttendanceSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT school_id, auto_mark_absent_after, late_threshold_minutes,
                       notification_enabled, daily_summary_time, weekly_summary_day
                FROM attendance_settings
                WHERE school_id=%s
                """,
                (int(school_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceSettings(
                school_id=int(r["school_id"]),
                auto_mark_absent_after=normalize_mysql_time(r["auto_mark_absent_after"]),
                late_threshold_minutes=int(r["late_threshold_minutes"]),
                notification_enabled=bool(r["notification_enabled"]),
                daily_summary_time=normalize_mysql_time(r["daily_summary_time"]),
                weekly_summary_day=int(r["weekly_summary_day"]),
            )
