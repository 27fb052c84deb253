from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "record_id, student_id, class_id, attendance_date, status, marked_by, marked_at, remarks"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        student_id=int(r["student_id"]),
        class_id=int(r["class_id"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        marked_by=int(r["marked_by"]),
        marked_at=r["marked_at"],
        remarks=r.get("remarks"),
    )


def _history_filter(class_id: int, start_date: Optional[date], end_date: Optional[date]):
    clauses = ["class_id=%s"]
    params: list[object] = [int(class_id)]
    if start_date is not None:
        clauses.append("attendance_date >= %s")
        params.append(start_date)
    if end_date is not None:
        clauses.append("attendance_date <= %s")
        params.append(end_date)
    return " AND ".join(clauses), params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            # The upsert captures the overwritten status into @prev_status.
            # status must be the first assignment: later ones would see the new value.
            cur.execute("SET @prev_status := NULL")
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, class_id, attendance_date, status, marked_by, remarks, marked_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=IF((@prev_status := status) IS NULL, VALUES(status), VALUES(status)),
                    class_id=VALUES(class_id),
                    marked_by=VALUES(marked_by),
                    remarks=VALUES(remarks),
                    marked_at=VALUES(marked_at)
                """,
                (int(student_id), int(class_id), attendance_date, status.value, int(marked_by), remarks, marked_at),
            )
            cur.execute("SELECT @prev_status AS prev_status")
            previous = fetchone(cur)
            prev = previous["prev_status"] if previous else None
            if prev is None:
                return None
            if isinstance(prev, (bytes, bytearray)):
                prev = prev.decode("utf-8")
            return AttendanceStatus(prev)

    def delete(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE record_id=%s", (int(record_id),))
            return cur.rowcount > 0

    def list_for_class_and_date(self, class_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE class_id=%s AND attendance_date=%s
                """,
                (int(class_id), attendance_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        class_id: Optional[int] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["attendance_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if class_id is not None:
            clauses.append("class_id=%s")
            params.append(int(class_id))
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(int(student_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY attendance_date ASC, student_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_marked_dates(
        self,
        *,
        class_id: int,
        start_date: Optional[date],
        end_date: Optional[date],
        limit: int,
        offset: int,
    ) -> Sequence[date]:
        where, params = _history_filter(class_id, start_date, end_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT DISTINCT attendance_date
                FROM attendance_records
                WHERE {where}
                ORDER BY attendance_date DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [r["attendance_date"] for r in fetchall(cur)]

    def count_marked_dates(self, *, class_id: int, start_date: Optional[date], end_date: Optional[date]) -> int:
        where, params = _history_filter(class_id, start_date, end_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(DISTINCT attendance_date) AS total FROM attendance_records WHERE {where}",
                tuple(params),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_for_class_on_dates(self, class_id: int, dates: Iterable[date]) -> Sequence[AttendanceRecord]:
        days = sorted(set(dates))
        if not days:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE class_id=%s AND attendance_date IN ({in_clause(days)})
                ORDER BY attendance_date DESC, student_id ASC
                """,
                tuple([int(class_id)] + days),
            )
            return [_to_record(r) for r in fetchall(cur)]
