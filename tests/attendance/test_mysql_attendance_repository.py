from __future__ import annotations

from datetime import date, datetime

from school_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from school_attendance.core.enums import AttendanceStatus


class RecordingCursor:
    def __init__(self, prev_status):
        self.executed = []
        self._prev_status = prev_status
        self._row = None

    def execute(self, sql, params=None):
        self.executed.append(" ".join(sql.split()))
        self._row = {"prev_status": self._prev_status} if "SELECT @prev_status" in sql else None

    def fetchone(self):
        return self._row

    def close(self):
        pass


class RecordingConn:
    def __init__(self, cursor):
        self._cursor = cursor
        self.commits = 0

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        pass

    def close(self):
        pass


class RecordingFactory:
    def __init__(self, prev_status=None):
        self.cursor = RecordingCursor(prev_status)
        self.conn = RecordingConn(self.cursor)

    def connect(self, *, with_database=True):
        return self.conn


def _upsert(factory, status=AttendanceStatus.ABSENT):
    return MySQLAttendanceRepository(factory).upsert(
        student_id=101,
        class_id=10,
        attendance_date=date(2024, 3, 1),
        status=status,
        remarks=None,
        marked_by=2,
        marked_at=datetime(2024, 3, 1, 8, 0),
    )


def test_upsert_is_a_single_statement_with_no_read_before_it():
    factory = RecordingFactory()

    _upsert(factory)

    sql = factory.cursor.executed
    writes = [s for s in sql if "attendance_records" in s]
    assert len(writes) == 1
    assert writes[0].startswith("INSERT INTO attendance_records")
    assert "ON DUPLICATE KEY UPDATE status=IF((@prev_status := status)" in writes[0]
    upsert_at = sql.index(writes[0])
    assert not any(s.startswith("SELECT") for s in sql[:upsert_at])
    assert not any("FOR UPDATE" in s for s in sql)
    assert factory.conn.commits == 1


def test_upsert_returns_none_for_a_new_row():
    assert _upsert(RecordingFactory(prev_status=None)) is None


def test_upsert_returns_overwritten_status():
    assert _upsert(RecordingFactory(prev_status="PRESENT")) == AttendanceStatus.PRESENT
    assert _upsert(RecordingFactory(prev_status=bytearray(b"LATE"))) == AttendanceStatus.LATE
