from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SchoolClass
from .repository import ClassRepository

_COLUMNS = "class_id, name, grade, section, capacity, teacher_id, school_id, is_active"


def _to_class(row: dict) -> SchoolClass:
    teacher_id = row.get("teacher_id")
    return SchoolClass(
        class_id=int(row["class_id"]),
        name=row["name"],
        grade=row["grade"],
        section=row["section"],
        capacity=int(row["capacity"]),
        teacher_id=int(teacher_id) if teacher_id is not None else None,
        school_id=int(row["school_id"]),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE class_id=%s", (int(class_id),))
            row = fetchone(cur)
            return _to_class(row) if row else None

    def list_active(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM classes WHERE is_active=1 ORDER BY grade, section, name")
            return [_to_class(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        grade: str,
        section: str,
        capacity: int,
        teacher_id: Optional[int],
        school_id: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO classes(name, grade, section, capacity, teacher_id, school_id, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (name, grade, section, int(capacity), teacher_id, int(school_id)),
            )
            return int(cur.lastrowid)
