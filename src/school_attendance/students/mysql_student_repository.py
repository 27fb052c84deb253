from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Student
from .repository import StudentRepository

_COLUMNS = "student_id, name, roll_number, class_id, parent_id, is_active"


def _to_student(row: dict) -> Student:
    return Student(
        student_id=int(row["student_id"]),
        name=row["name"],
        roll_number=row["roll_number"],
        class_id=int(row["class_id"]),
        parent_id=int(row["parent_id"]),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE roll_number=%s", (roll_number,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_many(self, student_ids: Iterable[int]) -> Dict[int, Student]:
        ids = sorted({int(i) for i in student_ids})
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE student_id IN ({in_clause(ids)})",
                tuple(ids),
            )
            return {s.student_id: s for s in map(_to_student, fetchall(cur))}

    def list_active_for_class(self, class_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM students
                WHERE class_id=%s AND is_active=1
                ORDER BY roll_number ASC
                """,
                (int(class_id),),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def count_active_by_class(self) -> Dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT class_id, COUNT(*) AS total
                FROM students
                WHERE is_active=1
                GROUP BY class_id
                """
            )
            return {int(r["class_id"]): int(r["total"]) for r in fetchall(cur)}

    def list_ids_for_parent(self, parent_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM students WHERE parent_id=%s", (int(parent_id),))
            return [int(r["student_id"]) for r in fetchall(cur)]

    def create(self, *, name: str, roll_number: str, class_id: int, parent_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(name, roll_number, class_id, parent_id, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (name, roll_number, int(class_id), int(parent_id)),
            )
            return int(cur.lastrowid)

    def set_active(self, student_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET is_active=%s WHERE student_id=%s",
                (1 if is_active else 0, int(student_id)),
            )
            return cur.rowcount > 0

    def set_class(self, student_id: int, *, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET class_id=%s WHERE student_id=%s",
                (int(class_id), int(student_id)),
            )
            return cur.rowcount > 0
