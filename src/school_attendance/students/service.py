from __future__ import annotations

import logging

from ..classes.repository import ClassRepository
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: admin manages enrolment (create, deactivate, transfer)."""

    def __init__(self, students: StudentRepository, classes: ClassRepository, users: UserRepository):
        self._students = students
        self._classes = classes
        self._users = users

    def _require_class(self, class_id: int):
        school_class = self._classes.get_by_id(int(class_id))
        if not school_class or not school_class.is_active:
            raise NotFoundError(f"Class {class_id} not found")
        return school_class

    def _require_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def create_student(self, *, name: str, roll_number: str, class_id: int, parent_id: int) -> int:
        name = require_non_empty(name, "Name")
        roll_number = require_non_empty(roll_number, "Roll number")
        self._require_class(class_id)

        parent = self._users.get_by_id(int(parent_id))
        if not parent or parent.role != Role.PARENT:
            raise ValidationError(f"User {parent_id} is not a parent account")

        if self._students.get_by_roll_number(roll_number):
            raise ValidationError(f"Roll number {roll_number} already exists")

        student_id = self._students.create(
            name=name,
            roll_number=roll_number,
            class_id=int(class_id),
            parent_id=int(parent_id),
        )
        logger.info("Enrolled student_id=%s in class_id=%s", student_id, class_id)
        return student_id

    def deactivate(self, student_id: int) -> None:
        student = self._require_student(student_id)
        if not student.is_active:
            return
        self._students.set_active(student.student_id, is_active=False)
        logger.info("Deactivated student_id=%s", student.student_id)

    def transfer(self, student_id: int, *, class_id: int) -> None:
        """Move a student to another class.

        Existing attendance records keep the class they were marked in.
        """
        student = self._require_student(student_id)
        if not student.is_active:
            raise ValidationError(f"Student {student_id} is inactive")
        self._require_class(class_id)
        if student.class_id == int(class_id):
            return
        self._students.set_class(student.student_id, class_id=int(class_id))
        logger.info("Transferred student_id=%s from class_id=%s to class_id=%s", student_id, student.class_id, class_id)

    def list_for_class(self, class_id: int) -> list[Student]:
        self._require_class(class_id)
        return list(self._students.list_active_for_class(int(class_id)))

    def list_for_parent(self, parent_id: int) -> list[Student]:
        """All children of a parent account, inactive ones included."""
        students = self._students.get_many(self._students.list_ids_for_parent(int(parent_id)))
        return sorted(students.values(), key=lambda s: s.roll_number)
