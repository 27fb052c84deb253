from __future__ import annotations

from typing import Optional

from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import DEFAULT_CLASS_CAPACITY, DEFAULT_CLASS_SECTION
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..schools.repository import SchoolRepository
from ..users.repository import UserRepository
from .model import SchoolClass
from .repository import ClassRepository


class ClassService:
    def __init__(self, classes: ClassRepository, schools: SchoolRepository, users: UserRepository):
        self._classes = classes
        self._schools = schools
        self._users = users

    def create_class(
        self,
        *,
        name: str,
        grade: str,
        school_id: int,
        section: str = DEFAULT_CLASS_SECTION,
        capacity: int = DEFAULT_CLASS_CAPACITY,
        teacher_id: Optional[int] = None,
    ) -> int:
        name = require_non_empty(name, "Name")
        grade = require_non_empty(str(grade or ""), "Grade")
        section = require_non_empty(section or DEFAULT_CLASS_SECTION, "Section")
        capacity = require_positive_int(capacity, "Capacity")

        if not self._schools.get_by_id(int(school_id)):
            raise NotFoundError(f"School {school_id} not found")

        if teacher_id is not None:
            teacher = self._users.get_by_id(int(teacher_id))
            if not teacher or teacher.role != Role.TEACHER:
                raise ValidationError(f"User {teacher_id} is not a teacher account")

        return self._classes.create(
            name=name,
            grade=grade,
            section=section,
            capacity=capacity,
            teacher_id=int(teacher_id) if teacher_id is not None else None,
            school_id=int(school_id),
        )

    def get_class(self, class_id: int) -> SchoolClass:
        school_class = self._classes.get_by_id(int(class_id))
        if not school_class:
            raise NotFoundError(f"Class {class_id} not found")
        return school_class

    def list_classes(self) -> list[SchoolClass]:
        return list(self._classes.list_active())
