from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class with zero or one homeroom teacher."""

    class_id: int
    name: str
    grade: str
    section: str
    capacity: int
    teacher_id: Optional[int]
    school_id: int
    is_active: bool = True

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.grade}-{self.section})"

    def to_dict(self) -> dict:
        return {
            "id": self.class_id,
            "name": self.name,
            "grade": self.grade,
            "section": self.section,
            "capacity": self.capacity,
            "teacherId": self.teacher_id,
            "schoolId": self.school_id,
            "displayName": self.display_name,
        }
