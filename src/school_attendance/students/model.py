from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    """Domain entity: a student enrolled in one class.

    Students are deactivated (``is_active=False``) instead of being removed so
    their attendance history survives.
    """

    student_id: int
    name: str
    roll_number: str
    class_id: int
    parent_id: int
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "name": self.name,
            "rollNumber": self.roll_number,
            "classId": self.class_id,
            "parentId": self.parent_id,
            "isActive": self.is_active,
        }
