from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolClass


class ClassRepository(Protocol):
    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def list_active(self) -> Sequence[SchoolClass]:
        raise NotImplementedError

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
        raise NotImplementedError
