from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        raise NotImplementedError

    def get_many(self, student_ids: Iterable[int]) -> Dict[int, Student]:
        """Students keyed by id; unknown ids are simply absent."""

        raise NotImplementedError

    def list_active_for_class(self, class_id: int) -> Sequence[Student]:
        """Active students of a class ordered by roll number."""

        raise NotImplementedError

    def count_active_by_class(self) -> Dict[int, int]:
        raise NotImplementedError

    def list_ids_for_parent(self, parent_id: int) -> Sequence[int]:
        raise NotImplementedError

    def create(self, *, name: str, roll_number: str, class_id: int, parent_id: int) -> int:
        raise NotImplementedError

    def set_active(self, student_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def set_class(self, student_id: int, *, class_id: int) -> bool:
        raise NotImplementedError
