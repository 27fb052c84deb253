"""Role-based access rules.

The access layer decides who may call what; the attendance and report
services trust their callers and never re-check roles.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class Caller:
    user_id: int
    role: Role
    # only meaningful for PARENT: the children this caller may read
    student_ids: FrozenSet[int] = field(default_factory=frozenset)


class AccessPolicy:
    STAFF = frozenset({Role.ADMIN, Role.TEACHER})

    def require_role(self, caller: Caller, *roles: Role) -> None:
        if caller.role not in roles:
            raise AuthorizationError("Insufficient permissions")

    def require_staff(self, caller: Caller) -> None:
        """Admins and teachers mark attendance and view every report."""
        self.require_role(caller, *self.STAFF)

    def require_admin(self, caller: Caller) -> None:
        self.require_role(caller, Role.ADMIN)

    def can_view_student(self, caller: Caller, student_id: int) -> bool:
        if caller.role in self.STAFF:
            return True
        return caller.role == Role.PARENT and int(student_id) in caller.student_ids

    def require_student_access(self, caller: Caller, student_id: int) -> None:
        if not self.can_view_student(caller, student_id):
            raise AuthorizationError("You may only view your own children")

    def history_scope(self, caller: Caller, *, class_id: int, child_class_ids: Iterable[int]) -> Optional[FrozenSet[int]]:
        """Which students' records a caller may see in a class history.

        Staff see the whole class (``None``). A parent sees only their own
        children, and only for a class one of them currently attends.
        """
        if caller.role in self.STAFF:
            return None
        if caller.role == Role.PARENT and int(class_id) in set(child_class_ids):
            return caller.student_ids
        raise AuthorizationError("You may only view your own children")
