from __future__ import annotations

from functools import wraps

from flask import g, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .policy import Caller


def login_required(container):
    """Decorator factory: resolve the session user into ``g.caller``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                raise AuthenticationError("Login required")

            role = Role(session["role"])
            user_id = int(session["user_id"])
            student_ids = frozenset()
            if role == Role.PARENT:
                student_ids = frozenset(container.students_repo.list_ids_for_parent(user_id))
            g.caller = Caller(user_id=user_id, role=role, student_ids=student_ids)
            return view(*args, **kwargs)

        return wrapper

    return decorator
