from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        if not isinstance(username, str) or not isinstance(password, str):
            raise AuthenticationError("Invalid username or password")

        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.info("Failed login for username=%s", user.username)
            raise AuthenticationError("Invalid username or password")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, role=user.role)


class UserService:
    """Use case: admin creates teacher and parent accounts."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_account(
        self,
        *,
        current_role: Role,
        full_name: str,
        username: str,
        password: str,
        role: Role,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can create accounts")

        full_name = require_non_empty(full_name, "Full name")
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", 6)

        if role == Role.ADMIN:
            raise ValidationError("Admin accounts are provisioned by init_db")
        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")

        user_id = self._users.create_user(
            full_name=full_name,
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
        )
        logger.info("Created %s account user_id=%s", role.value, user_id)
        return user_id
