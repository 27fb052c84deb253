from __future__ import annotations

import logging

from flask import Flask, g, jsonify, request, session

from ..access.web import login_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = request.get_json(silent=True) or {}
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        logger.info("user_id=%s logged in as %s", s_user.user_id, s_user.role.value)
        return jsonify({"id": s_user.user_id, "fullName": s_user.full_name, "role": s_user.role.value})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return jsonify({"loggedOut": True})

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    @auth
    def create_user():
        data = request.get_json(silent=True) or {}
        try:
            role = Role(str(data.get("role", "")))
        except ValueError:
            raise ValidationError("role must be one of TEACHER, PARENT")

        user_id = container.user_service.create_account(
            current_role=g.caller.role,
            full_name=data.get("fullName", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            role=role,
        )
        return jsonify({"id": user_id}), 201
