from __future__ import annotations

from flask import Flask, g, jsonify

from ..access.web import login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    @app.route("/api/schools/<int:school_id>/attendance-settings", methods=["GET"], endpoint="school_settings")
    @auth
    def attendance_settings(school_id: int):
        container.access_policy.require_staff(g.caller)
        return jsonify(container.school_service.get_attendance_settings(school_id).to_dict())
