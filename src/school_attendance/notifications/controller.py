from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..access.web import login_required
from ..common.http import parse_int_param
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)
    policy = container.access_policy

    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @auth
    def list_notifications():
        policy.require_role(g.caller, Role.PARENT)

        limit = parse_int_param(request.args.get("limit", DEFAULT_HISTORY_LIMIT), "limit")
        items = container.notification_service.list_for_parent(g.caller.user_id, limit=limit)
        return jsonify([n.to_dict() for n in items])

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notifications_read")
    @auth
    def mark_read(notification_id: int):
        policy.require_role(g.caller, Role.PARENT)

        container.notification_service.mark_read(g.caller.user_id, notification_id)
        return jsonify({"id": notification_id, "isRead": True})

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="notifications_read_all")
    @auth
    def mark_all_read():
        policy.require_role(g.caller, Role.PARENT)

        updated = container.notification_service.mark_all_read(g.caller.user_id)
        return jsonify({"updated": updated})
