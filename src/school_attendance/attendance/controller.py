from __future__ import annotations

import logging

from flask import Flask, g, jsonify, request

from ..access.web import login_required
from ..common.http import parse_date_param, parse_int_param, parse_optional_date_param
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError
from ..container import Container
from .model import MarkEntry

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)
    policy = container.access_policy

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @auth
    def mark():
        policy.require_staff(g.caller)

        data = request.get_json(silent=True) or {}
        class_id = parse_int_param(data.get("classId"), "classId")
        attendance_date = parse_date_param(data.get("date"), "date")
        entries = data.get("entries")
        if not isinstance(entries, list):
            raise ValidationError("entries must be a list")

        updated = container.attendance_service.mark_attendance(
            class_id=class_id,
            attendance_date=attendance_date,
            entries=[MarkEntry.from_payload(e) for e in entries],
            marked_by=g.caller.user_id,
        )
        return jsonify({"updated": updated})

    @app.route("/api/attendance/class-day", methods=["GET"], endpoint="attendance_class_day")
    @auth
    def class_day():
        policy.require_staff(g.caller)

        class_id = parse_int_param(request.args.get("classId"), "classId")
        attendance_date = parse_date_param(request.args.get("date"), "date")
        day = container.attendance_service.get_attendance_for_class_and_date(class_id, attendance_date)
        return jsonify(day.to_dict())

    @app.route("/api/attendance/history/<int:class_id>", methods=["GET"], endpoint="attendance_history")
    @auth
    def history(class_id: int):
        children = container.students_repo.get_many(g.caller.student_ids) if g.caller.student_ids else {}
        scope = policy.history_scope(
            g.caller,
            class_id=class_id,
            child_class_ids=[s.class_id for s in children.values()],
        )

        result = container.attendance_service.get_attendance_history(
            class_id,
            start_date=parse_optional_date_param(request.args.get("startDate"), "startDate"),
            end_date=parse_optional_date_param(request.args.get("endDate"), "endDate"),
            limit=parse_int_param(request.args.get("limit", DEFAULT_HISTORY_LIMIT), "limit"),
            offset=parse_int_param(request.args.get("offset", 0), "offset"),
            student_ids=scope,
        )
        return jsonify(result)

    @app.route("/api/attendance/<int:record_id>", methods=["DELETE"], endpoint="attendance_delete")
    @auth
    def delete(record_id: int):
        policy.require_admin(g.caller)

        container.attendance_service.delete_record(record_id)
        logger.info("user_id=%s deleted attendance record_id=%s", g.caller.user_id, record_id)
        return jsonify({"deleted": record_id})
