from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..access.web import login_required
from ..common.http import parse_int_param
from ..core.constants import DEFAULT_CLASS_CAPACITY, DEFAULT_CLASS_SECTION
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)
    policy = container.access_policy

    @app.route("/api/classes", methods=["GET"], endpoint="classes_list")
    @auth
    def list_classes():
        policy.require_staff(g.caller)
        return jsonify([c.to_dict() for c in container.class_service.list_classes()])

    @app.route("/api/classes", methods=["POST"], endpoint="classes_create")
    @auth
    def create_class():
        policy.require_admin(g.caller)

        data = request.get_json(silent=True) or {}
        teacher_id = data.get("teacherId")
        class_id = container.class_service.create_class(
            name=data.get("name", ""),
            grade=data.get("grade", ""),
            school_id=parse_int_param(data.get("schoolId"), "schoolId"),
            section=data.get("section") or DEFAULT_CLASS_SECTION,
            capacity=data.get("capacity", DEFAULT_CLASS_CAPACITY),
            teacher_id=parse_int_param(teacher_id, "teacherId") if teacher_id is not None else None,
        )
        return jsonify({"id": class_id}), 201

    @app.route("/api/classes/<int:class_id>/students", methods=["GET"], endpoint="classes_students")
    @auth
    def class_students(class_id: int):
        policy.require_staff(g.caller)
        return jsonify([s.to_dict() for s in container.student_service.list_for_class(class_id)])
