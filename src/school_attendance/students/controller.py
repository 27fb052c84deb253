from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..access.web import login_required
from ..common.http import parse_int_param
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)
    policy = container.access_policy

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @auth
    def create_student():
        policy.require_admin(g.caller)

        data = request.get_json(silent=True) or {}
        student_id = container.student_service.create_student(
            name=data.get("name", ""),
            roll_number=data.get("rollNumber", ""),
            class_id=parse_int_param(data.get("classId"), "classId"),
            parent_id=parse_int_param(data.get("parentId"), "parentId"),
        )
        return jsonify({"id": student_id}), 201

    @app.route("/api/students/<int:student_id>/deactivate", methods=["POST"], endpoint="students_deactivate")
    @auth
    def deactivate(student_id: int):
        policy.require_admin(g.caller)
        container.student_service.deactivate(student_id)
        return jsonify({"id": student_id, "isActive": False})

    @app.route("/api/students/<int:student_id>/transfer", methods=["POST"], endpoint="students_transfer")
    @auth
    def transfer(student_id: int):
        policy.require_admin(g.caller)

        data = request.get_json(silent=True) or {}
        class_id = parse_int_param(data.get("classId"), "classId")
        container.student_service.transfer(student_id, class_id=class_id)
        return jsonify({"id": student_id, "classId": class_id})

    @app.route("/api/students/mine", methods=["GET"], endpoint="students_mine")
    @auth
    def my_children():
        policy.require_role(g.caller, Role.PARENT)
        return jsonify([s.to_dict() for s in container.student_service.list_for_parent(g.caller.user_id)])
