from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_user_id, json_body, login_required
from ..common.validators import require_bool
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @login_required
    def list_students():
        archived = (request.args.get("archived") or "").lower() in {"1", "true", "yes"}
        students = container.student_service.list_students(grade=request.args.get("grade"), archived=archived)
        return jsonify([s.to_dict() for s in students])

    @app.route("/api/students", methods=["POST"], endpoint="create_students")
    @login_required
    def create_students():
        data = json_body(allow_list=True)
        created = container.student_service.create_students(data, actor_id=current_user_id())
        if isinstance(data, list):
            return jsonify([s.to_dict() for s in created]), 201
        return jsonify(created[0].to_dict()), 201

    @app.route("/api/students", methods=["PATCH"], endpoint="archive_students")
    @login_required
    def archive_students():
        data = json_body()
        ids = data.get("ids")
        if ids is None and data.get("id") is not None:
            ids = [data.get("id")]
        if not isinstance(ids, list):
            ids = []
        archived = require_bool(data.get("archived"), "archived")
        updated = container.student_service.set_archived(ids, archived, actor_id=current_user_id())
        return jsonify([s.to_dict() for s in updated])

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="update_student")
    @login_required
    def update_student(student_id: int):
        data = json_body()
        student = container.student_service.update_student(
            student_id,
            actor_id=current_user_id(),
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            lrn=data.get("lrn"),
        )
        return jsonify(student.to_dict())

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="delete_student")
    @login_required
    def delete_student(student_id: int):
        container.student_service.delete_student(student_id, actor_id=current_user_id())
        return jsonify({"message": "Student deleted successfully"})

    @app.route("/api/students/reset", methods=["POST"], endpoint="reset_students")
    @admin_required
    def reset_students():
        grade = json_body().get("grade")
        deleted = container.student_service.reset_grade(grade, actor_id=current_user_id())
        return jsonify({"message": f"Deleted {deleted} student(s)", "deletedCount": deleted})

    @app.route("/api/students/byTeacher/<int:teacher_id>", methods=["GET"], endpoint="students_by_teacher")
    @admin_required
    def students_by_teacher(teacher_id: int):
        students = container.teacher_student_resolver.students_managed_by(teacher_id)
        return jsonify([s.to_dict() for s in students])
