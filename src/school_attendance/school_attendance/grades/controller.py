from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, current_user_id, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/grades", methods=["GET"], endpoint="list_grades")
    @login_required
    def list_grades():
        return jsonify([g.to_dict() for g in container.grade_service.list_grades()])

    @app.route("/api/grades", methods=["POST"], endpoint="create_grade")
    @admin_required
    def create_grade():
        data = json_body()
        grade = container.grade_service.create_grade(
            name=data.get("name"),
            number=data.get("number"),
            actor_id=current_user_id(),
        )
        return jsonify(grade.to_dict()), 201

    @app.route("/api/grades", methods=["DELETE"], endpoint="delete_grade")
    @admin_required
    def delete_grade():
        container.grade_service.delete_grade(request.args.get("id"), actor_id=current_user_id())
        return jsonify({"message": "Grade deleted successfully"})
