from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import admin_required, current_user_id, json_body, login_required
from ..common.validators import require_bool
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        pin = data.get("pin") if isinstance(data, dict) else None
        password = data.get("password") if isinstance(data, dict) else None

        s_user = container.auth_service.authenticate(pin=pin, password=password)

        session.clear()
        session.permanent = True
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        app.logger.info("User %s logged in as %s", s_user.user_id, s_user.role.value)
        return jsonify(s_user.to_dict())

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/auth/session", methods=["GET"], endpoint="current_session")
    @login_required
    def current_session():
        return jsonify({"id": session["user_id"], "name": session.get("name"), "role": session.get("role")})

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        users = container.user_service.list_users(role=request.args.get("role"))
        return jsonify([u.to_public_dict() for u in users])

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    @admin_required
    def create_user():
        data = json_body()
        user = container.user_service.create_user(
            actor_id=current_user_id(),
            name=data.get("name"),
            role=data.get("role") or "teacher",
            email=data.get("email"),
            password=data.get("password"),
            pin=data.get("pin"),
        )
        return jsonify(user.to_public_dict()), 201

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="update_user")
    @admin_required
    def update_user(user_id: int):
        data = json_body()
        user = container.user_service.update_user(
            user_id,
            actor_id=current_user_id(),
            name=data.get("name"),
            email=data.get("email"),
        )
        return jsonify(user.to_public_dict())

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: int):
        container.user_service.delete_user(user_id, actor_id=current_user_id())
        return jsonify({"message": "User deleted successfully"})

    @app.route("/api/users/<int:user_id>/change-password", methods=["PUT"], endpoint="change_password")
    @admin_required
    def change_password(user_id: int):
        data = json_body()
        user = container.user_service.change_password(user_id, data.get("newPassword"), actor_id=current_user_id())
        return jsonify({"message": "Password updated successfully", "user": user.to_public_dict()})

    @app.route("/api/users/<int:user_id>/change-pin", methods=["PUT"], endpoint="change_pin")
    @admin_required
    def change_pin(user_id: int):
        data = json_body()
        user = container.user_service.change_pin(user_id, data.get("newPin"), actor_id=current_user_id())
        return jsonify({"message": "Teacher PIN updated successfully", "user": {"id": user.user_id, "name": user.name}})

    @app.route("/api/users/<int:user_id>/archive", methods=["PATCH"], endpoint="archive_user")
    @admin_required
    def archive_user(user_id: int):
        archived = require_bool(json_body().get("archived"), "archived")
        user = container.user_service.set_archived(user_id, archived, actor_id=current_user_id())
        return jsonify({"message": "User archived" if archived else "User unarchived", "user": user.to_public_dict()})
