from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_user_id, json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_LOG_LIMIT


def register(app: Flask, container: Container) -> None:
    @app.route("/api/logs", methods=["GET"], endpoint="list_logs")
    @login_required
    def list_logs():
        limit = request.args.get("limit", type=int) or DEFAULT_LOG_LIMIT
        return jsonify([e.to_dict() for e in container.audit_service.recent(limit)])

    @app.route("/api/logs", methods=["POST"], endpoint="create_log")
    @login_required
    def create_log():
        data = json_body()
        entry_id = container.audit_service.record_client_event(
            user_id=current_user_id(),
            action=data.get("action"),
            details=data.get("details"),
        )
        return jsonify({"id": entry_id}), 201
