from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.constants import UNAUTHORIZED_MESSAGE
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

STATUS_FOR_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 401),
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def json_error(message: str, status: int, *, error: Optional[str] = None):
    body = {"message": message}
    if error is not None:
        body["error"] = error
    return jsonify(body), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError(UNAUTHORIZED_MESSAGE)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError(UNAUTHORIZED_MESSAGE)
        if session.get("role") != Role.ADMIN.value:
            raise AuthorizationError(UNAUTHORIZED_MESSAGE)
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> Optional[int]:
    user_id = session.get("user_id")
    return int(user_id) if user_id is not None else None


def json_body(*, allow_list: bool = False) -> Any:
    data = request.get_json(silent=True)
    if isinstance(data, dict) or (allow_list and isinstance(data, list)):
        return data
    raise ValidationError("Request body must be a JSON object")


def register_error_handlers(app: Flask) -> None:
    """Translate domain errors into the JSON error contract."""

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for exc_type, status in STATUS_FOR_ERROR:
            if isinstance(e, exc_type):
                return json_error(str(e), status)
        return json_error(str(e), 400)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return json_error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return json_error("Internal server error", 500, error=str(e))
