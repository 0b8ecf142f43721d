"""Flask glue shared by the feature controllers."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps

from flask import Flask, current_app, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    GatewayError,
    NotFoundError,
    ValidationError,
)
from ..users.model import SessionUser

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (GatewayError, 502),
)


def to_json(value):
    """Make dataclasses, Decimals, dates and enums JSON friendly."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json(v) for v in value]
    return value


def ok(payload=None, status: int = 200):
    return jsonify(to_json(payload if payload is not None else {"ok": True})), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def login_session(user: SessionUser) -> None:
    session["user_id"] = user.user_id
    session["name"] = user.name
    session["email"] = user.email
    session["role"] = user.role.value


def current_actor() -> SessionUser:
    return SessionUser(
        user_id=int(session["user_id"]),
        name=session.get("name") or "",
        email=session.get("email") or "",
        role=Role(session.get("role", Role.USER.value)),
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Please sign in to continue"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"error": "Administrator role required"}), 403
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def domain_error(e: DomainError):
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                return jsonify({"error": str(e)}), status
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(Exception)
    def unexpected_error(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        current_app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(current_app.config.get("DEBUG", False)):
            return jsonify({"error": f"Operation failed: {e}"}), 500
        return jsonify({"error": "Operation failed"}), 500
