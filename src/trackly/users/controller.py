from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.web import admin_required, current_actor, json_body, login_required, login_session, ok
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container


def _public(user) -> dict:
    return {
        "user_id": user.user_id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "disabled": user.disabled,
        "last_activity_at": user.last_activity_at,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        login_session(s_user)
        app.logger.info("User %s signed in", s_user.user_id)
        return ok(s_user)

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        user = container.user_service.get(current_actor().user_id)
        if not user:
            raise NotFoundError("User not found")
        return ok(_public(user))

    @app.route("/api/me/name", methods=["PUT"], endpoint="set_my_name")
    @login_required
    def set_my_name():
        actor = current_actor()
        name = json_body().get("name", "")
        container.user_service.set_name(actor, name=name)
        session["name"] = name.strip()
        return ok()

    @app.route("/api/me/push-token", methods=["POST"], endpoint="register_push_token")
    @login_required
    def register_push_token():
        registered = container.notification_service.register_token(current_actor().user_id, json_body().get("token"))
        return ok({"registered": registered})

    @app.route("/api/me/inactivity", methods=["GET"], endpoint="my_inactivity")
    @login_required
    def my_inactivity():
        return ok(container.stats_service.user_inactivity(current_actor()))

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        return ok([_public(u) for u in container.user_service.list_all()])

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    @admin_required
    def create_user():
        data = json_body()
        try:
            role = Role(data.get("role") or Role.USER.value)
        except ValueError:
            raise ValidationError("Invalid role")
        user_id = container.user_service.create_user(
            current_actor(),
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=role,
        )
        return ok({"user_id": user_id}, 201)

    @app.route("/api/users/<int:user_id>/disabled", methods=["PUT"], endpoint="set_user_disabled")
    @admin_required
    def set_user_disabled(user_id: int):
        container.user_service.set_disabled(
            current_actor(), user_id=user_id, disabled=bool(json_body().get("disabled"))
        )
        return ok()

    @app.route("/api/users/<int:user_id>/role", methods=["PUT"], endpoint="set_user_role")
    @admin_required
    def set_user_role(user_id: int):
        container.user_service.set_role(current_actor(), user_id=user_id, role=json_body().get("role", ""))
        return ok()
