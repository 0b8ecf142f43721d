from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import month_of, now_local
from ..common.web import admin_required, current_actor, json_body, login_required, ok
from ..container import Container

_SETTINGS_FIELDS = ("mode", "inactivity_enabled", "inactivity_hours", "reminder_enabled", "reminder_days")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings", methods=["GET"], endpoint="get_settings")
    @login_required
    def get_settings():
        return ok(container.settings_service.get().as_dict())

    @app.route("/api/settings", methods=["PUT"], endpoint="save_settings")
    @admin_required
    def save_settings():
        data = json_body()
        saved = container.settings_service.save(current_actor(), **{k: data[k] for k in _SETTINGS_FIELDS if k in data})
        return ok(saved.as_dict())

    @app.route("/api/admin/stats", methods=["GET"], endpoint="admin_stats")
    @admin_required
    def admin_stats():
        month = request.args.get("month") or month_of(now_local().date())
        return ok(container.stats_service.month_stats(current_actor(), month))
