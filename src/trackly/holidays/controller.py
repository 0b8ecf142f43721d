from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_actor, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    holidays = container.holiday_service

    @app.route("/api/holidays/<int:year>", methods=["GET"], endpoint="list_holidays")
    @login_required
    def list_holidays(year: int):
        return ok(holidays.list(year))

    @app.route("/api/holidays", methods=["POST"], endpoint="add_holiday")
    @admin_required
    def add_holiday():
        return ok({"added": holidays.add(current_actor(), json_body().get("date"))})

    @app.route("/api/holidays/<day>", methods=["DELETE"], endpoint="remove_holiday")
    @admin_required
    def remove_holiday(day: str):
        return ok({"removed": holidays.remove(current_actor(), day)})
