from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_actor, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    registry = container.status_registry

    @app.route("/api/statuses", methods=["GET"], endpoint="list_statuses")
    @login_required
    def list_statuses():
        if request.args.get("all") == "1" and current_actor().is_admin:
            return ok(registry.list_all())
        return ok(registry.list_active())

    @app.route("/api/statuses", methods=["POST"], endpoint="create_status")
    @admin_required
    def create_status():
        data = json_body()
        status_id = registry.create(current_actor(), key=data.get("key", ""), label=data.get("label", ""))
        return ok({"status_id": status_id}, 201)

    @app.route("/api/statuses/<int:status_id>", methods=["PATCH"], endpoint="update_status_label")
    @admin_required
    def update_status_label(status_id: int):
        registry.update_label(current_actor(), status_id, label=json_body().get("label", ""))
        return ok()

    @app.route("/api/statuses/<int:status_id>/toggle", methods=["POST"], endpoint="toggle_status")
    @admin_required
    def toggle_status(status_id: int):
        return ok({"active": registry.toggle_active(current_actor(), status_id)})

    @app.route("/api/statuses/order", methods=["PUT"], endpoint="reorder_statuses")
    @admin_required
    def reorder_statuses():
        return ok(registry.reorder(current_actor(), json_body().get("ids") or []))
