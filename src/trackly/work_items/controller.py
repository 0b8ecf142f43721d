from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_actor, json_body, login_required, ok
from ..container import Container

_UPDATE_FIELDS = ("title", "description", "priority", "project_id", "assigned_to", "estimate_hours", "actual_hours")


def register(app: Flask, container: Container) -> None:
    items = container.work_item_service

    @app.route("/api/work-items", methods=["GET"], endpoint="list_work_items")
    @login_required
    def list_work_items():
        if request.args.get("all") == "1":
            return ok(items.list_all())
        return ok(items.list_active())

    @app.route("/api/work-items/<int:work_item_id>", methods=["GET"], endpoint="get_work_item")
    @login_required
    def get_work_item(work_item_id: int):
        return ok(items.get(work_item_id))

    @app.route("/api/work-items", methods=["POST"], endpoint="create_work_item")
    @login_required
    def create_work_item():
        data = json_body()
        work_item_id = items.create(
            current_actor(),
            title=data.get("title", ""),
            status=data.get("status", ""),
            description=data.get("description", ""),
            priority=data.get("priority"),
            project_id=data.get("project_id"),
            assigned_to=data.get("assigned_to"),
            estimate_hours=data.get("estimate_hours"),
        )
        return ok({"work_item_id": work_item_id}, 201)

    @app.route("/api/work-items/<int:work_item_id>", methods=["PATCH"], endpoint="update_work_item")
    @login_required
    def update_work_item(work_item_id: int):
        data = json_body()
        items.update(current_actor(), work_item_id, **{k: data[k] for k in _UPDATE_FIELDS if k in data})
        return ok()

    @app.route("/api/work-items/<int:work_item_id>/move", methods=["POST"], endpoint="move_work_item")
    @login_required
    def move_work_item(work_item_id: int):
        items.move(current_actor(), work_item_id, json_body().get("status", ""))
        return ok()

    @app.route("/api/work-items/<int:work_item_id>/assign", methods=["POST"], endpoint="assign_work_item")
    @login_required
    def assign_work_item(work_item_id: int):
        items.assign(current_actor(), work_item_id, json_body().get("user_id"))
        return ok()

    @app.route("/api/work-items/<int:work_item_id>/active", methods=["PUT"], endpoint="set_work_item_active")
    @admin_required
    def set_work_item_active(work_item_id: int):
        items.set_active(current_actor(), work_item_id, bool(json_body().get("active")))
        return ok()
