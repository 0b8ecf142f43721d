from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_actor, json_body, login_required, ok
from .service import CatalogService


def register_catalog(app: Flask, service: CatalogService, *, path: str, name: str) -> None:
    """CRUD routes under ``/api/<path>``; endpoint names are prefixed with ``name``."""

    @app.route(f"/api/{path}", methods=["GET"], endpoint=f"list_{name}s")
    @login_required
    def list_entries():
        if request.args.get("all") == "1" and current_actor().is_admin:
            return ok(service.list_all())
        return ok(service.list_active())

    @app.route(f"/api/{path}", methods=["POST"], endpoint=f"create_{name}")
    @admin_required
    def create_entry():
        entry_id = service.create(current_actor(), name=json_body().get("name", ""))
        return ok({"entry_id": entry_id}, 201)

    @app.route(f"/api/{path}/<int:entry_id>", methods=["PATCH"], endpoint=f"update_{name}")
    @admin_required
    def update_entry(entry_id: int):
        data = json_body()
        service.update(current_actor(), entry_id, name=data.get("name"), active=data.get("active"))
        return ok()

    @app.route(f"/api/{path}/<int:entry_id>", methods=["DELETE"], endpoint=f"delete_{name}")
    @admin_required
    def delete_entry(entry_id: int):
        service.deactivate(current_actor(), entry_id)
        return ok()
