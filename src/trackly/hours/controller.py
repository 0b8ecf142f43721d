from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import month_of, now_local
from ..common.permissions import require_self_or_admin
from ..common.web import current_actor, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError
from ..functions.gateway import get_jira_issues

_ENTRY_FIELDS = ("work_date", "hours", "description", "project", "task_id", "task_type_id", "jira_issue")


def register(app: Flask, container: Container) -> None:
    def _target_user(actor):
        raw = request.args.get("user_id")
        if not raw:
            return actor.user_id
        try:
            return int(raw)
        except ValueError:
            raise ValidationError("user_id must be a number")

    @app.route("/api/hours", methods=["GET"], endpoint="month_hours")
    @login_required
    def month_hours():
        actor = current_actor()
        month = request.args.get("month") or month_of(now_local().date())
        user_id = _target_user(actor)
        require_self_or_admin(actor, user_id)
        return ok(container.hours_service.month_view(user_id=user_id, month=month))

    @app.route("/api/hours", methods=["POST"], endpoint="add_hours")
    @login_required
    def add_hours():
        data = json_body()
        record_id = container.hours_service.add(
            current_actor(),
            user_id=data.get("user_id"),
            **{k: data.get(k) for k in _ENTRY_FIELDS},
        )
        return ok({"record_id": record_id}, 201)

    @app.route("/api/hours/<int:record_id>", methods=["PATCH"], endpoint="edit_hours")
    @login_required
    def edit_hours(record_id: int):
        data = json_body()
        container.hours_service.edit(current_actor(), record_id, **{k: data[k] for k in _ENTRY_FIELDS if k in data})
        return ok()

    @app.route("/api/hours/<int:record_id>", methods=["DELETE"], endpoint="delete_hours")
    @login_required
    def delete_hours(record_id: int):
        container.hours_service.soft_delete(current_actor(), record_id)
        return ok()

    @app.route("/api/hours/<int:record_id>/restore", methods=["POST"], endpoint="restore_hours")
    @login_required
    def restore_hours(record_id: int):
        container.hours_service.restore(current_actor(), record_id)
        return ok()

    @app.route("/api/jira/issues", methods=["GET"], endpoint="jira_issues")
    @login_required
    def jira_issues():
        return ok(get_jira_issues(container.gateway))
