from __future__ import annotations

from flask import Flask, request, send_file

from ..common.web import admin_required, current_actor, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError
from ..functions.gateway import send_hours_report


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/reports", methods=["POST"], endpoint="submit_report")
    @login_required
    def submit_report():
        report_id = reports.submit(current_actor(), month=json_body().get("month", ""))
        return ok({"report_id": report_id}, 201)

    @app.route("/api/reports/mine", methods=["GET"], endpoint="my_reports")
    @login_required
    def my_reports():
        return ok(reports.list_for_user(current_actor()))

    @app.route("/api/reports", methods=["GET"], endpoint="list_reports")
    @admin_required
    def list_reports():
        return ok(
            reports.list_all(
                current_actor(),
                month=request.args.get("month") or None,
                status=request.args.get("status") or None,
            )
        )

    @app.route("/api/reports/<int:report_id>/review", methods=["POST"], endpoint="review_report")
    @admin_required
    def review_report(report_id: int):
        data = json_body()
        reports.review(current_actor(), report_id, status=data.get("status", ""), note=data.get("note", ""))
        return ok()

    @app.route("/api/reports/export", methods=["GET"], endpoint="export_reports")
    @admin_required
    def export_reports():
        month = request.args.get("month") or ""
        out = reports.export_month(current_actor(), month=month)
        return send_file(
            out,
            as_attachment=True,
            download_name=f"trackly_reports_{month}.xlsx",
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    @app.route("/api/reports/mail", methods=["POST"], endpoint="mail_report")
    @login_required
    def mail_report():
        month = json_body().get("month") or ""
        if not month:
            raise ValidationError("Month is required")
        send_hours_report(container.gateway, user_id=current_actor().user_id, month=month)
        return ok()
