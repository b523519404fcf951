from __future__ import annotations

from flask import Flask, jsonify, redirect, render_template, url_for

from ..attendance.controller import STUDENT_OPTIONS
from ..common.datetime_utils import today_local
from ..common.web import current_actor, current_role, login_required
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _summary_for(role, actor):
        today = today_local()
        if role == Role.SUPER_ADMIN:
            return container.dashboard_service.super_admin_summary(actor, today=today)
        if role == Role.ADMIN:
            return container.dashboard_service.admin_summary(actor, today=today)
        if role == Role.STUDENT:
            return container.dashboard_service.student_summary(actor, today=today)
        return None

    @app.route("/", endpoint="index")
    def index():
        return redirect(url_for("dashboard"))

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        role = current_role()
        summary = _summary_for(role, current_actor())
        return render_template(
            "dashboard.html",
            role=role,
            summary=summary,
            options=STUDENT_OPTIONS,
            today=today_local(),
            active_page="dashboard",
        )

    @app.route("/api/dashboard/stats", endpoint="api_dashboard_stats")
    @login_required
    def api_dashboard_stats():
        role = current_role()
        try:
            summary = _summary_for(role, current_actor())
        except Exception as e:
            app.logger.exception("dashboard stats failed")
            return jsonify({"success": False, "message": str(e)}), 500
        if summary is None:
            return jsonify({"success": False, "message": "No role assigned"}), 403
        return jsonify({"success": True, "role": role.value, "data": summary.as_dict()})
