from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import parse_optional_date, today_local
from ..common.web import current_actor, roles_required
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..container import Container
from .service import DailyReport, report_filename


def register(app: Flask, container: Container) -> None:
    @app.route("/reports", methods=["GET"], endpoint="reports")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN)
    def reports():
        work_date = parse_optional_date(request.args.get("date"), default=today_local())
        try:
            report = container.report_service.build_daily_report(current_actor(), work_date=work_date)
        except AuthorizationError as e:
            flash(str(e), "danger")
            return redirect(url_for("dashboard"))
        except Exception:
            app.logger.exception("report failed for %s", work_date)
            flash("Failed to load the report.", "danger")
            report = DailyReport(work_date=work_date)
        return render_template("reports.html", report=report, active_page="reports")

    @app.route("/reports.csv", methods=["GET"], endpoint="reports_csv")
    @roles_required(Role.SUPER_ADMIN, Role.ADMIN)
    def reports_csv():
        work_date = parse_optional_date(request.args.get("date"), default=today_local())
        try:
            report = container.report_service.build_daily_report(current_actor(), work_date=work_date)
        except Exception:
            app.logger.exception("csv export failed for %s", work_date)
            flash("Failed to export the report.", "danger")
            return redirect(url_for("reports", date=work_date.strftime("%Y-%m-%d")))

        return app.response_class(
            container.report_service.to_csv(report),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={report_filename(work_date)}"},
        )
