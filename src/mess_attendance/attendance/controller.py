from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import parse_optional_date, today_local
from ..common.web import current_actor, roles_required
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AttendanceLocked, AuthorizationError, NotFoundError, ValidationError
from ..container import Container

NOT_TAKEN = "not_taken"

STUDENT_OPTIONS = [
    (AttendanceStatus.PRESENT, "I ate at the mess today"),
    (AttendanceStatus.ABSENT, "I didn't eat at the mess"),
    (AttendanceStatus.LEAVE, "I went home / away"),
]


def _safe_next(value: str) -> str | None:
    # Only same-site paths; "//host" would leave the site.
    if value and value.startswith("/") and not value.startswith("//"):
        return value
    return None


def _parse_status(value: str) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError("Unknown attendance status")


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance", methods=["GET"], endpoint="student_attendance")
    @roles_required(Role.STUDENT)
    def student_attendance():
        data = container.dashboard_service.student_summary(current_actor(), today=today_local())
        return render_template(
            "attendance.html",
            summary=data,
            options=STUDENT_OPTIONS,
            active_page="student_attendance",
        )

    @app.route("/attendance/mark", methods=["POST"], endpoint="mark_attendance")
    @roles_required(Role.STUDENT)
    def mark_attendance():
        try:
            status = _parse_status(request.form.get("status", ""))
            container.attendance_service.mark_own(current_actor(), status, today=today_local())
            flash(f"Marked as {status.value} for today.", "success")
        except AttendanceLocked as e:
            flash(str(e), "info")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("mark attendance failed")
            flash("Failed to mark attendance. Please try again.", "danger")
        return redirect(_safe_next(request.form.get("next", "")) or url_for("student_attendance"))

    @app.route("/attendance/quick-present", methods=["POST"], endpoint="quick_present")
    @roles_required(Role.STUDENT)
    def quick_present():
        try:
            container.attendance_service.quick_mark_present(current_actor(), today=today_local())
            flash("Marked as present for today.", "success")
        except AttendanceLocked as e:
            flash(str(e), "info")
        except AuthorizationError as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("quick present failed")
            flash("Failed to mark attendance. Please try again.", "danger")
        return redirect(_safe_next(request.form.get("next", "")) or url_for("student_attendance"))

    @app.route("/manage-attendance", methods=["GET"], endpoint="manage_attendance")
    @roles_required(Role.SUPER_ADMIN)
    def manage_attendance():
        work_date = parse_optional_date(request.args.get("date"), default=today_local())
        try:
            roster = container.attendance_service.roster_for_date(current_actor(), work_date=work_date)
            if not roster:
                flash("No students found in the system", "info")
        except Exception:
            app.logger.exception("could not load roster for %s", work_date)
            flash("An unexpected error occurred", "danger")
            roster = []
        return render_template(
            "manage/attendance.html",
            roster=roster,
            work_date=work_date,
            statuses=list(AttendanceStatus),
            not_taken=NOT_TAKEN,
            active_page="manage_attendance",
        )

    @app.route("/manage-attendance", methods=["POST"], endpoint="override_attendance")
    @roles_required(Role.SUPER_ADMIN)
    def override_attendance():
        work_date = parse_optional_date(request.form.get("date"), default=today_local())
        status_s = request.form.get("status", "")
        try:
            status = None if status_s == NOT_TAKEN else _parse_status(status_s)
            container.attendance_service.set_status(
                current_actor(),
                user_id=request.form.get("user_id", ""),
                work_date=work_date,
                status=status,
            )
            flash(f"Attendance marked as {status_s}", "success")
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("override attendance failed")
            flash("Failed to mark attendance", "danger")
        return redirect(url_for("manage_attendance", date=work_date.strftime("%Y-%m-%d")))
