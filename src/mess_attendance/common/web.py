"""Request-scoped helpers shared by the controllers.

The guards only decide which pages a role gets to see; the services check
the access policies again on every read and write.
"""
from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import flash, g, redirect, render_template, url_for

from ..core.enums import Role
from ..core.policies import Actor

NAV_ITEMS = {
    Role.SUPER_ADMIN: [
        ("manage_users", "Manage Users"),
        ("manage_attendance", "Manage Attendance"),
        ("reports", "Reports"),
    ],
    Role.ADMIN: [("reports", "Daily Reports")],
    Role.STUDENT: [("student_attendance", "My Attendance")],
}


def current_actor() -> Optional[Actor]:
    return g.get("actor")


def current_role() -> Optional[Role]:
    return g.get("role")


def nav_items(role: Optional[Role]) -> list[tuple[str, str]]:
    return [("dashboard", "Dashboard")] + NAV_ITEMS.get(role, [])


def render_forbidden():
    return render_template("403.html"), 403


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_actor() is None:
            flash("Please sign in to continue.", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    """Allow the view only when the caller's primary role is one of ``roles``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if current_actor() is None:
                return redirect(url_for("login"))
            if current_role() not in roles:
                return render_forbidden()
            return view(*args, **kwargs)

        return wrapper

    return decorator
