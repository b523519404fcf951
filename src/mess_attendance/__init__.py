"""Hostel mess attendance.

Feature modules (users, attendance, reports, dashboard) each carry a thin
Flask controller over service and repository layers.
"""
from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, render_template, session

from .common.web import nav_items, render_forbidden
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .users.service import primary_role

from .attendance.controller import register as register_attendance
from .dashboard.controller import register as register_dashboard
from .reports.controller import register as register_reports
from .users.controller import register as register_users


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_DAYS"] = int(getattr(settings, "SESSION_DAYS", 2))
    app.permanent_session_lifetime = timedelta(days=app.config["SESSION_DAYS"])

    if app.config["DEBUG"]:
        app.logger.setLevel(logging.DEBUG)
        app.logger.debug(
            "[mess-attendance] settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe()
        )

    if container is None:
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            app.logger.info("[mess-attendance] schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_demo_users(db_config)
            app.logger.info("[mess-attendance] demo accounts ready")
        container = build_container(db_config=db_config)

    app.extensions["mess_attendance"] = container

    @app.before_request
    def load_actor():
        g.actor = None
        g.role = None
        user_id = session.get("user_id")
        if not user_id:
            return
        actor = container.auth_service.actor_for(user_id)
        if actor is None:
            # Account was deleted while the session was alive.
            session.clear()
            return
        g.actor = actor
        g.role = primary_role(list(actor.roles))

    @app.context_processor
    def inject_layout():
        role = g.get("role")
        return {
            "current_user": {
                "name": session.get("name"),
                "email": session.get("email"),
                "role": role,
                "role_label": role.label if role else "User",
            },
            "nav_items": nav_items(role) if g.get("actor") else [],
        }

    @app.errorhandler(403)
    def forbidden(_e):
        return render_forbidden()

    @app.errorhandler(404)
    def not_found(_e):
        return render_template("404.html"), 404

    register_users(app, container)
    register_dashboard(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
