from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.web import current_actor, login_required, roles_required
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    PartialUserCreation,
    ValidationError,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if current_actor() is not None:
            return redirect(url_for("dashboard"))

        email = ""
        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")

            try:
                s_user = container.auth_service.authenticate(email, password)

                session.clear()
                session.permanent = True

                session["user_id"] = s_user.user_id
                session["email"] = s_user.email
                session["name"] = s_user.full_name

                app.logger.info("login ok for %s", s_user.email)
                return redirect(url_for("dashboard"))
            except (ValidationError, AuthenticationError) as e:
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("login failed")
                flash("Something went wrong while signing in.", "danger")

        return render_template("login.html", email=email)

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("You have been signed out.", "info")
        return redirect(url_for("login"))

    @app.route("/manage-users", methods=["GET"], endpoint="manage_users")
    @roles_required(Role.SUPER_ADMIN)
    def manage_users():
        try:
            users = container.user_service.list_users(current_actor())
        except Exception:
            app.logger.exception("could not load users")
            flash("Failed to load users.", "danger")
            users = []
        return render_template(
            "manage/users.html",
            users=users,
            roles=[Role.STUDENT, Role.ADMIN],
            active_page="manage_users",
        )

    @app.route("/manage-users", methods=["POST"], endpoint="create_user")
    @roles_required(Role.SUPER_ADMIN)
    def create_user():
        role_s = request.form.get("role", Role.STUDENT.value)
        try:
            try:
                role = Role(role_s)
            except ValueError:
                raise ValidationError("Role must be admin or student")

            container.user_service.create_user(
                current_actor(),
                email=request.form.get("email", ""),
                password=request.form.get("password", ""),
                full_name=request.form.get("fullName", ""),
                role=role,
            )
            flash(f"{role.label} created successfully.", "success")
        except PartialUserCreation as e:
            flash(str(e), "warning")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("create user failed")
            flash("Failed to create user.", "danger")
        return redirect(url_for("manage_users"))

    @app.route("/manage-users/<user_id>/role", methods=["POST"], endpoint="update_user_role")
    @roles_required(Role.SUPER_ADMIN)
    def update_user_role(user_id: str):
        try:
            try:
                role = Role(request.form.get("role", ""))
            except ValueError:
                raise ValidationError("Role must be admin or student")
            container.user_service.update_role(current_actor(), user_id=user_id, role=role)
            flash("User role updated successfully.", "success")
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("update role failed for %s", user_id)
            flash("Failed to update user role.", "danger")
        return redirect(url_for("manage_users"))

    @app.route("/manage-users/<user_id>/delete", methods=["POST"], endpoint="delete_user")
    @roles_required(Role.SUPER_ADMIN)
    def delete_user(user_id: str):
        try:
            container.user_service.delete_user(current_actor(), user_id=user_id)
            flash("User deleted successfully.", "success")
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            app.logger.exception("delete user failed for %s", user_id)
            flash("Failed to delete user. Please try again.", "danger")
        return redirect(url_for("manage_users"))

    @app.route("/profile", methods=["GET", "POST"], endpoint="profile")
    @login_required
    def profile():
        actor = current_actor()
        if request.method == "POST":
            try:
                container.user_service.update_profile(
                    actor,
                    user_id=actor.user_id,
                    full_name=request.form.get("fullName", ""),
                )
                session["name"] = request.form.get("fullName", "").strip()
                flash("Profile updated.", "success")
            except (ValidationError, AuthorizationError, NotFoundError) as e:
                flash(str(e), "danger")
            except Exception:
                app.logger.exception("profile update failed")
                flash("Failed to update profile.", "danger")
            return redirect(url_for("profile"))

        me = container.user_service.get_profile(actor, actor.user_id)
        return render_template("profile.html", profile=me, active_page="profile")
