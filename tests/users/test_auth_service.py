from __future__ import annotations

import pytest

from conftest import add_user
from mess_attendance.core.enums import Role
from mess_attendance.core.exceptions import AuthenticationError, ValidationError


def test_authenticate_returns_profile_name_and_role(db, container):
    user_id = add_user(db, "asha@hostel.edu", Role.STUDENT, full_name="Asha", password="pass1234")

    s_user = container.auth_service.authenticate("  Asha@Hostel.edu ", "pass1234")

    assert s_user.user_id == user_id
    assert s_user.full_name == "Asha"
    assert s_user.role == Role.STUDENT


def test_authenticate_wrong_password_raises(db, container):
    add_user(db, "asha@hostel.edu", Role.STUDENT, password="pass1234")

    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        container.auth_service.authenticate("asha@hostel.edu", "wrong-pass")


def test_authenticate_unknown_email_raises(container):
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("nobody@hostel.edu", "pass1234")


@pytest.mark.parametrize("email,password", [("not-an-email", "pass1234"), ("a@b.co", "123")])
def test_authenticate_validates_input(container, email, password):
    with pytest.raises(ValidationError):
        container.auth_service.authenticate(email, password)


def test_get_role_none_when_unassigned(db, container):
    user_id = add_user(db, "norole@hostel.edu", None)
    assert container.auth_service.get_role(user_id) is None


def test_get_role_prefers_strongest_role(db, container):
    user_id = add_user(db, "both@hostel.edu", Role.STUDENT)
    container.roles_repo.insert_role(user_id=user_id, role=Role.ADMIN)
    assert container.auth_service.get_role(user_id) == Role.ADMIN


def test_actor_for_deleted_account_is_none(db, container):
    user_id = add_user(db, "gone@hostel.edu", Role.STUDENT)
    container.accounts_repo.delete_account(user_id)
    assert container.auth_service.actor_for(user_id) is None
