from __future__ import annotations

from mess_attendance.core import policies
from mess_attendance.core.enums import Role
from mess_attendance.core.policies import Actor

STUDENT = Actor.of("s1", [Role.STUDENT])
OTHER_STUDENT = Actor.of("s2", [Role.STUDENT])
ADMIN = Actor.of("a1", [Role.ADMIN])
SUPER = Actor.of("sa", [Role.SUPER_ADMIN])
NO_ROLE = Actor.of("n1", [])


def test_role_helpers():
    assert policies.is_super_admin(SUPER)
    assert not policies.is_super_admin(ADMIN)
    assert policies.is_admin(ADMIN)
    assert policies.is_student(STUDENT)
    assert not policies.has_role(None, Role.STUDENT)


def test_profiles_and_roles_visible_to_any_authenticated_user():
    for a in (STUDENT, ADMIN, SUPER, NO_ROLE):
        assert policies.can_view_profiles(a)
        assert policies.can_view_roles(a)
    assert not policies.can_view_profiles(None)


def test_only_super_admin_manages_roles_and_deletes_profiles():
    assert policies.can_manage_roles(SUPER)
    assert not policies.can_manage_roles(ADMIN)
    assert policies.can_delete_profile(SUPER)
    assert not policies.can_delete_profile(STUDENT)


def test_profile_update_by_owner_or_super_admin():
    assert policies.can_update_profile(STUDENT, "s1")
    assert not policies.can_update_profile(STUDENT, "s2")
    assert policies.can_update_profile(SUPER, "s2")


def test_students_only_see_their_own_attendance():
    assert policies.can_view_attendance(STUDENT, "s1")
    assert not policies.can_view_attendance(OTHER_STUDENT, "s1")
    assert policies.can_view_attendance(ADMIN, "s1")
    assert not policies.can_view_attendance(NO_ROLE, "n1")
    assert not policies.can_view_all_attendance(STUDENT)


def test_attendance_writes():
    assert policies.can_write_attendance(STUDENT, "s1")
    assert not policies.can_write_attendance(STUDENT, "s2")
    assert policies.can_write_attendance(ADMIN, "s2")
    assert policies.can_delete_attendance(SUPER)
    assert not policies.can_delete_attendance(STUDENT)


def test_only_super_admin_inserts_profiles():
    assert policies.can_insert_profile(SUPER)
    assert not policies.can_insert_profile(ADMIN)
    assert not policies.can_insert_profile(STUDENT)
    assert not policies.can_insert_profile(None)
