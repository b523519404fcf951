"""Row-level access predicates.

Each function answers one question of the form "may ``actor`` perform
``operation`` on this row?". Services evaluate them before touching a
repository, so a forged form post cannot reach data the role may not see.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

from .enums import Role
from .exceptions import AuthorizationError


@dataclass(frozen=True)
class Actor:
    """The authenticated caller and every role row it holds."""

    user_id: str
    roles: FrozenSet[Role] = frozenset()

    @classmethod
    def of(cls, user_id: str, roles: Iterable[Role]) -> "Actor":
        return cls(user_id=str(user_id), roles=frozenset(roles))


def has_role(actor: Optional[Actor], role: Role) -> bool:
    return actor is not None and role in actor.roles


def is_authenticated(actor: Optional[Actor]) -> bool:
    return actor is not None and bool(actor.user_id)


def is_super_admin(actor: Optional[Actor]) -> bool:
    return has_role(actor, Role.SUPER_ADMIN)


def is_admin(actor: Optional[Actor]) -> bool:
    return has_role(actor, Role.ADMIN)


def is_student(actor: Optional[Actor]) -> bool:
    return has_role(actor, Role.STUDENT)


def is_staff(actor: Optional[Actor]) -> bool:
    return is_admin(actor) or is_super_admin(actor)


# profiles

def can_view_profiles(actor: Optional[Actor]) -> bool:
    return is_authenticated(actor)


def can_insert_profile(actor: Optional[Actor]) -> bool:
    return is_super_admin(actor)


def can_update_profile(actor: Optional[Actor], profile_id: str) -> bool:
    return is_super_admin(actor) or (is_authenticated(actor) and actor.user_id == str(profile_id))


def can_delete_profile(actor: Optional[Actor]) -> bool:
    return is_super_admin(actor)


# user_roles

def can_view_roles(actor: Optional[Actor]) -> bool:
    return is_authenticated(actor)


def can_manage_roles(actor: Optional[Actor]) -> bool:
    return is_super_admin(actor)


# attendance

def can_view_attendance(actor: Optional[Actor], owner_id: str) -> bool:
    if is_staff(actor):
        return True
    return is_student(actor) and actor.user_id == str(owner_id)


def can_view_all_attendance(actor: Optional[Actor]) -> bool:
    return is_staff(actor)


def can_write_attendance(actor: Optional[Actor], owner_id: str) -> bool:
    if is_staff(actor):
        return True
    return is_authenticated(actor) and actor.user_id == str(owner_id)


def can_delete_attendance(actor: Optional[Actor]) -> bool:
    return is_staff(actor)


def require(allowed: bool, message: str = "You do not have permission to do that.") -> None:
    if not allowed:
        raise AuthorizationError(message)
