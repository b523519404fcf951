from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core import policies
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    NotFoundError,
    PartialUserCreation,
    ValidationError,
)
from ..core.policies import Actor
from .model import Profile, UserWithRole
from .repository import AccountRepository, ProfileRepository, RoleRepository

log = logging.getLogger(__name__)

# When an account carries several role rows the strongest one drives the UI.
ROLE_PRECEDENCE = (Role.SUPER_ADMIN, Role.ADMIN, Role.STUDENT)

ASSIGNABLE_ROLES = (Role.ADMIN, Role.STUDENT)


def primary_role(roles: Sequence[Role]) -> Optional[Role]:
    for role in ROLE_PRECEDENCE:
        if role in roles:
            return role
    return None


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    email: str
    full_name: str
    role: Optional[Role]


class AuthService:
    """Use case: authenticate user (login) and resolve who is calling."""

    def __init__(self, accounts: AccountRepository, profiles: ProfileRepository, roles: RoleRepository):
        self._accounts = accounts
        self._profiles = profiles
        self._roles = roles

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_email(email)
        require_min_length(password or "", "Password", MIN_PASSWORD_LENGTH)

        account = self._accounts.get_by_email(email)
        if not account:
            raise AuthenticationError("Invalid email or password. Please try again.")

        try:
            ok = check_password_hash(account.password_hash, password)
        except ValueError:
            # Placeholder or corrupted hash values.
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password. Please try again.")

        profile = self._profiles.get_by_id(account.user_id)
        full_name = profile.full_name if profile else (account.full_name or account.email)

        return SessionUser(
            user_id=account.user_id,
            email=account.email,
            full_name=full_name,
            role=self.get_role(account.user_id),
        )

    def get_role(self, user_id: str) -> Optional[Role]:
        return primary_role(self._roles.roles_for_user(user_id))

    def actor_for(self, user_id: str) -> Optional[Actor]:
        if not self._profiles.get_by_id(user_id):
            return None
        return Actor.of(user_id, self._roles.roles_for_user(user_id))


class UserService:
    """Use case: manage users (super admin) and own profile edits."""

    def __init__(self, accounts: AccountRepository, profiles: ProfileRepository, roles: RoleRepository):
        self._accounts = accounts
        self._profiles = profiles
        self._roles = roles

    def list_users(self, actor: Actor) -> list[UserWithRole]:
        policies.require(policies.can_view_profiles(actor) and policies.can_view_roles(actor))

        role_by_user: dict[str, Role] = {}
        for row in self._roles.list_all():
            current = role_by_user.get(row.user_id)
            if current is None or ROLE_PRECEDENCE.index(row.role) < ROLE_PRECEDENCE.index(current):
                role_by_user[row.user_id] = row.role

        out: list[UserWithRole] = []
        for p in self._profiles.list_all():
            role = role_by_user.get(p.user_id)
            if role == Role.SUPER_ADMIN:
                continue
            out.append(
                UserWithRole(
                    user_id=p.user_id,
                    email=p.email,
                    full_name=p.full_name,
                    role=role.value if role else "unknown",
                    created_at=p.created_at,
                )
            )
        return out

    def create_user(self, actor: Actor, *, email: str, password: str, full_name: str, role: Role) -> str:
        """Create the account, then its role row.

        The two writes are not atomic: when the role insert fails the account
        stays and ``PartialUserCreation`` is raised.
        """

        policies.require(
            policies.can_manage_roles(actor) and policies.can_insert_profile(actor),
            "Only the super admin can add users.",
        )

        email = require_email(email)
        full_name = require_non_empty(full_name, "Full name")
        require_min_length(password or "", "Password", MIN_PASSWORD_LENGTH)
        if role not in ASSIGNABLE_ROLES:
            raise ValidationError("Role must be admin or student")

        if self._accounts.get_by_email(email):
            raise ValidationError("A user with this email address has already been registered")

        user_id = self._accounts.create_account(
            email=email,
            password_hash=generate_password_hash(password),
            full_name=full_name,
        )

        try:
            self._roles.insert_role(user_id=user_id, role=role)
        except Exception as exc:
            log.warning("role assignment failed for new user %s: %s", user_id, exc)
            raise PartialUserCreation("User created but role assignment failed.", user_id=user_id) from exc

        log.info("user %s created with role %s", email, role.value)
        return user_id

    def update_role(self, actor: Actor, *, user_id: str, role: Role) -> None:
        policies.require(policies.can_manage_roles(actor), "Only the super admin can change roles.")
        if role not in ASSIGNABLE_ROLES:
            raise ValidationError("Role must be admin or student")
        if not self._profiles.get_by_id(user_id):
            raise NotFoundError("User not found")

        existing = self._roles.roles_for_user(user_id)
        if Role.SUPER_ADMIN in existing:
            raise ValidationError("The super admin role cannot be changed here")

        if len(existing) > 1:
            # UNIQUE(user_id, role) forbids collapsing several rows with one UPDATE.
            self._roles.delete_for_user(user_id)
            self._roles.insert_role(user_id=user_id, role=role)
        elif existing:
            self._roles.update_role(user_id=user_id, role=role)
        else:
            self._roles.insert_role(user_id=user_id, role=role)

    def delete_user(self, actor: Actor, *, user_id: str) -> None:
        policies.require(
            policies.can_manage_roles(actor) and policies.can_delete_profile(actor),
            "Only the super admin can delete users.",
        )
        if user_id == actor.user_id:
            raise ValidationError("You cannot delete your own account")
        if Role.SUPER_ADMIN in self._roles.roles_for_user(user_id):
            raise ValidationError("A super admin account cannot be deleted")
        if not self._profiles.get_by_id(user_id):
            raise NotFoundError("User not found")

        self._roles.delete_for_user(user_id)
        # Profile and attendance rows go with the account.
        if not self._accounts.delete_account(user_id):
            raise NotFoundError("User not found")
        log.info("user %s deleted", user_id)

    def get_profile(self, actor: Actor, user_id: str) -> Profile:
        policies.require(policies.can_view_profiles(actor))
        profile = self._profiles.get_by_id(user_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def update_profile(self, actor: Actor, *, user_id: str, full_name: str) -> None:
        policies.require(policies.can_update_profile(actor, user_id))
        full_name = require_non_empty(full_name, "Full name")
        if not self._profiles.update_full_name(user_id, full_name):
            raise NotFoundError("Profile not found")
