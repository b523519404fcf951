from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Account, Profile, UserRole


class AccountRepository(Protocol):
    """Accounts are the login identities; inserting one also creates its profile."""

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def create_account(self, *, email: str, password_hash: str, full_name: str) -> str:
        raise NotImplementedError

    def delete_account(self, user_id: str) -> bool:
        raise NotImplementedError


class ProfileRepository(Protocol):
    def get_by_id(self, user_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Profile]:
        raise NotImplementedError

    def list_by_ids(self, user_ids: Sequence[str]) -> Sequence[Profile]:
        raise NotImplementedError

    def update_full_name(self, user_id: str, full_name: str) -> bool:
        raise NotImplementedError


class RoleRepository(Protocol):
    def list_all(self) -> Sequence[UserRole]:
        raise NotImplementedError

    def roles_for_user(self, user_id: str) -> Sequence[Role]:
        raise NotImplementedError

    def user_ids_with_role(self, role: Role) -> Sequence[str]:
        raise NotImplementedError

    def insert_role(self, *, user_id: str, role: Role) -> str:
        raise NotImplementedError

    def update_role(self, *, user_id: str, role: Role) -> bool:
        raise NotImplementedError

    def delete_for_user(self, user_id: str) -> int:
        raise NotImplementedError
