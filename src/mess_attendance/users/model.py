from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Login identity (the ``users`` table). The profile is derived from it."""

    user_id: str
    email: str
    password_hash: str
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Profile:
    user_id: str
    email: str
    full_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class UserRole:
    role_id: str
    user_id: str
    role: Role
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class UserWithRole:
    """Read-model for the Manage Users table."""

    user_id: str
    email: str
    full_name: str
    role: str
    created_at: Optional[datetime] = None

    @property
    def role_label(self) -> str:
        try:
            return Role(self.role).label
        except ValueError:
            return self.role.capitalize()
