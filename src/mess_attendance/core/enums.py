from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Application roles stored in ``user_roles``."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    STUDENT = "student"

    @property
    def label(self) -> str:
        return {"super_admin": "Super Admin", "admin": "Admin", "student": "Student"}[self.value]


class AttendanceStatus(str, Enum):
    """Daily mess attendance status."""

    PRESENT = "present"
    ABSENT = "absent"
    LEAVE = "leave"

    @property
    def label(self) -> str:
        return self.value.capitalize()
