from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One row per (user, date)."""

    record_id: str
    user_id: str
    work_date: date
    status: AttendanceStatus
    marked_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceWithProfile:
    """Attendance joined with the owner's profile, for dashboards and reports."""

    record_id: str
    user_id: str
    full_name: str
    email: str
    work_date: date
    status: AttendanceStatus
    marked_at: Optional[datetime] = None


@dataclass(frozen=True)
class RosterRow:
    """A student and their status for one date (``None`` = not checked)."""

    user_id: str
    full_name: str
    email: str
    status: Optional[AttendanceStatus]


@dataclass(frozen=True)
class StatusCounts:
    present: int = 0
    absent: int = 0
    leave: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.leave

    @classmethod
    def count(cls, statuses: Iterable[AttendanceStatus]) -> "StatusCounts":
        statuses = list(statuses)
        return cls(
            present=sum(1 for s in statuses if s == AttendanceStatus.PRESENT),
            absent=sum(1 for s in statuses if s == AttendanceStatus.ABSENT),
            leave=sum(1 for s in statuses if s == AttendanceStatus.LEAVE),
        )

    def as_dict(self) -> dict:
        return {"present": self.present, "absent": self.absent, "leave": self.leave}
