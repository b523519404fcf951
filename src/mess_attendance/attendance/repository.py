from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceWithProfile


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(self, user_id: str, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        """Newest date first."""

        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AttendanceWithProfile]:
        """Most recently marked first; rows without a profile are skipped."""

        raise NotImplementedError

    def upsert(self, *, user_id: str, work_date: date, status: AttendanceStatus, marked_at: datetime) -> None:
        """Insert, or overwrite the status of the existing (user, date) row."""

        raise NotImplementedError

    def create(self, *, user_id: str, work_date: date, status: AttendanceStatus, marked_at: datetime) -> str:
        raise NotImplementedError

    def update_status(self, *, user_id: str, work_date: date, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def delete_for_user_and_date(self, user_id: str, work_date: date) -> bool:
        raise NotImplementedError
