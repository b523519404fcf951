from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core import policies
from ..core.constants import RECENT_STUDENT_RECORDS
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AttendanceLocked, NotFoundError
from ..core.policies import Actor
from ..users.repository import ProfileRepository, RoleRepository
from .model import AttendanceRecord, RosterRow, StatusCounts
from .repository import AttendanceRepository

log = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        profiles: ProfileRepository,
        roles: RoleRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._profiles = profiles
        self._roles = roles
        self._clock = clock

    def _today(self, today: Optional[date]) -> date:
        return today or self._clock().date()

    # student side

    def get_today_status(self, actor: Actor, *, today: Optional[date] = None) -> Optional[AttendanceStatus]:
        policies.require(policies.can_view_attendance(actor, actor.user_id))
        record = self._attendance.get_for_user_and_date(actor.user_id, self._today(today))
        return record.status if record else None

    def mark_own(self, actor: Actor, status: AttendanceStatus, *, today: Optional[date] = None) -> None:
        """Record today's status for the calling student.

        A day that already has a record is locked for the student; only an
        admin override can change it afterwards.
        """

        policies.require(
            policies.is_student(actor) and policies.can_write_attendance(actor, actor.user_id),
            "Only students can mark their own attendance.",
        )
        today = self._today(today)

        if self._attendance.get_for_user_and_date(actor.user_id, today):
            raise AttendanceLocked("Attendance locked - cannot be changed")

        self._attendance.upsert(user_id=actor.user_id, work_date=today, status=status, marked_at=self._clock())
        log.info("user %s marked %s for %s", actor.user_id, status.value, today)

    def quick_mark_present(self, actor: Actor, *, today: Optional[date] = None) -> None:
        today = self._today(today)
        if self.get_today_status(actor, today=today) is not None:
            raise AttendanceLocked("You have already marked your attendance for today")
        self.mark_own(actor, AttendanceStatus.PRESENT, today=today)

    def recent_records(self, actor: Actor, *, limit: int = RECENT_STUDENT_RECORDS) -> Sequence[AttendanceRecord]:
        policies.require(policies.can_view_attendance(actor, actor.user_id))
        return self._attendance.list_for_user(actor.user_id, limit=limit)

    def own_stats(self, actor: Actor) -> StatusCounts:
        policies.require(policies.can_view_attendance(actor, actor.user_id))
        return StatusCounts.count(r.status for r in self._attendance.list_for_user(actor.user_id))

    # admin side

    def set_status(
        self,
        actor: Actor,
        *,
        user_id: str,
        work_date: date,
        status: Optional[AttendanceStatus],
    ) -> None:
        """Override a student's status for a date; ``None`` clears it (not taken)."""

        if status is None:
            policies.require(policies.can_delete_attendance(actor), "Only admins can clear attendance.")
        else:
            policies.require(
                policies.is_staff(actor) and policies.can_write_attendance(actor, user_id),
                "Only admins can override attendance.",
            )
        if not self._profiles.get_by_id(user_id):
            raise NotFoundError("Student not found")

        if status is None:
            self._attendance.delete_for_user_and_date(user_id, work_date)
            log.info("attendance cleared for %s on %s by %s", user_id, work_date, actor.user_id)
            return

        if self._attendance.get_for_user_and_date(user_id, work_date):
            self._attendance.update_status(user_id=user_id, work_date=work_date, status=status)
        else:
            self._attendance.create(user_id=user_id, work_date=work_date, status=status, marked_at=self._clock())
        log.info("attendance for %s on %s set to %s by %s", user_id, work_date, status.value, actor.user_id)

    def roster_for_date(self, actor: Actor, *, work_date: date) -> list[RosterRow]:
        policies.require(policies.can_view_all_attendance(actor) and policies.can_view_profiles(actor))

        student_ids = list(self._roles.user_ids_with_role(Role.STUDENT))
        if not student_ids:
            return []

        status_by_user = {r.user_id: r.status for r in self._attendance.list_for_date(work_date)}
        rows = [
            RosterRow(
                user_id=p.user_id,
                full_name=p.full_name,
                email=p.email,
                status=status_by_user.get(p.user_id),
            )
            for p in self._profiles.list_by_ids(student_ids)
        ]
        rows.sort(key=lambda r: r.full_name.lower())
        return rows
