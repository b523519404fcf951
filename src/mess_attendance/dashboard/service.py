from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceRecord, AttendanceWithProfile, StatusCounts
from ..attendance.repository import AttendanceRepository
from ..attendance.service import AttendanceService
from ..core import policies
from ..core.constants import RECENT_ADMIN_RECORDS
from ..core.enums import AttendanceStatus, Role
from ..core.policies import Actor
from ..users.repository import RoleRepository


@dataclass(frozen=True)
class StudentSummary:
    today_status: Optional[AttendanceStatus]
    recent: list[AttendanceRecord] = field(default_factory=list)
    stats: StatusCounts = field(default_factory=StatusCounts)

    @property
    def locked(self) -> bool:
        return self.today_status is not None

    def as_dict(self) -> dict:
        return {
            "today_status": self.today_status.value if self.today_status else None,
            "locked": self.locked,
            "stats": self.stats.as_dict(),
            "recent": [{"date": r.work_date.isoformat(), "status": r.status.value} for r in self.recent],
        }


@dataclass(frozen=True)
class AdminSummary:
    today: StatusCounts
    total_students: int
    recent: list[AttendanceWithProfile] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            **self.today.as_dict(),
            "total": self.total_students,
            "recent": [
                {"full_name": r.full_name, "email": r.email, "date": r.work_date.isoformat(), "status": r.status.value}
                for r in self.recent
            ],
        }


@dataclass(frozen=True)
class SuperAdminSummary:
    total_students: int
    total_admins: int
    present_today: int
    absent_today: int

    @property
    def present_percent(self) -> int:
        if self.total_students <= 0:
            return 0
        # Halves round up.
        return math.floor(self.present_today / self.total_students * 100 + 0.5)

    def as_dict(self) -> dict:
        return {**asdict(self), "present_percent": self.present_percent}


class DashboardService:
    def __init__(self, attendance_service: AttendanceService, attendance: AttendanceRepository, roles: RoleRepository):
        self._attendance_service = attendance_service
        self._attendance = attendance
        self._roles = roles

    def student_summary(self, actor: Actor, *, today: date) -> StudentSummary:
        return StudentSummary(
            today_status=self._attendance_service.get_today_status(actor, today=today),
            recent=list(self._attendance_service.recent_records(actor)),
            stats=self._attendance_service.own_stats(actor),
        )

    def admin_summary(self, actor: Actor, *, today: date) -> AdminSummary:
        policies.require(policies.can_view_all_attendance(actor))
        return AdminSummary(
            today=StatusCounts.count(r.status for r in self._attendance.list_for_date(today)),
            total_students=len(self._roles.user_ids_with_role(Role.STUDENT)),
            recent=list(self._attendance.list_recent(RECENT_ADMIN_RECORDS)),
        )

    def super_admin_summary(self, actor: Actor, *, today: date) -> SuperAdminSummary:
        policies.require(policies.is_super_admin(actor))
        roles = [r.role for r in self._roles.list_all()]
        counts = StatusCounts.count(r.status for r in self._attendance.list_for_date(today))
        return SuperAdminSummary(
            total_students=roles.count(Role.STUDENT),
            total_admins=roles.count(Role.ADMIN),
            present_today=counts.present,
            absent_today=counts.absent,
        )
