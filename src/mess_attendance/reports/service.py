from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from datetime import date

from ..attendance.model import StatusCounts
from ..attendance.repository import AttendanceRepository
from ..core import policies
from ..core.constants import REPORT_CSV_HEADERS, REPORT_STATUS_ORDER
from ..core.enums import Role
from ..core.policies import Actor
from ..users.model import Profile
from ..users.repository import ProfileRepository, RoleRepository


@dataclass(frozen=True)
class ReportRow:
    record_id: str
    user_id: str
    full_name: str
    email: str
    status: str


@dataclass(frozen=True)
class DailyReport:
    work_date: date
    rows: list[ReportRow] = field(default_factory=list)
    not_marked: list[Profile] = field(default_factory=list)
    stats: StatusCounts = field(default_factory=StatusCounts)


def report_filename(work_date: date) -> str:
    return f"attendance-{work_date.strftime('%Y-%m-%d')}.csv"


class DailyReportService:
    def __init__(self, attendance: AttendanceRepository, profiles: ProfileRepository, roles: RoleRepository):
        self._attendance = attendance
        self._profiles = profiles
        self._roles = roles

    def build_daily_report(self, actor: Actor, *, work_date: date) -> DailyReport:
        policies.require(policies.can_view_all_attendance(actor), "Only admins can view reports.")

        student_ids = list(self._roles.user_ids_with_role(Role.STUDENT))
        students = list(self._profiles.list_by_ids(student_ids))
        records = list(self._attendance.list_for_date(work_date))

        # Records of non-students still need a name, so look them up as well.
        profile_by_id = {p.user_id: p for p in students}
        missing = [r.user_id for r in records if r.user_id not in profile_by_id]
        if missing:
            profile_by_id.update({p.user_id: p for p in self._profiles.list_by_ids(missing)})

        rows = []
        for r in records:
            p = profile_by_id.get(r.user_id)
            rows.append(
                ReportRow(
                    record_id=r.record_id,
                    user_id=r.user_id,
                    full_name=p.full_name if p else "Unknown",
                    email=p.email if p else "",
                    status=r.status.value,
                )
            )
        rows.sort(key=lambda row: REPORT_STATUS_ORDER.get(row.status, 99))

        marked = {r.user_id for r in records}
        not_marked = [p for p in students if p.user_id not in marked]

        return DailyReport(
            work_date=work_date,
            rows=rows,
            not_marked=not_marked,
            stats=StatusCounts.count(r.status for r in records),
        )

    def to_csv(self, report: DailyReport) -> str:
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(REPORT_CSV_HEADERS)
        for row in report.rows:
            writer.writerow([row.full_name, row.email, row.status])
        # No terminator after the last row.
        return out.getvalue().rstrip("\n")
