from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import DailyReportService
from .users.mysql_account_repository import MySQLAccountRepository
from .users.mysql_profile_repository import MySQLProfileRepository
from .users.mysql_role_repository import MySQLRoleRepository
from .users.repository import AccountRepository, ProfileRepository, RoleRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    accounts_repo: AccountRepository
    profiles_repo: ProfileRepository
    roles_repo: RoleRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    report_service: DailyReportService
    dashboard_service: DashboardService


def build_services(
    *,
    accounts: AccountRepository,
    profiles: ProfileRepository,
    roles: RoleRepository,
    attendance: AttendanceRepository,
) -> Container:
    attendance_service = AttendanceService(attendance, profiles, roles)
    return Container(
        accounts_repo=accounts,
        profiles_repo=profiles,
        roles_repo=roles,
        attendance_repo=attendance,
        auth_service=AuthService(accounts, profiles, roles),
        user_service=UserService(accounts, profiles, roles),
        attendance_service=attendance_service,
        report_service=DailyReportService(attendance, profiles, roles),
        dashboard_service=DashboardService(attendance_service, attendance, roles),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        accounts=MySQLAccountRepository(conn),
        profiles=MySQLProfileRepository(conn),
        roles=MySQLRoleRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
    )
