from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from mess_attendance.attendance.model import AttendanceRecord, AttendanceWithProfile
from mess_attendance.container import build_services
from mess_attendance.core.enums import AttendanceStatus, Role
from mess_attendance.core.policies import Actor
from mess_attendance.users.model import Account, Profile, UserRole


class InMemoryDB:
    """Tables plus the behaviour the MySQL schema gives for free.

    Account insert creates the profile, account delete cascades, and
    (user_id, date) / (user_id, role) are unique.
    """

    def __init__(self):
        self.accounts: dict[str, Account] = {}
        self.profiles: dict[str, Profile] = {}
        self.roles: dict[str, UserRole] = {}
        self.attendance: dict[tuple[str, date], AttendanceRecord] = {}
        self.fail_role_insert = False
        self._tick = 0

    def now(self) -> datetime:
        self._tick += 1
        return datetime(2026, 1, 1, 8, 0, 0).replace(second=self._tick % 60, minute=self._tick // 60)


class InMemoryAccounts:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def get_by_email(self, email: str) -> Optional[Account]:
        return next((a for a in self._db.accounts.values() if a.email == email), None)

    def create_account(self, *, email: str, password_hash: str, full_name: str) -> str:
        if self.get_by_email(email):
            raise RuntimeError("duplicate email")
        user_id = str(uuid.uuid4())
        created = self._db.now()
        self._db.accounts[user_id] = Account(user_id, email, password_hash, full_name, created)
        self._db.profiles[user_id] = Profile(user_id, email, full_name or email, created, created)
        return user_id

    def delete_account(self, user_id: str) -> bool:
        if self._db.accounts.pop(user_id, None) is None:
            return False
        self._db.profiles.pop(user_id, None)
        for rid in [k for k, r in self._db.roles.items() if r.user_id == user_id]:
            del self._db.roles[rid]
        for key in [k for k in self._db.attendance if k[0] == user_id]:
            del self._db.attendance[key]
        return True


class InMemoryProfiles:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def get_by_id(self, user_id: str) -> Optional[Profile]:
        return self._db.profiles.get(user_id)

    def list_all(self):
        return sorted(self._db.profiles.values(), key=lambda p: p.created_at, reverse=True)

    def list_by_ids(self, user_ids):
        wanted = set(user_ids)
        return sorted((p for p in self._db.profiles.values() if p.user_id in wanted), key=lambda p: p.full_name)

    def update_full_name(self, user_id: str, full_name: str) -> bool:
        p = self._db.profiles.get(user_id)
        if not p:
            return False
        self._db.profiles[user_id] = replace(p, full_name=full_name, updated_at=self._db.now())
        return True


class InMemoryRoles:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def list_all(self):
        return list(self._db.roles.values())

    def roles_for_user(self, user_id: str):
        return [r.role for r in self._db.roles.values() if r.user_id == user_id]

    def user_ids_with_role(self, role: Role):
        return [r.user_id for r in self._db.roles.values() if r.role == role]

    def insert_role(self, *, user_id: str, role: Role) -> str:
        if self._db.fail_role_insert:
            raise RuntimeError("permission denied for table user_roles")
        if role in self.roles_for_user(user_id):
            raise RuntimeError("duplicate key uq_user_roles_user_role")
        role_id = str(uuid.uuid4())
        self._db.roles[role_id] = UserRole(role_id, user_id, role, self._db.now())
        return role_id

    def update_role(self, *, user_id: str, role: Role) -> bool:
        found = False
        for rid, r in list(self._db.roles.items()):
            if r.user_id == user_id:
                self._db.roles[rid] = replace(r, role=role)
                found = True
        return found

    def delete_for_user(self, user_id: str) -> int:
        ids = [k for k, r in self._db.roles.items() if r.user_id == user_id]
        for k in ids:
            del self._db.roles[k]
        return len(ids)


class InMemoryAttendance:
    def __init__(self, db: InMemoryDB):
        self._db = db

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        return self._db.attendance.get((user_id, work_date))

    def list_for_user(self, user_id: str, limit: Optional[int] = None):
        items = sorted(
            (r for r in self._db.attendance.values() if r.user_id == user_id),
            key=lambda r: r.work_date,
            reverse=True,
        )
        return items if limit is None else items[:limit]

    def list_for_date(self, work_date: date):
        return [r for r in self._db.attendance.values() if r.work_date == work_date]

    def list_recent(self, limit: int):
        out = []
        for r in sorted(self._db.attendance.values(), key=lambda r: r.marked_at, reverse=True):
            p = self._db.profiles.get(r.user_id)
            if not p:
                continue
            out.append(AttendanceWithProfile(r.record_id, r.user_id, p.full_name, p.email, r.work_date, r.status, r.marked_at))
        return out[:limit]

    def upsert(self, *, user_id: str, work_date: date, status: AttendanceStatus, marked_at: datetime) -> None:
        existing = self._db.attendance.get((user_id, work_date))
        if existing:
            self._db.attendance[(user_id, work_date)] = replace(existing, status=status, marked_at=marked_at)
        else:
            self.create(user_id=user_id, work_date=work_date, status=status, marked_at=marked_at)

    def create(self, *, user_id: str, work_date: date, status: AttendanceStatus, marked_at: datetime) -> str:
        if (user_id, work_date) in self._db.attendance:
            raise RuntimeError("duplicate key uq_attendance_user_date")
        record_id = str(uuid.uuid4())
        self._db.attendance[(user_id, work_date)] = AttendanceRecord(
            record_id, user_id, work_date, status, marked_at, marked_at
        )
        return record_id

    def update_status(self, *, user_id: str, work_date: date, status: AttendanceStatus) -> bool:
        existing = self._db.attendance.get((user_id, work_date))
        if not existing:
            return False
        self._db.attendance[(user_id, work_date)] = replace(existing, status=status, updated_at=self._db.now())
        return True

    def delete_for_user_and_date(self, user_id: str, work_date: date) -> bool:
        return self._db.attendance.pop((user_id, work_date), None) is not None


def add_user(db: InMemoryDB, email: str, role: Optional[Role], *, full_name: str = "", password: str = "secret123") -> str:
    user_id = InMemoryAccounts(db).create_account(
        email=email,
        password_hash=generate_password_hash(password),
        full_name=full_name or email.split("@")[0].title(),
    )
    if role is not None:
        InMemoryRoles(db).insert_role(user_id=user_id, role=role)
    return user_id


def actor(db: InMemoryDB, user_id: str) -> Actor:
    return Actor.of(user_id, InMemoryRoles(db).roles_for_user(user_id))


@pytest.fixture
def fixed_today() -> date:
    return date(2026, 1, 28)


@pytest.fixture
def db() -> InMemoryDB:
    return InMemoryDB()


@pytest.fixture
def container(db):
    return build_services(
        accounts=InMemoryAccounts(db),
        profiles=InMemoryProfiles(db),
        roles=InMemoryRoles(db),
        attendance=InMemoryAttendance(db),
    )


@pytest.fixture
def super_admin(db) -> str:
    return add_user(db, "warden@hostel.edu", Role.SUPER_ADMIN, full_name="Warden")


@pytest.fixture
def admin(db) -> str:
    return add_user(db, "mess.admin@hostel.edu", Role.ADMIN, full_name="Mess Admin")


@pytest.fixture
def student(db) -> str:
    return add_user(db, "asha@hostel.edu", Role.STUDENT, full_name="Asha")
