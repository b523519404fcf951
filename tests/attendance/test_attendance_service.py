from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from conftest import InMemoryAttendance, InMemoryProfiles, InMemoryRoles, actor, add_user
from mess_attendance.attendance.service import AttendanceService
from mess_attendance.core.enums import AttendanceStatus, Role
from mess_attendance.core.exceptions import AttendanceLocked, AuthorizationError, NotFoundError


@pytest.fixture
def clock_now(fixed_today):
    return datetime.combine(fixed_today, datetime.min.time()).replace(hour=13, minute=5)


@pytest.fixture
def service(db, clock_now):
    return AttendanceService(InMemoryAttendance(db), InMemoryProfiles(db), InMemoryRoles(db), clock=lambda: clock_now)


def test_mark_own_creates_record_for_today(db, service, student, fixed_today, clock_now):
    service.mark_own(actor(db, student), AttendanceStatus.PRESENT)

    rec = db.attendance[(student, fixed_today)]
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.marked_at == clock_now
    assert service.get_today_status(actor(db, student)) == AttendanceStatus.PRESENT


def test_second_mark_same_day_is_locked(db, service, student, fixed_today):
    service.mark_own(actor(db, student), AttendanceStatus.LEAVE)

    with pytest.raises(AttendanceLocked):
        service.mark_own(actor(db, student), AttendanceStatus.PRESENT)

    assert db.attendance[(student, fixed_today)].status == AttendanceStatus.LEAVE
    assert len(db.attendance) == 1


def test_admin_cannot_mark_own(db, service, admin):
    with pytest.raises(AuthorizationError):
        service.mark_own(actor(db, admin), AttendanceStatus.PRESENT)


def test_quick_mark_present(db, service, student, fixed_today):
    service.quick_mark_present(actor(db, student))
    assert db.attendance[(student, fixed_today)].status == AttendanceStatus.PRESENT

    with pytest.raises(AttendanceLocked, match="already marked"):
        service.quick_mark_present(actor(db, student))


def test_recent_records_and_stats(db, service, student, fixed_today):
    repo = InMemoryAttendance(db)
    statuses = [AttendanceStatus.PRESENT] * 6 + [AttendanceStatus.ABSENT, AttendanceStatus.LEAVE]
    for i, st in enumerate(statuses):
        day = fixed_today - timedelta(days=i + 1)
        repo.create(user_id=student, work_date=day, status=st, marked_at=datetime.combine(day, datetime.min.time()))

    recent = service.recent_records(actor(db, student))
    stats = service.own_stats(actor(db, student))

    assert len(recent) == 7
    assert recent[0].work_date == fixed_today - timedelta(days=1)
    assert (stats.present, stats.absent, stats.leave) == (6, 1, 1)


def test_override_updates_instead_of_duplicating(db, service, super_admin, student, fixed_today):
    sa = actor(db, super_admin)
    service.mark_own(actor(db, student), AttendanceStatus.ABSENT)

    service.set_status(sa, user_id=student, work_date=fixed_today, status=AttendanceStatus.PRESENT)

    assert len(db.attendance) == 1
    assert db.attendance[(student, fixed_today)].status == AttendanceStatus.PRESENT


def test_override_inserts_for_past_date(db, service, admin, student):
    day = date(2026, 1, 2)
    service.set_status(actor(db, admin), user_id=student, work_date=day, status=AttendanceStatus.LEAVE)
    assert db.attendance[(student, day)].status == AttendanceStatus.LEAVE


def test_override_not_taken_clears(db, service, super_admin, student, fixed_today):
    service.mark_own(actor(db, student), AttendanceStatus.PRESENT)
    service.set_status(actor(db, super_admin), user_id=student, work_date=fixed_today, status=None)

    assert (student, fixed_today) not in db.attendance
    # Cleared days can be marked again by the student.
    service.mark_own(actor(db, student), AttendanceStatus.ABSENT)


def test_override_rules(db, service, student, super_admin, fixed_today):
    other = add_user(db, "bala@hostel.edu", Role.STUDENT)
    with pytest.raises(AuthorizationError):
        service.set_status(actor(db, student), user_id=other, work_date=fixed_today, status=AttendanceStatus.PRESENT)
    with pytest.raises(NotFoundError):
        service.set_status(actor(db, super_admin), user_id="missing", work_date=fixed_today, status=AttendanceStatus.PRESENT)


def test_roster_lists_students_with_status(db, service, super_admin, admin, student, fixed_today):
    other = add_user(db, "bala@hostel.edu", Role.STUDENT, full_name="Bala")
    service.mark_own(actor(db, student), AttendanceStatus.PRESENT)

    roster = service.roster_for_date(actor(db, super_admin), work_date=fixed_today)

    assert [r.full_name for r in roster] == ["Asha", "Bala"]
    assert roster[0].status == AttendanceStatus.PRESENT
    assert roster[1].user_id == other
    assert roster[1].status is None


def test_roster_empty_without_students(db, service, super_admin, fixed_today):
    assert service.roster_for_date(actor(db, super_admin), work_date=fixed_today) == []


def test_roster_forbidden_for_students(db, service, student, fixed_today):
    with pytest.raises(AuthorizationError):
        service.roster_for_date(actor(db, student), work_date=fixed_today)
