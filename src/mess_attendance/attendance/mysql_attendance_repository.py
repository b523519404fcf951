from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, AttendanceWithProfile
from .repository import AttendanceRepository

_COLUMNS = "id, user_id, date, status, marked_at, updated_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=r["id"],
        user_id=r["user_id"],
        work_date=r["date"],
        status=AttendanceStatus(r["status"]),
        marked_at=r.get("marked_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE user_id=%s AND date=%s",
                (user_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_user(self, user_id: str, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        sql = f"SELECT {_COLUMNS} FROM attendance WHERE user_id=%s ORDER BY date DESC"
        params: tuple = (user_id,)
        if limit is not None:
            sql += " LIMIT %s"
            params += (int(limit),)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE date=%s", (work_date,))
            return [_to_record(r) for r in fetchall(cur)]

    def list_recent(self, limit: int) -> Sequence[AttendanceWithProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.id, a.user_id, a.date, a.status, a.marked_at, p.full_name, p.email
                FROM attendance a
                JOIN profiles p ON p.id = a.user_id
                ORDER BY a.marked_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                AttendanceWithProfile(
                    record_id=r["id"],
                    user_id=r["user_id"],
                    full_name=r["full_name"],
                    email=r["email"],
                    work_date=r["date"],
                    status=AttendanceStatus(r["status"]),
                    marked_at=r.get("marked_at"),
                )
                for r in fetchall(cur)
            ]

    def upsert(self, *, user_id: str, work_date: date, status: AttendanceStatus, marked_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance (id, user_id, date, status, marked_at)
                VALUES (%s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), marked_at=VALUES(marked_at)
                """,
                (str(uuid.uuid4()), user_id, work_date, status.value, marked_at),
            )

    def create(self, *, user_id: str, work_date: date, status: AttendanceStatus, marked_at: datetime) -> str:
        record_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance (id, user_id, date, status, marked_at) VALUES (%s, %s, %s, %s, %s)",
                (record_id, user_id, work_date, status.value, marked_at),
            )
        return record_id

    def update_status(self, *, user_id: str, work_date: date, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET status=%s WHERE user_id=%s AND date=%s",
                (status.value, user_id, work_date),
            )
            return cur.rowcount > 0

    def delete_for_user_and_date(self, user_id: str, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE user_id=%s AND date=%s", (user_id, work_date))
            return cur.rowcount > 0
