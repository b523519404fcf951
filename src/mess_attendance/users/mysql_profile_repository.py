from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = "id, email, full_name, created_at, updated_at"


def _to_profile(row: dict) -> Profile:
    return Profile(
        user_id=row["id"],
        email=row.get("email") or "",
        full_name=row.get("full_name") or "",
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def list_all(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles ORDER BY created_at DESC")
            return [_to_profile(r) for r in fetchall(cur)]

    def list_by_ids(self, user_ids: Sequence[str]) -> Sequence[Profile]:
        if not user_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM profiles WHERE id IN ({in_clause(user_ids)}) ORDER BY full_name",
                tuple(user_ids),
            )
            return [_to_profile(r) for r in fetchall(cur)]

    def update_full_name(self, user_id: str, full_name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE profiles SET full_name=%s WHERE id=%s", (full_name, user_id))
            return cur.rowcount > 0
