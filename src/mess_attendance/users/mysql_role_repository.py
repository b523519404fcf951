from __future__ import annotations

import uuid
from typing import Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import UserRole
from .repository import RoleRepository


class MySQLRoleRepository(RoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[UserRole]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, user_id, role, created_at FROM user_roles")
            return [
                UserRole(role_id=r["id"], user_id=r["user_id"], role=Role(r["role"]), created_at=r.get("created_at"))
                for r in fetchall(cur)
            ]

    def roles_for_user(self, user_id: str) -> Sequence[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM user_roles WHERE user_id=%s", (user_id,))
            return [Role(r["role"]) for r in fetchall(cur)]

    def user_ids_with_role(self, role: Role) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM user_roles WHERE role=%s", (role.value,))
            return [r["user_id"] for r in fetchall(cur)]

    def insert_role(self, *, user_id: str, role: Role) -> str:
        role_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO user_roles (id, user_id, role) VALUES (%s, %s, %s)",
                (role_id, user_id, role.value),
            )
        return role_id

    def update_role(self, *, user_id: str, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE user_roles SET role=%s WHERE user_id=%s", (role.value, user_id))
            # rowcount is 0 when the value is unchanged, so count matches instead.
            cur.execute("SELECT COUNT(*) AS n FROM user_roles WHERE user_id=%s", (user_id,))
            return int(cur.fetchone()["n"]) > 0

    def delete_for_user(self, user_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM user_roles WHERE user_id=%s", (user_id,))
            return int(cur.rowcount)
