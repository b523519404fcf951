from __future__ import annotations

import uuid
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Account
from .repository import AccountRepository


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, email, password_hash, full_name, created_at
                FROM users
                WHERE email=%s
                """,
                (email,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Account(
                user_id=row["id"],
                email=row["email"],
                password_hash=row["password_hash"],
                full_name=row.get("full_name"),
                created_at=row.get("created_at"),
            )

    def create_account(self, *, email: str, password_hash: str, full_name: str) -> str:
        user_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            # on_user_created inserts the matching profiles row.
            cur.execute(
                "INSERT INTO users (id, email, password_hash, full_name) VALUES (%s, %s, %s, %s)",
                (user_id, email, password_hash, full_name),
            )
        return user_id

    def delete_account(self, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (user_id,))
            return cur.rowcount > 0
