from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path
from typing import Iterable, Optional

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor, fetchone

log = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    config = DBConfig.from_dict(db_config)
    ensure_database_exists(config)

    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))
    with db_cursor(DatabaseConnection(config), dictionary=False) as (_, cur):
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
    log.info("schema applied to %s", config.describe())


def ensure_account(
    db_config: dict,
    *,
    email: str,
    password: str,
    full_name: str,
    role: Role,
) -> str:
    """Create or refresh an account with exactly ``role``. Returns the user id."""

    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    email = email.strip().lower()
    password_hash = generate_password_hash(password)

    with db_cursor(conn) as (_, cur):
        cur.execute("SELECT id FROM users WHERE email=%s", (email,))
        existing: Optional[dict] = fetchone(cur)
        if existing:
            user_id = existing["id"]
            cur.execute("UPDATE users SET password_hash=%s, full_name=%s WHERE id=%s", (password_hash, full_name, user_id))
            cur.execute("UPDATE profiles SET full_name=%s WHERE id=%s", (full_name, user_id))
        else:
            user_id = str(uuid.uuid4())
            cur.execute(
                "INSERT INTO users (id, email, password_hash, full_name) VALUES (%s, %s, %s, %s)",
                (user_id, email, password_hash, full_name),
            )

        cur.execute("DELETE FROM user_roles WHERE user_id=%s AND role<>%s", (user_id, role.value))
        cur.execute(
            "INSERT IGNORE INTO user_roles (id, user_id, role) VALUES (%s, %s, %s)",
            (str(uuid.uuid4()), user_id, role.value),
        )

    log.info("account %s ready with role %s", email, role.value)
    return user_id


def ensure_demo_users(db_config: dict) -> None:
    ensure_account(db_config, email="superadmin@mess.local", password="super123", full_name="Mess Super Admin", role=Role.SUPER_ADMIN)
    ensure_account(db_config, email="admin@mess.local", password="admin123", full_name="Mess Admin", role=Role.ADMIN)
    ensure_account(db_config, email="student@mess.local", password="student123", full_name="Demo Student", role=Role.STUDENT)


def list_tables(db_config: dict) -> list[str]:
    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
