"""Create the demo super admin, admin and student accounts."""

from __future__ import annotations

import importlib

from mess_attendance.config import get_settings_module
from mess_attendance.database.bootstrap import ensure_demo_users
from mess_attendance.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_users(db_config)
    print(f"OK: Seeded demo accounts -> {DBConfig.from_dict(db_config).describe()}")


if __name__ == "__main__":
    main()
