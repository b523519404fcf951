"""Bootstrap the super admin account.

Nobody can add users before a super admin exists, so the first one is
created from the command line:

    python scripts/create_super_admin.py warden@hostel.edu "Hostel Warden"
"""

from __future__ import annotations

import argparse
import getpass
import importlib

from mess_attendance.common.validators import require_email, require_min_length
from mess_attendance.config import get_settings_module
from mess_attendance.core.constants import MIN_PASSWORD_LENGTH
from mess_attendance.core.enums import Role
from mess_attendance.core.exceptions import ValidationError
from mess_attendance.database.bootstrap import ensure_account


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("email")
    parser.add_argument("full_name", nargs="?", default="")
    args = parser.parse_args()

    password = getpass.getpass("Password: ")
    try:
        email = require_email(args.email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
    except ValidationError as e:
        raise SystemExit(str(e))

    settings = importlib.import_module(get_settings_module())
    user_id = ensure_account(
        dict(settings.DB_CONFIG),
        email=email,
        password=password,
        full_name=args.full_name or email,
        role=Role.SUPER_ADMIN,
    )
    print(f"OK: super admin {email} ({user_id})")


if __name__ == "__main__":
    main()
