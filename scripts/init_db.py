"""Create the database, apply pending migrations and provision the admin account.

Usage: APP_ENV=development python scripts/init_db.py
Admin credentials come from ADMIN_USERNAME / ADMIN_PASSWORD (and optional
ADMIN_FULL_NAME); without ADMIN_PASSWORD no admin account is written.
"""
from __future__ import annotations

import importlib
import logging
import os

from dotenv import load_dotenv

from school_attendance.database.bootstrap import (
    apply_migrations,
    ensure_admin_user,
    ensure_database_exists,
    list_tables,
)
from school_attendance.database.connection import DBConfig, DatabaseConnection
from school_attendance.settings import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format="%(levelname)s [%(name)s] %(message)s")

    config = DBConfig.from_dict(dict(settings.DB_CONFIG))
    conn = DatabaseConnection.get_instance(config)

    ensure_database_exists(conn)
    applied = apply_migrations(conn)

    password = os.getenv("ADMIN_PASSWORD")
    if password:
        username = os.getenv("ADMIN_USERNAME", "admin")
        ensure_admin_user(
            conn,
            full_name=os.getenv("ADMIN_FULL_NAME", "Administrator"),
            username=username,
            password=password,
        )
        print(f"OK: admin account '{username}' ready")

    tables = list_tables(conn)
    print(
        f"OK: {len(applied)} migrations applied -> "
        f"{config.user}@{config.host}:{config.port}/{config.database} (tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
