from __future__ import annotations

import logging
from typing import Iterable, List

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection
from .migrations import MIGRATIONS, Migration

logger = logging.getLogger(__name__)

SCHEMA_MIGRATIONS_DDL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    name VARCHAR(120) NOT NULL PRIMARY KEY,
    applied_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
"""


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    database = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_migrations(conn_factory, migrations: Iterable[Migration] = MIGRATIONS) -> List[str]:
    """Apply every migration not yet recorded in ``schema_migrations``.

    Returns the names applied by this call, in order. A driver error that the
    migration declares as "already exists" counts as success; any other error
    rolls back the current migration and propagates.
    """
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute(SCHEMA_MIGRATIONS_DDL)
        cur.execute("SELECT name FROM schema_migrations")
        applied = {row[0] for row in cur.fetchall()}

        newly_applied: list[str] = []
        for migration in migrations:
            if migration.name in applied:
                continue

            for sql, params in migration.statements():
                try:
                    cur.execute(sql, params or None)
                except mysql.connector.Error as e:
                    if not migration.is_already_applied_error(e.errno):
                        conn.rollback()
                        logger.error("Migration %s failed: %s", migration.name, e)
                        raise
                    logger.info("Migration %s: object already exists (errno=%s)", migration.name, e.errno)

            cur.execute("INSERT INTO schema_migrations (name) VALUES (%s)", (migration.name,))
            conn.commit()
            newly_applied.append(migration.name)
            logger.info("Applied migration %s", migration.name)

        return newly_applied
    finally:
        conn.close()


def ensure_admin_user(conn_factory: DatabaseConnection, *, full_name: str, username: str, password: str) -> None:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO users (full_name, username, password_hash, role, is_active)
            VALUES (%s, %s, %s, %s, 1)
            ON DUPLICATE KEY UPDATE
                full_name=VALUES(full_name),
                password_hash=VALUES(password_hash),
                role=VALUES(role),
                is_active=1
            """,
            (full_name, username, generate_password_hash(password), Role.ADMIN.value),
        )
        conn.commit()
    finally:
        conn.close()


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
