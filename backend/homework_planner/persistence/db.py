"""SQLite connection + schema initialisation."""
from __future__ import annotations
import logging
import os
import sqlite3
import uuid
from datetime import datetime, timezone

import bcrypt

from homework_planner.core import config

logger = logging.getLogger(__name__)

_MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "migrations")


def get_connection() -> sqlite3.Connection:
    conn = sqlite3.connect(config.DATABASE_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db() -> None:
    """Run all migration SQL files against the database."""
    db_dir = os.path.dirname(config.DATABASE_PATH)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    migration_file = os.path.join(_MIGRATIONS_DIR, "001_init.sql")
    with open(migration_file, "r", encoding="utf-8") as f:
        sql = f.read()
    conn = get_connection()
    conn.executescript(sql)
    conn.commit()
    conn.close()
    _seed_default_user()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_user(email: str, password: str, display_name: str = "", is_admin: bool = False) -> str:
    user_id = str(uuid.uuid4())
    conn = get_connection()
    try:
        conn.execute(
            """
            INSERT INTO users (id, email, password_hash, display_name, is_admin, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                user_id,
                email,
                hash_password(password),
                display_name or email,
                1 if is_admin else 0,
                datetime.now(timezone.utc).isoformat(),
            ),
        )
        conn.commit()
    finally:
        conn.close()
    return user_id


def _seed_default_user() -> None:
    """Insert the default admin account when no user exists yet."""
    conn = get_connection()
    try:
        count = conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]
    finally:
        conn.close()
    if count == 0:
        create_user(
            config.DEFAULT_ADMIN_EMAIL,
            config.DEFAULT_ADMIN_PASSWORD,
            config.DEFAULT_ADMIN_NAME,
            is_admin=True,
        )
        logger.info("Seeded default admin account %s", config.DEFAULT_ADMIN_EMAIL)
