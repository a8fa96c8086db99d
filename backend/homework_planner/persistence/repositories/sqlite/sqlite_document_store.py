"""Whole-collection JSON documents kept in the SQLite `documents` table."""
from __future__ import annotations
import json
import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, Optional

from homework_planner.persistence.db import get_connection

logger = logging.getLogger(__name__)


def read_document(key: str) -> Optional[Any]:
    """Decoded body stored under `key`, or None when absent or empty."""
    conn = get_connection()
    try:
        row = conn.execute("SELECT body FROM documents WHERE key = ?", (key,)).fetchone()
    finally:
        conn.close()
    if not row or not (row["body"] or "").strip():
        return None
    try:
        return json.loads(row["body"])
    except json.JSONDecodeError:
        logger.exception("Stored document %r is not valid JSON; treating it as empty", key)
        return None


def write_document(key: str, value: Any) -> bool:
    """Replace the document under `key` in a single statement."""
    body = json.dumps(value, indent=2)
    try:
        conn = get_connection()
        try:
            conn.execute(
                """
                INSERT INTO documents (key, body, updated_at)
                VALUES (:key, :body, :updated_at)
                ON CONFLICT(key) DO UPDATE SET
                    body       = excluded.body,
                    updated_at = excluded.updated_at
                """,
                {
                    "key": key,
                    "body": body,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                },
            )
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error:
        logger.exception("Error writing document %r", key)
        return False
    return True
