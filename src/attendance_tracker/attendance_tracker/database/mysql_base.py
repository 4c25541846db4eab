from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``; everything inside runs as one transaction.

    Commits on normal exit, rolls back on any exception.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value)


def load_json(value: Any, default: Any = None) -> Any:
    """Decode a JSON column; connectors return either str, bytes or already-parsed values."""

    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        if not value.strip():
            return default
        return json.loads(value)
    return value


def execute_unique(cur, sql: str, params: tuple, *, conflict_message: str) -> None:
    """Execute a write and turn duplicate-key failures into ConflictError."""

    try:
        cur.execute(sql, params)
    except mysql.connector.IntegrityError as e:
        if getattr(e, "errno", None) == errorcode.ER_DUP_ENTRY:
            logger.info("Unique constraint hit: %s", conflict_message)
            raise ConflictError(conflict_message)
        raise
