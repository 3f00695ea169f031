from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import ConflictError
from .connection import DatabaseConnection

MYSQL_DUPLICATE_KEY = 1062


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction.

    Everything executed inside the block commits together; any exception rolls
    the whole block back. Duplicate-key errors surface as ``ConflictError``.
    """
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as exc:
        conn.rollback()
        if getattr(exc, "errno", None) == MYSQL_DUPLICATE_KEY:
            raise ConflictError("duplicate", str(exc)) from exc
        raise
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


def placeholders(count: int) -> str:
    """``%s,%s,...`` for IN clauses."""
    return ",".join(["%s"] * count)
