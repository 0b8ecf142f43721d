from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional


@contextmanager
def db_cursor(conn_factory, *, dictionary: bool = True):
    """Yield (conn, cursor) inside one transaction.

    Everything executed in the block is committed together, or rolled back
    together if the block raises.
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


def set_clause(fields: dict) -> tuple[str, list]:
    """Build `col=%s, ...` and its params for a partial UPDATE.

    Column names come from repository code, never from request input.
    """
    cols = ", ".join(f"{col}=%s" for col in fields)
    return cols, list(fields.values())
