from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ValidationError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        raise translate_integrity_error(e) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def translate_integrity_error(err: mysql.connector.IntegrityError) -> Exception:
    """Turn constraint violations into domain errors the API can show."""

    if err.errno == errorcode.ER_DUP_ENTRY:
        return ValidationError("Data sudah ada (duplikat)")
    if err.errno in (errorcode.ER_NO_REFERENCED_ROW, errorcode.ER_NO_REFERENCED_ROW_2):
        return ValidationError("Data referensi tidak ditemukan")
    return err


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def build_where(clauses: Iterable[Tuple[str, Any]]) -> Tuple[str, List[Any]]:
    """Join (sql_fragment, param) pairs, skipping pairs whose param is None."""

    parts: List[str] = []
    params: List[Any] = []
    for fragment, value in clauses:
        if value is None:
            continue
        parts.append(fragment)
        params.append(value)
    where = " AND ".join(parts) if parts else "1=1"
    return where, params


def in_placeholders(values: Sequence[Any]) -> str:
    return ",".join(["%s"] * len(values))


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '07:15:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
