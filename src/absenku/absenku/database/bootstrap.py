"""Schema/seed helpers used at startup (AUTO_INIT_DB) and by scripts/."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> None:
    sql = Path(path).read_text(encoding="utf-8")
    sql = _strip_comments(_strip_create_db_and_use(sql))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_script(db_config, seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Create (or reset) one demo account per role with known passwords.

    seed.sql cannot carry werkzeug hashes portably, so accounts are upserted here.
    """

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_user(username: str, password: str, role: str) -> int:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT id FROM users WHERE username=%s", (username,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE users SET password_hash=%s, role=%s, is_active=1 WHERE id=%s",
                    (password_hash, role, existing["id"]),
                )
                return int(existing["id"])
            cur.execute(
                "INSERT INTO users (username, password_hash, role) VALUES (%s, %s, %s)",
                (username, password_hash, role),
            )
            return int(cur.lastrowid)

        upsert_user("admin", "admin123", "admin")
        guru_user_id = upsert_user("guru.demo", "guru123", "guru")
        siswa_user_id = upsert_user("siswa.demo", "siswa123", "siswa")

        cur.execute("SELECT id FROM guru WHERE user_id=%s", (guru_user_id,))
        guru = cur.fetchone()
        if guru:
            guru_id = int(guru["id"])
        else:
            cur.execute(
                "INSERT INTO guru (user_id, nip, nama) VALUES (%s, %s, %s)",
                (guru_user_id, "198001012005011001", "Budi Santoso"),
            )
            guru_id = int(cur.lastrowid)

        cur.execute("SELECT id FROM kelas WHERE nama_kelas=%s", ("X IPA 1",))
        kelas = cur.fetchone()
        if kelas:
            kelas_id = int(kelas["id"])
        else:
            cur.execute("INSERT INTO kelas (nama_kelas, wali_kelas_id) VALUES (%s, %s)", ("X IPA 1", guru_id))
            kelas_id = int(cur.lastrowid)

        cur.execute(
            "INSERT IGNORE INTO guru_kelas (guru_id, kelas_id, is_homeroom) VALUES (%s, %s, 1)",
            (guru_id, kelas_id),
        )

        cur.execute("SELECT id FROM siswa WHERE user_id=%s", (siswa_user_id,))
        if not cur.fetchone():
            cur.execute(
                "INSERT INTO siswa (user_id, nisn, nama, kelas_id) VALUES (%s, %s, %s, %s)",
                (siswa_user_id, "0051234567", "Siti Aminah", kelas_id),
            )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
