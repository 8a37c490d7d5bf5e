from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

import mysql.connector

from ..core.exceptions import StorageError
from .connection import DBConfig

logger = logging.getLogger(__name__)

# Quoted strings, line comments, statement terminators; anything else is copied through.
_SQL_TOKENS = re.compile(r"""'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|--[^\n]*|;""")


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql may name its own database; the configured one wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a schema file into statements, ignoring ';' in quotes and -- comments."""
    buf: list[str] = []
    pos = 0
    for m in _SQL_TOKENS.finditer(sql):
        buf.append(sql[pos:m.start()])
        token = m.group(0)
        pos = m.end()
        if token == ";":
            stmt = "".join(buf).strip()
            buf = []
            if stmt:
                yield stmt
        elif not token.startswith("--"):
            buf.append(token)
    buf.append(sql[pos:])
    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBConfig, *, with_database: bool = True):
    params = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
        "use_pure": True,
    }
    if with_database:
        params["database"] = target.database
    try:
        return mysql.connector.connect(**params)
    except mysql.connector.Error as e:
        logger.error("Cannot connect to %s@%s:%s: %s", target.user, target.host, target.port, e)
        raise StorageError(str(e)) from e


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create the database if needed and run every statement of schema.sql."""
    ensure_database_exists(db_config)
    target = DBConfig.from_dict(db_config)

    schema_path = Path(schema_path)
    sql = _strip_create_db_and_use(schema_path.read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
        logger.info("Applied schema %s to %s", schema_path.name, target.database)
    except mysql.connector.Error as e:
        conn.rollback()
        raise StorageError(str(e)) from e
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
