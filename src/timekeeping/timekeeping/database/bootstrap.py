"""Create the database and apply ``database/schema.sql``.

The schema file carries its own ``CREATE DATABASE`` / ``USE`` header for
manual use; both are dropped here so the configured database name wins.
"""

from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;")
_COMMENT_RE = re.compile(r"(?m)^\s*--.*$")
# A statement ends at ';' outside of quoted literals.
_STATEMENT_RE = re.compile(r"""(?:'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|[^;'"])+""", re.S)


def split_statements(sql: str) -> list[str]:
    sql = _COMMENT_RE.sub("", _HEADER_RE.sub("", sql))
    return [m.group(0).strip() for m in _STATEMENT_RE.finditer(sql) if m.group(0).strip()]


def _server_connection(target: DBConfig, *, database: bool):
    params = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
    }
    if database:
        params["database"] = target.database
    return mysql.connector.connect(**params)


def create_database(target: DBConfig) -> None:
    with closing(_server_connection(target, database=False)) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute(
                f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
                "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    target = DBConfig.from_dict(db_config)
    create_database(target)

    statements = split_statements(Path(schema_path).read_text(encoding="utf-8"))
    with closing(_server_connection(target, database=True)) as conn:
        with closing(conn.cursor()) as cur:
            for statement in statements:
                cur.execute(statement)
        conn.commit()
    logger.info("applied %d schema statements to %s", len(statements), target.describe())


def list_tables(db_config: dict) -> list[str]:
    with closing(_server_connection(DBConfig.from_dict(db_config), database=True)) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute("SHOW TABLES")
            return [row[0] for row in cur.fetchall()]
