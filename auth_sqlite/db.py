from __future__ import annotations

# auth_sqlite/db.py
import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Protocol, Sequence

import aiosqlite
import yaml

logger = logging.getLogger(__name__)

ENV_URL = "AUTH_SQLITE_URL"
ENV_CONFIG = "AUTH_SQLITE_CONFIG"

# Connection string resolution order:
# 1) explicit argument
# 2) env AUTH_SQLITE_URL
# 3) config.yaml test_database_url (when a test run is detected)
# 4) config.yaml database_url
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))


def _read_config_yaml() -> dict:
    cfg_path = os.environ.get(ENV_CONFIG) or os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(cfg, dict):
        return {}
    out = {}
    for k in ("database_url", "test_database_url"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    return out


def get_env_connection_string() -> str | None:
    env_url = os.environ.get(ENV_URL)
    if env_url:
        return env_url
    cfg = _read_config_yaml()
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)
    if is_test and cfg.get("test_database_url"):
        return cfg["test_database_url"]
    return cfg.get("database_url")


def parse_connection_string(connection_string: str) -> tuple[str, bool]:
    """
    Turn a connection string into (database, uri) arguments for sqlite.

    Accepts ``sqlite:///path.db``, ``file:`` URIs and bare filesystem paths.
    """
    cs = connection_string.strip()
    if cs.startswith("sqlite:///"):
        return cs[len("sqlite:///"):], False
    if cs.startswith("file:"):
        return cs, True
    if "://" in cs:
        raise ValueError(f"Unsupported connection string: {cs}")
    return cs, False


@dataclass
class QueryResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    lastrowid: int | None = None

    def first(self) -> dict[str, Any] | None:
        return self.rows[0] if self.rows else None


class SQLRunner(Protocol):
    async def sql(self, statement: str, params: Sequence[Any] = ()) -> QueryResult: ...


class Executor:
    """Runs statements on one open connection."""

    def __init__(self, conn: aiosqlite.Connection):
        self.conn = conn

    async def sql(self, statement: str, params: Sequence[Any] = ()) -> QueryResult:
        logger.debug("sql: %s params=%r", " ".join(statement.split()), params)
        async with self.conn.execute(statement, tuple(params)) as cur:
            rows = await cur.fetchall()
            return QueryResult(rows=[dict(r) for r in rows], lastrowid=cur.lastrowid)


class Database:
    """
    Thin async client over a SQLite file.

    Every ``sql()`` call opens its own connection, like a per-call ``get_conn()``;
    ``transaction()`` keeps one connection for a BEGIN IMMEDIATE/COMMIT block.
    """

    def __init__(self, database: str, uri: bool = False, timeout: float = 5.0):
        self.database = database
        self.uri = uri
        self.timeout = timeout
        if not uri and database != ":memory:":
            dirn = os.path.dirname(os.path.abspath(database)) or "."
            os.makedirs(dirn, exist_ok=True)

    @classmethod
    def from_url(cls, connection_string: str, **kwargs) -> "Database":
        database, uri = parse_connection_string(connection_string)
        return cls(database, uri=uri, **kwargs)

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Open a connection with foreign keys on and dict-like rows.
        Autocommit mode: transactions are opened explicitly.
        """
        conn = await aiosqlite.connect(
            self.database,
            timeout=self.timeout,
            isolation_level=None,
            uri=self.uri,
        )
        try:
            await conn.execute("PRAGMA foreign_keys = ON;")
            conn.row_factory = aiosqlite.Row
            yield conn
        finally:
            await conn.close()

    async def sql(self, statement: str, params: Sequence[Any] = ()) -> QueryResult:
        async with self.connect() as conn:
            return await Executor(conn).sql(statement, params)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Executor]:
        async with self.connect() as conn:
            # write lock taken at BEGIN; other writers wait up to self.timeout
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield Executor(conn)
            except Exception:
                await conn.execute("ROLLBACK")
                raise
            await conn.execute("COMMIT")
