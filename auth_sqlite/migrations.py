"""
Schema lifecycle for the adapter tables.

Each statement runs on its own; a failing statement is logged and the rest
still run.
"""
from __future__ import annotations

import logging
import sqlite3

from .db import SQLRunner

logger = logging.getLogger(__name__)

UP_SQL_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS accounts (
        id TEXT PRIMARY KEY,
        userId TEXT NOT NULL,
        type TEXT NOT NULL,
        provider TEXT NOT NULL,
        providerAccountId TEXT NOT NULL,
        refresh_token TEXT DEFAULT NULL,
        access_token TEXT DEFAULT NULL,
        expires_at INTEGER DEFAULT NULL,
        token_type TEXT DEFAULT NULL,
        scope TEXT DEFAULT NULL,
        id_token TEXT DEFAULT NULL,
        session_state TEXT DEFAULT NULL,
        UNIQUE (provider, providerAccountId)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sessions (
        id TEXT NOT NULL,
        sessionToken TEXT PRIMARY KEY,
        userId TEXT NOT NULL,
        expires datetime NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        name TEXT DEFAULT NULL,
        email TEXT DEFAULT NULL UNIQUE,
        emailVerified datetime DEFAULT NULL,
        image TEXT DEFAULT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS verification_tokens (
        identifier TEXT NOT NULL,
        token TEXT NOT NULL,
        expires datetime NOT NULL,
        PRIMARY KEY (identifier, token)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS authenticator (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        credentialID TEXT NOT NULL UNIQUE,
        userId TEXT NOT NULL,
        providerAccountId TEXT NOT NULL,
        credentialPublicKey TEXT NOT NULL,
        counter INTEGER NOT NULL,
        credentialDeviceType TEXT NOT NULL,
        credentialBackedUp BOOLEAN NOT NULL,
        transports TEXT,
        FOREIGN KEY (userId)
            REFERENCES users (id)
            ON DELETE CASCADE
            ON UPDATE CASCADE
    )
    """,
]

DOWN_SQL_STATEMENTS = [
    "DROP TABLE IF EXISTS accounts",
    "DROP TABLE IF EXISTS sessions",
    "DROP TABLE IF EXISTS users",
    "DROP TABLE IF EXISTS verification_tokens",
    "DROP TABLE IF EXISTS authenticator",
]

ADAPTER_TABLES = ("accounts", "sessions", "users", "verification_tokens", "authenticator")


async def _run_all(db: SQLRunner, statements: list[str], label: str) -> int:
    failed = 0
    for sql in statements:
        try:
            await db.sql(sql)
        except sqlite3.Error as e:
            failed += 1
            logger.error("migration %s statement failed: %s | %s", label, e, " ".join(sql.split())[:80])
    logger.info("migration %s done: %d statements, %d failed", label, len(statements), failed)
    return failed


async def up(db: SQLRunner) -> int:
    """Create the adapter tables. Returns the number of failed statements."""
    return await _run_all(db, UP_SQL_STATEMENTS, "up")


async def down(db: SQLRunner) -> int:
    """Drop the adapter tables. Returns the number of failed statements."""
    return await _run_all(db, DOWN_SQL_STATEMENTS, "down")


async def existing_tables(db: SQLRunner) -> list[str]:
    res = await db.sql(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    names = {r["name"] for r in res.rows}
    return [t for t in ADAPTER_TABLES if t in names]
