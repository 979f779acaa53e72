from __future__ import annotations

from typing import Any

from ..db import SQLRunner


async def insert_token(conn: SQLRunner, identifier: str, expires: str, token: str) -> None:
    await conn.sql(
        "INSERT INTO verification_tokens(identifier, expires, token) VALUES(?,?,?)",
        (identifier, expires, token),
    )


async def get_token(conn: SQLRunner, identifier: str, token: str) -> dict[str, Any] | None:
    res = await conn.sql(
        "SELECT identifier, token, expires FROM verification_tokens WHERE identifier=? AND token=?",
        (identifier, token),
    )
    return res.first()


async def delete_token(conn: SQLRunner, identifier: str, token: str) -> None:
    await conn.sql(
        "DELETE FROM verification_tokens WHERE identifier=? AND token=?",
        (identifier, token),
    )
