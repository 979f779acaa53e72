from __future__ import annotations

from typing import Any

from ..db import SQLRunner


async def insert_session(conn: SQLRunner, session_id: str, session_token: str, user_id: str, expires: str) -> None:
    await conn.sql(
        "INSERT INTO sessions(id, sessionToken, userId, expires) VALUES(?,?,?,?)",
        (session_id, session_token, user_id, expires),
    )


async def get_by_token(conn: SQLRunner, session_token: str) -> dict[str, Any] | None:
    res = await conn.sql(
        "SELECT id, sessionToken, userId, expires FROM sessions WHERE sessionToken=?",
        (session_token,),
    )
    return res.first()


async def update_expires(conn: SQLRunner, session_token: str, expires: str | None) -> None:
    # absent expiry leaves the row untouched
    await conn.sql(
        "UPDATE sessions SET expires=COALESCE(?, expires) WHERE sessionToken=?",
        (expires, session_token),
    )


async def delete_by_token(conn: SQLRunner, session_token: str) -> None:
    await conn.sql("DELETE FROM sessions WHERE sessionToken=?", (session_token,))


async def delete_by_user_id(conn: SQLRunner, user_id: str) -> None:
    await conn.sql("DELETE FROM sessions WHERE userId=?", (user_id,))
