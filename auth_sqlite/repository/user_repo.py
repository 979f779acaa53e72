from __future__ import annotations

from typing import Any

from ..db import QueryResult, SQLRunner

USER_FIELDS = "id, name, email, emailVerified, image"


async def insert_user(
    conn: SQLRunner,
    user_id: str,
    name: str | None,
    email: str | None,
    email_verified: str | None,
    image: str | None,
) -> int | None:
    res = await conn.sql(
        "INSERT INTO users(id, name, email, emailVerified, image) VALUES(?,?,?,?,?)",
        (user_id, name, email, email_verified, image),
    )
    return res.lastrowid


async def get_by_rowid(conn: SQLRunner, rowid: int) -> dict[str, Any] | None:
    res = await conn.sql(f"SELECT {USER_FIELDS} FROM users WHERE rowid=?", (rowid,))
    return res.first()


async def get_by_id(conn: SQLRunner, user_id: str) -> dict[str, Any] | None:
    res = await conn.sql(f"SELECT {USER_FIELDS} FROM users WHERE id=?", (user_id,))
    return res.first()


async def get_by_email(conn: SQLRunner, email: str) -> dict[str, Any] | None:
    res = await conn.sql(f"SELECT {USER_FIELDS} FROM users WHERE email=?", (email,))
    return res.first()


async def get_by_account(conn: SQLRunner, provider_account_id: str, provider: str) -> dict[str, Any] | None:
    res = await conn.sql(
        "SELECT u.id, u.name, u.email, u.emailVerified, u.image "
        "FROM users u JOIN accounts a ON a.userId = u.id "
        "WHERE a.providerAccountId=? AND a.provider=?",
        (provider_account_id, provider),
    )
    return res.first()


async def update_fields(conn: SQLRunner, user_id: str, values: dict[str, Any]) -> QueryResult | None:
    """
    Update only the given columns; columns not in ``values`` keep their stored value.
    ``values`` keys must already be restricted to known user columns.
    """
    if not values:
        return None
    fields = [f"{col}=?" for col in values]
    params: list[object] = list(values.values())
    params.append(user_id)
    sql = f"UPDATE users SET {', '.join(fields)} WHERE id=?"
    return await conn.sql(sql, params)


async def delete_user(conn: SQLRunner, user_id: str) -> None:
    await conn.sql("DELETE FROM users WHERE id=?", (user_id,))
