from __future__ import annotations

from typing import Any

from ..db import SQLRunner

ACCOUNT_COLUMNS = (
    "id", "userId", "type", "provider", "providerAccountId",
    "refresh_token", "access_token", "expires_at",
    "token_type", "scope", "id_token", "session_state",
)


async def insert_account(conn: SQLRunner, account_id: str, values: dict[str, Any]) -> None:
    row = {**values, "id": account_id}
    cols = ", ".join(ACCOUNT_COLUMNS)
    marks = ",".join("?" for _ in ACCOUNT_COLUMNS)
    await conn.sql(
        f"INSERT INTO accounts({cols}) VALUES({marks})",
        tuple(row.get(c) for c in ACCOUNT_COLUMNS),
    )


async def get_by_provider(conn: SQLRunner, provider: str, provider_account_id: str) -> dict[str, Any] | None:
    res = await conn.sql(
        f"SELECT {', '.join(ACCOUNT_COLUMNS)} FROM accounts WHERE provider=? AND providerAccountId=?",
        (provider, provider_account_id),
    )
    return res.first()


async def delete_by_provider(conn: SQLRunner, provider: str, provider_account_id: str) -> None:
    await conn.sql(
        "DELETE FROM accounts WHERE provider=? AND providerAccountId=?",
        (provider, provider_account_id),
    )


async def delete_by_user_id(conn: SQLRunner, user_id: str) -> None:
    await conn.sql("DELETE FROM accounts WHERE userId=?", (user_id,))
