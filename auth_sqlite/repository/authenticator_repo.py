"""WebAuthn authenticators (passkeys) registered to a user."""
from __future__ import annotations

from typing import Any

from ..db import SQLRunner

AUTHENTICATOR_FIELDS = (
    "credentialID, userId, providerAccountId, credentialPublicKey, "
    "counter, credentialDeviceType, credentialBackedUp, transports"
)


def _row(row: dict[str, Any] | None) -> dict[str, Any] | None:
    # BOOLEAN columns come back as 0/1
    if row is not None and row.get("credentialBackedUp") is not None:
        row["credentialBackedUp"] = bool(row["credentialBackedUp"])
    return row


async def insert_authenticator(conn: SQLRunner, values: dict[str, Any]) -> None:
    await conn.sql(
        f"INSERT INTO authenticator({AUTHENTICATOR_FIELDS}) VALUES(?,?,?,?,?,?,?,?)",
        (
            values["credentialID"],
            values["userId"],
            values["providerAccountId"],
            values["credentialPublicKey"],
            int(values["counter"]),
            values["credentialDeviceType"],
            1 if values["credentialBackedUp"] else 0,
            values.get("transports"),
        ),
    )


async def get_by_credential_id(conn: SQLRunner, credential_id: str) -> dict[str, Any] | None:
    res = await conn.sql(
        f"SELECT {AUTHENTICATOR_FIELDS} FROM authenticator WHERE credentialID=?",
        (credential_id,),
    )
    return _row(res.first())


async def list_by_user_id(conn: SQLRunner, user_id: str) -> list[dict[str, Any]]:
    res = await conn.sql(
        f"SELECT {AUTHENTICATOR_FIELDS} FROM authenticator WHERE userId=? ORDER BY id",
        (user_id,),
    )
    return [_row(r) for r in res.rows]


async def update_counter(conn: SQLRunner, credential_id: str, new_counter: int) -> None:
    await conn.sql(
        "UPDATE authenticator SET counter=? WHERE credentialID=?",
        (int(new_counter), credential_id),
    )
