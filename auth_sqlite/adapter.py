"""
SQLite storage adapter for the auth framework.

Each method maps one framework call onto the repository functions and passes
rows through ``formatting`` on the way in and out. Results are plain dicts,
absent results are ``None``.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, Protocol

from .db import ENV_URL, Database, get_env_connection_string
from .formatting import insertable_from_object, object_from_row
from .models import (
    USER_COLUMNS,
    AdapterAccount,
    AdapterAuthenticator,
    AdapterSession,
    AdapterUser,
    ProviderAccount,
    SessionUpdate,
    VerificationToken,
    VerificationTokenKey,
)
from .repository import account_repo, authenticator_repo, session_repo, user_repo, verification_token_repo

logger = logging.getLogger(__name__)

Row = dict[str, Any]


class Adapter(Protocol):
    """Storage contract expected by the auth framework."""

    async def create_user(self, data: Mapping[str, Any]) -> Row | None: ...
    async def get_user(self, user_id: str) -> Row | None: ...
    async def get_user_by_email(self, email: str) -> Row | None: ...
    async def get_user_by_account(self, provider_account: Mapping[str, Any]) -> Row | None: ...
    async def update_user(self, data: Mapping[str, Any]) -> Row | None: ...
    async def delete_user(self, user_id: str) -> None: ...
    async def link_account(self, data: Mapping[str, Any]) -> None: ...
    async def unlink_account(self, provider_account: Mapping[str, Any]) -> None: ...
    async def get_account(self, provider_account_id: str, provider: str) -> Row | None: ...
    async def create_session(self, data: Mapping[str, Any]) -> Row | None: ...
    async def get_session_and_user(self, session_token: str) -> dict[str, Row] | None: ...
    async def update_session(self, data: Mapping[str, Any]) -> Row | None: ...
    async def delete_session(self, session_token: str) -> None: ...
    async def create_verification_token(self, data: Mapping[str, Any]) -> Mapping[str, Any]: ...
    async def use_verification_token(self, params: Mapping[str, Any]) -> Row | None: ...
    async def create_authenticator(self, data: Mapping[str, Any]) -> Row | None: ...
    async def get_authenticator(self, credential_id: str) -> Row | None: ...
    async def list_authenticators_by_user_id(self, user_id: str) -> list[Row]: ...
    async def update_authenticator_counter(self, credential_id: str, new_counter: int) -> Row | None: ...


class SQLiteAdapter:
    def __init__(self, db: Database):
        self.db = db

    @classmethod
    def from_env(cls, connection_string: str | None = None) -> "SQLiteAdapter":
        """Build an adapter from an explicit connection string or the environment/config.yaml."""
        connection_string = connection_string or get_env_connection_string()
        if not connection_string:
            raise ValueError(f"{ENV_URL} is not set and no connection string was provided")
        return cls(Database.from_url(connection_string))

    # ===== users =====
    async def create_user(self, data: Mapping[str, Any]) -> Row | None:
        row = insertable_from_object(AdapterUser.fields_from(data)) or {}
        user_id = row.get("id") or str(uuid.uuid4())
        rowid = await user_repo.insert_user(
            self.db, user_id, row.get("name"), row.get("email"), row.get("emailVerified"), row.get("image")
        )
        return object_from_row(await user_repo.get_by_rowid(self.db, rowid))

    async def get_user(self, user_id: str) -> Row | None:
        return object_from_row(await user_repo.get_by_id(self.db, user_id))

    async def get_user_by_email(self, email: str) -> Row | None:
        return object_from_row(await user_repo.get_by_email(self.db, email))

    async def get_user_by_account(self, provider_account: Mapping[str, Any]) -> Row | None:
        key = ProviderAccount.fields_from(provider_account)
        return object_from_row(
            await user_repo.get_by_account(self.db, key["providerAccountId"], key["provider"])
        )

    async def update_user(self, data: Mapping[str, Any]) -> Row | None:
        """
        Overwrite the given fields of an existing user; fields left out keep
        their stored value. Raises ValueError when the user does not exist.
        """
        fields = AdapterUser.fields_from(data)
        user_id = fields.get("id")
        changes = insertable_from_object({k: v for k, v in fields.items() if k in USER_COLUMNS}) or {}
        async with self.db.transaction() as tx:
            if not user_id or await user_repo.get_by_id(tx, user_id) is None:
                raise ValueError("User not found")
            await user_repo.update_fields(tx, user_id, changes)
        return object_from_row(await user_repo.get_by_id(self.db, user_id))

    async def delete_user(self, user_id: str) -> None:
        async with self.db.transaction() as tx:
            if await user_repo.get_by_id(tx, user_id) is None:
                raise ValueError("User not found")
            await user_repo.delete_user(tx, user_id)
            await session_repo.delete_by_user_id(tx, user_id)
            await account_repo.delete_by_user_id(tx, user_id)
        logger.info("deleted user %s with sessions and accounts", user_id)
        return None

    # ===== accounts =====
    async def link_account(self, data: Mapping[str, Any]) -> None:
        row = insertable_from_object(AdapterAccount.fields_from(data)) or {}
        await account_repo.insert_account(self.db, str(uuid.uuid4()), row)

    async def unlink_account(self, provider_account: Mapping[str, Any]) -> None:
        key = ProviderAccount.fields_from(provider_account)
        await account_repo.delete_by_provider(self.db, key["provider"], key["providerAccountId"])

    async def get_account(self, provider_account_id: str, provider: str) -> Row | None:
        return object_from_row(await account_repo.get_by_provider(self.db, provider, provider_account_id))

    # ===== sessions =====
    async def create_session(self, data: Mapping[str, Any]) -> Row | None:
        row = insertable_from_object(AdapterSession.fields_from(data)) or {}
        await session_repo.insert_session(
            self.db, str(uuid.uuid4()), row["sessionToken"], row["userId"], row["expires"]
        )
        return object_from_row(await session_repo.get_by_token(self.db, row["sessionToken"]))

    async def get_session_and_user(self, session_token: str) -> dict[str, Row] | None:
        session = object_from_row(await session_repo.get_by_token(self.db, session_token))
        if session is None:
            return None
        user = object_from_row(await user_repo.get_by_id(self.db, session["userId"]))
        if user is None:
            return None
        return {"session": session, "user": user}

    async def update_session(self, data: Mapping[str, Any]) -> Row | None:
        row = insertable_from_object(SessionUpdate.fields_from(data)) or {}
        await session_repo.update_expires(self.db, row["sessionToken"], row.get("expires"))
        return object_from_row(await session_repo.get_by_token(self.db, row["sessionToken"]))

    async def delete_session(self, session_token: str) -> None:
        await session_repo.delete_by_token(self.db, session_token)
        return None

    # ===== verification tokens =====
    async def create_verification_token(self, data: Mapping[str, Any]) -> Mapping[str, Any]:
        row = insertable_from_object(VerificationToken.fields_from(data)) or {}
        await verification_token_repo.insert_token(self.db, row["identifier"], row["expires"], row["token"])
        return data

    async def use_verification_token(self, params: Mapping[str, Any]) -> Row | None:
        """Fetch and consume a token. The delete runs whether or not the token was found."""
        key = VerificationTokenKey.fields_from(params)
        async with self.db.transaction() as tx:
            found = await verification_token_repo.get_token(tx, key["identifier"], key["token"])
            await verification_token_repo.delete_token(tx, key["identifier"], key["token"])
        return object_from_row(found)

    # ===== authenticators (WebAuthn) =====
    async def create_authenticator(self, data: Mapping[str, Any]) -> Row | None:
        values = AdapterAuthenticator.fields_from(data)
        await authenticator_repo.insert_authenticator(self.db, values)
        return object_from_row(await authenticator_repo.get_by_credential_id(self.db, values["credentialID"]))

    async def get_authenticator(self, credential_id: str) -> Row | None:
        return object_from_row(await authenticator_repo.get_by_credential_id(self.db, credential_id))

    async def list_authenticators_by_user_id(self, user_id: str) -> list[Row]:
        rows = await authenticator_repo.list_by_user_id(self.db, user_id)
        return [object_from_row(r) for r in rows]

    async def update_authenticator_counter(self, credential_id: str, new_counter: int) -> Row | None:
        async with self.db.transaction() as tx:
            if await authenticator_repo.get_by_credential_id(tx, credential_id) is None:
                raise ValueError("Authenticator not found")
            await authenticator_repo.update_counter(tx, credential_id, new_counter)
        return object_from_row(await authenticator_repo.get_by_credential_id(self.db, credential_id))


def sqlite_adapter(connection_string: str | None = None) -> SQLiteAdapter:
    """Build an adapter from an explicit connection string or the environment/config.yaml."""
    return SQLiteAdapter.from_env(connection_string)
