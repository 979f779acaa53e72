"""
Field sets accepted from the auth framework.

Only the fields declared here are ever written; unknown keys are dropped.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict


class _Input(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @classmethod
    def fields_from(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        """Validate ``data`` and return only the fields the caller actually set."""
        return cls.model_validate(dict(data)).model_dump(exclude_unset=True)


class AdapterUser(_Input):
    id: str | None = None
    name: str | None = None
    email: str | None = None
    emailVerified: datetime | None = None
    image: str | None = None


class AdapterSession(_Input):
    sessionToken: str
    userId: str
    expires: datetime


class SessionUpdate(_Input):
    sessionToken: str
    expires: datetime | None = None


class AdapterAccount(_Input):
    userId: str
    type: str
    provider: str
    providerAccountId: str
    refresh_token: str | None = None
    access_token: str | None = None
    expires_at: int | None = None  # epoch seconds, stored as-is
    token_type: str | None = None
    scope: str | None = None
    id_token: str | None = None
    session_state: str | None = None


class ProviderAccount(_Input):
    provider: str
    providerAccountId: str


class VerificationToken(_Input):
    identifier: str
    token: str
    expires: datetime


class VerificationTokenKey(_Input):
    identifier: str
    token: str


class AdapterAuthenticator(_Input):
    credentialID: str
    userId: str
    providerAccountId: str
    credentialPublicKey: str
    counter: int
    credentialDeviceType: str
    credentialBackedUp: bool
    transports: str | None = None


USER_COLUMNS = ("name", "email", "emailVerified", "image")
