# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import secrets
from dataclasses import dataclass

from itsdangerous import BadData, URLSafeSerializer

from todoapp.errors import TokenDecodeError

AUTH_PURPOSE = "auth"


@dataclass(frozen=True)
class TokenClaims:
    account_id: str
    purpose: str


class TokenCodec:
    """Signs and verifies bearer tokens carrying ``{account_id, purpose}``.

    Tokens carry no timestamp and never expire. A random nonce keeps tokens
    from separate logins distinct. Any process configured with the same
    secret and salt verifies tokens issued by another.
    """

    def __init__(self, secret_key: str, *, salt: str = "todoapp.auth.v1"):
        if not secret_key:
            raise ValueError("TokenCodec needs a secret key")
        self._serializer = URLSafeSerializer(secret_key=secret_key, salt=salt)

    def issue(self, account_id: str, purpose: str = AUTH_PURPOSE) -> str:
        return self._serializer.dumps(
            {"_id": account_id, "access": purpose, "n": secrets.token_urlsafe(8)}
        )

    def decode(self, token: str) -> TokenClaims:
        if not token or not isinstance(token, str):
            raise TokenDecodeError("empty token")
        try:
            data = self._serializer.loads(token)
        except BadData as e:
            raise TokenDecodeError("bad token") from e
        if not isinstance(data, dict):
            raise TokenDecodeError("bad token payload")
        account_id = str(data.get("_id") or "").strip()
        purpose = str(data.get("access") or "").strip()
        if not account_id or not purpose:
            raise TokenDecodeError("bad token payload")
        return TokenClaims(account_id=account_id, purpose=purpose)
