# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Login, logout and token resolution.

There is no separate session table: the ``tokens`` list on each account is
the set of live sessions. Login appends to it, logout removes one entry and
a failed login empties it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from todoapp.auth.accounts import Account, AccountStore, TokenEntry
from todoapp.auth.passwords import CredentialHasher
from todoapp.auth.tokens import AUTH_PURPOSE, TokenCodec
from todoapp.errors import InvalidCredentials, TokenDecodeError, Unauthenticated

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    account: Account
    token: str

    @property
    def account_id(self) -> str:
        return self.account.id


class SessionManager:
    def __init__(self, accounts: AccountStore, hasher: CredentialHasher, codec: TokenCodec):
        self.accounts = accounts
        self.hasher = hasher
        self.codec = codec

    def issue_session(self, account: Account) -> str:
        """Mint an auth token for ``account`` and record it as live."""
        token = self.codec.issue(account.id, AUTH_PURPOSE)
        self.accounts.append_token(account.id, TokenEntry(purpose=AUTH_PURPOSE, token=token))
        return token

    def login(self, email: str, password: str) -> LoginResult:
        account = self.accounts.find_by_email(email)
        if account is None:
            logger.debug("Login for unknown email %s", email)
            raise InvalidCredentials()

        if not self.hasher.verify(password, account.password_hash):
            # A wrong password revokes every outstanding session of the account.
            self.accounts.clear_tokens(account.id)
            logger.warning("Failed login for account %s; all its tokens were revoked", account.id)
            raise InvalidCredentials()

        token = self.issue_session(account)
        logger.info("Login for account %s", account.id)
        return LoginResult(account=account.stripped(), token=token)

    def authenticate(self, token: str) -> Account:
        try:
            claims = self.codec.decode(token)
        except TokenDecodeError as e:
            raise Unauthenticated() from e

        account = self.accounts.find_by_id(claims.account_id)
        if account is None:
            raise Unauthenticated()
        if claims.purpose != AUTH_PURPOSE or not account.has_token(token, AUTH_PURPOSE):
            raise Unauthenticated()
        return account.stripped()

    def logout(self, account_id: str, token: str) -> None:
        self.accounts.remove_token(account_id, token)
        logger.info("Logout for account %s", account_id)
