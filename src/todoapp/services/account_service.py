# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from email_validator import EmailNotValidError, validate_email

from todoapp.auth.accounts import AccountStore
from todoapp.auth.passwords import MAX_PASSWORD_LENGTH, CredentialHasher
from todoapp.auth.sessions import LoginResult, SessionManager
from todoapp.errors import ValidationError

MIN_PASSWORD_LENGTH = 6


def check_email(email: str) -> str:
    e = (email or "").strip()
    try:
        return validate_email(e, check_deliverability=False).normalized
    except EmailNotValidError as exc:
        raise ValidationError(f"'{e}' is not a valid email", [{"loc": ["email"], "msg": str(exc)}]) from exc


def check_password(password: str) -> str:
    p = password or ""
    if len(p) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "Password too short",
            [{"loc": ["password"], "msg": f"at least {MIN_PASSWORD_LENGTH} characters"}],
        )
    if len(p) > MAX_PASSWORD_LENGTH:
        raise ValidationError("Password too long", [{"loc": ["password"], "msg": "too long"}])
    return p


class AccountService:
    """Registration: the only place that creates accounts."""

    def __init__(
        self,
        accounts: AccountStore,
        hasher: CredentialHasher,
        sessions: Optional[SessionManager] = None,
    ):
        self.accounts = accounts
        self.hasher = hasher
        self.sessions = sessions

    def create_account(self, email: str, password: str):
        e = check_email(email)
        p = check_password(password)
        return self.accounts.create(e, self.hasher.hash(p))

    def register(self, email: str, password: str) -> LoginResult:
        """Create the account and open its first session."""
        if self.sessions is None:
            raise RuntimeError("register() needs a SessionManager")
        account = self.create_account(email, password)
        token = self.sessions.issue_session(account)
        return LoginResult(account=account.stripped(), token=token)
