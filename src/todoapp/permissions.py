# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from todoapp.auth.accounts import Account
from todoapp.auth.sessions import SessionManager
from todoapp.errors import Unauthenticated


@dataclass(frozen=True)
class CurrentAccount:
    account: Account
    token: str

    @property
    def id(self) -> str:
        return self.account.id


def token_from_request(request: Request) -> str:
    header = request.app.state.settings.auth_header
    return (request.headers.get(header) or "").strip()


def load_account_from_request(request: Request, sessions: SessionManager) -> CurrentAccount:
    token = token_from_request(request)
    if not token:
        raise Unauthenticated()
    return CurrentAccount(account=sessions.authenticate(token), token=token)


def require_account(request: Request) -> CurrentAccount:
    """Route dependency: resolve the bearer token or reject with 401 before the handler runs."""
    return load_account_from_request(request, request.app.state.sessions)
