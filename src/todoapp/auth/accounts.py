# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from todoapp.errors import AccountNotFound
from todoapp.infra.document_store import DocumentStore

logger = logging.getLogger(__name__)

TOKENS_FIELD = "tokens"


@dataclass(frozen=True)
class TokenEntry:
    purpose: str
    token: str

    def to_doc(self) -> dict:
        return {"purpose": self.purpose, "token": self.token}


@dataclass(frozen=True)
class Account:
    id: str
    email: str
    password_hash: str
    tokens: Tuple[TokenEntry, ...] = ()

    def __repr__(self) -> str:
        return f"Account(id={self.id!r}, email={self.email!r}, tokens={len(self.tokens)})"

    def has_token(self, token: str, purpose: str) -> bool:
        return any(t.token == token and t.purpose == purpose for t in self.tokens)

    def stripped(self) -> "Account":
        """Copy without credentials or tokens, for handing to request handlers."""
        return replace(self, password_hash="", tokens=())

    def public(self) -> dict:
        """Fields safe to return to clients."""
        return {"id": self.id, "email": self.email}


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup (domain lowercased, local part kept)."""
    e = (email or "").strip()
    try:
        return validate_email(e, check_deliverability=False).normalized
    except EmailNotValidError:
        return e


def _from_doc(doc: dict) -> Account:
    entries = []
    for t in doc.get(TOKENS_FIELD) or []:
        if not isinstance(t, dict):
            continue
        entries.append(TokenEntry(purpose=str(t.get("purpose") or ""), token=str(t.get("token") or "")))
    return Account(
        id=doc["id"],
        email=str(doc.get("email") or ""),
        password_hash=str(doc.get("password_hash") or ""),
        tokens=tuple(entries),
    )


class AccountStore:
    """Account persistence. Token list changes are single atomic updates."""

    def __init__(self, documents: DocumentStore):
        self._docs = documents

    def create(self, email: str, password_hash: str) -> Account:
        if not password_hash:
            raise ValueError("Accounts are stored with a password hash, never without one")
        doc = self._docs.insert(
            {"email": normalize_email(email), "password_hash": password_hash, TOKENS_FIELD: []},
            unique=("email",),
        )
        logger.info("Created account %s", doc["id"])
        return _from_doc(doc)

    def find_by_email(self, email: str) -> Optional[Account]:
        e = normalize_email(email)
        if not e:
            return None
        doc = self._docs.find_one(email=e)
        return _from_doc(doc) if doc else None

    def find_by_id(self, account_id: str) -> Optional[Account]:
        doc = self._docs.find_by_id(account_id)
        return _from_doc(doc) if doc else None

    def append_token(self, account_id: str, entry: TokenEntry) -> None:
        if not self._docs.push(account_id, TOKENS_FIELD, entry.to_doc()):
            raise AccountNotFound(account_id)

    def remove_token(self, account_id: str, token: str) -> None:
        if not self._docs.pull(account_id, TOKENS_FIELD, token=token):
            raise AccountNotFound(account_id)

    def clear_tokens(self, account_id: str) -> None:
        if not self._docs.set(account_id, TOKENS_FIELD, []):
            raise AccountNotFound(account_id)
