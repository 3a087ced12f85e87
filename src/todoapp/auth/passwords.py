# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

MAX_PASSWORD_LENGTH = 1024


class CredentialHasher:
    """Salted one-way password hashing.

    Two hashes of the same password differ, so digests are only ever compared
    through ``verify`` (argon2 compares in constant time).
    """

    def __init__(self, hasher: Optional[PasswordHasher] = None):
        self._ph = hasher or PasswordHasher()

    def hash(self, plain: str) -> str:
        if not plain:
            raise ValueError("Empty password")
        if len(plain) > MAX_PASSWORD_LENGTH:
            raise ValueError("Password too long")
        return self._ph.hash(plain)

    def verify(self, plain: str, digest: str) -> bool:
        if not digest or not plain or not isinstance(digest, str):
            return False
        try:
            return self._ph.verify(digest, plain)
        except (VerificationError, InvalidHashError):
            return False

