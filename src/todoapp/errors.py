# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exceptions raised by the service and mapped to HTTP responses in app.py."""

from __future__ import annotations

from typing import List, Optional


class TodoAppError(Exception):
    """Base exception for the service."""


class InvalidCredentials(TodoAppError):
    """Unknown email or wrong password. Both causes look the same outside."""


class Unauthenticated(TodoAppError):
    """Missing, malformed, tampered or revoked token."""


class NotFound(TodoAppError):
    pass


class AccountNotFound(NotFound):
    pass


class TodoNotFound(NotFound):
    pass


class ValidationError(TodoAppError):
    """Malformed request data."""

    def __init__(self, message: str, errors: Optional[List[dict]] = None):
        self.errors = errors or [{"msg": message}]
        super().__init__(message)


class Conflict(TodoAppError):
    """Unique field already taken (e.g. account email)."""


class TokenDecodeError(TodoAppError):
    """Token failed signature or payload checks."""
