# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _truthy(v: str) -> bool:
    return (v or "").strip().lower() in {"1", "true", "yes", "y"}


@dataclass(frozen=True)
class Settings:
    secret_key: str
    token_salt: str
    data_dir: Path
    auth_header: str
    host: str
    port: int
    reload: bool
    log_level: str


def load_settings() -> Settings:
    """Read configuration from the environment. Called once at startup."""
    secret = os.getenv("SECRET_KEY") or os.getenv("TODOAPP_SECRET_KEY")
    if not secret:
        raise RuntimeError("Missing SECRET_KEY (or TODOAPP_SECRET_KEY) in environment")
    return Settings(
        secret_key=secret,
        token_salt=os.getenv("TODOAPP_TOKEN_SALT", "todoapp.auth.v1"),
        data_dir=Path(os.getenv("TODOAPP_DATA_DIR", "data")).resolve(),
        auth_header=os.getenv("TODOAPP_AUTH_HEADER", "x-auth").strip().lower() or "x-auth",
        host=os.getenv("TODOAPP_HOST", "0.0.0.0"),
        port=int(os.getenv("TODOAPP_PORT", "8000")),
        reload=_truthy(os.getenv("TODOAPP_RELOAD", "false")),
        log_level=os.getenv("TODOAPP_LOG_LEVEL", "INFO").upper(),
    )
