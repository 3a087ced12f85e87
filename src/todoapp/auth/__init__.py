# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Account authentication.

This package provides:
- Password hashing/verification (argon2)
- Signed bearer tokens bound to an account id (itsdangerous)
- The account store, with its embedded list of issued tokens
- Login / logout / authenticate over those three
"""
