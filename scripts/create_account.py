#!/usr/bin/env python3
from __future__ import annotations

import os
from getpass import getpass
from pathlib import Path

from todoapp.auth.accounts import AccountStore
from todoapp.auth.passwords import CredentialHasher
from todoapp.errors import Conflict, ValidationError
from todoapp.infra.document_store import DocumentStore
from todoapp.services.account_service import AccountService

DATA_DIR = Path(os.getenv("TODOAPP_DATA_DIR", "data")).resolve()


def main() -> None:
    accounts_path = DATA_DIR / "accounts.yml"
    service = AccountService(AccountStore(DocumentStore("accounts", accounts_path)), CredentialHasher())

    email = input("Email: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        account = service.create_account(email, pw1)
    except (ValidationError, Conflict) as e:
        raise SystemExit(str(e))

    print(f"OK -> {account.id} in {accounts_path}")


if __name__ == "__main__":
    main()
