#!/usr/bin/env python3
"""
Create an account (user + profile) directly in the configured database.

Usage:
  python scripts/add_user.py --email ana@example.com --name "Ana Souza" [--password secret123]
"""
from __future__ import annotations

import argparse
import asyncio
import secrets
import sys

from togather.db.create_tables import create_all
from togather.domain.errors import translate
from togather.domain.validation import is_valid_email, is_valid_full_name, is_valid_password
from togather.services.backend import BackendError
from togather.services.sql_backend import SQLAuthBackend


def main() -> None:
    ap = argparse.ArgumentParser(description="Create a ToGather account")
    ap.add_argument("--email", required=True, help="account e-mail")
    ap.add_argument("--name", required=True, help="full name stored in the profile")
    ap.add_argument("--password", help="password (default: random 16 chars)")
    args = ap.parse_args()

    email = (args.email or "").strip()
    if not is_valid_email(email):
        raise SystemExit("Invalid e-mail")
    if not is_valid_full_name(args.name):
        raise SystemExit("Full name must have at least 2 characters")
    password = args.password or secrets.token_urlsafe(12)
    if not is_valid_password(password):
        raise SystemExit("Password must be at least 8 characters")

    create_all()
    client = SQLAuthBackend().client(client_key="cli")
    try:
        session = asyncio.run(client.register(email, password, args.name.strip()))
    except BackendError as exc:
        raise SystemExit(translate(exc.code))
    print("OK: account created")
    print(f"  UID: {session.uid}")
    print(f"  Email: {session.email}")
    if not args.password:
        print(f"  Password: {password}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI only
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
