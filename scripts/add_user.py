#!/usr/bin/env python3
"""
Create a user directly in the database.

Usage:
  python scripts/add_user.py --email user@example.com --name "Jane Doe" [--password secret123]
"""
from __future__ import annotations

import argparse
import secrets
import sys

from blogapi.services.auth_service import AccountExistsError, AuthService, RegistrationError


def gen_password(length: int = 16) -> str:
    return secrets.token_urlsafe(length)[:length]


def main() -> None:
    ap = argparse.ArgumentParser(description="Create a blog user")
    ap.add_argument("--email", required=True, help="Login e-mail")
    ap.add_argument("--name", required=True, help="Full name shown on posts")
    ap.add_argument("--password", help="Password (default: random, printed once)")
    args = ap.parse_args()

    password = (args.password or "").strip() or gen_password()
    try:
        user = AuthService().register(args.email, password, args.name)
    except RegistrationError as exc:
        raise SystemExit(f"Invalid data: {exc.message}")
    except AccountExistsError:
        raise SystemExit(f"User '{args.email}' already exists")

    print("OK: user created")
    print(f"  ID: {user.id}")
    print(f"  Email: {user.email}")
    if not args.password:
        print(f"  Password: {password}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
