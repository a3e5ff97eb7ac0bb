#!/usr/bin/env python3
"""
Create the first administrator account (only when no account exists yet),
using auth.admin_username / auth.admin_default_password from config.

Usage:
    python scripts/bootstrap_admin.py
    python scripts/bootstrap_admin.py --username admin --password 'Str0ng!pass'
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from config.settings import settings
from sessiongate.auth import Role, build_auth_service
from sessiongate.db import init_db
from sessiongate.db.repositories import SqlAccountStore


def main():
    parser = argparse.ArgumentParser(description="Bootstrap first admin account")
    parser.add_argument("--username", default=None, help="Admin username (default: from config)")
    parser.add_argument("--password", default=None, help="Admin password (default: from config)")
    args = parser.parse_args()

    init_db()
    accounts = SqlAccountStore().list_accounts()
    if accounts:
        print(f"Accounts already exist ({len(accounts)}). Register further users via POST /api/v1/authentication/register.")
        return

    username = args.username or settings.auth.admin_username
    password = args.password or settings.auth.admin_default_password
    if not username or not password:
        print("Error: username and password required (set in config or --username/--password)")
        sys.exit(1)

    result = build_auth_service().register(username, password, Role.ADMIN)
    if not result.ok:
        print(f"Error: {result.message}")
        sys.exit(1)
    print(f"Created admin account: {username} (id={result.value.id})")
    print("Login: POST /api/v1/authentication/login with body {\"username\": \"%s\", \"password\": \"...\"}" % username)


if __name__ == "__main__":
    main()
