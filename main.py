#!/usr/bin/env python3
"""
Robinson -- session-authenticated report site.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0
  python main.py create-user alice
  python main.py create-user admin --admin

Environment variables (or .env):
  PORT            Required. Port the web server listens on.
  SESSION_SECRET  Required. At least 32 characters; signs the session cookie.
  DATABASE_URL    Optional. SQLAlchemy URL of the credential store.
  DEBUG           Optional. Enables debug logging and auto-reload.

A missing or invalid PORT / SESSION_SECRET stops the process before any
socket is bound.
"""

import argparse
import getpass
import sys
from typing import Optional

import uvicorn
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.passwords import hash_password
from auth.store import UserStore
from core.config import Settings, get_settings


def _load_settings() -> Optional[Settings]:
    """Return validated settings, or None after reporting every problem."""
    try:
        return get_settings()
    except ValidationError as exc:
        print("  [!] Invalid configuration:", file=sys.stderr)
        for err in exc.errors():
            field = ".".join(str(p) for p in err["loc"]).upper() or "settings"
            print(f"      {field}: {err['msg']}", file=sys.stderr)
        return None


def _read_password(args: argparse.Namespace) -> Optional[str]:
    if args.password:
        return args.password
    first = getpass.getpass("Password: ")
    second = getpass.getpass("Repeat password: ")
    if first != second:
        print("  [!] Passwords do not match.", file=sys.stderr)
        return None
    return first


def _serve(args: argparse.Namespace, settings: Settings) -> int:
    print(f"Robinson running at http://localhost:{settings.port}/")
    uvicorn.run(
        "asgi:app",
        host=args.host,
        port=settings.port,
        reload=settings.debug,
    )
    return 0


def _create_user(args: argparse.Namespace, settings: Settings) -> int:
    username = args.username.strip()
    if not username:
        print("  [!] Username is required.", file=sys.stderr)
        return 1

    password = _read_password(args)
    if not password:
        print("  [!] Password is required.", file=sys.stderr)
        return 1

    try:
        hashed = hash_password(password, rounds=settings.bcrypt_rounds)
    except ValueError as exc:
        print(f"  [!] {exc}", file=sys.stderr)
        return 1

    store = UserStore(db_url=settings.database_url)
    try:
        user_id = store.create_user(User(username=username, hashed_password=hashed, admin=args.admin))
    except IntegrityError:
        print(f"  [!] User '{username}' already exists.", file=sys.stderr)
        return 1
    finally:
        store.close()

    role = "admin" if args.admin else "user"
    print(f"Created {role} '{username}' (id {user_id}).")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="robinson",
        description="Robinson report site: web server and user provisioning.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the web server on the configured PORT")
    serve.add_argument(
        "--host",
        default="127.0.0.1",
        help="Interface to bind (default: 127.0.0.1)",
    )

    create = sub.add_parser("create-user", help="Add a user account to the credential store")
    create.add_argument("username", help="Login name; must be unique")
    create.add_argument("--admin", action="store_true", help="Grant the administrator flag")
    create.add_argument(
        "--password",
        default=None,
        help="Password (prompted for when omitted; avoid on shared machines -- it lands in shell history)",
    )

    args = parser.parse_args(argv)

    settings = _load_settings()
    if settings is None:
        return 1

    if args.command == "serve":
        return _serve(args, settings)
    return _create_user(args, settings)


if __name__ == "__main__":
    sys.exit(main())
