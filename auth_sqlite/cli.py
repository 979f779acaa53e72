"""
auth-sqlite command line

Commands:
  migrate up      Create the adapter tables (users, sessions, accounts, verification_tokens, authenticator)
  migrate down    Drop the adapter tables
  check           Show which adapter tables exist

The database comes from --url, else AUTH_SQLITE_URL, else config.yaml (database_url).
"""
from __future__ import annotations

import argparse
import asyncio
import logging

from .db import ENV_URL, Database, get_env_connection_string
from .migrations import ADAPTER_TABLES, down, existing_tables, up


def _open_db(args) -> Database:
    url = args.url or get_env_connection_string()
    if not url:
        raise SystemExit(f"Please set {ENV_URL}, database_url in config.yaml, or pass --url")
    return Database.from_url(url)


def cmd_migrate(args) -> int:
    db = _open_db(args)
    run = up if args.direction == "up" else down
    failed = asyncio.run(run(db))
    print(f"migrate {args.direction}: {'OK' if not failed else f'{failed} statement(s) failed'}")
    return 1 if failed else 0


def cmd_check(args) -> int:
    db = _open_db(args)
    present = asyncio.run(existing_tables(db))
    for t in ADAPTER_TABLES:
        print(f"{t:<22}{'present' if t in present else 'missing'}")
    return 0 if len(present) == len(ADAPTER_TABLES) else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="SQLite auth adapter tools")
    parser.add_argument("--url", default=None, help="sqlite:///path.db, file: URI or plain path")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers()

    p_mig = sub.add_parser("migrate", help="create or drop the adapter tables")
    p_mig.add_argument("direction", choices=["up", "down"])
    p_mig.set_defaults(func=cmd_migrate)

    p_check = sub.add_parser("check", help="list adapter tables")
    p_check.set_defaults(func=cmd_check)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if hasattr(args, "func"):
        return args.func(args)
    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
