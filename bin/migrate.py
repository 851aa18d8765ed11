#!/usr/bin/env python3
"""Minimal SQL migration runner for the Webhook Inspector."""
from __future__ import annotations

import argparse
import asyncio
import os
from pathlib import Path

import asyncpg

from webhook_inspector.db.migrations import apply_pending, load_migrations, pending_migrations


def _default_migrations_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "migrations"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply SQL migrations sequentially.")
    parser.add_argument(
        "--database-url",
        "-d",
        default=os.getenv("DATABASE_URL"),
        help="PostgreSQL connection string. Defaults to DATABASE_URL env variable.",
    )
    parser.add_argument(
        "--migrations-dir",
        "-m",
        type=Path,
        default=_default_migrations_dir(),
        help="Directory with *.sql migrations (sorted lexicographically).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only list pending migrations without applying.",
    )
    return parser.parse_args()


async def apply_migrations(database_url: str, migrations_dir: Path, dry_run: bool) -> None:
    migrations = load_migrations(migrations_dir)
    conn = await asyncpg.connect(database_url)
    try:
        pending = await pending_migrations(conn, migrations)
        if not pending:
            print("No pending migrations.")
            return
        if dry_run:
            for _version, path, _sql, _checksum in pending:
                print(f"[dry-run] Pending migration: {path.name}")
            print(f"{len(pending)} migration(s) pending.")
            return
        await apply_pending(conn, pending)
        print(f"Applied {len(pending)} migration(s).")
    finally:
        await conn.close()


async def main_async() -> None:
    args = parse_args()
    if not args.database_url:
        raise SystemExit("Database URL must be provided via --database-url or DATABASE_URL env.")
    await apply_migrations(args.database_url, args.migrations_dir, args.dry_run)


def main() -> None:
    asyncio.run(main_async())


if __name__ == "__main__":
    main()
