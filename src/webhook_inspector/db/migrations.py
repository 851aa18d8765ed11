"""SQL migrations: loading, applying and the startup hook."""
from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, Protocol

import asyncpg
import structlog
from aiohttp import web

logger = structlog.get_logger(__name__)

SCHEMA_MIGRATIONS_DDL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version text PRIMARY KEY,
    checksum text NOT NULL,
    applied_at timestamptz NOT NULL DEFAULT now()
);
"""


class SettingsProtocol(Protocol):
    """Protocol for settings objects with database configuration."""

    database_url: Any


def load_migrations(directory: Path) -> dict[str, Path]:
    """Return ``{version: path}`` for every ``*.sql`` file, sorted lexicographically."""
    if not directory.exists():
        raise FileNotFoundError(f"Migrations directory does not exist: {directory}")
    migrations: dict[str, Path] = {}
    for path in sorted(directory.glob("*.sql")):
        version = path.stem
        if version in migrations:
            raise ValueError(f"Duplicate migration version detected: {version}")
        migrations[version] = path
    if not migrations:
        raise ValueError(f"No *.sql files found in {directory}")
    return migrations


async def pending_migrations(
    conn: asyncpg.Connection, migrations: dict[str, Path]
) -> list[tuple[str, Path, str, str]]:
    """Return ``(version, path, sql, checksum)`` for migrations not yet recorded.

    Raises ``RuntimeError`` when an applied migration file was edited afterwards.
    """
    await conn.execute(SCHEMA_MIGRATIONS_DDL)
    rows = await conn.fetch("SELECT version, checksum FROM schema_migrations")
    applied = {row["version"]: row["checksum"] for row in rows}
    pending = []
    for version, path in migrations.items():
        sql = path.read_text(encoding="utf-8")
        checksum = hashlib.sha256(sql.encode("utf-8")).hexdigest()
        if version in applied:
            if applied[version] != checksum:
                raise RuntimeError(
                    f"Checksum mismatch for {version}: "
                    f"{applied[version]} (db) != {checksum} (file)"
                )
            continue
        pending.append((version, path, sql, checksum))
    return pending


async def apply_pending(conn: asyncpg.Connection, pending: list[tuple[str, Path, str, str]]) -> None:
    """Apply each pending migration in its own transaction."""
    for version, path, sql, checksum in pending:
        logger.info("Applying migration", migration=path.name)
        async with conn.transaction():
            await conn.execute(sql)
            await conn.execute(
                "INSERT INTO schema_migrations (version, checksum) VALUES ($1, $2)",
                version,
                checksum,
            )


def create_migration_runner(
    settings: SettingsProtocol,
    possible_paths: Iterable[Path],
    *,
    max_retries: int = 5,
    retry_delay: float = 2.0,
) -> Callable[[web.Application], Awaitable[None]]:
    """Create an aiohttp startup hook to apply SQL migrations."""
    possible_paths_list = list(possible_paths)

    async def apply_migrations_on_startup(_app: web.Application) -> None:
        """Apply pending migrations on startup."""
        migrations_dir = next((path for path in possible_paths_list if path.exists()), None)
        if migrations_dir is None:
            logger.warning("Migrations directory not found, skipping", tried=[str(p) for p in possible_paths_list])
            return

        try:
            migrations = load_migrations(migrations_dir)
        except ValueError:
            logger.warning("No migrations found, skipping", directory=str(migrations_dir))
            return

        conn = None
        for attempt in range(1, max_retries + 1):
            try:
                conn = await asyncpg.connect(str(settings.database_url))
                break
            except (OSError, asyncpg.PostgresError) as e:
                logger.warning(
                    "Database connection error",
                    attempt=attempt,
                    max_retries=max_retries,
                    error=str(e),
                )
                if attempt < max_retries:
                    await asyncio.sleep(retry_delay)

        if conn is None:
            logger.error("Failed to connect to database after retries, skipping migrations")
            return

        try:
            pending = await pending_migrations(conn, migrations)
            if not pending:
                logger.info("No pending migrations")
                return
            await apply_pending(conn, pending)
            logger.info("Migrations applied", count=len(pending))
        finally:
            await conn.close()

    return apply_migrations_on_startup
