"""
Schema migrations for the highlight store.

Migrations are numbered SQL files in this directory (e.g., 0001_create_highlights.sql).
They are applied in order based on the numeric prefix, and each applied version
is recorded in the schema_migrations table so re-running is a no-op.
"""

import logging
import re
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

SCHEMA_MIGRATIONS_SQL = """
    CREATE TABLE IF NOT EXISTS schema_migrations (
        version INTEGER PRIMARY KEY,
        applied_ts TEXT NOT NULL
    )
"""


def get_migration_files() -> list[tuple[int, Path]]:
    """Get all migration files sorted by version number."""
    migrations = []
    for path in MIGRATIONS_DIR.glob("*.sql"):
        match = re.match(r"^(\d+)_", path.name)
        if match:
            migrations.append((int(match.group(1)), path))
    return sorted(migrations, key=lambda x: x[0])


def get_applied_versions(conn: sqlite3.Connection) -> set[int]:
    """Get the set of already-applied migration versions."""
    try:
        cursor = conn.execute("SELECT version FROM schema_migrations")
        return {row[0] for row in cursor.fetchall()}
    except sqlite3.OperationalError:
        # Table doesn't exist yet
        return set()


def apply_migration(conn: sqlite3.Connection, version: int, path: Path) -> None:
    """Apply a single migration file and record its version."""
    sql = path.read_text()
    now = datetime.now(UTC).isoformat()

    conn.executescript(sql)

    # Another process may have recorded the same version first
    conn.execute(
        "INSERT OR IGNORE INTO schema_migrations (version, applied_ts) VALUES (?, ?)",
        (version, now),
    )
    conn.commit()


def run_migrations(db_path: Path, verbose: bool = True, timeout: float = 5.0) -> list[int]:
    """
    Run all pending migrations on the database.

    Returns list of versions that were applied. sqlite3 errors propagate to
    the caller unchanged.
    """
    log = logger.info if verbose else logger.debug
    conn = sqlite3.connect(db_path, timeout=timeout)
    applied = []

    try:
        conn.execute(SCHEMA_MIGRATIONS_SQL)
        conn.commit()

        already_applied = get_applied_versions(conn)

        for version, path in get_migration_files():
            if version in already_applied:
                log(f"Skipping migration {version} (already applied)")
                continue

            log(f"Applying migration {version}: {path.name}")
            apply_migration(conn, version, path)
            applied.append(version)

        if not applied:
            log("No new migrations to apply.")

    finally:
        conn.close()

    return applied


def get_current_version(db_path: Path) -> int:
    """Get the current schema version (0 for a missing or empty database)."""
    if not db_path.exists():
        return 0

    conn = sqlite3.connect(db_path)
    try:
        applied = get_applied_versions(conn)
        return max(applied) if applied else 0
    finally:
        conn.close()
