"""Unit tests for database schema and migrations."""

import sqlite3

import pytest

from highlight_store.migrations import (
    get_current_version,
    get_migration_files,
    run_migrations,
)


def test_migration_files_are_ordered():
    """Migration files should be discovered and sorted by version."""
    migrations = get_migration_files()
    versions = [version for version, _ in migrations]

    assert versions == sorted(versions)
    assert versions[0] == 1
    assert migrations[0][1].name == "0001_create_highlights.sql"


def test_highlights_table_created(db_path):
    """Migrations should create the highlights table with the expected columns."""
    conn = sqlite3.connect(db_path)
    try:
        cursor = conn.execute("PRAGMA table_info(highlights)")
        columns = {row[1]: row for row in cursor.fetchall()}

        assert set(columns) == {"id", "member_id", "highlight"}
        # notnull flag is column index 3, pk flag is index 5
        assert columns["member_id"][3] == 1
        assert columns["highlight"][3] == 1
        assert columns["id"][5] == 1
    finally:
        conn.close()


def test_run_migrations_twice_is_noop(tmp_path):
    """Running migrations again should apply nothing and keep the table usable."""
    db_path = tmp_path / "twice.db"

    first = run_migrations(db_path, verbose=False)
    second = run_migrations(db_path, verbose=False)

    assert first == [1]
    assert second == []
    assert get_current_version(db_path) == 1

    conn = sqlite3.connect(db_path)
    try:
        conn.execute("INSERT INTO highlights (member_id, highlight) VALUES (1, 'a')")
        conn.commit()
        count = conn.execute("SELECT COUNT(*) FROM highlights").fetchone()[0]
        assert count == 1
    finally:
        conn.close()


def test_create_sql_is_idempotent_on_its_own(db_path):
    """The migration SQL should be safe to execute against an initialized database."""
    _, path = get_migration_files()[0]
    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(path.read_text())
        conn.executescript(path.read_text())
        cursor = conn.execute(
            "SELECT COUNT(*) FROM sqlite_master WHERE type='table' AND name='highlights'"
        )
        assert cursor.fetchone()[0] == 1
    finally:
        conn.close()


def test_unique_constraint(db_path):
    """(member_id, highlight) should be unique, but only per member."""
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("INSERT INTO highlights (member_id, highlight) VALUES (1, 'a')")
        conn.execute("INSERT INTO highlights (member_id, highlight) VALUES (2, 'a')")
        conn.commit()

        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO highlights (member_id, highlight) VALUES (1, 'a')")
    finally:
        conn.close()


def test_ids_not_reused_after_delete(db_path):
    """AUTOINCREMENT should never hand out a deleted id again."""
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("INSERT INTO highlights (member_id, highlight) VALUES (1, 'a')")
        conn.execute("INSERT INTO highlights (member_id, highlight) VALUES (1, 'b')")
        conn.execute("DELETE FROM highlights WHERE highlight = 'b'")
        cursor = conn.execute("INSERT INTO highlights (member_id, highlight) VALUES (1, 'c')")
        conn.commit()

        assert cursor.lastrowid == 3
    finally:
        conn.close()


def test_current_version_of_missing_database(tmp_path):
    """A database file that doesn't exist is at version 0."""
    assert get_current_version(tmp_path / "missing.db") == 0
