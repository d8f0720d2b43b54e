"""Shared pytest fixtures for highlight store tests."""

import pytest

from highlight_store.migrations import run_migrations
from highlight_store.models import HighlightStore


@pytest.fixture
def db_path(tmp_path):
    """Create a temporary database with full schema via migrations.

    This is the canonical way to get a test database - uses the same
    migration system as production.
    """
    db_file = tmp_path / "test_highlights.db"
    run_migrations(db_file, verbose=False)
    return db_file


@pytest.fixture
def store(db_path):
    """A HighlightStore over an isolated, freshly migrated database."""
    return HighlightStore(db_path, timeout=1.0)
