"""
Data models and database operations for the highlight store.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from .errors import DuplicateHighlight, InvalidInput, StorageUnavailable
from .migrations import run_migrations

DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class HighlightRecord:
    """A single highlight registered by a member."""

    id: int
    member_id: int
    highlight_text: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> HighlightRecord:
        return cls(id=row["id"], member_id=row["member_id"], highlight_text=row["highlight"])


def _check_member_id(member_id: int) -> None:
    # bool is an int subclass but never a member id
    if not isinstance(member_id, int) or isinstance(member_id, bool):
        raise InvalidInput(f"member_id must be an integer, got {member_id!r}")


def _check_highlight_text(highlight_text: str) -> None:
    if not isinstance(highlight_text, str) or not highlight_text:
        raise InvalidInput("Highlight text must be a non-empty string")


class HighlightStore:
    """
    Database operations for the highlights table.

    Each operation opens its own connection and closes it before returning,
    so concurrent callers only contend inside SQLite. Uniqueness of
    (member_id, highlight) is enforced by the table's UNIQUE constraint.
    """

    def __init__(self, db_path: Path, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.db_path = db_path
        self.timeout = timeout

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """
        Yield a connection, committing on success.

        IntegrityError is re-raised untouched so callers can classify it;
        every other sqlite3 error becomes StorageUnavailable.
        """
        try:
            # mode=rw: never create a database file outside initialize()
            conn = sqlite3.connect(
                f"file:{quote(str(self.db_path))}?mode=rw", uri=True, timeout=self.timeout
            )
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot open database {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.IntegrityError:
            conn.rollback()
            raise
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageUnavailable(f"Database operation failed: {e}") from e
        finally:
            conn.close()

    def initialize(self) -> list[int]:
        """Create the schema if needed. Safe to call on every startup."""
        try:
            return run_migrations(self.db_path, verbose=False, timeout=self.timeout)
        except (sqlite3.Error, OSError) as e:
            raise StorageUnavailable(f"Cannot initialize database {self.db_path}: {e}") from e

    def add(self, member_id: int, highlight_text: str) -> HighlightRecord:
        """
        Register a highlight for a member.

        Raises DuplicateHighlight if the member already has this exact text.
        The decision is made by the insert itself, so two racing callers get
        exactly one record and one DuplicateHighlight.
        """
        _check_member_id(member_id)
        _check_highlight_text(highlight_text)

        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "INSERT INTO highlights (member_id, highlight) VALUES (?, ?)",
                    (member_id, highlight_text),
                )
                highlight_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            if e.sqlite_errorname == "SQLITE_CONSTRAINT_UNIQUE":
                raise DuplicateHighlight(member_id, highlight_text) from e
            raise InvalidInput(f"Highlight rejected by database: {e}") from e

        return HighlightRecord(id=highlight_id, member_id=member_id, highlight_text=highlight_text)

    def remove(self, member_id: int, highlight_text: str) -> bool:
        """Delete a member's highlight by text. Returns whether a row was deleted."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM highlights WHERE member_id = ? AND highlight = ?",
                (member_id, highlight_text),
            )
            return cursor.rowcount > 0

    def remove_by_id(self, member_id: int, highlight_id: int) -> bool:
        """Delete a highlight by id, only if it belongs to member_id."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM highlights WHERE id = ? AND member_id = ?",
                (highlight_id, member_id),
            )
            return cursor.rowcount > 0

    def list(self, member_id: int) -> list[HighlightRecord]:
        """Get all highlights for a member in insertion order."""
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT id, member_id, highlight FROM highlights WHERE member_id = ? ORDER BY id ASC",
                (member_id,),
            )
            return [HighlightRecord.from_row(row) for row in cursor.fetchall()]

    def list_all(self) -> list[HighlightRecord]:
        """Get every highlight for every member in insertion order."""
        with self._connect() as conn:
            cursor = conn.execute("SELECT id, member_id, highlight FROM highlights ORDER BY id ASC")
            return [HighlightRecord.from_row(row) for row in cursor.fetchall()]

    def exists(self, member_id: int, highlight_text: str) -> bool:
        """Advisory check; add() still enforces uniqueness on its own."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM highlights WHERE member_id = ? AND highlight = ?",
                (member_id, highlight_text),
            ).fetchone()
        return row is not None
