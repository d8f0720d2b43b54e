"""
Regex matching over stored highlights.

Highlights are stored as plain text, but the host application treats each one
as a regular expression: when a message matches a member's pattern, that
member gets notified. Patterns are compiled with RE2, which matches in time
linear in the haystack, so no member's pattern can stall matching for others.
RE2 has no backreferences or lookaround; such patterns are rejected.
"""

from __future__ import annotations

import logging
from typing import Any

import re2

from .errors import InvalidInput
from .models import HighlightStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_PATTERN_LENGTH = 1024


def validate_pattern(text: str, max_length: int = DEFAULT_MAX_PATTERN_LENGTH) -> Any:
    """
    Check that text is usable as a highlight pattern and return it compiled.

    Raises InvalidInput for empty, overlong or malformed patterns, and for
    patterns RE2 does not support.
    """
    if not isinstance(text, str) or not text:
        raise InvalidInput("Highlight text must be a non-empty string")
    if len(text) > max_length:
        raise InvalidInput(f"Pattern is {len(text)} characters; the limit is {max_length}")
    try:
        return re2.compile(text)
    except re2.error as e:
        raise InvalidInput(f"Invalid pattern: {e}") from e


class HighlightMatcher:
    """In-memory index of every member's compiled highlight patterns."""

    def __init__(self, entries: list[tuple[int, Any]] | None = None):
        self._entries = entries or []

    @classmethod
    def load(cls, store: HighlightStore) -> HighlightMatcher:
        """Build an index from the store, skipping patterns that do not compile."""
        entries = []
        for record in store.list_all():
            try:
                entries.append((record.member_id, re2.compile(record.highlight_text)))
            except re2.error as e:
                logger.warning(
                    f"Invalid regex pattern {record.highlight_text!r} "
                    f"for member {record.member_id}: {e}"
                )
        logger.debug(f"Loaded {len(entries)} highlight pattern(s)")
        return cls(entries)

    def refresh(self, store: HighlightStore) -> None:
        """Reload patterns after highlights were added or removed."""
        self._entries = HighlightMatcher.load(store)._entries

    def __len__(self) -> int:
        return len(self._entries)

    def find(self, haystack: str) -> list[tuple[int, str]]:
        """Return one (member_id, pattern) per member with a matching highlight."""
        found: dict[int, str] = {}
        for member_id, pattern in self._entries:
            if member_id not in found and pattern.search(haystack):
                found[member_id] = pattern.pattern
        return sorted(found.items())

    def matches(self, member_id: int, haystack: str) -> list[str]:
        """Return every pattern of one member that matches haystack."""
        return [
            pattern.pattern
            for owner, pattern in self._entries
            if owner == member_id and pattern.search(haystack)
        ]
