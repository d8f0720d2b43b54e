"""
highlight-store: per-member highlight patterns backed by SQLite.

Members register text highlights (regular expressions in practice); the store
keeps each member's set free of duplicates and lets the host application find
which members a message should be forwarded to.
"""

from highlight_store.errors import (
    DuplicateHighlight,
    HighlightError,
    InvalidInput,
    StorageUnavailable,
)
from highlight_store.matching import HighlightMatcher, validate_pattern
from highlight_store.models import HighlightRecord, HighlightStore

__version__ = "0.1.0"

__all__ = [
    "DuplicateHighlight",
    "HighlightError",
    "HighlightMatcher",
    "HighlightRecord",
    "HighlightStore",
    "InvalidInput",
    "StorageUnavailable",
    "validate_pattern",
]
