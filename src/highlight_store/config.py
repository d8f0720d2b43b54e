"""
Configuration for the highlight store.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .models import DEFAULT_TIMEOUT_SECONDS


@dataclass
class StoreConfig:
    """Where the highlights database lives and how long to wait for it."""

    db_path: Path = field(default_factory=lambda: Path("highlights.db"))
    db_path_env: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def get_db_path(self) -> Path:
        """Get database path from environment, falling back to config."""
        if self.db_path_env:
            value = os.environ.get(self.db_path_env)
            if value:
                return Path(value)
        return self.db_path


@dataclass
class MatchingConfig:
    """Limits applied to highlight patterns."""

    max_pattern_length: int = 1024


@dataclass
class HighlightConfig:
    """Complete highlight store configuration."""

    enabled: bool = True
    store: StoreConfig = field(default_factory=StoreConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HighlightConfig":
        """Create config from a dictionary (e.g., from YAML)."""
        config = cls()

        if "enabled" in data:
            config.enabled = data["enabled"]

        if "store" in data:
            store = data["store"]
            config.store = StoreConfig(
                db_path=Path(store.get("db_path", config.store.db_path)),
                db_path_env=store.get("db_path_env"),
                timeout_seconds=float(store.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
            )

        if "matching" in data:
            matching = data["matching"]
            config.matching = MatchingConfig(
                max_pattern_length=int(matching.get("max_pattern_length", 1024)),
            )

        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "HighlightConfig":
        """Load config from the `highlights` section of a YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data.get("highlights", {}) or {})

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return {
            "enabled": self.enabled,
            "store": {
                "db_path": str(self.store.db_path),
                "db_path_env": self.store.db_path_env,
                "timeout_seconds": self.store.timeout_seconds,
            },
            "matching": {
                "max_pattern_length": self.matching.max_pattern_length,
            },
        }
