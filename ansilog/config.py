"""Parser configuration — reads from ~/.config/ansilog/config.json and ANSILOG_* env vars."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "ansilog"
_DEFAULT_CONFIG_FILE = _DEFAULT_CONFIG_DIR / "config.json"


class ParserConfig(BaseSettings):
    """CLI defaults for parsing and rendering a log."""

    # Search
    search: str = Field(default="", description="Search term highlighted after loading")

    # Output
    pretty: bool = Field(default=False, description="Pretty-print the JSON output")

    # Input
    encoding: str = Field(default="utf-8", description="Encoding of log files")

    # Logging
    log_level: str = Field(default="INFO", description="Log level for the CLI")

    model_config = {"env_prefix": "ANSILOG_"}

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ParserConfig":
        """Load config from a JSON file, falling back to defaults if missing."""
        path = path or _DEFAULT_CONFIG_FILE
        if path.exists():
            data = json.loads(path.read_text())
            return cls(**data)
        return cls()

    def save(self, path: Optional[Path] = None) -> None:
        """Persist current config to disk."""
        path = path or _DEFAULT_CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(mode="json")
        path.write_text(json.dumps(data, indent=2) + "\n")
