"""Where the match database lives."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "chequemate"
DEFAULT_DB_FILENAME: Final[str] = "chequemate.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str

    @classmethod
    def sqlite_file(cls, path: Path) -> DatabaseConfig:
        return cls(uri=f"sqlite+pysqlite:///{path}")


def default_data_dir() -> Path:
    """``CHEQUEMATE_DATA_DIR``, else ``$XDG_DATA_HOME/chequemate`` (``~/.local/share``)."""

    env_dir = os.getenv("CHEQUEMATE_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    base = os.getenv("XDG_DATA_HOME")
    base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_database_config(*, data_dir: Path | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""

    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    directory = data_dir or default_data_dir()
    directory.mkdir(parents=True, exist_ok=True)
    return DatabaseConfig.sqlite_file(directory / DEFAULT_DB_FILENAME)
