"""Runtime settings, read from the environment.

    PHONESHOP_DATABASE_URL   SQLAlchemy URL (default: SQLite file in ./data)
    PHONESHOP_LOG_LEVEL      logging level name (default: WARNING)
    PHONESHOP_CURRENCY       ISO code for every amount (default: USD)
    PHONESHOP_SQL_ECHO       "1"/"true" to echo SQL statements
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from phoneshop.domain.model.value_objects import DEFAULT_CURRENCY

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_TRUTHY = {"1", "true", "yes", "on"}


def default_database_url() -> str:
    return f"sqlite:///{_DATA_DIR / 'phoneshop.db'}"


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "WARNING"
    currency: str = DEFAULT_CURRENCY
    sql_echo: bool = False

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return Settings(
            database_url=env.get("PHONESHOP_DATABASE_URL") or default_database_url(),
            log_level=env.get("PHONESHOP_LOG_LEVEL", "WARNING").upper(),
            currency=env.get("PHONESHOP_CURRENCY", DEFAULT_CURRENCY).upper(),
            sql_echo=env.get("PHONESHOP_SQL_ECHO", "").lower() in _TRUTHY,
        )
