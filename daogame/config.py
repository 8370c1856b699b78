"""Configuration utilities for DAO the Game.

Reads environment variables and exposes configuration values for the
play-through driver, the CLI and the optional persistence layer.

Notes on seed + logging flags:
- DAO_SEED / DAO_TREASURY:
  Starting seed and treasury of a fresh play-through. The tutorial values
  are used when unset, so a default run is always reproducible.
- RUN_LOG_PATH:
  If set in the environment before this module is imported, it changes
  DEFAULT_RUN_LOG_PATH. Tests can either set RUN_LOG_PATH before import,
  or pass an explicit path to the JSONL run logger.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


DEFAULT_DB_URL = "sqlite:///dao_game.db"
DEFAULT_SEED = 424242
DEFAULT_TREASURY = 540
# Default path for JSONL run logs (can be overridden via env RUN_LOG_PATH)
DEFAULT_RUN_LOG_PATH = Path(os.getenv("RUN_LOG_PATH", "logs/dao_runs.jsonl"))


def _bool_from_env(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _int_from_env(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        seed: Global seed of a fresh play-through.
        treasury: Starting treasury of a fresh play-through.
        database_url: SQLAlchemy connection URL for snapshot storage.
        echo_sql: Whether to echo SQL statements to stdout.
        log_level: Application log level string.
        persist_to_db: Whether the CLI should persist play-through snapshots.
    """

    seed: int = _int_from_env("DAO_SEED", DEFAULT_SEED)
    treasury: int = _int_from_env("DAO_TREASURY", DEFAULT_TREASURY)
    database_url: str = os.getenv("DATABASE_URL", DEFAULT_DB_URL)
    echo_sql: bool = os.getenv("ECHO_SQL", "false").lower() in {"1", "true", "yes", "on"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    persist_to_db: bool = os.getenv("PERSIST_TO_DB", "false").lower() in {"1", "true", "yes", "on"}


def get_settings() -> Settings:
    """Return a Settings instance using current environment variables."""
    return Settings(
        seed=_int_from_env("DAO_SEED", DEFAULT_SEED),
        treasury=_int_from_env("DAO_TREASURY", DEFAULT_TREASURY),
        database_url=os.getenv("DATABASE_URL", DEFAULT_DB_URL),
        echo_sql=_bool_from_env("ECHO_SQL", default=False),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        persist_to_db=_bool_from_env("PERSIST_TO_DB", default=False),
    )


def get_run_log_path() -> Path:
    """Return the effective JSONL run log path from env or default.

    Tests can set RUN_LOG_PATH (even after import) to redirect logs
    for a given play-through.
    """
    return Path(os.getenv("RUN_LOG_PATH", "logs/dao_runs.jsonl"))
