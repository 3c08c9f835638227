"""Application configuration utilities for the finance tracker backend.

This module centralises environment-driven configuration so the rest of the
code base does not need to read environment variables directly.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Pick up variables from a local .env file before anything reads them.
load_dotenv()


@dataclass(frozen=True)
class AppConfig:
    """Strongly-typed container for runtime configuration.

    Attributes:
        project_root: Root directory of the project. Used to derive default
            paths so the app works out of the box after cloning the repo.
        database_file: Absolute path to the SQLite database file holding the
            module collections and the seeding session.
        currency: ISO code echoed in export documents. Only ``PKR`` is
            supported by the formatting helpers.
        log_level: Name of the root logging level applied by ``main.py``.
        export_context: Prefix used for the all-module export filename
            (``<context>-export-<timestamp>.xlsx``).
    """

    project_root: Path
    database_file: Path
    currency: str
    log_level: str
    export_context: str


def load_config() -> AppConfig:
    """Create a new :class:`AppConfig` instance based on environment settings.

    Environment variables override the default values, allowing users to
    customise the runtime without touching the source code.
    """

    project_root = Path(__file__).resolve().parent.parent
    database_file = Path(
        getenv_with_default(
            "FINANCE_TRACKER_DB_FILE",
            project_root / "finance_tracker.db",
        )
    )
    currency = getenv_with_default("FINANCE_TRACKER_CURRENCY", "PKR")
    log_level = getenv_with_default("FINANCE_TRACKER_LOG_LEVEL", "INFO")
    export_context = getenv_with_default("FINANCE_TRACKER_EXPORT_CONTEXT", "finance-tracker")

    # Ensure the directories exist so later code can safely create files.
    database_file.parent.mkdir(parents=True, exist_ok=True)

    return AppConfig(
        project_root=project_root,
        database_file=database_file,
        currency=currency.upper(),
        log_level=log_level.upper(),
        export_context=export_context,
    )


def getenv_with_default(name: str, default: Optional[Path | str] = None) -> Optional[str]:
    """Return the value of an environment variable or a sensible default.

    ``None`` values are propagated so callers can make explicit decisions about
    optional configuration values. Paths are converted to strings, keeping the
    return type uniform and easy to serialise.
    """

    from os import getenv

    value = getenv(name)
    if value is not None:
        return value
    if default is None:
        return None
    return str(default)
