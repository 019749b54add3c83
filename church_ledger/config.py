"""Runtime settings for ``church_ledger``.

Settings come from the process environment. The CLI loads a ``.env`` from the
working directory first (``python-dotenv``, non-overriding), so both sources
resolve through :func:`load_settings`.

Environment variables
---------------------
- ``CHURCH_LEDGER_DATABASE_URL`` (falls back to ``DATABASE_URL``): SQLAlchemy
  URL of the ledger database. When missing, or still set to a placeholder
  value, the ledger runs in demo mode with an in-memory store.
- ``CHURCH_LEDGER_LOG_LEVEL``: default log level for the CLI.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_PLACEHOLDER_MARKER = "placeholder"


@dataclass(frozen=True, slots=True)
class LedgerSettings:
    database_url: str | None = None
    log_level: str = "INFO"

    @property
    def is_configured(self) -> bool:
        """True when a real database URL is available."""

        url = (self.database_url or "").strip()
        return bool(url) and _PLACEHOLDER_MARKER not in url.lower()


def load_settings(database_url: str | None = None) -> LedgerSettings:
    """Resolve settings, giving an explicit ``database_url`` precedence."""

    url = (
        database_url
        or os.getenv("CHURCH_LEDGER_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or None
    )
    level = (os.getenv("CHURCH_LEDGER_LOG_LEVEL") or "INFO").strip().upper()
    return LedgerSettings(database_url=url, log_level=level)


__all__ = ["LedgerSettings", "load_settings"]
