"""Pytest configuration for test isolation.

The ledger database client keeps a process-wide engine, and the CLI configures
the package logger once per process. Both would leak between tests, so an
autouse fixture resets them after every test. Database URLs from the
developer's environment are removed so tests never touch a real ledger.
"""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path

import pytest

import church_ledger.logging_setup as logging_setup
from church_ledger.db.client import dispose_engine

TODAY = dt.date(2024, 1, 15)


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch):
    for var in ("CHURCH_LEDGER_DATABASE_URL", "DATABASE_URL", "CHURCH_LEDGER_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    yield

    dispose_engine()
    pkg_logger = logging.getLogger("church_ledger")
    for h in list(pkg_logger.handlers):
        pkg_logger.removeHandler(h)
    pkg_logger.propagate = True
    pkg_logger.setLevel(logging.NOTSET)
    logging_setup._CONFIGURED = False


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    """URL of a file-backed SQLite database private to the test.

    File-backed rather than ``:memory:`` so every pooled connection sees the
    same schema and rows.
    """

    return f"sqlite+pysqlite:///{tmp_path / 'ledger.db'}"


@pytest.fixture
def today() -> dt.date:
    return TODAY
