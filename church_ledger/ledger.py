"""Ledger stores: where confirmed transactions live.

Two backends share the :class:`LedgerStore` protocol:

- :class:`InMemoryLedgerStore` keeps entries in process memory. It is the
  demo mode used when no database is configured.
- :class:`SqlLedgerStore` persists to the ``transactions`` table through
  SQLAlchemy sessions from :mod:`church_ledger.db.client`.

Imported ids are provisional: both stores assign a fresh id on append.
Manual entries are validated the same way in both backends (see
:func:`prepare_entry`).
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import delete, or_, select

from .config import LedgerSettings
from .db.client import session_scope
from .db.models import LedgerTransaction
from .errors import EntryNotFoundError, InvalidEntryError
from .logging_setup import get_logger
from .models import (
    MEMBER_LINKED_CATEGORIES,
    ImportedTransaction,
    LedgerEntry,
    LedgerSummary,
    NewLedgerEntry,
)

logger = get_logger("church_ledger.ledger")


class LedgerStore(Protocol):
    def append(self, transactions: Iterable[ImportedTransaction]) -> list[LedgerEntry]: ...

    def add(self, entry: NewLedgerEntry) -> LedgerEntry: ...

    def delete(self, entry_id: str) -> None: ...

    def list_entries(self, search: str | None = None) -> list[LedgerEntry]: ...

    def summary(self) -> LedgerSummary: ...


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _new_id() -> str:
    return uuid.uuid4().hex


def from_imported(tx: ImportedTransaction) -> LedgerEntry:
    """Convert an imported record into a stored entry with a durable id."""

    return LedgerEntry(
        id=_new_id(),
        description=tx.description,
        amount=tx.amount,
        type=tx.type,
        category=tx.category,
        payment_method=tx.payment_method,
        date=tx.date,
    )


def prepare_entry(entry: NewLedgerEntry) -> LedgerEntry:
    """Validate a manual entry and assign its id.

    The description must be non-empty and the amount positive. A member link
    is kept only for member-linked categories (tithes, named offerings).
    """

    if not entry.description:
        raise InvalidEntryError("description is required")
    if not math.isfinite(entry.amount) or entry.amount <= 0:
        raise InvalidEntryError("amount must be greater than zero")

    member_id = entry.member_id or None
    if entry.category not in MEMBER_LINKED_CATEGORIES:
        member_id = None

    return LedgerEntry(
        id=_new_id(),
        description=entry.description,
        amount=entry.amount,
        type=entry.type,
        category=entry.category,
        payment_method=entry.payment_method,
        date=entry.date,
        member_id=member_id,
    )


def matches_search(entry: LedgerEntry, search: str | None) -> bool:
    if not search:
        return True
    needle = search.lower()
    return needle in entry.description.lower() or needle in entry.category.lower()


def summarize(entries: Iterable[LedgerEntry]) -> LedgerSummary:
    income = 0.0
    expense = 0.0
    for e in entries:
        if e.type == "income":
            income += e.amount
        else:
            expense += e.amount
    return LedgerSummary(income=income, expense=expense)


# ---------------------------------------------------------------------------
# In-memory (demo) backend
# ---------------------------------------------------------------------------


class InMemoryLedgerStore:
    """Process-local store used when no database is configured."""

    def __init__(self, entries: Iterable[LedgerEntry] = ()):
        self._entries: list[LedgerEntry] = list(entries)

    def append(self, transactions: Iterable[ImportedTransaction]) -> list[LedgerEntry]:
        stored = [from_imported(tx) for tx in transactions]
        self._entries.extend(stored)
        logger.info("Appended %d entr(ies) to the demo ledger", len(stored))
        return stored

    def add(self, entry: NewLedgerEntry) -> LedgerEntry:
        stored = prepare_entry(entry)
        self._entries.append(stored)
        return stored

    def delete(self, entry_id: str) -> None:
        for i, e in enumerate(self._entries):
            if e.id == entry_id:
                del self._entries[i]
                return
        raise EntryNotFoundError(entry_id)

    def list_entries(self, search: str | None = None) -> list[LedgerEntry]:
        # Stable sort: equal dates keep insertion order, newest insert first.
        ordered = sorted(reversed(self._entries), key=lambda e: e.date, reverse=True)
        return [e for e in ordered if matches_search(e, search)]

    def summary(self) -> LedgerSummary:
        return summarize(self._entries)


# ---------------------------------------------------------------------------
# SQL backend
# ---------------------------------------------------------------------------


def _escape_like(text: str) -> str:
    """Make ``%`` and ``_`` match literally, like :func:`matches_search`."""

    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_row(entry: LedgerEntry) -> LedgerTransaction:
    return LedgerTransaction(
        id=entry.id,
        description=entry.description,
        amount=entry.amount,
        type=entry.type,
        category=entry.category,
        payment_method=entry.payment_method,
        date=entry.date,
        member_id=entry.member_id,
    )


def _to_entry(row: LedgerTransaction) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,
        description=row.description,
        amount=float(row.amount),
        type=row.type,
        category=row.category,
        payment_method=row.payment_method,
        date=row.date,
        member_id=row.member_id,
    )


class SqlLedgerStore:
    """Store backed by the ``transactions`` table."""

    def __init__(self, database_url: str):
        self.database_url = database_url

    def _insert(self, entries: list[LedgerEntry]) -> None:
        with session_scope(database_url=self.database_url) as session:
            session.add_all(_to_row(e) for e in entries)

    def append(self, transactions: Iterable[ImportedTransaction]) -> list[LedgerEntry]:
        stored = [from_imported(tx) for tx in transactions]
        if stored:
            self._insert(stored)
        logger.info("Appended %d entr(ies) to the ledger database", len(stored))
        return stored

    def add(self, entry: NewLedgerEntry) -> LedgerEntry:
        stored = prepare_entry(entry)
        self._insert([stored])
        return stored

    def delete(self, entry_id: str) -> None:
        with session_scope(database_url=self.database_url) as session:
            result = session.execute(
                delete(LedgerTransaction).where(LedgerTransaction.id == entry_id)
            )
            if result.rowcount == 0:
                raise EntryNotFoundError(entry_id)

    def list_entries(self, search: str | None = None) -> list[LedgerEntry]:
        stmt = select(LedgerTransaction).order_by(
            LedgerTransaction.date.desc(), LedgerTransaction.created_at.desc()
        )
        if search:
            pattern = f"%{_escape_like(search.lower())}%"
            stmt = stmt.where(
                or_(
                    LedgerTransaction.description.ilike(pattern, escape="\\"),
                    LedgerTransaction.category.ilike(pattern, escape="\\"),
                )
            )
        with session_scope(database_url=self.database_url) as session:
            return [_to_entry(row) for row in session.scalars(stmt)]

    def summary(self) -> LedgerSummary:
        return summarize(self.list_entries())


def open_ledger_store(settings: LedgerSettings) -> LedgerStore:
    """Return the SQL store when a database is configured, else the demo store."""

    if settings.is_configured and settings.database_url is not None:
        return SqlLedgerStore(settings.database_url)
    logger.warning(
        "No ledger database configured; running in demo mode with an in-memory store"
    )
    return InMemoryLedgerStore()


__all__ = [
    "InMemoryLedgerStore",
    "LedgerStore",
    "SqlLedgerStore",
    "from_imported",
    "matches_search",
    "open_ledger_store",
    "prepare_entry",
    "summarize",
]
