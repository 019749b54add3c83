"""Exception types raised by ``church_ledger``.

Per-row import problems are never raised; they are reported through
:class:`~church_ledger.models.ImportResult.skipped`. The exceptions here cover
the fatal cases only.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all ledger errors surfaced to callers."""


class UnreadableFileError(LedgerError):
    """The import source could not be read or decoded as text."""

    def __init__(self, source: str, detail: str):
        self.source = source
        self.detail = detail
        super().__init__(f"could not process the file {source}: {detail}")


class InvalidEntryError(LedgerError):
    """A manual ledger entry failed validation."""


class EntryNotFoundError(LedgerError):
    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"ledger entry not found: {entry_id}")


__all__ = [
    "EntryNotFoundError",
    "InvalidEntryError",
    "LedgerError",
    "UnreadableFileError",
]
