"""Public interface for the ``church_ledger`` package.

This module only re-exports the stable import surface: the importer, the
ledger stores and the public models/types.
"""

from .config import LedgerSettings, load_settings
from .errors import EntryNotFoundError, InvalidEntryError, LedgerError, UnreadableFileError
from .ingest import build_column_map, detect_delimiter, import_file, import_transactions
from .ledger import InMemoryLedgerStore, LedgerStore, SqlLedgerStore, open_ledger_store
from .models import (
    ColumnMap,
    ImportedTransaction,
    ImportResult,
    LedgerEntry,
    LedgerSummary,
    NewLedgerEntry,
    SkippedRow,
    SkipReason,
)
from .normalizers import detect_payment_method, detect_type, normalize_amount, normalize_date

__all__ = [
    # Import pipeline
    "build_column_map",
    "detect_delimiter",
    "detect_payment_method",
    "detect_type",
    "import_file",
    "import_transactions",
    "normalize_amount",
    "normalize_date",
    # Ledger
    "InMemoryLedgerStore",
    "LedgerStore",
    "SqlLedgerStore",
    "open_ledger_store",
    "LedgerSettings",
    "load_settings",
    # Models / types
    "ColumnMap",
    "ImportedTransaction",
    "ImportResult",
    "LedgerEntry",
    "LedgerSummary",
    "NewLedgerEntry",
    "SkippedRow",
    "SkipReason",
    # Errors
    "EntryNotFoundError",
    "InvalidEntryError",
    "LedgerError",
    "UnreadableFileError",
]
