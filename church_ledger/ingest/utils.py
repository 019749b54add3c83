"""Ingest utilities shared by the CLI and library callers.

Reading the file is the only step of an import that may fail as a whole: the
bytes must decode as UTF-8 (a BOM is tolerated) or, failing that, as
Windows-1252, which is what spreadsheet software in Brazil commonly writes.
"""

from __future__ import annotations

import datetime as dt
from os import PathLike
from pathlib import Path

from ..errors import UnreadableFileError
from ..logging_setup import get_logger
from ..models import ImportResult
from .csv_importer import import_transactions

logger = get_logger("church_ledger.ingest.utils")

ENCODINGS: tuple[str, ...] = ("utf-8-sig", "cp1252")


def decode_import_bytes(data: bytes, *, source: str = "<bytes>") -> str:
    for encoding in ENCODINGS:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError:
            continue
        if encoding != ENCODINGS[0]:
            logger.info("Decoded %s as %s", source, encoding)
        return text
    raise UnreadableFileError(source, "not decodable as text")


def read_import_file(path: str | PathLike[str]) -> str:
    """Return the decoded text of ``path`` or raise :class:`UnreadableFileError`."""

    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as exc:
        raise UnreadableFileError(str(p), exc.strerror or str(exc)) from exc
    return decode_import_bytes(data, source=str(p))


def import_file(path: str | PathLike[str], *, today: dt.date | None = None) -> ImportResult:
    """Read ``path`` and run :func:`import_transactions` over its text."""

    return import_transactions(read_import_file(path), today=today)


__all__ = ["decode_import_bytes", "import_file", "read_import_file"]
