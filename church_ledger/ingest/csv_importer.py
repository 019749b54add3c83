"""Delimited-text importer for the treasury ledger.

Turns the full text of a bank or spreadsheet export into a batch of
:class:`~church_ledger.models.ImportedTransaction` values.

Contract
--------
- The first line is the header. It picks the delimiter (``;`` when present,
  ``,`` otherwise) and the :class:`~church_ledger.models.ColumnMap`.
- Every later non-blank line is one candidate transaction. Lines with fewer
  than three cells, or without a description, are skipped and reported in
  :attr:`ImportResult.skipped`; they never raise.
- Unparseable amounts become ``0.0`` and unparseable dates become the import
  date. A missing type column yields ``expense`` for every row.
- The importer never writes to a ledger store. Callers show
  :attr:`ImportResult.count` to the user and append after confirmation.
"""

from __future__ import annotations

import csv
import datetime as dt
import re
import uuid
from collections.abc import Callable, Iterable, Iterator
from typing import NamedTuple

from ..logging_setup import get_logger
from ..models import (
    ColumnMap,
    ImportedTransaction,
    ImportResult,
    SkippedRow,
    SkipReason,
)
from ..normalizers import (
    clean_cell,
    detect_payment_method,
    detect_type,
    normalize_amount,
    normalize_category,
    normalize_date,
)
from .columns import build_column_map, detect_delimiter

logger = get_logger("church_ledger.ingest.csv_importer")

MIN_CELLS = 3

# Only CR/LF end a line; other Unicode separators stay inside cells.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class RawRow(NamedTuple):
    line_number: int
    cells: tuple[str, ...] | None
    """Cleaned cells, or ``None`` when the line could not be tokenized."""


def split_line(line: str, delimiter: str) -> tuple[str, ...] | None:
    """Split one line on ``delimiter`` and clean each cell.

    Quoted cells may contain the delimiter. A line with unbalanced quotes is
    split on every delimiter instead. Returns ``None`` for lines the ``csv``
    tokenizer rejects.
    """

    if line.count('"') % 2:
        return tuple(clean_cell(c) for c in line.split(delimiter))
    try:
        cells = next(csv.reader([line], delimiter=delimiter), [])
    except csv.Error:
        return None
    return tuple(clean_cell(c) for c in cells)


def iter_raw_rows(lines: Iterable[str], delimiter: str, *, start: int = 1) -> Iterator[RawRow]:
    """Lazily yield one :class:`RawRow` per non-blank line.

    ``start`` is the physical line number of the first item in ``lines``.
    """

    for line_number, line in enumerate(lines, start=start):
        if not line.strip():
            continue
        yield RawRow(line_number, split_line(line, delimiter))


def _row_to_transaction(
    cells: tuple[str, ...],
    columns: ColumnMap,
    *,
    today: dt.date,
    new_id: Callable[[], str],
) -> ImportedTransaction | SkipReason:
    if len(cells) < MIN_CELLS:
        return SkipReason.TOO_FEW_CELLS

    description = columns.cell(cells, "description")
    if not description:
        return SkipReason.MISSING_DESCRIPTION

    amount_raw = columns.cell(cells, "amount")
    date_raw = columns.cell(cells, "date")

    return ImportedTransaction(
        id=new_id(),
        description=description,
        amount=normalize_amount(amount_raw if amount_raw is not None else "0"),
        date=normalize_date(date_raw, today=today),
        type=detect_type(columns.cell(cells, "type")),
        category=normalize_category(columns.cell(cells, "category")),
        payment_method=detect_payment_method(columns.cell(cells, "payment_method")),
    )


def _new_id() -> str:
    return uuid.uuid4().hex


def import_transactions(
    file_contents: str,
    *,
    today: dt.date | None = None,
    id_factory: Callable[[], str] | None = None,
) -> ImportResult:
    """Parse ``file_contents`` into a vetted batch of imported transactions.

    Parameters
    ----------
    file_contents:
        Complete decoded text of the export, header line first.
    today:
        Date used for missing or invalid dates. Defaults to the current date.
    id_factory:
        Callable returning a fresh identifier per transaction. Defaults to
        random UUID hex strings.
    """

    today = today or dt.date.today()
    new_id = id_factory or _new_id
    result = ImportResult()

    lines = iter(_LINE_BREAK.split(file_contents.removeprefix("\ufeff")))
    header_line = next(lines, None)
    if header_line is None or not header_line.strip():
        logger.info("Import source is empty; nothing to parse")
        return result

    delimiter = detect_delimiter(header_line)
    header_cells = split_line(header_line, delimiter)
    if header_cells is None:
        header_cells = tuple(header_line.split(delimiter))
    columns = build_column_map(header_cells)
    logger.debug("Delimiter %r, column map %s", delimiter, columns)

    for row in iter_raw_rows(lines, delimiter, start=2):
        if row.cells is None:
            outcome: ImportedTransaction | SkipReason = SkipReason.MALFORMED_LINE
        else:
            outcome = _row_to_transaction(row.cells, columns, today=today, new_id=new_id)

        if isinstance(outcome, SkipReason):
            logger.debug("Skipping line %d: %s", row.line_number, outcome.value)
            result.skipped.append(SkippedRow(row.line_number, outcome))
        else:
            result.transactions.append(outcome)

    logger.info(
        "Parsed %d transaction(s), skipped %d line(s)", result.count, len(result.skipped)
    )
    return result


__all__ = ["MIN_CELLS", "RawRow", "import_transactions", "iter_raw_rows", "split_line"]
