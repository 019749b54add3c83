"""Header sniffing: delimiter detection and keyword-based column mapping.

Bank and spreadsheet exports rarely agree on column names or order, so the
header row is matched by keyword substrings instead of exact names. The map is
built once per file; per-row normalization only reads indices from it.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..models import UNMAPPED, ColumnMap
from ..normalizers import clean_cell, fold_text

SEMICOLON = ";"
COMMA = ","

# Logical field -> keyword substrings matched against the folded header cell.
HEADER_KEYWORDS: dict[str, tuple[str, ...]] = {
    "description": ("desc", "historico"),
    "amount": ("valor", "amount", "quantia"),
    "date": ("data", "date"),
    "category": ("cat", "class"),
    "type": ("tipo", "type"),
    "payment_method": ("forma", "pagamento", "method"),
}


def detect_delimiter(first_line: str) -> str:
    """Semicolon when the header line has one, comma otherwise.

    Brazilian exports use ``;`` because ``,`` is the decimal separator there.
    """

    return SEMICOLON if SEMICOLON in first_line else COMMA


def normalize_header(cells: Sequence[str]) -> list[str]:
    return [fold_text(clean_cell(c)) for c in cells]


def build_column_map(header_cells: Sequence[str]) -> ColumnMap:
    """Map each logical field to the first header cell containing a keyword."""

    headers = normalize_header(header_cells)
    indices: dict[str, int] = {}
    for name, keywords in HEADER_KEYWORDS.items():
        indices[name] = next(
            (i for i, h in enumerate(headers) if any(k in h for k in keywords)),
            UNMAPPED,
        )
    return ColumnMap(**indices)


__all__ = [
    "COMMA",
    "HEADER_KEYWORDS",
    "SEMICOLON",
    "build_column_map",
    "detect_delimiter",
    "normalize_header",
]
