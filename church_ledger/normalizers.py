"""Cell-level normalizers for imported ledger rows.

Each helper takes one raw cell (or ``None`` when the column is unmapped) and
returns the normalized value. None of them raise on bad input: amounts that
cannot be parsed become ``0.0`` and dates that cannot be parsed become the
import date. Every helper is idempotent on its own output.

Amount separators follow Brazilian spreadsheet exports first (``1.234,56``)
and fall back to the ISO/US reading (``1,234.56`` / ``1234.56``).
"""

from __future__ import annotations

import datetime as dt
import math
import re
import unicodedata

from .models import DEFAULT_CATEGORY, PaymentMethod, TransactionType

# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

_WRAPPING_QUOTES = re.compile(r'^"|"$')


def clean_cell(value: str) -> str:
    """Trim whitespace and strip one pair of wrapping double quotes."""

    return _WRAPPING_QUOTES.sub("", value.strip()).strip()


def fold_text(value: str) -> str:
    """Lower-case ``value`` and drop accents (``"Crédito"`` -> ``"credito"``)."""

    decomposed = unicodedata.normalize("NFKD", value.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def contains_any(value: str, keywords: tuple[str, ...]) -> bool:
    folded = fold_text(value)
    return any(fold_text(k) in folded for k in keywords)


# ---------------------------------------------------------------------------
# Amount
# ---------------------------------------------------------------------------

_AMOUNT_NOISE = re.compile(r"[^\d,.\-]")


def parse_amount(raw: str | None) -> float:
    """Parse a money cell keeping its sign.

    - Currency symbols, spaces and letters are discarded.
    - A comma after a period means Brazilian grouping: periods are thousands
      separators and the comma is the decimal point.
    - A lone comma is the decimal point.
    - Anything unparseable or non-finite is ``0.0``.
    """

    s = _AMOUNT_NOISE.sub("", raw or "")
    if "," in s and "." in s:
        if s.rfind(",") > s.find("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            # ``1,234.56``: commas group thousands.
            s = s.replace(",", "")
    elif "," in s:
        s = s.replace(",", ".") if s.count(",") == 1 else s.replace(",", "")
    elif s.count(".") > 1:
        # ``1.234.567``: only grouping separators are left.
        s = s.replace(".", "")

    try:
        value = float(s)
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def normalize_amount(raw: str | None) -> float:
    """Parse an imported money cell into a non-negative float.

    Separators follow :func:`parse_amount`. The sign is dropped; direction
    comes from the transaction type.
    """

    return abs(parse_amount(raw))


# ---------------------------------------------------------------------------
# Date
# ---------------------------------------------------------------------------

_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:T.*)?$")


def _parse_iso(value: str) -> dt.date | None:
    m = _ISO_DATE.match(value)
    if m is None:
        return None
    try:
        return dt.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def normalize_date(raw: str | None, *, today: dt.date | None = None) -> str:
    """Return ``raw`` as ``YYYY-MM-DD``, or ``today`` when it is not a real date.

    Slash-separated dates are read as ``DD/MM/YYYY``. A trailing time
    (``25/12/2023 10:30``) is ignored.
    """

    fallback = (today or dt.date.today()).isoformat()
    s = (raw or "").strip()
    if not s:
        return fallback
    s = s.split()[0]

    if "/" in s:
        parts = [p.strip() for p in s.split("/")]
        if len(parts) != 3:
            return fallback
        day, month, year = parts
        s = f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    parsed = _parse_iso(s)
    return parsed.isoformat() if parsed is not None else fallback


# ---------------------------------------------------------------------------
# Type, category, payment method
# ---------------------------------------------------------------------------

INCOME_KEYWORDS: tuple[str, ...] = ("entrada", "receita", "credito", "crédito", "income")

# Order matters: the first matching keyword wins.
PAYMENT_METHOD_KEYWORDS: tuple[tuple[str, PaymentMethod], ...] = (
    ("pix", "Pix"),
    ("dinheiro", "Cash"),
    ("cart", "Card"),
)


def detect_type(raw: str | None) -> TransactionType:
    """Classify a type cell; anything not recognizably an inflow is an expense."""

    if raw is None:
        return "expense"
    return "income" if contains_any(raw, INCOME_KEYWORDS) else "expense"


def normalize_category(raw: str | None) -> str:
    return raw if raw else DEFAULT_CATEGORY


def detect_payment_method(raw: str | None) -> PaymentMethod:
    if not raw:
        return "Other"
    folded = fold_text(raw)
    for keyword, method in PAYMENT_METHOD_KEYWORDS:
        if keyword in folded:
            return method
    return "Other"


__all__ = [
    "INCOME_KEYWORDS",
    "PAYMENT_METHOD_KEYWORDS",
    "clean_cell",
    "contains_any",
    "detect_payment_method",
    "detect_type",
    "fold_text",
    "normalize_amount",
    "normalize_category",
    "normalize_date",
    "parse_amount",
]
