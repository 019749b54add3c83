"""Data models and type aliases for ``church_ledger``.

Import-side records (:class:`ImportedTransaction`, :class:`ColumnMap`,
:class:`SkippedRow`, :class:`ImportResult`) live next to the ledger-side
records (:class:`LedgerEntry`, :class:`NewLedgerEntry`, :class:`LedgerSummary`)
so both halves of the import -> confirm -> append flow share one vocabulary.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

type TransactionType = Literal["income", "expense"]
type PaymentMethod = Literal["Pix", "Cash", "Card", "Other"]

PAYMENT_METHODS: tuple[str, ...] = ("Pix", "Cash", "Card", "Other")
DEFAULT_CATEGORY = "Outros"

# Categories whose entries may reference the contributing member.
MEMBER_LINKED_CATEGORIES: frozenset[str] = frozenset({"Dízimos", "Ofertas Nominais"})


# ---------------------------------------------------------------------------
# Import pipeline
# ---------------------------------------------------------------------------

UNMAPPED = -1


@dataclass(frozen=True, slots=True)
class ColumnMap:
    """Header-derived lookup from logical field to input column index.

    Every index is either a valid position within the header row or
    :data:`UNMAPPED`.
    """

    description: int = UNMAPPED
    amount: int = UNMAPPED
    date: int = UNMAPPED
    category: int = UNMAPPED
    type: int = UNMAPPED
    payment_method: int = UNMAPPED

    def is_mapped(self, name: str) -> bool:
        return getattr(self, name) != UNMAPPED

    def cell(self, cells: Sequence[str], name: str) -> str | None:
        """Return the cell for ``name`` or ``None`` when unmapped.

        Data rows may be shorter than the header; a mapped column beyond the
        end of ``cells`` reads as an empty string.
        """

        idx = getattr(self, name)
        if idx == UNMAPPED:
            return None
        return cells[idx] if idx < len(cells) else ""


class ImportedTransaction(BaseModel):
    """A normalized, ready-to-persist record produced by the importer.

    ``id`` is provisional: the ledger store assigns the durable identity when
    the batch is appended.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    description: str
    amount: float = Field(ge=0)
    date: str
    type: TransactionType = "expense"
    category: str = DEFAULT_CATEGORY
    payment_method: PaymentMethod = Field(default="Other", alias="paymentMethod")

    @field_validator("date")
    @classmethod
    def _iso_date(cls, v: str) -> str:
        dt.date.fromisoformat(v)
        return v


class SkipReason(StrEnum):
    TOO_FEW_CELLS = "too_few_cells"
    MISSING_DESCRIPTION = "missing_description"
    MALFORMED_LINE = "malformed_line"


class SkippedRow(NamedTuple):
    """A data line the importer excluded from the batch."""

    row_number: int
    """1-based physical line number in the input text."""

    reason: SkipReason


@dataclass(slots=True)
class ImportResult:
    transactions: list[ImportedTransaction] = field(default_factory=list)
    skipped: list[SkippedRow] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.transactions)


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


class NewLedgerEntry(BaseModel):
    """A manually entered transaction before the store assigns an id."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    description: str
    amount: float
    type: TransactionType = "income"
    category: str = "Dízimos"
    payment_method: PaymentMethod = Field(default="Pix", alias="paymentMethod")
    date: dt.date = Field(default_factory=dt.date.today)
    member_id: str | None = Field(default=None, alias="memberId")


class LedgerEntry(BaseModel):
    """A transaction held by a ledger store."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    description: str
    amount: float
    type: TransactionType
    category: str
    payment_method: PaymentMethod = Field(alias="paymentMethod")
    date: dt.date
    member_id: str | None = Field(default=None, alias="memberId")


@dataclass(frozen=True, slots=True)
class LedgerSummary:
    income: float
    expense: float

    @property
    def balance(self) -> float:
        return self.income - self.expense


__all__ = [
    "DEFAULT_CATEGORY",
    "MEMBER_LINKED_CATEGORIES",
    "PAYMENT_METHODS",
    "UNMAPPED",
    "ColumnMap",
    "ImportResult",
    "ImportedTransaction",
    "LedgerEntry",
    "LedgerSummary",
    "NewLedgerEntry",
    "PaymentMethod",
    "SkipReason",
    "SkippedRow",
    "TransactionType",
]
