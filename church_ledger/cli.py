# ruff: noqa: I001
"""CLI for the ``church_ledger`` package.

Command handlers (``cmd_*``) hold the logic and return an exit status; the
Typer commands below only parse options and delegate. Environment variables
(notably ``CHURCH_LEDGER_DATABASE_URL``) are loaded from a local ``.env`` with
``python-dotenv`` before any command runs.
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from typer.models import ArgumentInfo

from .config import load_settings
from .errors import LedgerError
from .ingest.utils import import_file
from .ledger import open_ledger_store
from .logging_setup import configure_logging, get_logger
from .models import LedgerEntry, NewLedgerEntry
from .normalizers import parse_amount

logger = get_logger("church_ledger.cli")

NO_TRANSACTIONS_MESSAGE = (
    "No transactions could be recognized. Check that the file has a header row "
    "with recognizable column names (e.g. Descrição, Valor, Data, Tipo)."
)


# ---- Small module-level helpers ----------------------------------------------


def format_brl(value: float) -> str:
    """Format ``value`` as Brazilian currency: ``R$ 1.234,56``."""

    s = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {s}"


def _format_entry(entry: LedgerEntry) -> str:
    sign = "+" if entry.type == "income" else "-"
    return "\t".join(
        [
            entry.date.isoformat(),
            entry.description,
            entry.category,
            entry.payment_method,
            f"{sign}{format_brl(entry.amount)}",
            entry.id,
        ]
    )


def _error(message: str) -> int:
    typer.echo(f"Error: {message}", err=True)
    return 1


# ---- Command handlers --------------------------------------------------------


def cmd_import_csv(
    csv_path: str,
    *,
    database_url: str | None = None,
    assume_yes: bool = False,
) -> int:
    """Import a delimited-text export into the ledger after confirmation.

    Behavior
    --------
    - Reads and parses ``csv_path``; an unreadable file is the only fatal
      error (exit status 1).
    - Lists skipped lines on stderr.
    - Shows the number of recognized transactions and asks for confirmation
      unless ``assume_yes`` is set. Declining writes nothing.
    - Appends the batch to the configured ledger store.
    """

    try:
        result = import_file(csv_path)
    except LedgerError as e:
        return _error(str(e))

    for skipped in result.skipped:
        typer.echo(f"Skipped line {skipped.row_number}: {skipped.reason.value}", err=True)

    if result.count == 0:
        typer.echo(NO_TRANSACTIONS_MESSAGE)
        return 0

    typer.echo(f"{result.count} transaction(s) recognized in {csv_path}.")
    if not assume_yes and not typer.confirm("Append them to the ledger?", default=False):
        typer.echo("Import cancelled; nothing was written.")
        return 0

    store = open_ledger_store(load_settings(database_url))
    try:
        stored = store.append(result.transactions)
    except SQLAlchemyError as e:
        logger.exception("Ledger append failed")
        return _error(f"could not save the imported transactions: {e}")

    typer.echo(f"Imported {len(stored)} transaction(s).")
    return 0


def cmd_add(
    *,
    description: str,
    amount: str,
    type_: str,
    category: str,
    payment_method: str,
    date: dt.date | None,
    member_id: str | None,
    database_url: str | None = None,
) -> int:
    try:
        entry = NewLedgerEntry(
            description=description,
            amount=parse_amount(amount),
            type=type_,
            category=category,
            payment_method=payment_method,
            date=date or dt.date.today(),
            member_id=member_id,
        )
    except ValidationError as e:
        return _error(f"invalid entry: {e.errors()[0]['msg']}")

    store = open_ledger_store(load_settings(database_url))
    try:
        stored = store.add(entry)
    except LedgerError as e:
        return _error(str(e))
    except SQLAlchemyError as e:
        return _error(f"could not save the entry: {e}")

    typer.echo(f"Saved {stored.id}")
    return 0


def cmd_list(*, search: str | None = None, database_url: str | None = None) -> int:
    store = open_ledger_store(load_settings(database_url))
    try:
        entries = store.list_entries(search)
    except SQLAlchemyError as e:
        return _error(f"could not read the ledger: {e}")
    for entry in entries:
        typer.echo(_format_entry(entry))
    return 0


def cmd_delete(entry_id: str, *, assume_yes: bool = False, database_url: str | None = None) -> int:
    if not assume_yes and not typer.confirm(f"Delete entry {entry_id}?", default=False):
        typer.echo("Nothing deleted.")
        return 0
    store = open_ledger_store(load_settings(database_url))
    try:
        store.delete(entry_id)
    except LedgerError as e:
        return _error(str(e))
    except SQLAlchemyError as e:
        return _error(f"could not delete the entry: {e}")
    typer.echo(f"Deleted {entry_id}")
    return 0


def cmd_summary(*, database_url: str | None = None) -> int:
    store = open_ledger_store(load_settings(database_url))
    try:
        totals = store.summary()
    except SQLAlchemyError as e:
        return _error(f"could not read the ledger: {e}")
    typer.echo(f"Income:   {format_brl(totals.income)}")
    typer.echo(f"Expenses: {format_brl(totals.expense)}")
    typer.echo(f"Balance:  {format_brl(totals.balance)}")
    return 0


# ---- Typer application -------------------------------------------------------

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Treasury ledger: import bank/spreadsheet exports and review entries.",
)

# Module-level argument object to satisfy ruff B008 (no calls in parameter
# defaults).
CSV_PATH_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Path to a comma- or semicolon-separated export with a header row",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports unreadable files itself
)


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


@app.command("import-csv")
def import_csv_cmd(
    csv_path: Annotated[Path, CSV_PATH_ARGUMENT],
    *,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
    database_url: str | None = typer.Option(
        None, help="Override CHURCH_LEDGER_DATABASE_URL (falls back to env var)."
    ),
) -> None:
    _exit(cmd_import_csv(str(csv_path), database_url=database_url, assume_yes=yes))


@app.command("add")
def add_cmd(
    *,
    description: str = typer.Option(..., help="What the entry is for."),
    amount: str = typer.Option(..., help="Amount, e.g. 450,00 or 1.234,56."),
    type_: str = typer.Option("income", "--type", help="income or expense."),
    category: str = typer.Option("Dízimos", help="Ledger category."),
    payment_method: str = typer.Option("Pix", help="Pix, Cash, Card or Other."),
    date: dt.datetime | None = typer.Option(
        None, formats=["%Y-%m-%d", "%d/%m/%Y"], help="Entry date (defaults to today)."
    ),
    member_id: str | None = typer.Option(
        None, help="Contributing member (kept for tithes and named offerings only)."
    ),
    database_url: str | None = typer.Option(
        None, help="Override CHURCH_LEDGER_DATABASE_URL (falls back to env var)."
    ),
) -> None:
    _exit(
        cmd_add(
            description=description,
            amount=amount,
            type_=type_,
            category=category,
            payment_method=payment_method,
            date=date.date() if date else None,
            member_id=member_id,
            database_url=database_url,
        )
    )


@app.command("list")
def list_cmd(
    *,
    search: str | None = typer.Option(None, help="Filter by description or category."),
    database_url: str | None = typer.Option(
        None, help="Override CHURCH_LEDGER_DATABASE_URL (falls back to env var)."
    ),
) -> None:
    _exit(cmd_list(search=search, database_url=database_url))


@app.command("delete")
def delete_cmd(
    entry_id: str,
    *,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
    database_url: str | None = typer.Option(
        None, help="Override CHURCH_LEDGER_DATABASE_URL (falls back to env var)."
    ),
) -> None:
    _exit(cmd_delete(entry_id, assume_yes=yes, database_url=database_url))


@app.command("summary")
def summary_cmd(
    *,
    database_url: str | None = typer.Option(
        None, help="Override CHURCH_LEDGER_DATABASE_URL (falls back to env var)."
    ),
) -> None:
    _exit(cmd_summary(database_url=database_url))


@app.callback()
def _root(
    *,
    log_level: str | None = typer.Option(
        None, help="Log level (defaults to CHURCH_LEDGER_LOG_LEVEL or INFO)."
    ),
) -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level or load_settings().log_level)


if __name__ == "__main__":  # pragma: no cover
    app()
