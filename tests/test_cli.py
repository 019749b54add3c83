import io
from pathlib import Path

import pytest
from typer.testing import CliRunner

from church_ledger import SqlLedgerStore
from church_ledger.cli import NO_TRANSACTIONS_MESSAGE, app, format_brl
from church_ledger.logging_setup import configure_logging

runner = CliRunner()

CSV_TEXT = (
    "Descrição;Valor;Data;Tipo\n"
    "Dízimo João;1.450,00;25/12/2023;Entrada\n"
    "ok;ok\n"
    "Conta de luz;120,00;26/12/2023;Saída\n"
)


@pytest.fixture(autouse=True)
def _run_in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep load_dotenv() away from any .env in the repository.
    monkeypatch.chdir(tmp_path)
    # Route log records to a private stream; the CLI's own configure_logging()
    # call becomes a no-op, so records never land in a closed runner stream.
    configure_logging(stream=io.StringIO())


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    p = tmp_path / "extrato.csv"
    p.write_text(CSV_TEXT, encoding="utf-8")
    return p


def test_format_brl():
    assert format_brl(1234.56) == "R$ 1.234,56"
    assert format_brl(0) == "R$ 0,00"
    assert format_brl(1234567.891) == "R$ 1.234.567,89"


def test_import_csv_with_yes_appends_to_ledger(csv_file: Path, sqlite_url: str):
    result = runner.invoke(
        app, ["import-csv", str(csv_file), "--yes", "--database-url", sqlite_url]
    )

    assert result.exit_code == 0, result.output
    assert "2 transaction(s) recognized" in result.output
    assert "Skipped line 3: too_few_cells" in result.output
    assert "Imported 2 transaction(s)." in result.output
    assert len(SqlLedgerStore(sqlite_url).list_entries()) == 2


def test_import_csv_confirmation_accepted(csv_file: Path, sqlite_url: str):
    result = runner.invoke(
        app, ["import-csv", str(csv_file), "--database-url", sqlite_url], input="y\n"
    )

    assert result.exit_code == 0, result.output
    assert "Append them to the ledger?" in result.output
    assert len(SqlLedgerStore(sqlite_url).list_entries()) == 2


def test_import_csv_confirmation_declined_writes_nothing(csv_file: Path, sqlite_url: str):
    result = runner.invoke(
        app, ["import-csv", str(csv_file), "--database-url", sqlite_url], input="n\n"
    )

    assert result.exit_code == 0, result.output
    assert "Import cancelled; nothing was written." in result.output
    assert SqlLedgerStore(sqlite_url).list_entries() == []


def test_import_csv_unreadable_file(tmp_path: Path):
    result = runner.invoke(app, ["import-csv", str(tmp_path / "missing.csv"), "--yes"])

    assert result.exit_code == 1
    assert "could not process the file" in result.output


def test_import_csv_without_recognizable_rows(tmp_path: Path):
    p = tmp_path / "sem_cabecalho.csv"
    p.write_text("foo;bar;baz\n1;2;3\n", encoding="utf-8")

    result = runner.invoke(app, ["import-csv", str(p), "--yes"])

    assert result.exit_code == 0
    assert NO_TRANSACTIONS_MESSAGE in result.output
    assert "Skipped line 2: missing_description" in result.output


def test_import_csv_demo_mode_without_database(csv_file: Path):
    result = runner.invoke(app, ["import-csv", str(csv_file), "--yes"])

    assert result.exit_code == 0, result.output
    assert "Imported 2 transaction(s)." in result.output


def test_list_and_summary(csv_file: Path, sqlite_url: str):
    runner.invoke(app, ["import-csv", str(csv_file), "--yes", "--database-url", sqlite_url])

    listed = runner.invoke(app, ["list", "--database-url", sqlite_url])
    assert listed.exit_code == 0, listed.output
    lines = [ln for ln in listed.output.splitlines() if "\t" in ln]
    assert lines[0].startswith("2023-12-26\tConta de luz\tOutros\tOther\t-R$ 120,00\t")
    assert lines[1].startswith("2023-12-25\tDízimo João\tOutros\tOther\t+R$ 1.450,00\t")

    searched = runner.invoke(app, ["list", "--search", "luz", "--database-url", sqlite_url])
    assert "Conta de luz" in searched.output
    assert "Dízimo João" not in searched.output

    summary = runner.invoke(app, ["summary", "--database-url", sqlite_url])
    assert summary.exit_code == 0, summary.output
    assert "Income:   R$ 1.450,00" in summary.output
    assert "Expenses: R$ 120,00" in summary.output
    assert "Balance:  R$ 1.330,00" in summary.output


def test_add_then_delete(sqlite_url: str):
    added = runner.invoke(
        app,
        [
            "add",
            "--description",
            "Dízimo - Carlos",
            "--amount",
            "300,00",
            "--date",
            "07/01/2024",
            "--member-id",
            "member-1",
            "--database-url",
            sqlite_url,
        ],
    )
    assert added.exit_code == 0, added.output

    [entry] = SqlLedgerStore(sqlite_url).list_entries()
    assert entry.amount == 300.0
    assert entry.category == "Dízimos"
    assert entry.member_id == "member-1"
    assert entry.date.isoformat() == "2024-01-07"

    deleted = runner.invoke(app, ["delete", entry.id, "--yes", "--database-url", sqlite_url])
    assert deleted.exit_code == 0, deleted.output
    assert SqlLedgerStore(sqlite_url).list_entries() == []


def test_add_rejects_zero_amount(sqlite_url: str):
    result = runner.invoke(
        app,
        ["add", "--description", "Oferta", "--amount", "0", "--database-url", sqlite_url],
    )

    assert result.exit_code == 1
    assert "amount must be greater than zero" in result.output


@pytest.mark.parametrize("amount", ["-50", "-R$ 1.234,56"])
def test_add_rejects_negative_amount(sqlite_url: str, amount: str):
    result = runner.invoke(
        app,
        ["add", "--description", "Oferta", f"--amount={amount}", "--database-url", sqlite_url],
    )

    assert result.exit_code == 1
    assert "amount must be greater than zero" in result.output
    assert SqlLedgerStore(sqlite_url).list_entries() == []


def test_add_rejects_unknown_payment_method(sqlite_url: str):
    result = runner.invoke(
        app,
        [
            "add",
            "--description",
            "Oferta",
            "--amount",
            "10",
            "--payment-method",
            "Cheque",
            "--database-url",
            sqlite_url,
        ],
    )

    assert result.exit_code == 1
    assert "invalid entry" in result.output


def test_delete_unknown_entry(sqlite_url: str):
    result = runner.invoke(app, ["delete", "nope", "--yes", "--database-url", sqlite_url])

    assert result.exit_code == 1
    assert "ledger entry not found: nope" in result.output
