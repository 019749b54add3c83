from pathlib import Path

import pytest

from church_ledger import UnreadableFileError, import_file
from church_ledger.ingest.utils import decode_import_bytes, read_import_file

CSV_TEXT = "Descrição;Valor;Data;Tipo\nDízimo João;450,00;25/12/2023;Entrada\n"


def test_import_file_reads_utf8_with_bom(tmp_path: Path, today):
    p = tmp_path / "extrato.csv"
    p.write_bytes(CSV_TEXT.encode("utf-8-sig"))

    result = import_file(p, today=today)

    assert result.count == 1
    assert result.transactions[0].description == "Dízimo João"


def test_import_file_falls_back_to_windows_1252(tmp_path: Path, today):
    p = tmp_path / "planilha.csv"
    p.write_bytes(CSV_TEXT.encode("cp1252"))

    result = import_file(p, today=today)

    assert result.transactions[0].description == "Dízimo João"
    assert result.transactions[0].type == "income"


def test_missing_file_is_unreadable(tmp_path: Path):
    with pytest.raises(UnreadableFileError) as exc_info:
        read_import_file(tmp_path / "nope.csv")
    assert "could not process the file" in str(exc_info.value)


def test_directory_is_unreadable(tmp_path: Path):
    with pytest.raises(UnreadableFileError):
        read_import_file(tmp_path)


def test_undecodable_bytes_are_unreadable():
    # 0x81 is invalid as a UTF-8 start byte and undefined in Windows-1252.
    with pytest.raises(UnreadableFileError):
        decode_import_bytes(b"\x81\x8d\x8f\x90\x9d", source="blob")
