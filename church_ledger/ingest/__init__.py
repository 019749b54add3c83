"""Import pipeline: header sniffing, row normalization and file decoding."""

from .columns import build_column_map, detect_delimiter
from .csv_importer import RawRow, import_transactions, iter_raw_rows
from .utils import decode_import_bytes, import_file, read_import_file

__all__ = [
    "RawRow",
    "build_column_map",
    "decode_import_bytes",
    "detect_delimiter",
    "import_file",
    "import_transactions",
    "iter_raw_rows",
    "read_import_file",
]
