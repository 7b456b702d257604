# ==============================================
# CsvSource
# ==============================================
#
# PURPOSE:
#   Yield rows of named text fields from a delimited text file.
#   Every call to rows() reopens the file, so the same source can
#   be scanned any number of times from the beginning (schema
#   inference reads it twice, the bulk loader once more).
#
# CLASS: CsvSource
# ----------------
#   Constructor:
#   ------------
#   - __init__(path, delimiter=",", encoding="utf-8-sig")
#
#   Methods:
#   --------
#   - header() -> list[str]
#       Field names from the first row, in file order.
#       Raises InputError if the file is missing or has no header.
#
#   - rows() -> Iterator[dict[str, str]]
#       One dict per data row. Values are stripped; a field missing
#       from a short row reads as "". Extra trailing fields are dropped.
#       With duplicate header names the later column wins.
#
# ==============================================

import csv
import logging
from pathlib import Path
from typing import Iterator, List, Dict, Union

from csvload.errors import InputError, ConfigurationError

logger = logging.getLogger(__name__)


class CsvSource:
    """Re-readable record source over a delimited text file."""

    def __init__(self, path: Union[str, Path], delimiter: str = ",", encoding: str = "utf-8-sig"):
        if len(delimiter) != 1:
            raise ConfigurationError(f"Delimiter must be a single character, got {delimiter!r}")
        self.path = Path(path)
        self.delimiter = delimiter
        self.encoding = encoding

    def _open(self):
        try:
            return open(self.path, "r", newline="", encoding=self.encoding)
        except OSError as e:
            raise InputError(f"Cannot open input file {self.path}: {e.strerror or e}") from e

    def header(self) -> List[str]:
        """Return the header row's field names."""
        with self._open() as f:
            reader = csv.reader(f, delimiter=self.delimiter)
            try:
                first = next(reader, None)
            except (csv.Error, UnicodeDecodeError) as e:
                raise InputError(f"Cannot read header of {self.path}: {e}") from e
        if not first or all(not name.strip() for name in first):
            raise InputError(f"Input file {self.path} has no header row")
        return [name.strip() for name in first]

    def rows(self) -> Iterator[Dict[str, str]]:
        """Iterate the data rows as {field name: text value}."""
        fields = self.header()
        with self._open() as f:
            reader = csv.reader(f, delimiter=self.delimiter)
            next(reader, None)  # header
            try:
                for raw in reader:
                    if not raw:
                        continue  # blank line
                    row: Dict[str, str] = {}
                    for index, name in enumerate(fields):
                        row[name] = raw[index].strip() if index < len(raw) else ""
                    yield row
            except (csv.Error, UnicodeDecodeError) as e:
                raise InputError(f"Cannot read {self.path} near line {reader.line_num}: {e}") from e

    def __repr__(self) -> str:
        return f"CsvSource({str(self.path)!r}, delimiter={self.delimiter!r})"
