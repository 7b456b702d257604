# ==============================================
# LiteralEncoder
# ==============================================
#
# PURPOSE:
#   Turn one text value into a SQLite literal according to the
#   final kind of its column.
#
# RULES (checked in this order):
# ------------------------------
#   - BOOLEAN      → true literal "1", false literal "0";
#                    anything else (the empty value too) is an EncodingError
#   - empty value  → NULL
#   - INTEGER      → normalized decimal literal
#   - FLOAT        → repr() of the parsed float
#   - DATE         → reparsed, reformatted with date_format, quoted
#   - VARTEXT /
#     LONGVARTEXT  → quoted, embedded ' doubled
#
#   Numbers and dates that do not parse for their column's kind
#   are EncodingErrors, never passed through as raw SQL.
#
# ==============================================

from typing import List, Mapping

from csvload.analysis import ColumnKind, ColumnType
from csvload.errors import EncodingError
from csvload.normalization import TypeDetector

NULL = "NULL"


def quote_text(value: str) -> str:
    """Single-quoted SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


class LiteralEncoder:
    """Encodes text values as SQLite literals."""

    def __init__(self, type_detector: TypeDetector = None, date_format: str = "%Y-%m-%d %H:%M:%S"):
        self.type_detector = type_detector or TypeDetector()
        self.date_format = date_format

    def encode(self, field_name: str, column: ColumnType, value: str) -> str:
        """
        Encode a single value.

        Args:
            field_name: Raw field name (for error messages)
            column: Final ColumnType of the field
            value: Text value from the record source ("" when empty)

        Returns:
            SQL literal text
        """
        kind = column.kind

        if kind is ColumnKind.BOOLEAN:
            flag = self.type_detector.parse_boolean(value)
            if flag is None:
                raise EncodingError(field_name, value, "boolean")
            return "1" if flag else "0"

        if not value:
            return NULL

        if kind is ColumnKind.INTEGER:
            number = self.type_detector.parse_int(value)
            if number is None:
                raise EncodingError(field_name, value, "integer")
            return str(number)

        if kind is ColumnKind.FLOAT:
            number = self.type_detector.parse_float(value)
            if number is None:
                raise EncodingError(field_name, value, "float")
            return repr(number)

        if kind is ColumnKind.DATE:
            moment = self.type_detector.parse_datetime(value)
            if moment is None:
                raise EncodingError(field_name, value, "date")
            return quote_text(moment.strftime(self.date_format))

        return quote_text(value)

    def encode_row(self, row: Mapping[str, str], schema: Mapping[str, ColumnType]) -> List[str]:
        """Literals for every schema field of one row, in schema order."""
        return [
            self.encode(field_name, column, row.get(field_name) or "")
            for field_name, column in schema.items()
        ]

