# ==============================================
# TypeLattice
# ==============================================
#
# PURPOSE:
#   The promotion rule: given a column's current ColumnType and one
#   observed non-empty text value, return the column's next
#   ColumnType.
#
#   Order (weakest → strongest):
#     INTEGER < FLOAT < DATE < BOOLEAN < VARTEXT < LONGVARTEXT
#
# RULE (value checked in this order):
# -----------------------------------
#   1. Integer        → INTEGER columns widen their [min, max] bounds
#   2. Float          → INTEGER becomes FLOAT
#   3. Date/time      → INTEGER becomes DATE
#   4. Boolean literal→ INTEGER becomes BOOLEAN (size 1)
#   5. Free text      → VARTEXT, or LONGVARTEXT once the longest value
#                       seen exceeds text_threshold
#
#   Checks 2-4 only act on INTEGER columns. A FLOAT, DATE or BOOLEAN
#   column keeps its kind for any later number, date or boolean; only
#   free text moves it on. Text columns absorb everything and only
#   widen VARTEXT → LONGVARTEXT as the longest value grows.
#   Empty values never reach promote().
#
# ==============================================

from dataclasses import replace

from .column_type import ColumnKind, ColumnType
from csvload.normalization import TypeDetector


class TypeLattice:
    """Applies the promotion rule to one column state at a time."""

    def __init__(self, type_detector: TypeDetector = None, text_threshold: int = 255):
        """
        Args:
            type_detector: Supplies the "parses as" tests and boolean literals
            text_threshold: Longest value still stored as VARTEXT
        """
        self.type_detector = type_detector or TypeDetector()
        self.text_threshold = text_threshold

    def promote(self, column: ColumnType, value: str) -> ColumnType:
        """
        Fold one non-empty observed value into a column state.

        Args:
            column: Current state of the column
            value: Observed text value (non-empty)

        Returns:
            The column's next state (may be `column` itself)
        """
        max_length = max(column.max_length, len(value))

        if column.kind.is_text:
            return self._text(max_length)

        number = self.type_detector.parse_int(value)
        if number is not None:
            if column.kind is ColumnKind.INTEGER:
                return ColumnType(
                    kind=ColumnKind.INTEGER,
                    min_value=number if column.min_value is None else min(column.min_value, number),
                    max_value=number if column.max_value is None else max(column.max_value, number),
                    max_length=max_length,
                )
            return self._seen(column, max_length)

        if self.type_detector.is_float(value):
            if column.kind is ColumnKind.INTEGER:
                return ColumnType(kind=ColumnKind.FLOAT, max_length=max_length)
            return self._seen(column, max_length)

        if self.type_detector.is_datetime(value):
            if column.kind is ColumnKind.INTEGER:
                return ColumnType(kind=ColumnKind.DATE, max_length=max_length)
            return self._seen(column, max_length)

        if self.type_detector.is_boolean(value):
            if column.kind is ColumnKind.INTEGER:
                return ColumnType(kind=ColumnKind.BOOLEAN, size=1, max_length=max_length)
            return self._seen(column, max_length)

        # Free text
        return self._text(max_length)

    def _text(self, max_length: int) -> ColumnType:
        kind = ColumnKind.LONGVARTEXT if max_length > self.text_threshold else ColumnKind.VARTEXT
        return ColumnType(kind=kind, size=max_length, max_length=max_length)

    @staticmethod
    def _seen(column: ColumnType, max_length: int) -> ColumnType:
        # Kind unchanged; only the length evidence grows
        if max_length == column.max_length:
            return column
        return replace(column, max_length=max_length)
