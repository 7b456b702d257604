# ==============================================
# SchemaInferencer
# ==============================================
#
# PURPOSE:
#   Scan the whole record source and reduce every column's
#   observed values into one ColumnType via the TypeLattice.
#   The result is a frozen Schema; nothing is written anywhere.
#
# CLASS: SchemaInferencer
# -----------------------
#   Constructor:
#   ------------
#   - __init__(lattice: TypeLattice | None = None)
#
#   Methods:
#   --------
#   - infer(source, exclude=()) -> Schema
#       Pass 1: read the header, start every non-excluded field at
#               INTEGER (no bounds, size 0), in header order.
#       Pass 2: reopen the source; for every row and every
#               non-excluded field with a non-empty value, apply
#               TypeLattice.promote().
#       Returns the final Schema.
#
#   - rows_scanned: int
#       Data rows read by the last infer() call.
#
#   Column states are local to one infer() call and only leave it
#   as the immutable Schema.
#
# ERRORS:
# -------
#   InputError when the source cannot be opened or has no header.
#   Odd values never fail inference; they fall through to text.
#
# ==============================================

import logging
from typing import Dict, Iterable, Optional

from .column_type import ColumnType
from .lattice import TypeLattice
from .schema import Schema

logger = logging.getLogger(__name__)


class SchemaInferencer:
    """
    Two-pass schema inference over a re-readable record source.
    """

    def __init__(self, lattice: Optional[TypeLattice] = None):
        """
        Initialize the SchemaInferencer.

        Args:
            lattice: Optional TypeLattice instance. If not provided,
                     a default one (Yes/No literals, 255 threshold) is created.
        """
        self.lattice = lattice or TypeLattice()
        self.rows_scanned: int = 0

    def infer(self, source, exclude: Iterable[str] = ()) -> Schema:
        """
        Infer the schema of every non-excluded field.

        Args:
            source: Record source with header() and rows() (e.g., CsvSource)
            exclude: Raw field names to leave out of the schema

        Returns:
            The final Schema
        """
        excluded = set(exclude)

        # Pass 1: header order decides column order
        header = source.header()
        columns: Dict[str, ColumnType] = {}
        for field_name in header:
            if field_name not in excluded:
                columns[field_name] = ColumnType()

        unknown = excluded.difference(header)
        if unknown:
            logger.warning("Ignored fields not present in header: %s", ", ".join(sorted(unknown)))

        # Pass 2: fold every non-empty value into its column
        self.rows_scanned = 0
        for row in source.rows():
            for field_name, value in row.items():
                if not value or field_name not in columns:
                    continue
                columns[field_name] = self.lattice.promote(columns[field_name], value)
            self.rows_scanned += 1

        schema = Schema(columns)
        logger.info("Inferred %d columns from %d rows", len(schema), self.rows_scanned)
        for field_name, column in schema.items():
            logger.debug("  %s: %s", field_name, column)
        return schema
