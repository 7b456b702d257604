# ==============================================
# TOPIC 3: ANALYSIS (Schema Inference)
# ==============================================
#
# This package observes every value of every column and decides
# the narrowest column type consistent with all of them.
#
# Two-step process:
#   Step 1 (Lattice):    one value + current state → next state
#   Step 2 (Inference):  fold the whole input through the lattice
#
# Modules:
# --------
# - column_type.py       → ColumnKind, IntegerWidth, ColumnType
# - lattice.py           → TypeLattice promotion rule
# - schema.py            → Immutable Schema mapping
# - schema_inferencer.py → Two-pass SchemaInferencer
#
# ==============================================

from .column_type import ColumnKind, ColumnType, IntegerWidth
from .lattice import TypeLattice
from .schema import Schema
from .schema_inferencer import SchemaInferencer

__all__ = [
    "ColumnKind",
    "ColumnType",
    "IntegerWidth",
    "TypeLattice",
    "Schema",
    "SchemaInferencer",
]
