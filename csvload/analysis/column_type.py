# ==============================================
# Column Type (Data Classes)
# ==============================================
#
# PURPOSE:
#   Data classes that represent the per-column state of schema
#   inference and its final outcome.
#
# ENUMS:
# ------
# - ColumnKind(Enum): INTEGER < FLOAT < DATE < BOOLEAN < VARTEXT < LONGVARTEXT
#     Tags of the type lattice, ordered weakest to strongest.
#
# - IntegerWidth(Enum): UINT8, INT16, INT32
#     Physical width chosen for a column that stayed INTEGER.
#
# CLASSES:
# --------
# - ColumnType (frozen dataclass)
#     The state of one column. Promotion produces a new value,
#     so a ColumnType handed out is never mutated afterwards.
#
#     Attributes:
#     -----------
#     - kind: ColumnKind            → Current lattice tag
#     - size: int                   → Declared width (text kinds: max length, BOOLEAN: 1)
#     - min_value: int | None       → Smallest integer seen while INTEGER
#     - max_value: int | None       → Largest integer seen while INTEGER
#     - max_length: int             → Longest non-empty value seen, any kind
#
#     Methods:
#     --------
#     - integer_width -> IntegerWidth | None
#     - to_dict() / from_dict()
#
# ==============================================

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ColumnKind(Enum):
    """
    Lattice tags. The value is the rank: a column's kind only
    ever moves to a higher rank.
    """
    INTEGER = 0
    FLOAT = 1
    DATE = 2
    BOOLEAN = 3
    VARTEXT = 4
    LONGVARTEXT = 5

    @property
    def is_text(self) -> bool:
        return self in (ColumnKind.VARTEXT, ColumnKind.LONGVARTEXT)

    def __lt__(self, other: "ColumnKind") -> bool:
        if not isinstance(other, ColumnKind):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: "ColumnKind") -> bool:
        if not isinstance(other, ColumnKind):
            return NotImplemented
        return self.value <= other.value


class IntegerWidth(Enum):
    """Physical integer widths with their inclusive ranges."""
    UINT8 = (0, 255)
    INT16 = (-32768, 32767)
    INT32 = (-2147483648, 2147483647)

    @property
    def low(self) -> int:
        return self.value[0]

    @property
    def high(self) -> int:
        return self.value[1]

    @classmethod
    def for_range(cls, min_value: Optional[int], max_value: Optional[int]) -> "IntegerWidth":
        """
        Narrowest width holding [min_value, max_value].

        A column with no observed integers gets the narrowest width.
        """
        if min_value is None or max_value is None:
            return cls.UINT8
        for width in (cls.UINT8, cls.INT16):
            if min_value >= width.low and max_value <= width.high:
                return width
        return cls.INT32


@dataclass(frozen=True)
class ColumnType:
    """Inference state for a single column."""

    kind: ColumnKind = ColumnKind.INTEGER
    size: int = 0
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    max_length: int = 0

    @property
    def integer_width(self) -> Optional[IntegerWidth]:
        """Physical width for INTEGER columns, None for every other kind."""
        if self.kind is not ColumnKind.INTEGER:
            return None
        return IntegerWidth.for_range(self.min_value, self.max_value)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-compatible dictionary.

        Returns:
            A dictionary representation suitable for JSON storage.
        """
        width = self.integer_width
        return {
            "kind": self.kind.name,
            "size": self.size,
            "min_value": self.min_value,
            "max_value": self.max_value,
            "max_length": self.max_length,
            "integer_width": width.name if width else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColumnType":
        """
        Reconstruct a ColumnType from stored metadata.

        Args:
            data: Dictionary produced by to_dict()

        Returns:
            A ColumnType instance
        """
        return cls(
            kind=ColumnKind[data["kind"]],
            size=data.get("size", 0),
            min_value=data.get("min_value"),
            max_value=data.get("max_value"),
            max_length=data.get("max_length", 0),
        )

    def __str__(self) -> str:
        if self.kind is ColumnKind.INTEGER:
            return f"INTEGER({self.integer_width.name}, [{self.min_value}, {self.max_value}])"
        if self.kind.is_text:
            return f"{self.kind.name}({self.size})"
        return self.kind.name
