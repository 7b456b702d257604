"""Immutable result of schema inference."""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Tuple

from .column_type import ColumnKind, ColumnType


class Schema(Mapping):
    """
    Ordered, read-only mapping of raw field name -> final ColumnType.

    Keys are exactly the non-excluded header fields, in header order.
    """

    def __init__(self, columns: Dict[str, ColumnType]):
        self._columns: Dict[str, ColumnType] = dict(columns)

    def __getitem__(self, field_name: str) -> ColumnType:
        return self._columns[field_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}: {column}" for name, column in self._columns.items())
        return f"Schema({inner})"

    @property
    def fields(self) -> List[str]:
        return list(self._columns)

    def columns_of_kind(self, kind: ColumnKind) -> List[Tuple[str, ColumnType]]:
        return [(name, column) for name, column in self._columns.items() if column.kind is kind]

    def to_dict(self) -> Dict[str, Any]:
        return {name: column.to_dict() for name, column in self._columns.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Schema":
        return cls({name: ColumnType.from_dict(column) for name, column in data.items()})
