# ==============================================
# SQLiteStore
# ==============================================
#
# PURPOSE:
#   Manages the SQLite database file the CSV is loaded into,
#   through SQLAlchemy. Creates the target table from the
#   inferred schema, executes textual INSERT statements, and
#   compacts the file into a fresh copy.
#
# CLASS: SQLiteStore
# ------------------
#   Stateful: holds the engine and one open connection.
#
#   Constructor:
#   ------------
#   - __init__(path)
#       Store the database path. Don't connect yet.
#
#   Methods:
#   --------
#   - create() -> None
#       Delete any existing file at path, then connect (SQLite
#       creates the empty database).
#
#   - connect() / disconnect()
#       disconnect() closes the connection AND disposes the engine
#       pool, so no handle to the file stays open.
#
#   - create_table(table_name, columns, primary_key=None) -> Table
#       columns: ordered (identifier, ColumnType) pairs.
#       Every column nullable except BOOLEAN columns.
#       primary_key: optional single identifier → PRIMARY KEY "primaryKey".
#
#   - insert_rows(table_name, column_names, rows) -> int
#       One INSERT ... VALUES (...), (...) statement built from
#       pre-encoded literals, committed before returning.
#
#   - compact_into(destination) -> None
#       VACUUM INTO destination. Only while disconnected.
#
#   - fetch_all / count_rows / get_columns / execute / size_bytes
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with SQLiteStore(path) as db:` usage.
#
# PHYSICAL TYPES:
# ---------------
#   INTEGER (UINT8) → TINYINT UNSIGNED    FLOAT   → FLOAT
#   INTEGER (INT16) → SMALLINT            DATE    → DATETIME
#   INTEGER (INT32) → INTEGER             BOOLEAN → BOOLEAN
#   VARTEXT(n)      → VARCHAR(n)          LONGVARTEXT → TEXT
#
# ==============================================

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    SmallInteger,
    String,
    Table,
    Text,
    create_engine,
    inspect,
)
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.type_api import TypeEngine
from sqlalchemy.types import UserDefinedType

from csvload.analysis import ColumnKind, ColumnType, IntegerWidth
from csvload.errors import StoreError
from .literal_encoder import quote_text

logger = logging.getLogger(__name__)


class UnsignedTinyInteger(UserDefinedType):
    """8-bit unsigned integer column (SQLite gives it INTEGER affinity)."""

    cache_ok = True

    def get_col_spec(self, **kw) -> str:
        return "TINYINT UNSIGNED"


def _error_text(error: SQLAlchemyError) -> str:
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


class SQLiteStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.engine: Optional[Engine] = None
        self.connection: Optional[Connection] = None

    @property
    def url(self) -> str:
        return f"sqlite:///{self.path.resolve()}"

    def create(self) -> None:
        # Start from an empty database file
        self.disconnect()
        if self.path.exists():
            logger.info("Removing existing database %s", self.path)
            self.path.unlink()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.connect()

    def connect(self) -> None:
        if self.connection is not None:
            return
        try:
            self.engine = create_engine(self.url)
            self.connection = self.engine.connect()
        except SQLAlchemyError as e:
            self.disconnect()
            raise StoreError(f"Cannot open database {self.path}: {_error_text(e)}") from e

    def disconnect(self) -> None:
        # Close connection cleanly and release every pooled handle
        if self.connection is not None:
            self.connection.close()
            self.connection = None
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

    def _require_connection(self) -> Connection:
        if self.connection is None:
            raise StoreError(f"Not connected to {self.path}")
        return self.connection

    @staticmethod
    def sql_type(column: ColumnType) -> TypeEngine:
        """SQLAlchemy column type for a final ColumnType."""
        kind = column.kind
        if kind is ColumnKind.INTEGER:
            width = column.integer_width
            if width is IntegerWidth.UINT8:
                return UnsignedTinyInteger()
            if width is IntegerWidth.INT16:
                return SmallInteger()
            return Integer()
        if kind is ColumnKind.FLOAT:
            return Float()
        if kind is ColumnKind.DATE:
            return DateTime()
        if kind is ColumnKind.BOOLEAN:
            return Boolean()
        if kind is ColumnKind.VARTEXT:
            return String(max(column.size, 1))
        return Text()

    def create_table(
        self,
        table_name: str,
        columns: Sequence[Tuple[str, ColumnType]],
        primary_key: Optional[str] = None,
    ) -> Table:
        connection = self._require_connection()
        metadata = MetaData()
        sql_columns = [
            Column(name, self.sql_type(column), nullable=column.kind is not ColumnKind.BOOLEAN)
            for name, column in columns
        ]
        table = Table(table_name, metadata, *sql_columns)
        if primary_key:
            table.append_constraint(PrimaryKeyConstraint(primary_key, name="primaryKey"))

        try:
            metadata.create_all(connection, checkfirst=False)
            connection.commit()
        except SQLAlchemyError as e:
            connection.rollback()
            raise StoreError(f"Cannot create table {table_name}: {_error_text(e)}") from e

        logger.info("Created table %s with %d columns", table_name, len(sql_columns))
        return table

    def insert_rows(self, table_name: str, column_names: Sequence[str], rows: Sequence[Sequence[str]]) -> int:
        # Insert pre-encoded literal rows in one statement, return count inserted
        if not rows:
            return 0
        connection = self._require_connection()
        preparer = connection.dialect.identifier_preparer
        column_list = ", ".join(preparer.quote(name) for name in column_names)
        values = ", ".join("(" + ", ".join(row) + ")" for row in rows)
        statement = f"INSERT INTO {preparer.quote(table_name)} ({column_list}) VALUES {values}"
        try:
            connection.exec_driver_sql(statement)
            connection.commit()
        except SQLAlchemyError as e:
            connection.rollback()
            raise StoreError(f"Insert into {table_name} failed: {_error_text(e)}") from e
        return len(rows)

    def compact_into(self, destination: Union[str, Path]) -> None:
        """
        Write a compacted copy of the database to destination.

        The destination must not exist or must be an empty file.

        Args:
            destination: Path of the compacted copy
        """
        if self.connection is not None:
            raise StoreError("Disconnect before compacting the database")
        engine = create_engine(self.url, isolation_level="AUTOCOMMIT")
        try:
            with engine.connect() as connection:
                connection.exec_driver_sql(f"VACUUM INTO {quote_text(str(destination))}")
        except SQLAlchemyError as e:
            raise StoreError(f"Cannot compact {self.path}: {_error_text(e)}") from e
        finally:
            engine.dispose()

    def execute(self, query: str, params: Optional[tuple] = None) -> None:
        # Execute a raw SQL statement and commit
        connection = self._require_connection()
        try:
            if params:
                connection.exec_driver_sql(query, params)
            else:
                connection.exec_driver_sql(query)
            connection.commit()
        except SQLAlchemyError as e:
            connection.rollback()
            raise StoreError(_error_text(e)) from e

    def fetch_all(self, query: str, params: Optional[tuple] = None) -> List[Dict[str, Any]]:
        # Execute SELECT and return rows as dicts
        connection = self._require_connection()
        try:
            if params is not None:
                result = connection.exec_driver_sql(query, params)
            else:
                result = connection.exec_driver_sql(query)
            rows = [dict(row._mapping) for row in result]
            connection.commit()
        except SQLAlchemyError as e:
            connection.rollback()
            raise StoreError(_error_text(e)) from e
        return rows

    def count_rows(self, table_name: str) -> int:
        connection = self._require_connection()
        quoted = connection.dialect.identifier_preparer.quote(table_name)
        return self.fetch_all(f"SELECT COUNT(*) AS n FROM {quoted}")[0]["n"]

    def get_columns(self, table_name: str) -> Dict[str, Dict[str, Any]]:
        """Column name -> {"type": str, "nullable": bool, "primary_key": bool}."""
        connection = self._require_connection()
        try:
            inspector = inspect(connection)
            columns = {
                col["name"]: {
                    "type": str(col["type"]),
                    "nullable": bool(col["nullable"]),
                    "primary_key": bool(col.get("primary_key")),
                }
                for col in inspector.get_columns(table_name)
            }
        except SQLAlchemyError as e:
            raise StoreError(_error_text(e)) from e
        return columns

    def size_bytes(self) -> int:
        return self.path.stat().st_size if self.path.exists() else 0

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
