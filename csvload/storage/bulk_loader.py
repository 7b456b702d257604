# ==============================================
# BulkLoader
# ==============================================
#
# PURPOSE:
#   Re-reads the record source, encodes every row with the frozen
#   schema, inserts the rows into the target table in input order,
#   and runs a compaction cycle after every `compaction_interval`
#   committed rows.
#
# CLASS: BulkLoader
# -----------------
#   Stateful: holds references to the store, encoder and compactor.
#
#   Constructor:
#   ------------
#   - __init__(store, encoder=None, compactor=None,
#              compaction_interval=100000, batch_size=1,
#              progress_interval=1000, on_progress=None)
#
#   Methods:
#   --------
#   - load(source, schema, table_name, column_names) -> LoadResult
#       For each row:
#         1. Encode the schema fields into SQL literals
#         2. Queue the row; submit the queue as one INSERT when it
#            holds batch_size rows, or when the committed count
#            would reach the next multiple of compaction_interval
#         3. After a submit that lands on a multiple of
#            compaction_interval, compact
#       Statements are submitted one at a time, in input order,
#       and each commits before the next row is read.
#
#   Progress:
#   ---------
#   on_progress(rows_loaded) is called whenever at least
#   progress_interval more rows have committed, and once at the end.
#
# DATA CLASS: LoadResult
# ----------------------
#   - rows_loaded: int
#   - statements_executed: int
#   - compactions: int
#   - bytes_reclaimed: int
#   - elapsed_seconds: float
#
# ==============================================

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from csvload.analysis import Schema
from csvload.errors import ConfigurationError
from .compactor import Compactor, CompactionResult
from .literal_encoder import LiteralEncoder
from .sqlite_store import SQLiteStore

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    rows_loaded: int = 0
    statements_executed: int = 0
    compactions: int = 0
    bytes_reclaimed: int = 0
    elapsed_seconds: float = 0.0
    compaction_log: List[CompactionResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows_loaded": self.rows_loaded,
            "statements_executed": self.statements_executed,
            "compactions": self.compactions,
            "bytes_reclaimed": self.bytes_reclaimed,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
        }


class BulkLoader:
    def __init__(
        self,
        store: SQLiteStore,
        encoder: Optional[LiteralEncoder] = None,
        compactor: Optional[Compactor] = None,
        compaction_interval: int = 100000,
        batch_size: int = 1,
        progress_interval: int = 1000,
        on_progress: Optional[Callable[[int], None]] = None,
    ):
        if compaction_interval < 1:
            raise ConfigurationError(f"Compaction interval must be positive, got {compaction_interval}")
        if batch_size < 1:
            raise ConfigurationError(f"Batch size must be positive, got {batch_size}")
        self.store = store
        self.encoder = encoder or LiteralEncoder()
        self.compactor = compactor or Compactor(store)
        self.compaction_interval = compaction_interval
        self.batch_size = batch_size
        self.progress_interval = max(progress_interval, 1)
        self.on_progress = on_progress

    def load(self, source, schema: Schema, table_name: str, column_names: Sequence[str]) -> LoadResult:
        """
        Stream every row of source into table_name.

        Args:
            source: Record source with rows() (e.g., CsvSource)
            schema: Frozen schema; decides which fields are written and how
            table_name: Target table identifier
            column_names: Column identifiers, aligned with schema order

        Returns:
            LoadResult with counts and timings
        """
        if len(column_names) != len(schema):
            raise ConfigurationError("Column names do not match the schema")

        result = LoadResult()
        started = time.time()
        last_reported = 0
        batch: List[List[str]] = []

        for row in source.rows():
            batch.append(self.encoder.encode_row(row, schema))

            at_boundary = (result.rows_loaded + len(batch)) % self.compaction_interval == 0
            if len(batch) >= self.batch_size or at_boundary:
                self._submit(table_name, column_names, batch, result)
                batch = []

                if at_boundary:
                    self._compact(result)

                if result.rows_loaded - last_reported >= self.progress_interval:
                    last_reported = result.rows_loaded
                    self._report(result.rows_loaded)

        if batch:
            self._submit(table_name, column_names, batch, result)

        result.elapsed_seconds = time.time() - started
        if result.rows_loaded != last_reported or result.rows_loaded == 0:
            self._report(result.rows_loaded)

        logger.info(
            "Loaded %d rows into %s with %d statements and %d compactions in %.2fs",
            result.rows_loaded, table_name, result.statements_executed,
            result.compactions, result.elapsed_seconds,
        )
        return result

    def _submit(self, table_name: str, column_names: Sequence[str], batch: List[List[str]], result: LoadResult) -> None:
        result.rows_loaded += self.store.insert_rows(table_name, column_names, batch)
        result.statements_executed += 1
        logger.debug("Committed %d rows (total %d)", len(batch), result.rows_loaded)

    def _compact(self, result: LoadResult) -> None:
        compaction = self.compactor.compact()
        result.compactions += 1
        result.bytes_reclaimed += compaction.bytes_reclaimed
        result.compaction_log.append(compaction)

    def _report(self, rows_loaded: int) -> None:
        if self.on_progress is not None:
            self.on_progress(rows_loaded)
