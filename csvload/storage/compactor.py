# ==============================================
# Compactor
# ==============================================
#
# PURPOSE:
#   Runs one maintenance cycle on the database file while a
#   bulk load is in progress:
#
#     1. disconnect the store (no open handles remain)
#     2. VACUUM INTO a temporary file in the same directory
#     3. os.replace() the temporary file over the database
#     4. reconnect the store
#
#   Step 3 is a rename within one directory, so a crash at any
#   point leaves either the pre-compaction file or the fully
#   compacted file on disk, never a truncated or missing one.
#   On failure the temporary file is removed, the original file
#   is untouched, and CompactionError is raised.
#
# CLASS: Compactor
# ----------------
#   - __init__(store: SQLiteStore)
#   - compact() -> CompactionResult
#   - compactions: int   → cycles completed so far
#
# DATA CLASS: CompactionResult
# ----------------------------
#   - bytes_before: int
#   - bytes_after: int
#   - elapsed_seconds: float
#
# ==============================================

import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from csvload.errors import CompactionError, StoreError
from .sqlite_store import SQLiteStore

logger = logging.getLogger(__name__)


@dataclass
class CompactionResult:
    bytes_before: int = 0
    bytes_after: int = 0
    elapsed_seconds: float = 0.0

    @property
    def bytes_reclaimed(self) -> int:
        return max(self.bytes_before - self.bytes_after, 0)


class Compactor:
    """Compact-and-swap cycle for a SQLiteStore."""

    def __init__(self, store: SQLiteStore):
        self.store = store
        self.compactions = 0

    def compact(self) -> CompactionResult:
        """
        Compact the store's database file in place.

        Returns:
            CompactionResult with file sizes before and after

        Raises:
            CompactionError: if any step fails; the original file is kept
        """
        store = self.store
        started = time.time()
        bytes_before = store.size_bytes()

        # Step 1: release every handle to the file
        store.disconnect()

        # Step 2: compact into a sibling temporary file
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{store.path.name}.", suffix=".compact", dir=store.path.parent
        )
        os.close(fd)
        temp_path = Path(temp_name)

        try:
            store.compact_into(temp_path)
            # Step 3: atomic swap
            os.replace(temp_path, store.path)
        except (StoreError, OSError) as e:
            temp_path.unlink(missing_ok=True)
            raise CompactionError(f"Compaction of {store.path} failed: {e}") from e

        # Step 4: resume
        store.connect()
        self.compactions += 1

        result = CompactionResult(
            bytes_before=bytes_before,
            bytes_after=store.size_bytes(),
            elapsed_seconds=time.time() - started,
        )
        logger.info(
            "Compacted %s: %d -> %d bytes in %.2fs",
            store.path, result.bytes_before, result.bytes_after, result.elapsed_seconds,
        )
        return result
