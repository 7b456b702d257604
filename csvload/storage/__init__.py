# ==============================================
# TOPIC 4: STORAGE (SQLite)
# ==============================================
#
# This package handles all database operations:
# creating the store and table, encoding values, inserting
# rows, and keeping the database file compact during a load.
#
# Modules:
# --------
# - literal_encoder.py → Text value → SQLite literal by column kind
# - sqlite_store.py    → SQLite connection and operations (SQLAlchemy)
# - compactor.py       → Compact-and-swap maintenance cycle
# - bulk_loader.py     → Streams rows into the table, triggers compaction
#
# ==============================================

from .literal_encoder import LiteralEncoder, quote_text
from .sqlite_store import SQLiteStore, UnsignedTinyInteger
from .compactor import Compactor, CompactionResult
from .bulk_loader import BulkLoader, LoadResult

__all__ = [
    "LiteralEncoder",
    "quote_text",
    "SQLiteStore",
    "UnsignedTinyInteger",
    "Compactor",
    "CompactionResult",
    "BulkLoader",
    "LoadResult",
]
