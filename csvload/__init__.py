# ==============================================
# csvload: Typed CSV to SQLite Loader
# ==============================================
#
# Package Structure (5 Topics + Orchestrator):
#
# csvload/
# ├── source/          # Topic 1: Read delimited text as named text fields
# ├── normalization/   # Topic 2: Parse values, sanitize identifiers
# ├── analysis/        # Topic 3: Type lattice + two-pass schema inference
# ├── storage/         # Topic 4: SQLite store, encoder, compaction, bulk loader
# ├── persistence/     # Topic 5: Schema / load-state sidecar files
# ├── config.py        # Configuration management
# ├── errors.py        # Exception taxonomy
# ├── logging_config.py
# ├── pipeline.py      # CsvToStorePipeline orchestrator
# └── cli.py           # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
