# ==============================================
# CLI: Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Loads one delimited text file into a new SQLite database.
#   This is how users interact with the system.
#
# USAGE:
# ------
#   csvload <inputFile> [delimiter] [primaryKeyField] [ignoreFieldsCsv]
#
# EXAMPLES:
# ---------
# 1. Comma separated, no key:
#    csvload people.csv
#
# 2. Semicolon separated, "id" as primary key, two fields left out:
#    csvload people.csv ";" id "notes,internal code"
#
# 3. Tab separated (either spelling):
#    csvload people.tsv '\t'
#    csvload people.tsv tab
#
# 4. Only print the inferred column types:
#    csvload people.csv --infer-only
#
# EXIT STATUS:
# ------------
#   0 on success, 1 on any error. Errors are printed as
#   "An error occurred - <message>"; when pause_on_error is set
#   and stdin is a terminal, the program waits for Enter first.
#
# ==============================================

import argparse
import logging
import sys
from typing import List, Optional

from csvload import __version__
from csvload.analysis import ColumnKind, Schema
from csvload.config import AppConfig, load_config
from csvload.errors import CsvLoadError
from csvload.logging_config import setup_logging
from csvload.pipeline import CsvToStorePipeline
from csvload.storage import SQLiteStore

logger = logging.getLogger(__name__)

TAB_ALIASES = ("\\t", "tab")


def parse_delimiter(value: Optional[str]) -> Optional[str]:
    """First character of the argument; '\\t' and 'tab' mean TAB."""
    if not value:
        return None
    if value.lower() in TAB_ALIASES:
        return "\t"
    return value[0]


def parse_ignore_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csvload",
        description="Infer column types for a delimited text file and load it into a SQLite database.",
    )
    parser.add_argument("input_file", help="Delimited text file with a header row")
    parser.add_argument("delimiter", nargs="?", default=None, help="Field delimiter (default ',')")
    parser.add_argument("primary_key", nargs="?", default=None, help="Field to use as primary key")
    parser.add_argument("ignore_fields", nargs="?", default=None,
                        help="Comma-separated field names to leave out")
    parser.add_argument("--output", "-o", default=None,
                        help="Database path (default: input path with the .db extension)")
    parser.add_argument("--compaction-interval", type=int, default=None,
                        help="Compact the database after every N rows")
    parser.add_argument("--batch-size", type=int, default=None, help="Rows per INSERT statement")
    parser.add_argument("--metadata-dir", default=None,
                        help="Write schema.json and state.json into this directory")
    parser.add_argument("--infer-only", action="store_true",
                        help="Print the inferred schema and exit without creating a database")
    parser.add_argument("--no-pause", action="store_true", help="Do not wait for Enter after an error")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    # Command line flags take precedence over environment values
    if args.compaction_interval is not None:
        config.loader.compaction_interval = args.compaction_interval
    if args.batch_size is not None:
        config.loader.batch_size = args.batch_size
    if args.metadata_dir:
        config.store.metadata_dir = args.metadata_dir
    if args.no_pause:
        config.pause_on_error = False
    return config


def print_schema(pipeline: CsvToStorePipeline, schema: Schema) -> None:
    identifiers = pipeline.column_identifiers(schema)
    print(f"{'Field':<24} {'Column':<24} {'Type':<18} {'Size':>6}  Range")
    for field_name, column in schema.items():
        sql_type = SQLiteStore.sql_type(column).compile()
        bounds = ""
        if column.kind is ColumnKind.INTEGER and column.min_value is not None:
            bounds = f"{column.min_value}..{column.max_value}"
        print(f"{field_name:<24} {identifiers[field_name]:<24} {sql_type:<18} {column.size:>6}  {bounds}")


def _print_progress(rows_loaded: int) -> None:
    print(f"\rProcessing record {rows_loaded}", end="", flush=True)


def _pause() -> None:
    try:
        input("Press Enter to continue")
    except EOFError:
        pass


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    pause_on_error = not args.no_pause

    try:
        config = apply_overrides(load_config(), args)
        pause_on_error = config.pause_on_error
        setup_logging(verbose=args.verbose, level=config.log_level)

        pipeline = CsvToStorePipeline(config, on_progress=_print_progress)
        delimiter = parse_delimiter(args.delimiter)
        ignore = parse_ignore_list(args.ignore_fields)

        if args.infer_only:
            schema = pipeline.infer_schema(args.input_file, delimiter=delimiter, ignore=ignore)
            print_schema(pipeline, schema)
            return 0

        result = pipeline.run(
            args.input_file,
            delimiter=delimiter,
            primary_key=args.primary_key,
            ignore=ignore,
            output_path=args.output,
        )
        print()
        logger.info("Loaded %d records with %d compactions", result.rows_loaded, result.compactions)
        return 0
    except CsvLoadError as e:
        print()
        print(f"An error occurred - {e.message}")
    except Exception as e:
        logger.exception("Unexpected failure")
        print()
        print(f"An error occurred - {e}")

    if pause_on_error and sys.stdin.isatty():
        _pause()
    return 1


if __name__ == "__main__":
    sys.exit(main())
