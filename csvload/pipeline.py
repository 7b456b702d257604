"""
==============================================
CsvToStorePipeline: Orchestrator
==============================================

Ties the topics together for one input file:

    CsvSource ──► SchemaInferencer ──► Schema (frozen)
                                          │
                      SQLiteStore.create_table(identifiers, schema)
                                          │
    CsvSource ──► BulkLoader ──► SQLiteStore.insert_rows ──► Compactor
                                          │
                                    MetadataStore (optional)

USAGE EXAMPLES:

1. Load a file with defaults (comma delimiter, <input>.db output):
    from csvload.pipeline import CsvToStorePipeline

    pipeline = CsvToStorePipeline()
    result = pipeline.run("people.csv")
    print(result.rows_loaded)

2. Semicolon delimiter, primary key, ignored fields:
    pipeline.run("people.csv", delimiter=";", primary_key="id",
                 ignore=["notes", "internal code"])

3. Only look at the inferred schema:
    schema = pipeline.infer_schema("people.csv")
    for field_name, column in schema.items():
        print(field_name, column)
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from csvload.analysis import ColumnType, Schema, SchemaInferencer, TypeLattice
from csvload.config import AppConfig, get_config
from csvload.errors import ConfigurationError
from csvload.normalization import IdentifierNormalizer, TypeDetector
from csvload.persistence import MetadataStore
from csvload.source import CsvSource
from csvload.storage import BulkLoader, Compactor, LiteralEncoder, LoadResult, SQLiteStore

logger = logging.getLogger(__name__)


class CsvToStorePipeline:
    """
    Infers a schema for one delimited file and loads it into a new
    SQLite database. Each run() starts a fresh database.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        on_progress: Optional[Callable[[int], None]] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Optional configuration. If None, loads from environment.
            on_progress: Called with the committed row count during loading.
        """
        self._config = config or get_config()
        self._on_progress = on_progress
        self._type_detector = TypeDetector(
            true_literal=self._config.inference.true_literal,
            false_literal=self._config.inference.false_literal,
        )
        self._normalizer = IdentifierNormalizer()

    @property
    def config(self) -> AppConfig:
        return self._config

    def output_path_for(self, input_path: Union[str, Path]) -> Path:
        """Input path with its extension replaced by the configured one."""
        extension = self._config.store.output_extension.lstrip(".")
        return Path(input_path).with_suffix(f".{extension}")

    def open_source(self, input_path: Union[str, Path], delimiter: Optional[str] = None) -> CsvSource:
        return CsvSource(
            input_path,
            delimiter=delimiter or self._config.source.delimiter,
            encoding=self._config.source.encoding,
        )

    def infer_schema(
        self,
        input_path: Union[str, Path],
        delimiter: Optional[str] = None,
        ignore: Iterable[str] = (),
    ) -> Schema:
        """Run both inference passes and return the frozen schema."""
        return self._inferencer().infer(self.open_source(input_path, delimiter), exclude=ignore)

    def _inferencer(self) -> SchemaInferencer:
        lattice = TypeLattice(self._type_detector, self._config.inference.text_threshold)
        return SchemaInferencer(lattice)

    def column_identifiers(self, schema: Schema) -> Dict[str, str]:
        """
        Raw field name -> column identifier for every schema field.

        Raises:
            ConfigurationError: if a name sanitizes to nothing, or two
                fields sanitize to the same identifier
        """
        identifiers: Dict[str, str] = {}
        seen: Dict[str, str] = {}
        for field_name in schema:
            identifier = self._normalizer.normalize(field_name)
            if not identifier:
                raise ConfigurationError(f"Field name {field_name!r} has no usable characters")
            key = identifier.lower()
            if key in seen:
                raise ConfigurationError(
                    f"Fields {seen[key]!r} and {field_name!r} both map to column {identifier!r}"
                )
            seen[key] = field_name
            identifiers[field_name] = identifier
        return identifiers

    def table_name_for(self, input_path: Union[str, Path]) -> str:
        table_name = self._normalizer.normalize(Path(input_path).stem)
        if not table_name:
            raise ConfigurationError(f"Cannot derive a table name from {input_path}")
        return table_name

    def _resolve_primary_key(self, primary_key: Optional[str], identifiers: Dict[str, str]) -> Optional[str]:
        if not primary_key:
            return None
        if primary_key in identifiers:
            return identifiers[primary_key]
        if primary_key in identifiers.values():
            return primary_key
        raise ConfigurationError(f"Primary key field {primary_key!r} is not a loaded field")

    def run(
        self,
        input_path: Union[str, Path],
        delimiter: Optional[str] = None,
        primary_key: Optional[str] = None,
        ignore: Iterable[str] = (),
        output_path: Optional[Union[str, Path]] = None,
    ) -> LoadResult:
        """
        Load one file end to end.

        Args:
            input_path: Delimited text file with a header row
            delimiter: Field delimiter (defaults to the configured one)
            primary_key: Optional raw field name (or column identifier)
            ignore: Raw field names to leave out
            output_path: Database path (defaults to input path with the
                configured extension)

        Returns:
            LoadResult of the bulk load
        """
        input_path = Path(input_path)
        output_path = Path(output_path) if output_path else self.output_path_for(input_path)
        ignore = list(ignore)
        if output_path.resolve() == input_path.resolve():
            raise ConfigurationError(f"Output path {output_path} would overwrite the input file")
        self._check_loader_config()

        # Inference reads the input before anything is written
        print("Choosing column types")
        source = self.open_source(input_path, delimiter)
        schema = self._inferencer().infer(source, exclude=ignore)
        if not schema:
            raise ConfigurationError("No fields left to load after applying the ignore list")

        identifiers = self.column_identifiers(schema)
        table_name = self.table_name_for(input_path)
        key_column = self._resolve_primary_key(primary_key, identifiers)
        logger.info("Loading %s into table %s of %s", input_path, table_name, output_path)

        print("Creating the database")
        store = SQLiteStore(output_path)
        store.create()
        try:
            print("Creating the table")
            columns: List[Tuple[str, ColumnType]] = [
                (identifiers[name], column) for name, column in schema.items()
            ]
            store.create_table(table_name, columns, primary_key=key_column)

            metadata = self._metadata_store()
            if metadata is not None:
                metadata.save_schema(schema, table_name, identifiers, source=str(input_path))

            print("Populating the table")
            loader_config = self._config.loader
            loader = BulkLoader(
                store,
                encoder=LiteralEncoder(self._type_detector, self._config.store.date_format),
                compactor=Compactor(store),
                compaction_interval=loader_config.compaction_interval,
                batch_size=loader_config.batch_size,
                progress_interval=loader_config.progress_interval,
                on_progress=self._on_progress,
            )
            result = loader.load(source, schema, table_name, [identifiers[name] for name in schema])

            if metadata is not None:
                summary = result.to_dict()
                summary.update({"table": table_name, "database": str(output_path)})
                metadata.save_state(summary)
        finally:
            store.disconnect()

        return result

    def _check_loader_config(self) -> None:
        loader_config = self._config.loader
        if loader_config.compaction_interval < 1:
            raise ConfigurationError(
                f"Compaction interval must be positive, got {loader_config.compaction_interval}"
            )
        if loader_config.batch_size < 1:
            raise ConfigurationError(f"Batch size must be positive, got {loader_config.batch_size}")

    def _metadata_store(self) -> Optional[MetadataStore]:
        if not self._config.store.metadata_dir:
            return None
        return MetadataStore(self._config.store.metadata_dir)
