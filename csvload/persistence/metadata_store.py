import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from csvload.analysis import Schema

logger = logging.getLogger(__name__)


# ==============================================
# MetadataStore
# ==============================================
#
# PURPOSE:
#   Write what a run decided and did next to the database, so an
#   operator can see the inferred schema and the load summary
#   without opening the database.
#
# WHAT IS PERSISTED:
#   1. schema.json → source file, table name, and per field:
#                    column identifier + ColumnType
#   2. state.json  → load summary (rows, statements, compactions, timing)
#
#   Nothing here is read back to resume a load: a restarted run
#   re-infers and reloads from scratch.
#
# CLASS: MetadataStore
# --------------------
#   Stateful: holds a reference to the storage directory.
#
#   Constructor:
#   ------------
#   - __init__(storage_dir: str)
#       Create storage directory if it doesn't exist.
#
class MetadataStore:
    """
    Handles the schema / load-state sidecar files.

    Files created:
    - <storage_dir>/schema.json  → Inferred schema
    - <storage_dir>/state.json   → Load summary
    """

    def __init__(self, storage_dir: Union[str, Path]):
        """
        Initialize the metadata store.

        Args:
            storage_dir: Directory to store metadata files
        """
        self.storage_dir = Path(storage_dir)

        # Create directory if it doesn't exist
        self.storage_dir.mkdir(parents=True, exist_ok=True)

        # Define file paths
        self.schema_file = self.storage_dir / "schema.json"
        self.state_file = self.storage_dir / "state.json"

#   Methods:
#   --------
#   SAVING:
#   - save_schema(schema, table_name, column_names, source) -> Path
#   - save_state(summary: dict) -> Path
#
#   LOADING:
#   - load_schema() -> tuple[Schema, dict] | None
#       The Schema plus the raw document (table, column names).
#   - load_state() -> dict | None
#
    def save_schema(
        self,
        schema: Schema,
        table_name: str,
        column_names: Dict[str, str],
        source: Optional[str] = None,
    ) -> Path:
        """
        Save the inferred schema to disk.

        Args:
            schema: Inferred schema
            table_name: Target table identifier
            column_names: Raw field name -> column identifier
            source: Input file path

        Returns:
            Path of the written file
        """
        document = {
            "source": source,
            "table": table_name,
            "created_at": datetime.now().isoformat(),
            "fields": [
                {"field": name, "column": column_names.get(name, name), **column.to_dict()}
                for name, column in schema.items()
            ],
        }

        with open(self.schema_file, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)

        logger.info("Saved schema for %d fields to %s", len(schema), self.schema_file)
        return self.schema_file

    def save_state(self, summary: Dict[str, Any]) -> Path:
        """
        Save the load summary to disk.

        Args:
            summary: LoadResult.to_dict() plus anything the caller adds
        """
        state = dict(summary)
        state["finished_at"] = datetime.now().isoformat()

        with open(self.state_file, "w", encoding="utf-8") as f:
            json.dump(state, f, indent=2)

        logger.info("Saved load state to %s", self.state_file)
        return self.state_file

    def load_schema(self) -> Optional[tuple]:
        """
        Load a previously saved schema.

        Returns:
            (Schema, document) or None if no schema file exists
        """
        if not self.schema_file.exists():
            return None

        with open(self.schema_file, "r", encoding="utf-8") as f:
            document = json.load(f)

        schema = Schema.from_dict({entry["field"]: entry for entry in document["fields"]})
        return schema, document

    def load_state(self) -> Optional[Dict[str, Any]]:
        if not self.state_file.exists():
            return None
        with open(self.state_file, "r", encoding="utf-8") as f:
            return json.load(f)
