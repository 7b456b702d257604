# ==============================================
# TOPIC 5: PERSISTENCE (Run metadata)
# ==============================================
#
# This package writes the inferred schema and the load summary
# as JSON files next to the database.
#
# Modules:
# --------
# - metadata_store.py  → Save/load schema.json and state.json
#
# ==============================================

from .metadata_store import MetadataStore

__all__ = ["MetadataStore"]
