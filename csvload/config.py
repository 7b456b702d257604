# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to all other modules. CLI flags override these values.
#
# CLASSES:
# --------
# - SourceConfig (dataclass)
#     delimiter: str             (default ",")
#     encoding: str              (default "utf-8-sig")
#
# - InferenceConfig (dataclass)
#     text_threshold: int        (default 255)
#     true_literal: str          (default "Yes")
#     false_literal: str         (default "No")
#
# - LoaderConfig (dataclass)
#     compaction_interval: int   (default 100000)
#     batch_size: int            (default 1)
#     progress_interval: int     (default 1000)
#
# - StoreConfig (dataclass)
#     output_extension: str      (default "db")
#     date_format: str           (default "%Y-%m-%d %H:%M:%S")
#     metadata_dir: str | None   (default None)
#
# - AppConfig (dataclass)
#     source / inference / loader / store
#     pause_on_error: bool       (default True)
#     log_level: str             (default "WARNING")
#
# FUNCTIONS:
# ----------
# - load_config() -> AppConfig
#     Load .env using python-dotenv, construct a fresh AppConfig.
#
# - get_config() -> AppConfig
#     Same as load_config() but returns the same singleton on
#     repeated calls.
#
# USAGE:
# ------
#   from csvload.config import get_config
#   config = get_config()
#   print(config.loader.compaction_interval)
#
# ==============================================

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from csvload.errors import ConfigurationError


@dataclass
class SourceConfig:
    """How the input file is read."""
    delimiter: str = ","
    encoding: str = "utf-8-sig"


@dataclass
class InferenceConfig:
    """Schema inference settings."""
    text_threshold: int = 255  # VARCHAR up to this length, TEXT above it
    true_literal: str = "Yes"
    false_literal: str = "No"


@dataclass
class LoaderConfig:
    """Bulk loading settings."""
    compaction_interval: int = 100000  # Compact after every N committed rows
    batch_size: int = 1  # Rows per INSERT statement
    progress_interval: int = 1000  # Report progress every N rows


@dataclass
class StoreConfig:
    """Target store settings."""
    output_extension: str = "db"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    metadata_dir: Optional[str] = None  # Write schema.json / state.json here when set


@dataclass
class AppConfig:
    """Main application configuration."""
    source: SourceConfig = field(default_factory=SourceConfig)
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    loader: LoaderConfig = field(default_factory=LoaderConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    pause_on_error: bool = True
    log_level: str = "WARNING"


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def load_config(env_path: Optional[Path] = None) -> AppConfig:
    """
    Build a fresh configuration from environment variables / .env file.

    Args:
        env_path: Optional .env location. Defaults to the project root.

    Returns:
        AppConfig: Application configuration
    """
    # Load .env file from project root
    env_path = env_path or Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    source_config = SourceConfig(
        delimiter=os.getenv("CSVLOAD_DELIMITER", ","),
        encoding=os.getenv("CSVLOAD_ENCODING", "utf-8-sig")
    )

    inference_config = InferenceConfig(
        text_threshold=_getenv_int("CSVLOAD_TEXT_THRESHOLD", 255),
        true_literal=os.getenv("CSVLOAD_TRUE_LITERAL", "Yes"),
        false_literal=os.getenv("CSVLOAD_FALSE_LITERAL", "No")
    )

    loader_config = LoaderConfig(
        compaction_interval=_getenv_int("CSVLOAD_COMPACTION_INTERVAL", 100000),
        batch_size=_getenv_int("CSVLOAD_BATCH_SIZE", 1),
        progress_interval=_getenv_int("CSVLOAD_PROGRESS_INTERVAL", 1000)
    )

    store_config = StoreConfig(
        output_extension=os.getenv("CSVLOAD_OUTPUT_EXTENSION", "db"),
        date_format=os.getenv("CSVLOAD_DATE_FORMAT", "%Y-%m-%d %H:%M:%S"),
        metadata_dir=os.getenv("CSVLOAD_METADATA_DIR") or None
    )

    return AppConfig(
        source=source_config,
        inference=inference_config,
        loader=loader_config,
        store=store_config,
        pause_on_error=_getenv_bool("CSVLOAD_PAUSE_ON_ERROR", True),
        log_level=os.getenv("CSVLOAD_LOG_LEVEL", "WARNING")
    )


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    _config_instance = load_config()
    return _config_instance
