"""
Exceptions raised throughout the csvload package.

Every fatal condition of a run is a CsvLoadError subclass so the CLI can
report it as a single message:

- InputError:         missing/unreadable input file, missing header row
- ConfigurationError: invalid arguments (unknown primary key, bad interval)
- EncodingError:      a value that cannot be written as its column's kind
- StoreError:         table creation / insert failures from the driver
- CompactionError:    failure during the compact-and-swap cycle
"""

from typing import Optional


class CsvLoadError(Exception):
    """Base class for all csvload errors.

    Args:
        msg (str): Optional message for the exception.
    """

    def __init__(self, msg=""):
        super().__init__(msg)
        self._msg = msg

    @property
    def message(self) -> str:
        return self._msg


class InputError(CsvLoadError):
    """The input file cannot be opened or has no header row."""


class ConfigurationError(CsvLoadError):
    """Arguments or configuration values are unusable."""


class EncodingError(CsvLoadError):
    """A value does not fit the kind its column was inferred as."""

    def __init__(self, field: str, value: Optional[str], kind: str, msg: str = ""):
        super().__init__(msg or f"Unexpected {kind} value - {value!r} in field {field!r}")
        self.field = field
        self.value = value
        self.kind = kind


class StoreError(CsvLoadError):
    """The target store rejected an operation."""


class CompactionError(StoreError):
    """The compact-and-swap cycle failed; the original database file is kept."""
