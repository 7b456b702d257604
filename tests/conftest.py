# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - write_csv(name, lines, delimiter=",") -> Path
#     Write a small delimited file under tmp_path.
#
# - sample_csv -> Path
#     The five-field example used by the loader and CLI tests.
#
# - app_config -> AppConfig
#     Defaults, with pause_on_error off and small intervals.
#
# - store -> SQLiteStore
#     A freshly created database under tmp_path.
#
# ==============================================

from pathlib import Path
from typing import Callable, List

import pytest

from csvload.config import AppConfig
from csvload.storage import SQLiteStore

SAMPLE_LINES = [
    "id,score,active,joined,name",
    "1,3.5,Yes,2020-01-15,Ann",
    "2,,No,2020-02-20,Bea",
]


@pytest.fixture
def write_csv(tmp_path) -> Callable[..., Path]:
    """Return a helper that writes lines to tmp_path/<name>."""

    def _write(name: str, lines: List[str], delimiter: str = ",") -> Path:
        path = tmp_path / name
        text = "\n".join(line.replace(",", delimiter) if delimiter != "," else line for line in lines)
        path.write_text(text + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_csv(write_csv) -> Path:
    return write_csv("people.csv", SAMPLE_LINES)


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    config = AppConfig()
    config.pause_on_error = False
    config.loader.progress_interval = 1
    return config


@pytest.fixture
def store(tmp_path):
    db = SQLiteStore(tmp_path / "test.db")
    db.create()
    yield db
    db.disconnect()
