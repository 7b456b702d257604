# ==============================================
# Tests for the Command Line Entry Point
# ==============================================

import json

import pytest

from csvload.cli import main, parse_delimiter, parse_ignore_list
from csvload.source import CsvSource
from csvload.storage import SQLiteStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CSVLOAD_DELIMITER", "CSVLOAD_COMPACTION_INTERVAL", "CSVLOAD_BATCH_SIZE",
                 "CSVLOAD_METADATA_DIR", "CSVLOAD_PAUSE_ON_ERROR", "CSVLOAD_LOG_LEVEL",
                 "CSVLOAD_TRUE_LITERAL", "CSVLOAD_FALSE_LITERAL"):
        monkeypatch.delenv(name, raising=False)


class TestArguments:
    def test_delimiter_first_character(self):
        """Only the first character of the argument is used."""
        assert parse_delimiter(";") == ";"
        assert parse_delimiter("|x") == "|"
        assert parse_delimiter(None) is None

    def test_tab_delimiter(self):
        """\\t and tab both mean TAB."""
        assert parse_delimiter("\\t") == "\t"
        assert parse_delimiter("TAB") == "\t"

    def test_ignore_list(self):
        """Comma-separated names are split and trimmed."""
        assert parse_ignore_list("notes, internal code,") == ["notes", "internal code"]
        assert parse_ignore_list(None) == []


class TestMain:
    def test_load(self, sample_csv, capsys):
        """A successful load exits 0, prints only stages and progress."""
        assert main([str(sample_csv), "--no-pause"]) == 0
        out = capsys.readouterr().out
        assert "Processing record 2" in out
        assert "Loaded" not in out
        assert "error" not in out
        with SQLiteStore(sample_csv.with_suffix(".db")) as store:
            assert store.count_rows("People") == 2

    def test_positional_arguments(self, write_csv):
        """Delimiter, key and ignore list come in that order."""
        path = write_csv("people.csv", ["id,score,notes", "1,2.5,x", "2,3.5,y"], delimiter=";")

        assert main([str(path), ";", "id", "notes", "--no-pause"]) == 0

        with SQLiteStore(path.with_suffix(".db")) as store:
            columns = store.get_columns("People")
        assert list(columns) == ["Id", "Score"]
        assert columns["Id"]["primary_key"]

    def test_tab_separated(self, write_csv):
        """Tab-separated input loads with the tab alias."""
        path = write_csv("tabs.tsv", ["a,b", "1,x"], delimiter="\t")
        assert main([str(path), "tab", "--no-pause"]) == 0
        with SQLiteStore(path.with_suffix(".db")) as store:
            assert store.fetch_all('SELECT * FROM "Tabs"') == [{"A": 1, "B": "x"}]

    def test_infer_only(self, sample_csv, capsys):
        """--infer-only prints column types and writes nothing."""
        assert main([str(sample_csv), "--infer-only", "--no-pause"]) == 0
        out = capsys.readouterr().out
        assert "TINYINT UNSIGNED" in out
        assert "VARCHAR(3)" in out
        assert "1..2" in out
        assert not sample_csv.with_suffix(".db").exists()

    def test_output_and_interval_flags(self, sample_csv, tmp_path):
        """--output and --compaction-interval reach the pipeline."""
        target = tmp_path / "custom.db"
        meta = tmp_path / "meta"
        assert main([str(sample_csv), "--output", str(target), "--compaction-interval", "1",
                     "--metadata-dir", str(meta), "--no-pause"]) == 0
        assert target.exists()
        state = json.loads((meta / "state.json").read_text())
        assert state["compactions"] == 2

    def test_metadata_dir(self, sample_csv, tmp_path):
        """--metadata-dir writes the sidecar files."""
        meta = tmp_path / "meta"
        assert main([str(sample_csv), "--metadata-dir", str(meta), "--no-pause"]) == 0
        assert (meta / "schema.json").exists()
        assert (meta / "state.json").exists()

    def test_missing_file(self, tmp_path, capsys):
        """A missing input exits 1 with the error line."""
        assert main([str(tmp_path / "absent.csv"), "--no-pause"]) == 1
        assert "An error occurred - Cannot open input file" in capsys.readouterr().out

    def test_bad_primary_key(self, sample_csv, capsys):
        """An unknown key field exits 1."""
        assert main([str(sample_csv), ",", "nope", "--no-pause"]) == 1
        assert "An error occurred - Primary key field 'nope'" in capsys.readouterr().out

    def test_encoding_failure(self, write_csv, capsys, monkeypatch):
        """A value that cannot be encoded exits 1 and names the field."""
        path = write_csv("flags.csv", ["flag", "Yes", "No"])
        original_rows = CsvSource.rows
        calls = []

        def rows_then_bad(self):
            calls.append(1)
            yield from original_rows(self)
            if len(calls) > 1:
                yield {"flag": "maybe"}

        monkeypatch.setattr(CsvSource, "rows", rows_then_bad)

        assert main([str(path), "--no-pause"]) == 1
        out = capsys.readouterr().out
        assert "An error occurred - Unexpected boolean value - 'maybe' in field 'flag'" in out

    def test_invalid_batch_size(self, sample_csv, capsys):
        """A non-positive batch size exits 1."""
        assert main([str(sample_csv), "--batch-size", "0", "--no-pause"]) == 1
        assert "Batch size must be positive" in capsys.readouterr().out

    def test_bad_integer_setting(self, sample_csv, capsys, monkeypatch):
        """A non-numeric CSVLOAD_* integer exits 1 with the error line."""
        monkeypatch.setenv("CSVLOAD_COMPACTION_INTERVAL", "abc")
        assert main([str(sample_csv), "--no-pause"]) == 1
        out = capsys.readouterr().out
        assert "An error occurred - CSVLOAD_COMPACTION_INTERVAL must be an integer, got 'abc'" in out
        assert not sample_csv.with_suffix(".db").exists()

    def test_equal_boolean_literals(self, sample_csv, capsys, monkeypatch):
        """Identical true and false literals exit 1 with the error line."""
        monkeypatch.setenv("CSVLOAD_TRUE_LITERAL", "No")
        assert main([str(sample_csv), "--no-pause"]) == 1
        assert "An error occurred - Boolean literals must differ" in capsys.readouterr().out
