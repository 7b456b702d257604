# ==============================================
# Tests for BulkLoader and CsvToStorePipeline
# ==============================================

import json

import pytest

from csvload.analysis import ColumnKind, SchemaInferencer
from csvload.errors import ConfigurationError, EncodingError, InputError
from csvload.persistence import MetadataStore
from csvload.pipeline import CsvToStorePipeline
from csvload.source import CsvSource
from csvload.storage import BulkLoader, SQLiteStore


def numbered_csv(write_csv, count, name="numbers.csv"):
    lines = ["n,label"] + [f"{i},item {i}" for i in range(1, count + 1)]
    return write_csv(name, lines)


def prepare(path, tmp_path):
    source = CsvSource(path)
    schema = SchemaInferencer().infer(source)
    store = SQLiteStore(tmp_path / "out.db")
    store.create()
    columns = [(name.capitalize(), column) for name, column in schema.items()]
    store.create_table("Numbers", columns)
    return source, schema, store, [name for name, _ in columns]


class TestBulkLoader:
    def test_rows_loaded_in_order(self, write_csv, tmp_path):
        """Every row is inserted, in input order."""
        source, schema, store, names = prepare(numbered_csv(write_csv, 25), tmp_path)

        result = BulkLoader(store).load(source, schema, "Numbers", names)

        assert result.rows_loaded == 25
        assert result.statements_executed == 25
        rows = store.fetch_all('SELECT "N" FROM "Numbers" ORDER BY rowid')
        assert [row["N"] for row in rows] == list(range(1, 26))
        store.disconnect()

    def test_compaction_every_interval(self, write_csv, tmp_path):
        """Compaction runs after each full interval, including the last row."""
        source, schema, store, names = prepare(numbered_csv(write_csv, 30), tmp_path)

        result = BulkLoader(store, compaction_interval=10).load(source, schema, "Numbers", names)

        assert result.compactions == 3
        assert len(result.compaction_log) == 3
        assert store.count_rows("Numbers") == 30
        store.disconnect()

    def test_interval_equal_to_row_count(self, write_csv, tmp_path):
        """N rows with interval N compact exactly once."""
        source, schema, store, names = prepare(numbered_csv(write_csv, 7), tmp_path)

        result = BulkLoader(store, compaction_interval=7).load(source, schema, "Numbers", names)

        assert result.compactions == 1
        assert store.count_rows("Numbers") == 7
        store.disconnect()

    def test_no_compaction_below_interval(self, write_csv, tmp_path):
        """Fewer rows than the interval never compact."""
        source, schema, store, names = prepare(numbered_csv(write_csv, 5), tmp_path)

        result = BulkLoader(store, compaction_interval=6).load(source, schema, "Numbers", names)

        assert result.compactions == 0
        store.disconnect()

    def test_batching(self, write_csv, tmp_path):
        """Batches group rows per statement without reordering them."""
        source, schema, store, names = prepare(numbered_csv(write_csv, 23), tmp_path)

        result = BulkLoader(store, batch_size=5).load(source, schema, "Numbers", names)

        assert result.rows_loaded == 23
        assert result.statements_executed == 5
        rows = store.fetch_all('SELECT "N" FROM "Numbers" ORDER BY rowid')
        assert [row["N"] for row in rows] == list(range(1, 24))
        store.disconnect()

    def test_batch_flushed_at_compaction_boundary(self, write_csv, tmp_path):
        """A batch never straddles a compaction boundary."""
        source, schema, store, names = prepare(numbered_csv(write_csv, 10), tmp_path)
        counts = []
        loader = BulkLoader(store, batch_size=4, compaction_interval=6)
        original = loader.compactor.compact

        def counting_compact():
            counts.append(store.count_rows("Numbers"))
            return original()

        loader.compactor.compact = counting_compact
        result = loader.load(source, schema, "Numbers", names)

        assert counts == [6]
        assert result.rows_loaded == 10
        store.disconnect()

    def test_progress_reported(self, write_csv, tmp_path):
        """on_progress receives committed counts."""
        source, schema, store, names = prepare(numbered_csv(write_csv, 12), tmp_path)
        seen = []

        BulkLoader(store, progress_interval=5, on_progress=seen.append).load(
            source, schema, "Numbers", names
        )

        assert seen == [5, 10, 12]
        store.disconnect()

    def test_encoding_error_stops_load(self, write_csv, tmp_path):
        """Rows before a bad value stay committed."""
        path = write_csv("flags.csv", ["flag", "Yes", "No"])
        source = CsvSource(path)
        schema = SchemaInferencer().infer(source)
        store = SQLiteStore(tmp_path / "flags.db")
        store.create()
        store.create_table("Flags", [("Flag", schema["flag"])])
        path.write_text("flag\nYes\n\nmaybe\n", encoding="utf-8")

        with pytest.raises(EncodingError):
            BulkLoader(store).load(source, schema, "Flags", ["Flag"])

        assert store.count_rows("Flags") == 1
        store.disconnect()

    @pytest.mark.parametrize("kwargs", [{"compaction_interval": 0}, {"batch_size": 0}])
    def test_invalid_settings(self, tmp_path, kwargs):
        """Non-positive interval or batch size is rejected."""
        with pytest.raises(ConfigurationError):
            BulkLoader(SQLiteStore(tmp_path / "x.db"), **kwargs)


class TestPipeline:
    def test_round_trip(self, sample_csv, app_config):
        """The sample file loads with the expected types and values."""
        pipeline = CsvToStorePipeline(app_config)

        result = pipeline.run(sample_csv)

        assert result.rows_loaded == 2
        with SQLiteStore(sample_csv.with_suffix(".db")) as store:
            columns = store.get_columns("People")
            assert list(columns) == ["Id", "Score", "Active", "Joined", "Name"]
            assert columns["Name"]["type"] == "VARCHAR(3)"
            rows = store.fetch_all('SELECT * FROM "People" ORDER BY "Id"')

        assert rows == [
            {"Id": 1, "Score": 3.5, "Active": 1, "Joined": "2020-01-15 00:00:00", "Name": "Ann"},
            {"Id": 2, "Score": None, "Active": 0, "Joined": "2020-02-20 00:00:00", "Name": "Bea"},
        ]

    def test_stage_messages(self, sample_csv, app_config, capsys):
        """Stages are announced in order."""
        CsvToStorePipeline(app_config).run(sample_csv)
        out = capsys.readouterr().out.splitlines()
        assert out == [
            "Choosing column types",
            "Creating the database",
            "Creating the table",
            "Populating the table",
        ]

    def test_quotes_round_trip(self, write_csv, app_config):
        """Text with quotes and delimiters is stored unchanged."""
        path = write_csv("quotes.csv", ['name,note', "O'Brien,\"a, b: c\""])

        CsvToStorePipeline(app_config).run(path)

        with SQLiteStore(path.with_suffix(".db")) as store:
            rows = store.fetch_all('SELECT * FROM "Quotes"')
        assert rows == [{"Name": "O'Brien", "Note": "a, b: c"}]

    def test_integer_in_boolean_column(self, write_csv, app_config):
        """A column typed BOOLEAN fails the load on its integer value."""
        path = write_csv("flags.csv", ["flag", "5", "Yes", "No"])
        pipeline = CsvToStorePipeline(app_config)
        assert pipeline.infer_schema(path)["flag"].kind is ColumnKind.BOOLEAN

        with pytest.raises(EncodingError) as excinfo:
            pipeline.run(path)

        assert excinfo.value.value == "5"
        with SQLiteStore(path.with_suffix(".db")) as store:
            assert store.count_rows("Flags") == 0

    def test_values_trimmed(self, write_csv, app_config):
        """Surrounding spaces are dropped, quoted or not."""
        path = write_csv("trim.csv", ["name,note", '  Ann  ,"  x  "'])

        CsvToStorePipeline(app_config).run(path)

        with SQLiteStore(path.with_suffix(".db")) as store:
            assert store.fetch_all('SELECT * FROM "Trim"') == [{"Name": "Ann", "Note": "x"}]

    def test_primary_key_and_ignore(self, sample_csv, app_config):
        """Ignored fields are absent and the key is set."""
        CsvToStorePipeline(app_config).run(sample_csv, primary_key="id", ignore=["score", "joined"])

        with SQLiteStore(sample_csv.with_suffix(".db")) as store:
            columns = store.get_columns("People")
        assert list(columns) == ["Id", "Active", "Name"]
        assert columns["Id"]["primary_key"]

    def test_existing_output_replaced(self, sample_csv, app_config):
        """A second run starts from a fresh database."""
        pipeline = CsvToStorePipeline(app_config)
        pipeline.run(sample_csv)
        pipeline.run(sample_csv)

        with SQLiteStore(sample_csv.with_suffix(".db")) as store:
            assert store.count_rows("People") == 2

    def test_output_path_override(self, sample_csv, app_config, tmp_path):
        """--output style path is honoured."""
        target = tmp_path / "out" / "people.sqlite"
        CsvToStorePipeline(app_config).run(sample_csv, output_path=target)
        assert target.exists()
        assert not sample_csv.with_suffix(".db").exists()

    def test_compaction_during_run(self, write_csv, app_config):
        """Configured interval is used by the run."""
        path = numbered_csv(write_csv, 20)
        app_config.loader.compaction_interval = 10

        result = CsvToStorePipeline(app_config).run(path)

        assert result.compactions == 2
        with SQLiteStore(path.with_suffix(".db")) as store:
            assert store.count_rows("Numbers") == 20

    def test_unknown_primary_key(self, sample_csv, app_config):
        """A key that is not a loaded field fails before the store is created."""
        with pytest.raises(ConfigurationError):
            CsvToStorePipeline(app_config).run(sample_csv, primary_key="missing")
        assert not sample_csv.with_suffix(".db").exists()

    def test_ignored_primary_key(self, sample_csv, app_config):
        """The key cannot be an ignored field."""
        with pytest.raises(ConfigurationError):
            CsvToStorePipeline(app_config).run(sample_csv, primary_key="id", ignore=["id"])

    def test_identifier_collision(self, write_csv, app_config):
        """Two fields with the same identifier are rejected."""
        path = write_csv("clash.csv", ["first name,first-name", "a,b"])
        with pytest.raises(ConfigurationError):
            CsvToStorePipeline(app_config).run(path)

    def test_everything_ignored(self, sample_csv, app_config):
        """Ignoring every field is a configuration error."""
        with pytest.raises(ConfigurationError):
            CsvToStorePipeline(app_config).run(
                sample_csv, ignore=["id", "score", "active", "joined", "name"]
            )

    def test_missing_input(self, tmp_path, app_config):
        """A missing file is an InputError and creates nothing."""
        with pytest.raises(InputError):
            CsvToStorePipeline(app_config).run(tmp_path / "absent.csv")
        assert not (tmp_path / "absent.db").exists()

    def test_infer_schema(self, sample_csv, app_config):
        """infer_schema runs inference only."""
        schema = CsvToStorePipeline(app_config).infer_schema(sample_csv)
        assert schema["active"].kind is ColumnKind.BOOLEAN
        assert not sample_csv.with_suffix(".db").exists()


class TestMetadataStore:
    def test_sidecar_files(self, sample_csv, app_config, tmp_path):
        """schema.json and state.json describe the run."""
        app_config.store.metadata_dir = str(tmp_path / "meta")

        CsvToStorePipeline(app_config).run(sample_csv)

        schema_doc = json.loads((tmp_path / "meta" / "schema.json").read_text())
        assert schema_doc["table"] == "People"
        assert [entry["column"] for entry in schema_doc["fields"]] == [
            "Id", "Score", "Active", "Joined", "Name",
        ]
        assert schema_doc["fields"][0]["integer_width"] == "UINT8"

        state = json.loads((tmp_path / "meta" / "state.json").read_text())
        assert state["rows_loaded"] == 2
        assert state["table"] == "People"
        assert "finished_at" in state

    def test_load_schema(self, sample_csv, app_config, tmp_path):
        """A saved schema reads back equal."""
        pipeline = CsvToStorePipeline(app_config)
        schema = pipeline.infer_schema(sample_csv)
        meta = MetadataStore(tmp_path / "meta")
        meta.save_schema(schema, "People", pipeline.column_identifiers(schema))

        loaded, document = meta.load_schema()

        assert dict(loaded) == dict(schema)
        assert document["table"] == "People"

    def test_nothing_saved(self, tmp_path):
        """Loading from an empty directory gives None."""
        meta = MetadataStore(tmp_path / "empty")
        assert meta.load_schema() is None
        assert meta.load_state() is None
