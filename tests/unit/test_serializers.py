"""
Tests for export serializers — CSV/JSON payloads, filenames and file sinks.
"""

import csv
import io
import json
from datetime import date

import pytest

from perfhub.core.errors import InvalidExportFormatError
from perfhub.export.export_schema import ExportResult
from perfhub.export.serializers import (
    build_filename,
    count_records,
    format_export,
    parse_records,
    serialize,
    to_csv,
    to_json,
    write_export,
)


class TestCSV:
    """Test CSV serialization."""

    def test_header_follows_first_record_key_order(self):
        records = [{"b": 1, "a": 2}, {"b": 3, "a": 4}]

        assert to_csv(records) == "b,a\n1,2\n3,4"

    def test_empty_collection_yields_empty_string(self):
        assert to_csv([]) == ""

    def test_no_trailing_newline(self):
        assert not to_csv([{"x": 1}]).endswith("\n")

    def test_quotes_commas_and_doubles_embedded_quotes(self):
        records = [{"Title": 'Ship "v2", then rest', "Owner": "Ada"}]

        payload = to_csv(records)

        assert '"Ship ""v2"", then rest"' in payload
        assert payload.endswith(",Ada")

    def test_values_survive_csv_reader(self):
        records = [
            {"Title": "Plain", "Notes": "a, b and \"c\""},
            {"Title": "Multi\nline", "Notes": ""},
        ]

        parsed = list(csv.DictReader(io.StringIO(to_csv(records))))

        assert parsed == [
            {"Title": "Plain", "Notes": 'a, b and "c"'},
            {"Title": "Multi\nline", "Notes": ""},
        ]

    def test_none_renders_as_empty_field(self):
        assert to_csv([{"a": None, "b": 0}]) == "a,b\n,0"


class TestJSON:
    """Test JSON serialization."""

    def test_two_space_indent_and_key_order(self):
        payload = to_json([{"z": 1, "a": 2}])

        assert payload == '[\n  {\n    "z": 1,\n    "a": 2\n  }\n]'

    def test_empty_collection_is_empty_array(self):
        assert to_json([]) == "[]"

    def test_non_ascii_is_kept(self):
        assert "Zoë" in to_json([{"name": "Zoë"}])

    def test_parses_back_in_order(self):
        records = [{"Metric": "Total Goals", "Value": 3, "Category": "Goals"}]

        parsed = json.loads(to_json(records))

        assert parsed == records
        assert list(parsed[0].keys()) == ["Metric", "Value", "Category"]


class TestSerialize:
    """Test format dispatch."""

    def test_excel_produces_csv(self):
        records = [{"a": 1}]

        assert serialize(records, "excel") == serialize(records, "csv")

    def test_format_is_case_insensitive(self):
        assert serialize([{"a": 1}], "JSON") == to_json([{"a": 1}])

    def test_unknown_format_raises(self):
        with pytest.raises(InvalidExportFormatError) as exc_info:
            serialize([{"a": 1}], "pdf")

        assert exc_info.value.value == "pdf"
        assert "csv" in exc_info.value.allowed


class TestFilenames:
    """Test filename construction."""

    def test_build_filename(self):
        assert build_filename("users", "csv", date(2024, 3, 15)) == "users_2024-03-15.csv"

    def test_format_export_csv(self):
        result = format_export([{"a": 1}], "csv", "goals", today=date(2024, 3, 15))

        assert result.filename == "goals_2024-03-15.csv"
        assert result.mime_type == "text/csv"

    def test_format_export_json(self):
        result = format_export([{"a": 1}], "json", "performance_reviews", today=date(2024, 3, 15))

        assert result.filename == "performance_reviews_2024-03-15.json"
        assert result.mime_type == "application/json"

    def test_format_export_excel_keeps_csv_extension(self):
        result = format_export([{"a": 1}], "excel", "users", today=date(2024, 3, 15))

        assert result.filename == "users_2024-03-15.csv"
        assert result.mime_type == "text/csv"


class TestRecordHelpers:
    """Test parsing, counting and writing serialized exports."""

    def test_parse_records_from_json_export(self):
        result = format_export([{"a": 1}, {"a": 2}], "json", "users")

        assert parse_records(result) == [{"a": 1}, {"a": 2}]

    def test_count_records_csv_ignores_header_and_embedded_newlines(self):
        result = format_export([{"a": "x\ny"}, {"a": "z"}], "csv", "users")

        assert count_records(result) == 2

    def test_count_records_empty_export(self):
        assert count_records(ExportResult(data="", filename="users.csv", mime_type="text/csv")) == 0

    def test_write_export_creates_directory(self, tmp_path):
        result = format_export([{"a": 1}], "csv", "users", today=date(2024, 3, 15))

        path = write_export(result, tmp_path / "out")

        assert path == tmp_path / "out" / "users_2024-03-15.csv"
        assert path.read_text(encoding="utf-8") == "a\n1"
