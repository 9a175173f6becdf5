"""
Tests for the perfhub command line.
"""

import json
import logging
import sys
from datetime import datetime

import pytest

from perfhub.cli import (
    EXIT_INVALID_INPUT,
    EXIT_OK,
    build_parser,
    filters_from_args,
    main,
    run_export,
    run_report,
)


class TestArgumentParsing:
    """Test argument parsing into filters."""

    def test_defaults_are_unconstrained(self):
        args = build_parser().parse_args(["export", "users"])

        filters = filters_from_args(args)

        assert args.format == "csv"
        assert filters.constraint("department") is None
        assert filters.date_range is None

    def test_filters_and_window(self):
        args = build_parser().parse_args([
            "export", "reviews",
            "--department", "Sales",
            "--review-type", "annual",
            "--start", "2024-01-01",
            "--end", "2024-03-31T23:59:59",
        ])

        filters = filters_from_args(args)

        assert filters.department == "Sales"
        assert filters.review_type == "annual"
        assert filters.date_range.start == datetime(2024, 1, 1)
        assert filters.date_range.end == datetime(2024, 3, 31, 23, 59, 59)

    def test_bad_date_exits(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["export", "users", "--start", "last tuesday"])


class TestValidation:
    """Invalid input is rejected before the database is touched."""

    def test_unknown_domain(self):
        assert main(["export", "salaries"]) == EXIT_INVALID_INPUT

    def test_unknown_format(self):
        assert main(["export", "users", "--format", "xlsx"]) == EXIT_INVALID_INPUT

    def test_unknown_report(self):
        assert main(["report", "annual-review"]) == EXIT_INVALID_INPUT

    def test_logs_stay_off_stdout(self):
        main(["export", "salaries", "--stdout"])

        handlers = logging.getLogger("perfhub").handlers
        assert [handler.stream for handler in handlers] == [sys.stderr]


class TestRunners:
    """Test the export and report runners with the in-memory repository."""

    @pytest.mark.asyncio
    async def test_export_writes_file_and_metadata(self, collector, tmp_path, capsys):
        args = build_parser().parse_args(
            ["export", "goals", "--format", "json", "--output-dir", str(tmp_path)]
        )

        assert await run_export(args, collector) == EXIT_OK

        metadata = json.loads(capsys.readouterr().err)
        assert metadata["domain"] == "goals"
        assert metadata["export_format"] == "json"
        assert metadata["row_count"] == 3
        written = list(tmp_path.glob("goals_*.json"))
        assert len(written) == 1
        assert metadata["path"] == str(written[0])

    @pytest.mark.asyncio
    async def test_export_to_stdout(self, collector, tmp_path, capsys):
        args = build_parser().parse_args(["export", "users", "--stdout", "--output-dir", str(tmp_path)])

        await run_export(args, collector)

        out = capsys.readouterr().out
        assert out.startswith("User ID,Email")
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_report_written_as_html(self, assembler, tmp_path):
        args = build_parser().parse_args(
            ["report", "department-report", "--output-dir", str(tmp_path)]
        )

        assert await run_report(args, assembler) == EXIT_OK

        written = list(tmp_path.glob("department_performance_report_*.html"))
        assert len(written) == 1
        assert "Department Analysis" in written[0].read_text(encoding="utf-8")
