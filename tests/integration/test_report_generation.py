"""
Tests for ReportAssembler — end-to-end report generation over the fake repository.
"""

import re
from datetime import date

import pytest

from perfhub.core.errors import DataFetchError, InvalidReportTypeError
from perfhub.export.service import ExportCollector
from perfhub.reports.generator import (
    ReportAssembler,
    ReportResult,
    build_report_download,
    report_filename,
    write_report,
)
from tests.factories import FakeRepository, make_user


def section_ids(html: str):
    return re.findall(r'id="section-([a-z]+)"', html)


class TestReportGeneration:
    """Test full report generation."""

    @pytest.mark.asyncio
    async def test_quarterly_review_section_order(self, assembler):
        report = await assembler.generate_report("quarterly-review")

        assert report.title == "Quarterly Performance Review"
        assert section_ids(report.html) == ["overview", "goals", "reviews", "feedback", "analytics"]

    @pytest.mark.asyncio
    async def test_document_shell(self, assembler):
        report = await assembler.generate_report("user-summary")

        assert report.html.startswith("<!DOCTYPE html>")
        assert "<title>User Summary Report</title>" in report.html
        assert "<strong>Generated By:</strong> PerformanceHub Admin" in report.html
        assert "PerformanceHub" in report.html

    @pytest.mark.asyncio
    async def test_each_domain_fetched_once(self, sample_repository, assembler):
        await assembler.generate_report("user-summary")

        assert sample_repository.call_names.count("fetch_users") == 1
        assert "count_active_users" in sample_repository.call_names

    @pytest.mark.asyncio
    async def test_department_report_skips_analytics(self, sample_repository, assembler):
        report = await assembler.generate_report("department-report")

        assert section_ids(report.html) == ["departments", "goals", "reviews"]
        assert "count_active_users" not in sample_repository.call_names
        assert "analytics" not in report.data

    @pytest.mark.asyncio
    async def test_data_holds_parsed_records(self, assembler):
        report = await assembler.generate_report("performance-overview")

        assert set(report.data) == {"overview", "goals", "reviews", "analytics"}
        assert report.data["goals"][0]["Goal ID"] == "g1"
        assert report.data["overview"]["period_start"]

    @pytest.mark.asyncio
    async def test_filters_accepted_as_dict(self, sample_repository, assembler):
        report = await assembler.generate_report("department-report", {"department": "Engineering"})

        _, args = next(call for call in sample_repository.calls if call[0] == "fetch_goals")
        assert args[0].department == "Engineering"
        assert "<strong>Department Filter:</strong> Engineering" in report.html

    @pytest.mark.asyncio
    async def test_to_dict(self, assembler):
        report = await assembler.generate_report("user-summary")

        assert set(report.to_dict()) == {"report_type", "title", "html", "data"}


class TestReportEdgeCases:
    """Test omitted sections, failures and escaping."""

    @pytest.mark.asyncio
    async def test_unknown_type_issues_no_queries(self, sample_repository, assembler):
        with pytest.raises(InvalidReportTypeError):
            await assembler.generate_report("annual-review")

        assert sample_repository.calls == []

    @pytest.mark.asyncio
    async def test_empty_domains_omit_sections(self):
        assembler = ReportAssembler(ExportCollector(FakeRepository()))

        report = await assembler.generate_report("quarterly-review")

        # overview and analytics always have metrics; empty row domains render nothing
        assert section_ids(report.html) == ["overview", "analytics"]

    @pytest.mark.asyncio
    async def test_fetch_failure_fails_whole_report(self):
        repository = FakeRepository(fail_on="fetch_goals")
        assembler = ReportAssembler(ExportCollector(repository))

        with pytest.raises(DataFetchError):
            await assembler.generate_report("performance-overview")

    @pytest.mark.asyncio
    async def test_markup_in_values_is_escaped(self):
        repository = FakeRepository(users=[
            make_user("u1", "Ada", "Lovelace", "<script>alert(1)</script>"),
        ])
        assembler = ReportAssembler(ExportCollector(repository))

        report = await assembler.generate_report(
            "user-summary", {"department": "<b>R&D</b>"}
        )

        assert "<script>alert(1)</script>" not in report.html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in report.html
        assert "<b>R&D</b>" not in report.html
        assert "&lt;b&gt;R&amp;D&lt;/b&gt;" in report.html


class TestReportDownload:
    """Test HTML file naming and writing."""

    def test_report_filename(self):
        assert report_filename("Quarterly Performance Review", date(2024, 3, 15)) == (
            "quarterly_performance_review_2024-03-15.html"
        )

    def test_build_report_download(self):
        report = ReportResult(report_type="user-summary", title="User Summary Report", html="<html></html>")

        download = build_report_download(report, today=date(2024, 3, 15))

        assert download.filename == "user_summary_report_2024-03-15.html"
        assert download.mime_type == "text/html"
        assert download.data == "<html></html>"

    def test_write_report(self, tmp_path):
        report = ReportResult(report_type="user-summary", title="User Summary Report", html="<p>hi</p>")

        path = write_report(report, tmp_path)

        assert path.suffix == ".html"
        assert path.read_text(encoding="utf-8") == "<p>hi</p>"
