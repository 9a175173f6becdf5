"""
Report Generator — HTML reports assembled from domain exports.

Flow for one report:
1. Resolve the report type (unknown types fail before any query)
2. Fetch each required domain once, sequentially, as a JSON export
3. Aggregate per section and render the fragments in declared order
4. Wrap them in the standalone document shell

No caching and no partial output: a failing fetch fails the whole report.
"""

import re
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from perfhub.core.config import settings
from perfhub.core.filters import ExportFilters
from perfhub.core.logging import setup_logger
from perfhub.export.export_schema import ExportFormat, ExportResult, MIME_TYPES
from perfhub.export.projections import format_date, format_datetime
from perfhub.export.serializers import build_filename, parse_records, write_export
from perfhub.export.service import ExportCollector, resolve_date_range
from perfhub.reports.renderer import render_document, render_sections
from perfhub.reports.report_types import ReportDefinition, get_report_definition, required_domains

logger = setup_logger("INFO")


@dataclass
class ReportResult:
    """A rendered report plus the data it was built from."""
    report_type: str
    title: str
    html: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_type": self.report_type,
            "title": self.title,
            "html": self.html,
            "data": self.data,
        }


def report_filename(title: str, today: Optional[date] = None) -> str:
    """``{title lowercased, whitespace runs to _}_{YYYY-MM-DD}.html``."""
    stem = re.sub(r"\s+", "_", title.lower())
    return build_filename(stem, "html", today)


class ReportAssembler:
    """
    Builds HTML reports on top of an ExportCollector.

    Stateless apart from the injected collector; identical requests re-fetch
    and re-render from scratch.
    """

    def __init__(self, collector: ExportCollector, brand: Optional[str] = None):
        self.collector = collector
        self.brand = brand or settings.REPORT_BRAND_NAME

    def build_overview(self, filters: ExportFilters) -> Dict[str, Any]:
        """Report metadata: generation time, covered period and the filters applied."""
        start, end = resolve_date_range(filters.date_range)
        return {
            "generated": format_datetime(datetime.now()),
            "period_start": format_date(start),
            "period_end": format_date(end),
            "filters": filters.model_dump(mode="json", exclude_none=True),
        }

    async def collect_report_data(self, definition: ReportDefinition, filters: ExportFilters) -> Dict[str, Any]:
        """
        Fetch every domain the report's sections need.

        Returns:
            Mapping of domain name to parsed records, plus "overview" metadata
        """
        data: Dict[str, Any] = {"overview": self.build_overview(filters)}

        for domain in required_domains(definition):
            result = await self.collector.export_domain(domain, ExportFormat.JSON, filters)
            data[domain.value] = parse_records(result)
            logger.debug(
                f"report_section_fetched=true report={definition.report_id} "
                f"domain={domain.value} rows={len(data[domain.value])}"
            )

        return data

    def render_html(self, definition: ReportDefinition, data: Dict[str, Any], filters: ExportFilters) -> str:
        sections = render_sections(definition.sections, data)
        return render_document(
            title=definition.title,
            overview=data["overview"],
            sections=sections,
            brand=self.brand,
            year=datetime.now().year,
            department_filter=filters.constraint("department"),
        )

    async def generate_report(
        self,
        report_type: str,
        filters: Optional[Union[ExportFilters, Dict[str, Any]]] = None,
    ) -> ReportResult:
        """
        Generate a complete HTML report.

        Args:
            report_type: user-summary, performance-overview, quarterly-review
                or department-report
            filters: ExportFilters (or an equivalent dict) passed to every
                domain export

        Returns:
            ReportResult with title, HTML document and the raw section data

        Raises:
            InvalidReportTypeError: Unknown report type (before any query)
            DataFetchError: Any required domain export failed
        """
        definition = get_report_definition(report_type)
        if filters is None:
            filters = ExportFilters()
        elif not isinstance(filters, ExportFilters):
            filters = ExportFilters.model_validate(filters)

        start_time = time.time()
        try:
            data = await self.collect_report_data(definition, filters)
        except Exception as e:
            logger.error(
                f"report_failed=true report={definition.report_id} "
                f"error_class={getattr(e, 'error_class', 'UNEXPECTED')} "
                f"error={type(e).__name__} message={str(e)}"
            )
            raise

        html = self.render_html(definition, data, filters)
        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"report_generated=true report={definition.report_id} "
            f"sections={len(definition.sections)} html_chars={len(html)} latency_ms={latency_ms}"
        )

        return ReportResult(report_type=definition.report_id, title=definition.title, html=html, data=data)


def build_report_download(report: ReportResult, today: Optional[date] = None) -> ExportResult:
    """Wrap a rendered report as an ``.html`` file download."""
    return ExportResult(
        data=report.html,
        filename=report_filename(report.title, today or datetime.now(timezone.utc).date()),
        mime_type=MIME_TYPES["html"],
    )


def write_report(report: ReportResult, directory: Union[str, Path]) -> Path:
    """Save a rendered report to ``directory`` under its download filename."""
    return write_export(build_report_download(report), directory)
