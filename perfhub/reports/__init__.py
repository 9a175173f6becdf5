"""
Reports Package

Styled, self-contained HTML reports built from domain exports.
"""

from perfhub.reports.generator import (
    ReportAssembler,
    ReportResult,
    build_report_download,
    report_filename,
    write_report,
)
from perfhub.reports.report_types import (
    REPORT_TYPES,
    ReportDefinition,
    available_report_types,
    get_report_definition,
)

__all__ = [
    "ReportAssembler",
    "ReportResult",
    "ReportDefinition",
    "REPORT_TYPES",
    "available_report_types",
    "build_report_download",
    "get_report_definition",
    "report_filename",
    "write_report",
]
