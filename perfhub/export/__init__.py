"""
Export Package

Domain exports (users, goals, reviews, feedback, analytics) serialized as
CSV or JSON.
"""

from perfhub.export.export_schema import (
    ExportDomain,
    ExportFormat,
    ExportResult,
    available_domains,
    available_formats,
)
from perfhub.export.serializers import (
    count_records,
    serialize,
    format_export,
    parse_records,
    write_export,
)
from perfhub.export.service import ExportCollector

__all__ = [
    "ExportCollector",
    "ExportDomain",
    "ExportFormat",
    "ExportResult",
    "available_domains",
    "available_formats",
    "count_records",
    "serialize",
    "format_export",
    "parse_records",
    "write_export",
]
