"""
Export Schema — domains, formats and the export result handed to sinks.

``excel`` is accepted as a format but produces CSV (``.csv``, ``text/csv``);
no binary spreadsheet is generated.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from perfhub.core.errors import InvalidExportFormatError, InvalidExportTypeError
from perfhub.core.filters import DateRange, ExportFilters

EXPORT_SCHEMA_VERSION = "1.0.0"

DomainRecord = Dict[str, Any]


class ExportDomain(str, Enum):
    """Exportable data domains."""
    USERS = "users"
    GOALS = "goals"
    REVIEWS = "reviews"
    FEEDBACK = "feedback"
    ANALYTICS = "analytics"


class ExportFormat(str, Enum):
    """Export output formats."""
    CSV = "csv"
    JSON = "json"
    EXCEL = "excel"


# Base filename per domain; reviews keep their table name
DOMAIN_FILENAMES = {
    ExportDomain.USERS: "users",
    ExportDomain.GOALS: "goals",
    ExportDomain.REVIEWS: "performance_reviews",
    ExportDomain.FEEDBACK: "feedback",
    ExportDomain.ANALYTICS: "analytics",
}

MIME_TYPES = {
    "csv": "text/csv",
    "json": "application/json",
    "html": "text/html",
}


@dataclass(frozen=True)
class ExportResult:
    """Serialized payload plus the filename and MIME type a sink should use."""
    data: str
    filename: str
    mime_type: str

    @property
    def content_bytes(self) -> bytes:
        return self.data.encode("utf-8")


def parse_domain(value: str) -> ExportDomain:
    """Resolve a domain identifier or raise InvalidExportTypeError."""
    if isinstance(value, ExportDomain):
        return value
    try:
        return ExportDomain(str(value).lower())
    except ValueError:
        raise InvalidExportTypeError(value, [d.value for d in ExportDomain]) from None


def parse_format(value: str) -> ExportFormat:
    """Resolve a format identifier or raise InvalidExportFormatError."""
    if isinstance(value, ExportFormat):
        return value
    try:
        return ExportFormat(str(value).lower())
    except ValueError:
        raise InvalidExportFormatError(value, [f.value for f in ExportFormat]) from None


def available_formats() -> List[str]:
    return [f.value for f in ExportFormat]


def available_domains() -> List[str]:
    return [d.value for d in ExportDomain]


def create_export_metadata(
    domain: str,
    export_format: str,
    row_count: int,
    filters: Optional[ExportFilters] = None,
    latency_ms: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Create standardized export metadata for logging and API responses.

    Args:
        domain: Exported domain
        export_format: Requested format
        row_count: Number of serialized records
        filters: Filters the export ran with
        latency_ms: Time spent fetching and serializing

    Returns:
        Export metadata dict
    """
    metadata = {
        "export_version": EXPORT_SCHEMA_VERSION,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "domain": domain,
        "export_format": export_format,
        "row_count": row_count,
        "excel_aliased_to_csv": export_format == ExportFormat.EXCEL.value,
    }
    if filters is not None:
        metadata["filters"] = filters.model_dump(mode="json", exclude_none=True)
    if latency_ms is not None:
        metadata["export_latency_ms"] = latency_ms
    return metadata


__all__ = [
    "DateRange",
    "DomainRecord",
    "ExportDomain",
    "ExportFilters",
    "ExportFormat",
    "ExportResult",
    "DOMAIN_FILENAMES",
    "MIME_TYPES",
    "available_domains",
    "available_formats",
    "create_export_metadata",
    "parse_domain",
    "parse_format",
]
