"""
Error taxonomy for exports and reports.

Core modules raise these and never recover locally; the API layer maps them
onto HTTP status codes and the CLI onto exit codes.
"""

from typing import Iterable, Optional


class ErrorClass:
    """Structured error classification for log lines."""
    DATA_FETCH_FAILED = "DATA_FETCH_FAILED"
    INVALID_EXPORT_TYPE = "INVALID_EXPORT_TYPE"
    INVALID_EXPORT_FORMAT = "INVALID_EXPORT_FORMAT"
    INVALID_REPORT_TYPE = "INVALID_REPORT_TYPE"


class PerfHubError(Exception):
    """Base class for every error raised by the export/report core."""
    error_class: str = "PERFHUB_ERROR"


class DataFetchError(PerfHubError):
    """
    The query collaborator failed.

    The original exception is available as ``cause`` and is also chained
    as ``__cause__`` by the raising site.
    """
    error_class = ErrorClass.DATA_FETCH_FAILED

    def __init__(self, domain: str, cause: Optional[BaseException] = None):
        self.domain = domain
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to fetch {domain} data{detail}")


class _InvalidChoiceError(PerfHubError, ValueError):
    kind = "value"

    def __init__(self, value: str, allowed: Iterable[str]):
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"Invalid {self.kind}: {value!r} (expected one of {', '.join(self.allowed)})"
        )


class InvalidExportTypeError(_InvalidChoiceError):
    """Unknown export domain."""
    error_class = ErrorClass.INVALID_EXPORT_TYPE
    kind = "export type"


class InvalidExportFormatError(_InvalidChoiceError):
    """Unknown serialization format."""
    error_class = ErrorClass.INVALID_EXPORT_FORMAT
    kind = "export format"


class InvalidReportTypeError(_InvalidChoiceError):
    """Unknown report type identifier."""
    error_class = ErrorClass.INVALID_REPORT_TYPE
    kind = "report type"
