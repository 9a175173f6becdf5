"""
Serializers — export records to CSV / JSON payloads and filenames.
"""

import csv
import io
import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from perfhub.core.logging import setup_logger
from perfhub.export.export_schema import (
    DomainRecord,
    ExportFormat,
    ExportResult,
    MIME_TYPES,
    parse_format,
)

logger = setup_logger("INFO")


def to_csv(records: List[DomainRecord]) -> str:
    """
    Serialize records as CSV.

    The header is the first record's key order. Fields containing a comma,
    a double quote or a line break are quoted with embedded quotes doubled.
    An empty collection yields an empty string (no header row).
    """
    if not records:
        return ""

    headers = list(records[0].keys())
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=headers,
        restval="",
        extrasaction="ignore",
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    writer.writeheader()
    writer.writerows(records)

    # No trailing newline after the last row
    return buffer.getvalue().rstrip("\n")


def to_json(records: List[DomainRecord]) -> str:
    """Serialize records as a 2-space indented JSON array, key order preserved."""
    return json.dumps(records, indent=2, ensure_ascii=False, default=str)


def serialize(records: List[DomainRecord], export_format: Union[str, ExportFormat]) -> str:
    """Serialize records; ``excel`` produces CSV."""
    fmt = parse_format(export_format)
    if fmt == ExportFormat.JSON:
        return to_json(records)
    return to_csv(records)


def build_filename(base: str, extension: str, today: Optional[date] = None) -> str:
    """``{base}_{YYYY-MM-DD}.{extension}`` using today's UTC date by default."""
    today = today or datetime.now(timezone.utc).date()
    return f"{base}_{today.isoformat()}.{extension}"


def format_export(
    records: List[DomainRecord],
    export_format: Union[str, ExportFormat],
    base_name: str,
    today: Optional[date] = None,
) -> ExportResult:
    """
    Serialize records into an ExportResult.

    Args:
        records: Projected export records
        export_format: csv, json or excel (alias for csv)
        base_name: Filename stem, e.g. "users"
        today: Date stamped into the filename (defaults to today, UTC)

    Returns:
        ExportResult with payload, filename and MIME type
    """
    fmt = parse_format(export_format)

    if fmt == ExportFormat.EXCEL:
        logger.info(f"excel_alias=true base_name={base_name} served_as=csv")

    extension = "json" if fmt == ExportFormat.JSON else "csv"
    return ExportResult(
        data=serialize(records, fmt),
        filename=build_filename(base_name, extension, today),
        mime_type=MIME_TYPES[extension],
    )


def parse_records(result: ExportResult) -> List[DomainRecord]:
    """Load the records back out of a JSON export."""
    if not result.data:
        return []
    return json.loads(result.data)


def write_export(result: ExportResult, directory: Union[str, Path]) -> Path:
    """
    Write an export to ``directory`` under its suggested filename.

    Returns:
        Path of the written file
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / result.filename
    path.write_text(result.data, encoding="utf-8")
    logger.info(f"export_written=true path={path} bytes={len(result.content_bytes)}")
    return path


def count_records(result: ExportResult) -> int:
    """Number of records in a serialized export (header row excluded for CSV)."""
    if not result.data:
        return 0
    if result.mime_type == MIME_TYPES["json"]:
        return len(json.loads(result.data))
    rows = list(csv.reader(io.StringIO(result.data)))
    return max(len(rows) - 1, 0)
