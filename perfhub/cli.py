"""
Command-line exports and reports.

Usage:
    perfhub export <domain> [options]
    perfhub report <report-type> [options]

Examples:
    # Goals for one department as CSV under ./exports
    perfhub export goals --department Engineering

    # Analytics for Q1 as JSON on stdout
    perfhub export analytics --format json --start 2024-01-01 --end 2024-03-31 --stdout

    # Quarterly report written to ./reports
    perfhub report quarterly-review --output-dir reports
"""

import argparse
import asyncio
import json
import sys
import time
from datetime import datetime
from typing import List, Optional

from perfhub.core.config import settings
from perfhub.core.db import PerformanceRepository, close_engine, initialize_database
from perfhub.core.errors import DataFetchError, PerfHubError
from perfhub.core.filters import DateRange, ExportFilters
from perfhub.core.logging import setup_logger
from perfhub.export.export_schema import (
    available_domains,
    available_formats,
    create_export_metadata,
    parse_domain,
    parse_format,
)
from perfhub.export.serializers import count_records, write_export
from perfhub.export.service import ExportCollector
from perfhub.reports.generator import ReportAssembler, write_report
from perfhub.reports.report_types import REPORT_TYPES, get_report_definition

EXIT_OK = 0
EXIT_FETCH_FAILED = 1
EXIT_INVALID_INPUT = 2


def _iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date/datetime: {value!r}")


def _add_filter_arguments(parser: argparse.ArgumentParser):
    group = parser.add_argument_group("filters")
    group.add_argument("--department", default="all", help="Department name (default: all)")
    group.add_argument("--role", default="all", help="User role (default: all)")
    group.add_argument("--status", default="all", help="active/inactive for users, workflow status otherwise")
    group.add_argument("--priority", default="all", help="Goal priority (default: all)")
    group.add_argument("--review-type", default="all", help="Review type (default: all)")
    group.add_argument("--feedback-type", default="all", help="Feedback type (default: all)")
    group.add_argument("--start", type=_iso_datetime, metavar="DATE", help="Created-at window start (ISO 8601)")
    group.add_argument("--end", type=_iso_datetime, metavar="DATE", help="Created-at window end (ISO 8601)")


def _add_output_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--output-dir",
        default=settings.EXPORT_OUTPUT_DIR,
        metavar="PATH",
        help=f"Directory for the generated file (default: {settings.EXPORT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the payload instead of writing a file",
    )
    parser.add_argument(
        "--database-url",
        metavar="URL",
        help="Override DATABASE_URL for this run",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perfhub",
        description="Export PerformanceHub data and generate HTML reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s export users --format json
  %(prog)s export reviews --department Sales --status completed
  %(prog)s report department-report --department Engineering
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export one data domain")
    export_parser.add_argument("domain", help=f"One of: {', '.join(available_domains())}")
    export_parser.add_argument(
        "--format",
        default="csv",
        help=f"One of: {', '.join(available_formats())} (default: csv)",
    )
    _add_filter_arguments(export_parser)
    _add_output_arguments(export_parser)

    report_parser = subparsers.add_parser("report", help="Generate an HTML report")
    report_parser.add_argument("report_type", help=f"One of: {', '.join(REPORT_TYPES)}")
    _add_filter_arguments(report_parser)
    _add_output_arguments(report_parser)

    return parser


def filters_from_args(args: argparse.Namespace) -> ExportFilters:
    date_range = None
    if args.start or args.end:
        date_range = DateRange(start=args.start, end=args.end)
    return ExportFilters(
        department=args.department,
        role=args.role,
        status=args.status,
        priority=args.priority,
        review_type=args.review_type,
        feedback_type=args.feedback_type,
        date_range=date_range,
    )


async def run_export(args: argparse.Namespace, collector: ExportCollector) -> int:
    filters = filters_from_args(args)
    start_time = time.time()

    result = await collector.export_domain(args.domain, args.format, filters)

    metadata = create_export_metadata(
        domain=parse_domain(args.domain).value,
        export_format=parse_format(args.format).value,
        row_count=count_records(result),
        filters=filters,
        latency_ms=int((time.time() - start_time) * 1000),
    )

    if args.stdout:
        print(result.data)
    else:
        metadata["path"] = str(write_export(result, args.output_dir))
    print(json.dumps(metadata, indent=2), file=sys.stderr)
    return EXIT_OK


async def run_report(args: argparse.Namespace, assembler: ReportAssembler) -> int:
    report = await assembler.generate_report(args.report_type, filters_from_args(args))

    if args.stdout:
        print(report.html)
    else:
        path = write_report(report, args.output_dir)
        print(f"Report written to: {path}", file=sys.stderr)
    return EXIT_OK


def validate_args(args: argparse.Namespace):
    """Reject unknown domains, formats and report types before touching the database."""
    if args.command == "export":
        parse_domain(args.domain)
        parse_format(args.format)
    else:
        get_report_definition(args.report_type)


async def _run(args: argparse.Namespace) -> int:
    try:
        await initialize_database(args.database_url)
        collector = ExportCollector(PerformanceRepository())
        if args.command == "export":
            return await run_export(args, collector)
        return await run_report(args, ReportAssembler(collector))
    finally:
        await close_engine()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # stdout may carry the payload; logs go to stderr
    setup_logger("WARNING" if args.stdout else settings.LOG_LEVEL, stream=sys.stderr)

    try:
        validate_args(args)
        return asyncio.run(_run(args))
    except DataFetchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FETCH_FAILED
    except PerfHubError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Check DATABASE_URL (or DB_HOST/DB_PORT/DB_USER/DB_PASS/DB_NAME).", file=sys.stderr)
        return EXIT_FETCH_FAILED


if __name__ == "__main__":
    sys.exit(main())
