"""
Export Service — domain exports for PerformanceHub data

Supports exporting:
- Users (profiles with manager)
- Goals (with assignee and manager)
- Performance reviews (with reviewee and reviewer)
- Feedback (with giver and receiver)
- Analytics (flat KPI list over a date window)

Formats:
- CSV (``excel`` is served as CSV)
- JSON

No retries: a failing query surfaces as DataFetchError with the original
exception chained.
"""

import asyncio
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, Union

from perfhub.core.config import settings
from perfhub.core.errors import DataFetchError, ErrorClass, PerfHubError
from perfhub.core.logging import setup_logger
from perfhub.core.rounding import round_half_up
from perfhub.export.export_schema import (
    DOMAIN_FILENAMES,
    DateRange,
    DomainRecord,
    ExportDomain,
    ExportFilters,
    ExportFormat,
    ExportResult,
    parse_domain,
    parse_format,
)
from perfhub.export.projections import (
    format_date,
    format_datetime,
    metric,
    project_feedback,
    project_goal,
    project_review,
    project_user,
)
from perfhub.export.serializers import format_export

logger = setup_logger("INFO")


def compute_goal_metrics(progress_values: Sequence[Optional[float]], completed_goals: int) -> Dict[str, int]:
    """
    Goal KPIs for the analytics export.

    Missing progress counts as 0. Completion rate and average progress are
    whole percentages and are 0 when there are no goals.
    """
    total_goals = len(progress_values)
    if total_goals == 0:
        return {
            "totalGoals": 0,
            "completedGoals": completed_goals,
            "completionRate": 0,
            "averageProgress": 0,
        }

    progress_sum = sum(value or 0 for value in progress_values)
    return {
        "totalGoals": total_goals,
        "completedGoals": completed_goals,
        "completionRate": round_half_up(completed_goals / total_goals * 100),
        "averageProgress": round_half_up(progress_sum / total_goals),
    }


def compute_review_metrics(ratings: Sequence[Optional[float]], completed_reviews: int) -> Dict[str, Any]:
    """Review KPIs; the average covers rated reviews only and is 0 when none are rated."""
    rated = [rating for rating in ratings if rating is not None]
    average = round_half_up(sum(rated) / len(rated), 1) if rated else 0
    return {
        "totalReviews": len(ratings),
        "completedReviews": completed_reviews,
        "averageRating": average,
    }


async def gather_or_cancel(*aws: Awaitable[Any]) -> List[Any]:
    """
    Await ``aws`` concurrently and return their results in order.

    On the first failure the remaining awaitables are cancelled and awaited
    before the error propagates, so no query outlives a failed request.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def resolve_date_range(date_range: Optional[DateRange], window_days: Optional[int] = None) -> Tuple[datetime, datetime]:
    """Fill in a missing start/end with the trailing analytics window ending now (UTC)."""
    window_days = window_days if window_days is not None else settings.ANALYTICS_WINDOW_DAYS
    now = datetime.now(timezone.utc)
    end = date_range.end if date_range and date_range.end else now
    start = date_range.start if date_range and date_range.start else now - timedelta(days=window_days)
    return start, end


class ExportCollector:
    """
    Fetches domain rows through a query collaborator and serializes them.

    Holds no state beyond the injected repository, so one instance can serve
    concurrent calls.
    """

    def __init__(self, repository):
        self.repository = repository

    async def _fetch(self, domain: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await fetch()
        except PerfHubError:
            raise
        except Exception as e:
            logger.error(
                f"data_fetch_failed=true domain={domain} error_class={ErrorClass.DATA_FETCH_FAILED} "
                f"error={type(e).__name__} message={str(e)}"
            )
            raise DataFetchError(domain, e) from e

    def _finish(
        self,
        domain: ExportDomain,
        records: List[DomainRecord],
        fmt: ExportFormat,
        start_time: float,
    ) -> ExportResult:
        result = format_export(records, fmt, DOMAIN_FILENAMES[domain])
        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"export_completed=true domain={domain.value} format={fmt.value} "
            f"rows={len(records)} latency_ms={latency_ms}"
        )
        return result

    async def export_domain(
        self,
        domain: Union[str, ExportDomain],
        export_format: Union[str, ExportFormat] = ExportFormat.CSV,
        filters: Optional[ExportFilters] = None,
    ) -> ExportResult:
        """
        Export one domain in the requested format.

        Args:
            domain: users, goals, reviews, feedback or analytics
            export_format: csv, json or excel
            filters: Optional filters; analytics only honours the date range

        Returns:
            ExportResult

        Raises:
            InvalidExportTypeError: Unknown domain (before any query)
            InvalidExportFormatError: Unknown format (before any query)
            DataFetchError: The query collaborator failed
        """
        domain = parse_domain(domain)
        fmt = parse_format(export_format)
        filters = filters or ExportFilters()

        if domain == ExportDomain.ANALYTICS:
            return await self.export_analytics(fmt, filters.date_range)

        handlers = {
            ExportDomain.USERS: self.export_users,
            ExportDomain.GOALS: self.export_goals,
            ExportDomain.REVIEWS: self.export_reviews,
            ExportDomain.FEEDBACK: self.export_feedback,
        }
        return await handlers[domain](fmt, filters)

    async def export_users(self, export_format=ExportFormat.CSV, filters: Optional[ExportFilters] = None) -> ExportResult:
        start_time = time.time()
        fmt = parse_format(export_format)
        filters = filters or ExportFilters()

        rows = await self._fetch("users", lambda: self.repository.fetch_users(filters))
        records = [project_user(row) for row in rows]
        return self._finish(ExportDomain.USERS, records, fmt, start_time)

    async def export_goals(self, export_format=ExportFormat.CSV, filters: Optional[ExportFilters] = None) -> ExportResult:
        start_time = time.time()
        fmt = parse_format(export_format)
        filters = filters or ExportFilters()

        rows = await self._fetch("goals", lambda: self.repository.fetch_goals(filters))
        records = [project_goal(row) for row in rows]
        return self._finish(ExportDomain.GOALS, records, fmt, start_time)

    async def export_reviews(self, export_format=ExportFormat.CSV, filters: Optional[ExportFilters] = None) -> ExportResult:
        start_time = time.time()
        fmt = parse_format(export_format)
        filters = filters or ExportFilters()

        rows = await self._fetch("reviews", lambda: self.repository.fetch_reviews(filters))
        records = [project_review(row) for row in rows]
        return self._finish(ExportDomain.REVIEWS, records, fmt, start_time)

    async def export_feedback(self, export_format=ExportFormat.CSV, filters: Optional[ExportFilters] = None) -> ExportResult:
        start_time = time.time()
        fmt = parse_format(export_format)
        filters = filters or ExportFilters()

        rows = await self._fetch("feedback", lambda: self.repository.fetch_feedback(filters))
        records = [project_feedback(row) for row in rows]
        return self._finish(ExportDomain.FEEDBACK, records, fmt, start_time)

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    async def _analytics_users(self, start: datetime, end: datetime) -> Dict[str, int]:
        active_users, new_users = await gather_or_cancel(
            self.repository.count_active_users(),
            self.repository.count_new_users(start, end),
        )
        return {"activeUsers": active_users, "newUsers": new_users}

    async def _analytics_goals(self, start: datetime, end: datetime) -> Dict[str, int]:
        progress_values, completed_goals = await gather_or_cancel(
            self.repository.fetch_goal_progress(start, end),
            self.repository.count_completed_goals(start, end),
        )
        return compute_goal_metrics(progress_values, completed_goals)

    async def _analytics_reviews(self, start: datetime, end: datetime) -> Dict[str, Any]:
        ratings, completed_reviews = await gather_or_cancel(
            self.repository.fetch_review_ratings(start, end),
            self.repository.count_completed_reviews(start, end),
        )
        return compute_review_metrics(ratings, completed_reviews)

    async def collect_analytics(self, date_range: Optional[DateRange] = None) -> List[DomainRecord]:
        """
        Build the flat analytics metric list.

        The users, goals and reviews aggregates run concurrently; all three
        must finish before the list is assembled.
        """
        start, end = resolve_date_range(date_range)

        users, goals, reviews = await self._fetch(
            "analytics",
            lambda: gather_or_cancel(
                self._analytics_users(start, end),
                self._analytics_goals(start, end),
                self._analytics_reviews(start, end),
            ),
        )

        return [
            metric("Total Active Users", users["activeUsers"], "Users"),
            metric("New Users (Period)", users["newUsers"], "Users"),
            metric("Total Goals", goals["totalGoals"], "Goals"),
            metric("Completed Goals", goals["completedGoals"], "Goals"),
            metric("Goals Completion Rate (%)", goals["completionRate"], "Goals"),
            metric("Average Goal Progress (%)", goals["averageProgress"], "Goals"),
            metric("Total Reviews", reviews["totalReviews"], "Reviews"),
            metric("Completed Reviews", reviews["completedReviews"], "Reviews"),
            metric("Average Review Rating", reviews["averageRating"], "Reviews"),
            metric("Report Period Start", format_date(start), "Report Info"),
            metric("Report Period End", format_date(end), "Report Info"),
            metric("Report Generated", format_datetime(datetime.now()), "Report Info"),
        ]

    async def export_analytics(
        self,
        export_format: Union[str, ExportFormat] = ExportFormat.CSV,
        date_range: Optional[DateRange] = None,
    ) -> ExportResult:
        """
        Export the analytics KPI list.

        Args:
            export_format: csv, json or excel
            date_range: Created-at window; defaults to the trailing
                ANALYTICS_WINDOW_DAYS ending now

        Returns:
            ExportResult of Metric/Value/Category records
        """
        start_time = time.time()
        fmt = parse_format(export_format)

        records = await self.collect_analytics(date_range)
        return self._finish(ExportDomain.ANALYTICS, records, fmt, start_time)

    async def list_departments(self) -> List[str]:
        """Distinct department names, for filter pickers."""
        return await self._fetch("departments", self.repository.list_departments)
