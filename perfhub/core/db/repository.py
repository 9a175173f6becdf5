"""
Performance Repository — read-side queries behind the exports.

Every method opens its own session so the analytics fan-out can run several
queries concurrently. Rows come back as plain dicts shaped like the Supabase
rows the web client used to receive: scalar columns plus nested relation
dicts (``manager``, ``assignee``, ...) holding the related user's display
fields, or None.
"""

from datetime import datetime
from typing import Any, AsyncContextManager, Callable, Dict, List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from perfhub.core.db.models import UserProfile, Goal, PerformanceReview, Feedback
from perfhub.core.db.postgres import get_session
from perfhub.core.filters import ExportFilters, to_naive_utc
from perfhub.core.logging import setup_logger

logger = setup_logger("INFO")

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]

USER_COLUMNS = (
    "id", "email", "first_name", "last_name", "role", "department", "position",
    "phone", "location", "hire_date", "is_active", "created_at", "updated_at",
)
GOAL_COLUMNS = (
    "id", "title", "description", "status", "priority", "goal_type", "progress",
    "due_date", "created_at", "updated_at",
)
REVIEW_COLUMNS = (
    "id", "title", "review_type", "status", "review_period", "overall_rating",
    "strengths", "areas_for_improvement", "goals_for_next_period",
    "created_at", "updated_at",
)
FEEDBACK_COLUMNS = ("id", "feedback_type", "content", "rating", "created_at")


def _person(user: Optional[UserProfile], *extra: str) -> Optional[Dict[str, Any]]:
    """Display fields of a related user, or None when the relation is empty."""
    if user is None:
        return None
    person = {"first_name": user.first_name, "last_name": user.last_name}
    for field in extra:
        person[field] = getattr(user, field)
    return person


def _columns(obj: Any, names) -> Dict[str, Any]:
    return {name: getattr(obj, name) for name in names}


def _apply_created_range(query, model, filters: ExportFilters):
    date_range = filters.date_range
    if date_range is None:
        return query
    if date_range.start is not None:
        query = query.where(model.created_at >= to_naive_utc(date_range.start))
    if date_range.end is not None:
        query = query.where(model.created_at <= to_naive_utc(date_range.end))
    return query


class PerformanceRepository:
    """Query collaborator for the export collector."""

    def __init__(self, session_factory: SessionFactory = get_session):
        self._session_factory = session_factory

    async def _all(self, query) -> List[Any]:
        async with self._session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def _count(self, query) -> int:
        async with self._session_factory() as session:
            result = await session.execute(query)
            return int(result.scalar() or 0)

    # ------------------------------------------------------------------
    # Row domains
    # ------------------------------------------------------------------

    async def fetch_users(self, filters: ExportFilters) -> List[Dict[str, Any]]:
        """User profiles with their manager's name, newest first."""
        query = select(UserProfile).options(selectinload(UserProfile.manager))

        department = filters.constraint("department")
        if department:
            query = query.where(UserProfile.department == department)
        role = filters.constraint("role")
        if role:
            query = query.where(UserProfile.role == role)
        status = filters.constraint("status")
        if status:
            query = query.where(UserProfile.is_active == (status == "active"))

        query = _apply_created_range(query, UserProfile, filters)
        query = query.order_by(UserProfile.created_at.desc())

        users = await self._all(query)
        logger.debug(f"query_completed=true table=user_profiles rows={len(users)}")

        return [
            {**_columns(user, USER_COLUMNS), "manager": _person(user.manager)}
            for user in users
        ]

    async def fetch_goals(self, filters: ExportFilters) -> List[Dict[str, Any]]:
        """Goals with assignee and manager, newest first."""
        query = select(Goal).options(
            selectinload(Goal.assignee),
            selectinload(Goal.manager),
        )

        status = filters.constraint("status")
        if status:
            query = query.where(Goal.status == status)
        priority = filters.constraint("priority")
        if priority:
            query = query.where(Goal.priority == priority)
        department = filters.constraint("department")
        if department:
            query = query.where(Goal.assignee.has(UserProfile.department == department))

        query = _apply_created_range(query, Goal, filters)
        query = query.order_by(Goal.created_at.desc())

        goals = await self._all(query)
        logger.debug(f"query_completed=true table=goals rows={len(goals)}")

        return [
            {
                **_columns(goal, GOAL_COLUMNS),
                "assignee": _person(goal.assignee, "email", "department"),
                "manager": _person(goal.manager, "email"),
            }
            for goal in goals
        ]

    async def fetch_reviews(self, filters: ExportFilters) -> List[Dict[str, Any]]:
        """Performance reviews with reviewee and reviewer, newest first."""
        query = select(PerformanceReview).options(
            selectinload(PerformanceReview.reviewee),
            selectinload(PerformanceReview.reviewer),
        )

        status = filters.constraint("status")
        if status:
            query = query.where(PerformanceReview.status == status)
        review_type = filters.constraint("review_type")
        if review_type:
            query = query.where(PerformanceReview.review_type == review_type)
        department = filters.constraint("department")
        if department:
            query = query.where(
                PerformanceReview.reviewee.has(UserProfile.department == department)
            )

        query = _apply_created_range(query, PerformanceReview, filters)
        query = query.order_by(PerformanceReview.created_at.desc())

        reviews = await self._all(query)
        logger.debug(f"query_completed=true table=performance_reviews rows={len(reviews)}")

        return [
            {
                **_columns(review, REVIEW_COLUMNS),
                "reviewee": _person(review.reviewee, "email", "department"),
                "reviewer": _person(review.reviewer, "email"),
            }
            for review in reviews
        ]

    async def fetch_feedback(self, filters: ExportFilters) -> List[Dict[str, Any]]:
        """Feedback entries with giver and receiver, newest first."""
        query = select(Feedback).options(
            selectinload(Feedback.feedback_giver),
            selectinload(Feedback.feedback_receiver),
        )

        feedback_type = filters.constraint("feedback_type")
        if feedback_type:
            query = query.where(Feedback.feedback_type == feedback_type)
        department = filters.constraint("department")
        if department:
            query = query.where(
                Feedback.feedback_receiver.has(UserProfile.department == department)
            )

        query = _apply_created_range(query, Feedback, filters)
        query = query.order_by(Feedback.created_at.desc())

        entries = await self._all(query)
        logger.debug(f"query_completed=true table=feedback rows={len(entries)}")

        return [
            {
                **_columns(entry, FEEDBACK_COLUMNS),
                "feedback_giver": _person(entry.feedback_giver),
                "feedback_receiver": _person(entry.feedback_receiver, "department"),
            }
            for entry in entries
        ]

    # ------------------------------------------------------------------
    # Analytics aggregates
    # ------------------------------------------------------------------

    async def count_active_users(self) -> int:
        query = select(func.count()).select_from(UserProfile).where(UserProfile.is_active.is_(True))
        return await self._count(query)

    async def count_new_users(self, start: datetime, end: datetime) -> int:
        query = (
            select(func.count())
            .select_from(UserProfile)
            .where(UserProfile.created_at >= to_naive_utc(start))
            .where(UserProfile.created_at <= to_naive_utc(end))
        )
        return await self._count(query)

    async def fetch_goal_progress(self, start: datetime, end: datetime) -> List[Optional[int]]:
        """Progress value of every goal created in the window (None when unset)."""
        query = (
            select(Goal.progress)
            .where(Goal.created_at >= to_naive_utc(start))
            .where(Goal.created_at <= to_naive_utc(end))
        )
        return await self._all(query)

    async def count_completed_goals(self, start: datetime, end: datetime) -> int:
        query = (
            select(func.count())
            .select_from(Goal)
            .where(Goal.status == "completed")
            .where(Goal.created_at >= to_naive_utc(start))
            .where(Goal.created_at <= to_naive_utc(end))
        )
        return await self._count(query)

    async def fetch_review_ratings(self, start: datetime, end: datetime) -> List[Optional[float]]:
        """Overall rating of every review created in the window (None when unrated)."""
        query = (
            select(PerformanceReview.overall_rating)
            .where(PerformanceReview.created_at >= to_naive_utc(start))
            .where(PerformanceReview.created_at <= to_naive_utc(end))
        )
        return await self._all(query)

    async def count_completed_reviews(self, start: datetime, end: datetime) -> int:
        query = (
            select(func.count())
            .select_from(PerformanceReview)
            .where(PerformanceReview.status == "completed")
            .where(PerformanceReview.created_at >= to_naive_utc(start))
            .where(PerformanceReview.created_at <= to_naive_utc(end))
        )
        return await self._count(query)

    async def list_departments(self) -> List[str]:
        """Distinct non-empty department names, alphabetically."""
        query = (
            select(UserProfile.department)
            .where(UserProfile.department.is_not(None))
            .where(UserProfile.department != "")
            .distinct()
            .order_by(UserProfile.department)
        )
        return await self._all(query)
