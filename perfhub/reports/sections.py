"""
Section aggregates — derived statistics for each report section.

All functions are pure: they take the export records a section is backed by
(as parsed back from the JSON export) and return plain dataclasses the
templates render. Histograms keep first-seen order; rankings break ties by
first-seen order as well.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from perfhub.export.projections import NOT_RATED

TOP_DEPARTMENT_LIMIT = 5


@dataclass
class CountShare:
    """One histogram bucket: label, count and share of the total in percent."""
    label: str
    count: int
    percentage: float


@dataclass
class OverviewSummary:
    active_users: Any
    completion_rate: Any
    total_reviews: Any
    average_rating: Any


@dataclass
class UsersSummary:
    total: int
    active: int
    department_count: int
    top_departments: List[CountShare] = field(default_factory=list)


@dataclass
class GoalsSummary:
    total: int
    completed: int
    average_progress: float
    by_status: List[CountShare] = field(default_factory=list)


@dataclass
class ReviewsSummary:
    total: int
    completed: int
    rated: int
    average_rating: float
    by_status: List[CountShare] = field(default_factory=list)


@dataclass
class FeedbackSummary:
    total: int
    rated: int
    average_rating: float
    by_type: List[CountShare] = field(default_factory=list)


@dataclass
class DepartmentRow:
    department: str
    total: int
    active: int
    activity_rate: float
    top_role: str


def _to_number(value: Any) -> Optional[float]:
    """Numeric value of a cell, or None when it is missing or not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _shares(counts: Counter, total: int) -> List[CountShare]:
    return [
        CountShare(label=str(label), count=count, percentage=count / total * 100)
        for label, count in counts.items()
    ]


def _rated_values(records: Iterable[Dict[str, Any]], column: str) -> List[float]:
    ratings = []
    for record in records:
        raw = record.get(column)
        if raw is None or raw == "" or raw == NOT_RATED:
            continue
        value = _to_number(raw)
        if value is not None:
            ratings.append(value)
    return ratings


def summarize_overview(analytics: Optional[List[Dict[str, Any]]]) -> Optional[OverviewSummary]:
    """Headline cards from the analytics metric list; None when metrics are absent."""
    if analytics is None:
        return None

    metrics = {item.get("Metric"): item.get("Value") for item in analytics}
    return OverviewSummary(
        active_users=metrics.get("Total Active Users") or 0,
        completion_rate=metrics.get("Goals Completion Rate (%)") or 0,
        total_reviews=metrics.get("Total Reviews") or 0,
        average_rating=metrics.get("Average Review Rating") or 0,
    )


def summarize_users(users: Optional[List[Dict[str, Any]]]) -> Optional[UsersSummary]:
    """
    Totals plus the five largest departments.

    Departments are grouped by the exported value as-is, so "Not assigned"
    forms its own group.
    """
    if not users:
        return None

    total = len(users)
    active = sum(1 for user in users if user.get("Status") == "Active")
    department_counts = Counter(user.get("Department") for user in users)

    # sorted() is stable: equal counts keep first-seen order
    ranked = sorted(department_counts.items(), key=lambda item: item[1], reverse=True)
    top = ranked[:TOP_DEPARTMENT_LIMIT]

    return UsersSummary(
        total=total,
        active=active,
        department_count=len(department_counts),
        top_departments=[
            CountShare(label=str(dept), count=count, percentage=count / total * 100)
            for dept, count in top
        ],
    )


def summarize_goals(goals: Optional[List[Dict[str, Any]]]) -> Optional[GoalsSummary]:
    """Totals, average progress (missing progress = 0) and the status histogram."""
    if not goals:
        return None

    total = len(goals)
    status_counts = Counter(goal.get("Status") for goal in goals)
    progress_sum = sum(_to_number(goal.get("Progress (%)")) or 0 for goal in goals)

    return GoalsSummary(
        total=total,
        completed=status_counts.get("completed", 0),
        average_progress=progress_sum / total,
        by_status=_shares(status_counts, total),
    )


def summarize_reviews(reviews: Optional[List[Dict[str, Any]]]) -> Optional[ReviewsSummary]:
    """Totals, average over rated reviews only, and the status histogram."""
    if not reviews:
        return None

    total = len(reviews)
    status_counts = Counter(review.get("Status") for review in reviews)
    ratings = _rated_values(reviews, "Overall Rating")

    return ReviewsSummary(
        total=total,
        completed=status_counts.get("completed", 0),
        rated=len(ratings),
        average_rating=sum(ratings) / len(ratings) if ratings else 0.0,
        by_status=_shares(status_counts, total),
    )


def summarize_feedback(feedback: Optional[List[Dict[str, Any]]]) -> Optional[FeedbackSummary]:
    """Totals, average over rated feedback only, and the type histogram."""
    if not feedback:
        return None

    total = len(feedback)
    type_counts = Counter(entry.get("Type") for entry in feedback)
    ratings = _rated_values(feedback, "Rating")

    return FeedbackSummary(
        total=total,
        rated=len(ratings),
        average_rating=sum(ratings) / len(ratings) if ratings else 0.0,
        by_type=_shares(type_counts, total),
    )


def summarize_departments(users: Optional[List[Dict[str, Any]]]) -> Optional[List[DepartmentRow]]:
    """Per-department headcount, activity rate and most common role."""
    if not users:
        return None

    groups: Dict[Any, Dict[str, Any]] = {}
    for user in users:
        group = groups.setdefault(
            user.get("Department"), {"total": 0, "active": 0, "roles": Counter()}
        )
        group["total"] += 1
        if user.get("Status") == "Active":
            group["active"] += 1
        group["roles"][user.get("Role")] += 1

    rows = []
    for department, group in groups.items():
        roles: Counter = group["roles"]
        # max() returns the first maximal item, so ties go to the first-seen role
        top_role = max(roles.items(), key=lambda item: item[1])[0] if roles else None
        rows.append(DepartmentRow(
            department=str(department),
            total=group["total"],
            active=group["active"],
            activity_rate=group["active"] / group["total"] * 100,
            top_role=str(top_role) if top_role else "N/A",
        ))
    return rows
