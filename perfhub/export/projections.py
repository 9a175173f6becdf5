"""
Column projections — raw query rows to human-readable export records.

Each domain has a fixed, ordered column set; every projected record carries
exactly those keys in that order. Nested relations are flattened into
"First Last" display strings and dates are rendered with the configured
export date format.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from perfhub.core.config import settings

NOT_ASSIGNED = "Not assigned"
NOT_RATED = "Not rated"

USER_COLUMNS = (
    "User ID", "Email", "First Name", "Last Name", "Full Name", "Role",
    "Department", "Position", "Phone", "Location", "Manager", "Hire Date",
    "Status", "Created Date", "Last Updated",
)
GOAL_COLUMNS = (
    "Goal ID", "Title", "Description", "Status", "Priority", "Type",
    "Progress (%)", "Assignee", "Assignee Email", "Department", "Manager",
    "Due Date", "Created Date", "Last Updated",
)
REVIEW_COLUMNS = (
    "Review ID", "Title", "Type", "Status", "Period", "Overall Rating",
    "Reviewee", "Reviewee Email", "Department", "Reviewer", "Strengths",
    "Areas for Improvement", "Goals for Next Period", "Created Date",
    "Last Updated",
)
FEEDBACK_COLUMNS = (
    "Feedback ID", "Type", "Content", "Rating", "Giver", "Receiver",
    "Receiver Department", "Created Date",
)
ANALYTICS_COLUMNS = ("Metric", "Value", "Category")


def _parse_datetime(value: Union[str, date, datetime]) -> Union[date, datetime]:
    if isinstance(value, (date, datetime)):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return date.fromisoformat(text[:10])


def format_date(value: Optional[Union[str, date, datetime]]) -> str:
    """Render a date, datetime or ISO string with EXPORT_DATE_FORMAT ('' when missing)."""
    if value is None or value == "":
        return ""
    return _parse_datetime(value).strftime(settings.EXPORT_DATE_FORMAT)


def format_datetime(value: Union[str, datetime]) -> str:
    """Render a timestamp with EXPORT_DATETIME_FORMAT."""
    return _parse_datetime(value).strftime(settings.EXPORT_DATETIME_FORMAT)


def full_name(person: Optional[Dict[str, Any]], default: str = "") -> str:
    """'First Last' for a related user dict, or ``default`` when absent."""
    if not person:
        return default
    return f"{person.get('first_name') or ''} {person.get('last_name') or ''}".strip()


def _related(row: Dict[str, Any], relation: str, field: str) -> str:
    person = row.get(relation) or {}
    return person.get(field) or ""


def project_user(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "User ID": row.get("id"),
        "Email": row.get("email"),
        "First Name": row.get("first_name"),
        "Last Name": row.get("last_name"),
        "Full Name": f"{row.get('first_name') or ''} {row.get('last_name') or ''}".strip(),
        "Role": row.get("role"),
        "Department": row.get("department") or NOT_ASSIGNED,
        "Position": row.get("position") or NOT_ASSIGNED,
        "Phone": row.get("phone") or "",
        "Location": row.get("location") or "",
        "Manager": full_name(row.get("manager"), default="None"),
        "Hire Date": format_date(row.get("hire_date")),
        "Status": "Active" if row.get("is_active") else "Inactive",
        "Created Date": format_date(row.get("created_at")),
        "Last Updated": format_date(row.get("updated_at")),
    }


def project_goal(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "Goal ID": row.get("id"),
        "Title": row.get("title"),
        "Description": row.get("description") or "",
        "Status": row.get("status"),
        "Priority": row.get("priority"),
        "Type": row.get("goal_type"),
        "Progress (%)": row.get("progress") or 0,
        "Assignee": full_name(row.get("assignee"), default="Unassigned"),
        "Assignee Email": _related(row, "assignee", "email"),
        "Department": _related(row, "assignee", "department"),
        "Manager": full_name(row.get("manager"), default="None"),
        "Due Date": format_date(row.get("due_date")),
        "Created Date": format_date(row.get("created_at")),
        "Last Updated": format_date(row.get("updated_at")),
    }


def project_review(row: Dict[str, Any]) -> Dict[str, Any]:
    rating = row.get("overall_rating")
    return {
        "Review ID": row.get("id"),
        "Title": row.get("title"),
        "Type": row.get("review_type"),
        "Status": row.get("status"),
        "Period": row.get("review_period") or "",
        "Overall Rating": rating if rating is not None else NOT_RATED,
        "Reviewee": full_name(row.get("reviewee")),
        "Reviewee Email": _related(row, "reviewee", "email"),
        "Department": _related(row, "reviewee", "department"),
        "Reviewer": full_name(row.get("reviewer")),
        "Strengths": row.get("strengths") or "",
        "Areas for Improvement": row.get("areas_for_improvement") or "",
        "Goals for Next Period": row.get("goals_for_next_period") or "",
        "Created Date": format_date(row.get("created_at")),
        "Last Updated": format_date(row.get("updated_at")),
    }


def project_feedback(row: Dict[str, Any]) -> Dict[str, Any]:
    rating = row.get("rating")
    return {
        "Feedback ID": row.get("id"),
        "Type": row.get("feedback_type"),
        "Content": row.get("content") or "",
        "Rating": rating if rating is not None else NOT_RATED,
        "Giver": full_name(row.get("feedback_giver")),
        "Receiver": full_name(row.get("feedback_receiver")),
        "Receiver Department": _related(row, "feedback_receiver", "department"),
        "Created Date": format_date(row.get("created_at")),
    }


def metric(name: str, value: Any, category: str) -> Dict[str, Any]:
    """One analytics record."""
    return dict(zip(ANALYTICS_COLUMNS, (name, value, category)))
