"""
Export filters shared by the repository, the export collector and the API.

Every string filter defaults to ``"all"``; ``"all"``, an empty string or
``None`` impose no constraint.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

ALL = "all"


class DateRange(BaseModel):
    """Inclusive created-at window."""
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class ExportFilters(BaseModel):
    """
    Caller-supplied constraints narrowing which records an export includes.

    Accepts both snake_case and the camelCase keys the web client sends
    (``dateRange``, ``reviewType``, ``feedbackType``).
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    department: Optional[str] = ALL
    role: Optional[str] = ALL
    # users: "active" / "inactive"; goals and reviews: workflow status
    status: Optional[str] = ALL
    priority: Optional[str] = ALL
    review_type: Optional[str] = Field(default=ALL, alias="reviewType")
    feedback_type: Optional[str] = Field(default=ALL, alias="feedbackType")
    date_range: Optional[DateRange] = Field(default=None, alias="dateRange")

    def constraint(self, name: str) -> Optional[str]:
        """Return the filter value for ``name`` or None when unconstrained."""
        value = getattr(self, name)
        if value is None or value == "" or value == ALL:
            return None
        return value


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to naive UTC for comparison with stored timestamps."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
