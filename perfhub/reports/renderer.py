"""
HTML rendering for reports.

Templates live in ``perfhub/reports/templates`` and are rendered with
autoescaping on, so record values (department names, titles, free text)
can never inject markup into the document. Section fragments produced here
are the only strings the document shell embeds unescaped.
"""

from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional

from jinja2 import Environment, PackageLoader, StrictUndefined

from perfhub.core.rounding import format_one_decimal
from perfhub.reports.sections import (
    summarize_departments,
    summarize_feedback,
    summarize_goals,
    summarize_overview,
    summarize_reviews,
    summarize_users,
)


def _pct(value: float) -> str:
    return f"{format_one_decimal(value)}%"


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    """Shared Jinja2 environment (templates are read-only, so one is enough)."""
    env = Environment(
        loader=PackageLoader("perfhub.reports", "templates"),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=False,
        undefined=StrictUndefined,
    )
    env.filters["pct"] = _pct
    env.filters["one_decimal"] = format_one_decimal
    return env


def _render(template_name: str, **context: Any) -> str:
    return get_environment().get_template(template_name).render(**context)


def render_overview_section(data: Dict[str, Any]) -> str:
    summary = summarize_overview(data.get("analytics"))
    if summary is None:
        return ""
    return _render("sections/overview.html.jinja2", summary=summary)


def render_users_section(data: Dict[str, Any]) -> str:
    summary = summarize_users(data.get("users"))
    if summary is None:
        return ""
    return _render("sections/users.html.jinja2", summary=summary)


def render_goals_section(data: Dict[str, Any]) -> str:
    summary = summarize_goals(data.get("goals"))
    if summary is None:
        return ""
    return _render("sections/goals.html.jinja2", summary=summary)


def render_reviews_section(data: Dict[str, Any]) -> str:
    summary = summarize_reviews(data.get("reviews"))
    if summary is None:
        return ""
    return _render("sections/reviews.html.jinja2", summary=summary)


def render_feedback_section(data: Dict[str, Any]) -> str:
    summary = summarize_feedback(data.get("feedback"))
    if summary is None:
        return ""
    return _render("sections/feedback.html.jinja2", summary=summary)


def render_analytics_section(data: Dict[str, Any]) -> str:
    metrics = data.get("analytics")
    if not metrics:
        return ""
    return _render("sections/analytics.html.jinja2", metrics=metrics)


def render_departments_section(data: Dict[str, Any]) -> str:
    rows = summarize_departments(data.get("users"))
    if rows is None:
        return ""
    return _render("sections/departments.html.jinja2", rows=rows)


SECTION_RENDERERS = {
    "overview": render_overview_section,
    "users": render_users_section,
    "goals": render_goals_section,
    "reviews": render_reviews_section,
    "feedback": render_feedback_section,
    "analytics": render_analytics_section,
    "departments": render_departments_section,
}


def render_sections(section_names: Iterable[str], data: Dict[str, Any]) -> List[str]:
    """Render each section in order; sections without data (or without a renderer) are skipped."""
    fragments = []
    for name in section_names:
        renderer = SECTION_RENDERERS.get(name)
        html = renderer(data) if renderer else ""
        if html:
            fragments.append(html)
    return fragments


def render_document(
    title: str,
    overview: Dict[str, Any],
    sections: List[str],
    brand: str,
    year: int,
    department_filter: Optional[str] = None,
) -> str:
    """Wrap rendered section fragments in the standalone document shell."""
    return _render(
        "report.html.jinja2",
        title=title,
        overview=overview,
        sections=sections,
        brand=brand,
        year=year,
        department_filter=department_filter,
    )
