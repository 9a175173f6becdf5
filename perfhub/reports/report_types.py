"""
Report registry — the fixed set of report types and the domains each needs.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from perfhub.core.errors import InvalidReportTypeError
from perfhub.export.export_schema import ExportDomain


@dataclass(frozen=True)
class ReportDefinition:
    """Static definition of one report type."""
    report_id: str
    title: str
    description: str
    sections: Tuple[str, ...]


REPORT_TYPES: Dict[str, ReportDefinition] = {
    definition.report_id: definition
    for definition in (
        ReportDefinition(
            report_id="user-summary",
            title="User Summary Report",
            description="Overview of all users, departments, and roles",
            sections=("overview", "users", "departments"),
        ),
        ReportDefinition(
            report_id="performance-overview",
            title="Performance Overview Report",
            description="Goals and reviews performance analysis",
            sections=("goals", "reviews", "analytics"),
        ),
        ReportDefinition(
            report_id="quarterly-review",
            title="Quarterly Performance Review",
            description="Comprehensive quarterly performance report",
            sections=("overview", "goals", "reviews", "feedback", "analytics"),
        ),
        ReportDefinition(
            report_id="department-report",
            title="Department Performance Report",
            description="Department-specific performance analysis",
            sections=("departments", "goals", "reviews"),
        ),
    )
}

# Domain export backing each section; overview cards read the analytics metrics
SECTION_DOMAINS: Dict[str, ExportDomain] = {
    "overview": ExportDomain.ANALYTICS,
    "users": ExportDomain.USERS,
    "departments": ExportDomain.USERS,
    "goals": ExportDomain.GOALS,
    "reviews": ExportDomain.REVIEWS,
    "feedback": ExportDomain.FEEDBACK,
    "analytics": ExportDomain.ANALYTICS,
}


def get_report_definition(report_type: str) -> ReportDefinition:
    """Look up a report type or raise InvalidReportTypeError."""
    definition = REPORT_TYPES.get(report_type)
    if definition is None:
        raise InvalidReportTypeError(report_type, REPORT_TYPES.keys())
    return definition


def required_domains(definition: ReportDefinition) -> List[ExportDomain]:
    """Domains to fetch for a report, once each, in section declaration order."""
    domains: List[ExportDomain] = []
    for section in definition.sections:
        domain = SECTION_DOMAINS.get(section)
        if domain is not None and domain not in domains:
            domains.append(domain)
    return domains


def available_report_types() -> List[Dict[str, str]]:
    """Report types for pickers: id, title and description."""
    return [
        {"id": definition.report_id, "title": definition.title, "description": definition.description}
        for definition in REPORT_TYPES.values()
    ]
