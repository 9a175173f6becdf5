"""
Tests for report section aggregates.
"""

import pytest

from perfhub.reports.sections import (
    TOP_DEPARTMENT_LIMIT,
    CountShare,
    summarize_departments,
    summarize_feedback,
    summarize_goals,
    summarize_overview,
    summarize_reviews,
    summarize_users,
)


def _user(department, status="Active", role="employee"):
    return {"Department": department, "Status": status, "Role": role}


class TestGoalsSummary:
    """Test the goals section aggregate."""

    def test_average_progress_and_status_share(self):
        progress = [100, 100, 50, 80, 0, 0, 0, 0, 0, 0]
        statuses = ["completed"] * 4 + ["in_progress"] * 6
        goals = [
            {"Status": status, "Progress (%)": value}
            for status, value in zip(statuses, progress)
        ]

        summary = summarize_goals(goals)

        assert summary.total == 10
        assert summary.completed == 4
        assert summary.average_progress == pytest.approx(33.0)
        assert summary.by_status[0] == CountShare(label="completed", count=4, percentage=40.0)
        assert summary.by_status[1].label == "in_progress"

    def test_missing_progress_counts_as_zero(self):
        summary = summarize_goals([{"Status": "draft", "Progress (%)": None}, {"Status": "draft", "Progress (%)": 50}])

        assert summary.average_progress == pytest.approx(25.0)

    def test_empty_goals_omit_section(self):
        assert summarize_goals([]) is None
        assert summarize_goals(None) is None


class TestReviewsSummary:
    def test_average_over_rated_only(self):
        reviews = [
            {"Status": "completed", "Overall Rating": 4},
            {"Status": "completed", "Overall Rating": "Not rated"},
            {"Status": "draft", "Overall Rating": 3},
        ]

        summary = summarize_reviews(reviews)

        assert summary.total == 3
        assert summary.rated == 2
        assert summary.completed == 2
        assert summary.average_rating == pytest.approx(3.5)

    def test_all_unrated_yields_zero(self):
        summary = summarize_reviews([{"Status": "draft", "Overall Rating": "Not rated"}])

        assert summary.average_rating == 0.0


class TestUsersSummary:
    """Test the users section aggregate."""

    def test_top_departments_sorted_and_capped(self):
        users = (
            [_user("Sales")] * 2
            + [_user("Engineering")] * 4
            + [_user("Support")] * 2
            + [_user("Research")]
            + [_user("Legal")]
            + [_user("Finance")]
            + [_user("Not assigned", status="Inactive")]
        )

        summary = summarize_users(users)
        top = summary.top_departments

        assert len(top) == TOP_DEPARTMENT_LIMIT
        assert [row.label for row in top[:3]] == ["Engineering", "Sales", "Support"]
        assert [row.count for row in top] == sorted([row.count for row in top], reverse=True)
        assert sum(row.percentage for row in top) <= 100

    def test_ties_keep_first_seen_order(self):
        users = [_user("B"), _user("A"), _user("C"), _user("A"), _user("B")]

        labels = [row.label for row in summarize_users(users).top_departments]

        assert labels == ["B", "A", "C"]

    def test_totals_and_unassigned_group(self):
        users = [_user("Engineering"), _user("Not assigned", status="Inactive")]

        summary = summarize_users(users)

        assert summary.total == 2
        assert summary.active == 1
        assert summary.department_count == 2
        assert "Not assigned" in [row.label for row in summary.top_departments]


class TestFeedbackSummary:
    def test_type_histogram_and_average(self):
        feedback = [
            {"Type": "peer", "Rating": 5},
            {"Type": "manager", "Rating": "Not rated"},
            {"Type": "peer", "Rating": 3},
        ]

        summary = summarize_feedback(feedback)

        assert summary.total == 3
        assert summary.rated == 2
        assert summary.average_rating == pytest.approx(4.0)
        assert [(row.label, row.count) for row in summary.by_type] == [("peer", 2), ("manager", 1)]


class TestDepartmentsSummary:
    def test_activity_rate_and_top_role(self):
        users = [
            _user("Engineering", role="employee"),
            _user("Engineering", role="manager", status="Inactive"),
            _user("Engineering", role="employee"),
            _user("Research", role="admin"),
        ]

        rows = summarize_departments(users)

        assert [row.department for row in rows] == ["Engineering", "Research"]
        engineering = rows[0]
        assert engineering.total == 3
        assert engineering.active == 2
        assert engineering.activity_rate == pytest.approx(200 / 3)
        assert engineering.top_role == "employee"

    def test_role_ties_go_to_first_seen(self):
        rows = summarize_departments([_user("Ops", role="manager"), _user("Ops", role="employee")])

        assert rows[0].top_role == "manager"

    def test_missing_role_reports_na(self):
        rows = summarize_departments([_user("Ops", role=None)])

        assert rows[0].top_role == "N/A"


class TestOverviewSummary:
    def test_reads_headline_metrics(self):
        analytics = [
            {"Metric": "Total Active Users", "Value": 12, "Category": "Users"},
            {"Metric": "Goals Completion Rate (%)", "Value": 40, "Category": "Goals"},
            {"Metric": "Total Reviews", "Value": 3, "Category": "Reviews"},
            {"Metric": "Average Review Rating", "Value": 3.5, "Category": "Reviews"},
        ]

        summary = summarize_overview(analytics)

        assert summary.active_users == 12
        assert summary.completion_rate == 40
        assert summary.total_reviews == 3
        assert summary.average_rating == 3.5

    def test_absent_analytics_omit_section(self):
        assert summarize_overview(None) is None
