"""
Tests for analytics KPI computation and the default reporting window.
"""

from datetime import datetime, timedelta, timezone

from perfhub.core.filters import DateRange
from perfhub.export.service import compute_goal_metrics, compute_review_metrics, resolve_date_range


class TestGoalMetrics:
    """Test goal completion rate and average progress."""

    def test_no_goals_yields_zero_rates(self):
        metrics = compute_goal_metrics([], 0)

        assert metrics == {
            "totalGoals": 0,
            "completedGoals": 0,
            "completionRate": 0,
            "averageProgress": 0,
        }

    def test_rates_are_whole_percentages(self):
        progress = [100, 100, 50, 80, 0, 0, 0, 0, 0, 0]

        metrics = compute_goal_metrics(progress, completed_goals=4)

        assert metrics["totalGoals"] == 10
        assert metrics["completedGoals"] == 4
        assert metrics["completionRate"] == 40
        assert metrics["averageProgress"] == 33

    def test_missing_progress_counts_as_zero(self):
        metrics = compute_goal_metrics([None, 50], completed_goals=0)

        assert metrics["averageProgress"] == 25

    def test_halves_round_up(self):
        # 1 of 8 completed = 12.5%
        metrics = compute_goal_metrics([1, 2, 0, 0, 0, 0, 0, 0], completed_goals=1)

        assert metrics["completionRate"] == 13


class TestReviewMetrics:
    """Test the review rating average."""

    def test_average_over_rated_reviews_only(self):
        metrics = compute_review_metrics([4.0, None, 3.0], completed_reviews=2)

        assert metrics == {"totalReviews": 3, "completedReviews": 2, "averageRating": 3.5}

    def test_no_rated_reviews_yields_zero(self):
        assert compute_review_metrics([None, None], 0)["averageRating"] == 0

    def test_average_rounded_to_one_decimal(self):
        assert compute_review_metrics([4, 4, 5], 3)["averageRating"] == 4.3


class TestDateWindow:
    """Test the default analytics window."""

    def test_defaults_to_trailing_window(self):
        start, end = resolve_date_range(None, window_days=90)

        assert end - start == timedelta(days=90)
        assert abs(datetime.now(timezone.utc) - end) < timedelta(minutes=1)

    def test_explicit_bounds_win(self):
        requested = DateRange(
            start=datetime(2024, 1, 1, tzinfo=timezone.utc),
            end=datetime(2024, 3, 31, tzinfo=timezone.utc),
        )

        start, end = resolve_date_range(requested)

        assert start == requested.start
        assert end == requested.end

    def test_partial_range_fills_missing_start(self):
        end_only = DateRange(end=datetime(2024, 3, 31, tzinfo=timezone.utc))

        start, end = resolve_date_range(end_only, window_days=30)

        assert end == end_only.end
        assert start < datetime.now(timezone.utc)
