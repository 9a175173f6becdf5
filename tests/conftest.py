"""
Shared fixtures.
"""

import pytest

from perfhub.export.service import ExportCollector
from perfhub.reports.generator import ReportAssembler
from tests.factories import (
    FakeRepository,
    make_feedback,
    make_goal,
    make_review,
    make_user,
)


@pytest.fixture
def sample_repository():
    """Small, realistic data set covering every domain."""
    manager = {"first_name": "Grace", "last_name": "Hopper"}
    users = [
        make_user("u1", "Ada", "Lovelace", "Engineering", role="employee", manager=manager),
        make_user("u2", "Grace", "Hopper", "Engineering", role="manager"),
        make_user("u3", "Alan", "Turing", "Research", role="employee", is_active=False),
        make_user("u4", "Edsger", "Dijkstra", None, role="employee"),
    ]
    goals = [
        make_goal("g1", status="completed", progress=100),
        make_goal("g2", status="in_progress", progress=40),
        make_goal("g3", status="not_started", progress=None),
    ]
    reviews = [
        make_review("r1", status="completed", rating=4.0),
        make_review("r2", status="in_progress", rating=None),
    ]
    feedback = [
        make_feedback("f1", "peer", rating=5),
        make_feedback("f2", "manager", rating=None),
    ]
    return FakeRepository(users=users, goals=goals, reviews=reviews, feedback=feedback)


@pytest.fixture
def collector(sample_repository):
    return ExportCollector(sample_repository)


@pytest.fixture
def assembler(collector):
    return ReportAssembler(collector, brand="PerformanceHub")
