"""Tests for per-project and overall scoring."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from conftest import WALLET

from airdrop_eligibility.core.models import AirdropCheckResult, Criterion, Project, ProjectStatus, UserActivity
from airdrop_eligibility.core.scoring import (
    build_check_result,
    calculate_overall_score,
    score_project,
    score_projects,
)
from airdrop_eligibility.core.weights import StatusWeights, round_half_up


def _result(project_id: str, status: str, score: int) -> AirdropCheckResult:
    return AirdropCheckResult(project_id=project_id, project_name=project_id, status=status, score=score)


@pytest.fixture
def confirmed_and_speculative() -> list[AirdropCheckResult]:
    """One confirmed project at 80 and one speculative at 40."""
    return [_result("a", "confirmed", 80), _result("b", "speculative", 40)]


def test_overall_equal_weights(confirmed_and_speculative):
    """Equal weights give the plain mean."""
    assert calculate_overall_score(confirmed_and_speculative, StatusWeights.equal()) == 60


def test_overall_confirmed_weighted_double(confirmed_and_speculative):
    """Doubling the confirmed weight pulls the score up: round(200 / 3) == 67."""
    weights = StatusWeights(confirmed=2.0, speculative=1.0)

    assert calculate_overall_score(confirmed_and_speculative, weights) == 67


def test_overall_default_weights(confirmed_and_speculative):
    """Configured weights (1.5 / 0.5) give (120 + 20) / 2."""
    assert calculate_overall_score(confirmed_and_speculative) == 70


def test_overall_empty_and_zero_weight():
    """No results, or only zero-weight results, score 0."""
    assert calculate_overall_score([], StatusWeights()) == 0
    assert calculate_overall_score([_result("old", "expired", 100)], StatusWeights()) == 0


def test_expired_projects_do_not_move_default_score():
    """Expired projects carry no weight by default."""
    results = [_result("a", "rumored", 50), _result("old", "expired", 100)]

    assert calculate_overall_score(results, StatusWeights()) == 50


@pytest.mark.parametrize(
    ("value", "expected"),
    [(Decimal("12.5"), 13), (Decimal("12.49"), 12), (Decimal("66.6667"), 67), (Decimal("0"), 0)],
)
def test_round_half_up(value, expected):
    """Halves round up, unlike the built-in round."""
    assert round_half_up(value) == expected


def test_score_project(activity):
    """A project score is the rounded share of met criteria."""
    project = Project(
        id="layerzero",
        name="LayerZero",
        status=ProjectStatus.CONFIRMED,
        criteria=[
            Criterion(description="Bridged", check="bridge_count>=1"),
            Criterion(description="Active on Base", check="chain=base"),
            Criterion(description="Scroll user", check="chain=scroll"),
        ],
        claim_url="https://example.org/claim",
    )

    result = score_project(project, activity)

    assert result.project_id == "layerzero"
    assert result.status == ProjectStatus.CONFIRMED
    assert result.score == 67
    assert [c.met for c in result.criteria] == [True, True, False]
    assert result.claim_url == "https://example.org/claim"


def test_project_without_criteria_scores_zero(activity):
    """A project with no criteria scores 0."""
    project = Project(id="empty", name="Empty", status="rumored")

    assert score_project(project, activity).score == 0


def test_score_projects_preserves_order(activity):
    """Results follow catalog order."""
    projects = [Project(id=str(i), name=str(i), status="rumored") for i in range(4)]

    assert [r.project_id for r in score_projects(projects, activity)] == ["0", "1", "2", "3"]


def test_build_check_result_for_inactive_wallet():
    """A wallet with no activity gets a fully formed zero result."""
    projects = [
        Project(id="a", name="A", status="confirmed", criteria=[Criterion(description="x", check="chain=base")]),
        Project(id="b", name="B", status="rumored", criteria=[Criterion(description="y", kind="has_bridge_activity")]),
    ]
    timestamp = datetime(2024, 5, 1, tzinfo=UTC)

    result = build_check_result(WALLET, projects, UserActivity(address=WALLET), timestamp)

    assert result.address == WALLET
    assert result.timestamp == timestamp
    assert [a.score for a in result.airdrops] == [0, 0]
    assert result.overall_score == 0


def test_build_check_result_uses_weights(activity):
    """The weights passed in drive the overall score."""
    projects = [
        Project(id="a", name="A", status="confirmed", criteria=[Criterion(description="x", check="chain=base")]),
        Project(id="b", name="B", status="speculative", criteria=[Criterion(description="y", check="chain=scroll")]),
    ]
    timestamp = datetime(2024, 5, 1, tzinfo=UTC)

    equal = build_check_result(WALLET, projects, activity, timestamp, StatusWeights.equal())
    confirmed_only = build_check_result(WALLET, projects, activity, timestamp, StatusWeights(speculative=0))

    assert equal.overall_score == 50
    assert confirmed_only.overall_score == 100
