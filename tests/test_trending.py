"""Tests for trending project ranking."""

from datetime import UTC, datetime, timedelta

import pytest

from airdrop_eligibility.core.models import Project, ProjectStatus, SignalType
from airdrop_eligibility.core.trending import (
    calculate_trending_projects,
    filter_projects,
    format_usd,
    parse_estimated_value,
    score_project_trending,
)

NOW = datetime(2024, 6, 1, 12, tzinfo=UTC)


def _project(project_id: str, status: str = "rumored", **fields) -> Project:
    return Project(id=project_id, name=project_id.title(), status=status, **fields)


def test_fully_signalled_project():
    """Status, value, snapshot, recency, claim, and chains add up to 84."""
    project = _project(
        "scroll",
        status="confirmed",
        estimated_value="$20M",
        snapshot_date=NOW + timedelta(days=2),
        updated_at=NOW - timedelta(hours=1),
        claim_url="https://example.org/claim",
        chains=["Ethereum", "Scroll", "Base"],
    )

    summary = score_project_trending(project, NOW)

    assert summary.trending_score == 84
    assert [(s.type, s.weight) for s in summary.signals] == [
        (SignalType.STATUS, 28),
        (SignalType.VALUE, 12),
        (SignalType.SNAPSHOT, 16),
        (SignalType.RECENCY, 12),
        (SignalType.CLAIM, 10),
        (SignalType.CHAINS, 6),
    ]
    assert [s.label for s in summary.signals] == [
        "Confirmed airdrop",
        "Est. value $20M",
        "Snapshot in 2d",
        "Updated 1h ago",
        "Claim live",
        "3 chains",
    ]


@pytest.mark.parametrize(
    ("status", "points"),
    [("confirmed", 28), ("rumored", 18), ("speculative", 10), ("expired", 2)],
)
def test_status_points(status, points):
    """A bare project scores only its status."""
    summary = score_project_trending(_project("p", status=status), NOW)

    assert summary.trending_score == points
    assert len(summary.signals) == 1


@pytest.mark.parametrize(
    ("value", "points"),
    [
        (75_000_000, 18),
        ("$50M", 18),
        ("$12.5M", 12),
        (1_000_000, 8),
        ("250K", 5),
        (1, 5),
        (0, 0),
        ("TBD", 0),
        (None, 0),
    ],
)
def test_value_points(value, points):
    """Estimated value tiers."""
    summary = score_project_trending(_project("p", estimated_value=value), NOW)

    assert summary.trending_score - 18 == points


@pytest.mark.parametrize(
    ("offset", "points"),
    [
        (timedelta(hours=6), 16),
        (timedelta(days=3), 16),
        (timedelta(days=4), 10),
        (timedelta(days=14), 10),
        (timedelta(days=15), 0),
        (timedelta(days=-1), 8),
        (timedelta(days=-7), 8),
        (timedelta(days=-8), 0),
    ],
)
def test_snapshot_points(offset, points):
    """Snapshot proximity tiers."""
    summary = score_project_trending(_project("p", snapshot_date=NOW + offset), NOW)

    assert summary.trending_score - 18 == points


@pytest.mark.parametrize(
    ("age", "points"),
    [
        (timedelta(minutes=5), 12),
        (timedelta(hours=24), 12),
        (timedelta(hours=48), 8),
        (timedelta(hours=72), 8),
        (timedelta(days=5), 4),
        (timedelta(days=7), 4),
        (timedelta(days=8), 0),
    ],
)
def test_recency_points(age, points):
    """Recency tiers."""
    summary = score_project_trending(_project("p", updated_at=NOW - age), NOW)

    assert summary.trending_score - 18 == points


@pytest.mark.parametrize(("chain_count", "points"), [(0, 0), (1, 0), (2, 4), (3, 6), (4, 8), (7, 8)])
def test_chain_points(chain_count, points):
    """Multi-chain projects earn 2 per chain, capped at 8."""
    chains = [f"Chain{i}" for i in range(chain_count)]
    summary = score_project_trending(_project("p", chains=chains), NOW)

    assert summary.trending_score - 18 == points


def test_scores_stay_within_bounds():
    """The maximal project stays within 0..100."""
    project = _project(
        "max",
        status="confirmed",
        estimated_value=10**12,
        snapshot_date=NOW,
        updated_at=NOW,
        claim_url="https://example.org",
        chains=["a", "b", "c", "d", "e", "f"],
    )

    assert 0 <= score_project_trending(project, NOW).trending_score <= 100


@pytest.fixture
def catalog() -> list[Project]:
    """Projects with distinct scores and some ties."""
    return [
        _project("low", status="expired", chains=["Ethereum"]),
        _project("mid", status="rumored", chains=["Base"], updated_at=NOW - timedelta(hours=5)),
        _project("mid_newer", status="rumored", chains=["base"], updated_at=NOW - timedelta(hours=2)),
        _project("top", status="confirmed", estimated_value="$60M", chains=["Arbitrum", "Ethereum"]),
        _project("hopeful", status="speculative", chains=["Zora"]),
        _project("mid_undated", status="rumored", estimated_value=100, chains=["Base"]),
    ]


def test_ranking_order(catalog):
    """Higher scores first; equal scores order by most recent update."""
    ranked = calculate_trending_projects(catalog, limit=10, now=NOW)

    assert [s.project_id for s in ranked] == ["top", "mid_newer", "mid", "mid_undated", "hopeful", "low"]
    scores = [s.trending_score for s in ranked]
    assert scores == sorted(scores, reverse=True)


def test_ranking_is_stable_under_reordering(catalog):
    """Input order does not affect the ranking."""
    forward = calculate_trending_projects(catalog, limit=10, now=NOW)
    backward = calculate_trending_projects(list(reversed(catalog)), limit=10, now=NOW)

    assert [s.project_id for s in forward] == [s.project_id for s in backward]


def test_limit_applies_after_sorting(catalog):
    """The best projects are kept even when they come last in the input."""
    ranked = calculate_trending_projects(list(reversed(catalog)), limit=2, now=NOW)

    assert [s.project_id for s in ranked] == ["top", "mid_newer"]


def test_default_limit():
    """Five projects are returned by default."""
    projects = [_project(f"p{i}") for i in range(8)]

    assert len(calculate_trending_projects(projects, now=NOW)) == 5


def test_filter_by_status(catalog):
    """Only projects in the status set are scored."""
    ranked = calculate_trending_projects(catalog, status=["speculative", ProjectStatus.EXPIRED], now=NOW)

    assert {s.project_id for s in ranked} == {"hopeful", "low"}


def test_filter_by_chain_is_case_insensitive(catalog):
    """Chain names match regardless of case."""
    ranked = calculate_trending_projects(catalog, chain="BASE", limit=10, now=NOW)

    assert {s.project_id for s in ranked} == {"mid", "mid_newer", "mid_undated"}


def test_filter_projects_without_filters(catalog):
    """No filters keeps everything in order."""
    assert filter_projects(catalog) == catalog


def test_empty_catalog():
    """No projects, no ranking."""
    assert calculate_trending_projects([], now=NOW) == []


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("$20M", 20_000_000),
        ("$1.5B", 1_500_000_000),
        ("250k", 250_000),
        ("$3,500,000", 3_500_000),
        (42, 42.0),
        ("unknown", None),
        (None, None),
    ],
)
def test_parse_estimated_value(value, expected):
    """Display strings and numbers convert to USD."""
    assert parse_estimated_value(value) == expected


@pytest.mark.parametrize(
    ("amount", "expected"),
    [(20_000_000, "$20M"), (1_500_000_000, "$1.5B"), (10_000_000, "$10M"), (250_000, "$250K"), (500, "$500")],
)
def test_format_usd(amount, expected):
    """USD labels are compact."""
    assert format_usd(amount) == expected


def test_naive_now_is_read_as_utc():
    """A naive reference time scores the same as its UTC equivalent."""
    project = _project(
        "fresh",
        status="confirmed",
        snapshot_date=NOW + timedelta(days=2),
        updated_at=NOW - timedelta(hours=1),
    )

    naive = calculate_trending_projects([project], now=NOW.replace(tzinfo=None))
    aware = calculate_trending_projects([project], now=NOW)

    assert naive == aware
    assert naive[0].trending_score == 28 + 16 + 12
