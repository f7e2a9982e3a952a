"""Wallet-independent trending ranking of catalog projects."""

import math
import re
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from airdrop_eligibility.core.models import (
    Project,
    ProjectStatus,
    SignalType,
    TrendingProjectSummary,
    TrendingSignal,
    as_utc,
)

MAX_TRENDING_SCORE = 100
DEFAULT_TRENDING_LIMIT = 5

STATUS_POINTS: dict[ProjectStatus, int] = {
    ProjectStatus.CONFIRMED: 28,
    ProjectStatus.RUMORED: 18,
    ProjectStatus.SPECULATIVE: 10,
    ProjectStatus.EXPIRED: 2,
}

# (minimum USD value, points), checked in order
VALUE_TIERS: tuple[tuple[float, int], ...] = (
    (50_000_000, 18),
    (10_000_000, 12),
    (1_000_000, 8),
)
POSITIVE_VALUE_POINTS = 5

SNAPSHOT_IMMINENT_DAYS, SNAPSHOT_IMMINENT_POINTS = 3, 16
SNAPSHOT_UPCOMING_DAYS, SNAPSHOT_UPCOMING_POINTS = 14, 10
SNAPSHOT_RECENT_DAYS, SNAPSHOT_RECENT_POINTS = 7, 8

# (maximum hours since update, points), checked in order
RECENCY_TIERS: tuple[tuple[int, int], ...] = (
    (24, 12),
    (72, 8),
    (24 * 7, 4),
)

CLAIM_POINTS = 10
# Multi-chain projects only; a single chain earns nothing.
POINTS_PER_CHAIN = 2
MAX_CHAIN_POINTS = 8

_VALUE_PATTERN = re.compile(r"^\$?\s*([\d,]*\.?\d+)\s*([kmb])?")
_MULTIPLIERS = {"k": 1_000, "m": 1_000_000, "b": 1_000_000_000}


def parse_estimated_value(value: float | str | None) -> float | None:
    """
    Convert an estimated value to USD.

    Parameters
    ----------
    value : float | str | None
        Number, or display string such as ``"$20M"``, ``"$1.5B"``, ``"250K"``

    Returns
    -------
    float | None
        USD amount, None when missing or unparseable

    """
    if value is None:
        return None
    if isinstance(value, int | float):
        return float(value)

    match = _VALUE_PATTERN.match(value.strip().lower())
    if not match:
        return None
    amount = float(match.group(1).replace(",", ""))
    return amount * _MULTIPLIERS.get(match.group(2) or "", 1)


def format_usd(amount: float) -> str:
    """Compact USD label (``$20M``, ``$1.5B``, ``$250K``)."""
    for suffix, size in (("B", 1_000_000_000), ("M", 1_000_000), ("K", 1_000)):
        if amount >= size:
            return f"${round(amount / size, 1):g}{suffix}"
    return f"${amount:,.0f}"


def _status_signal(project: Project) -> TrendingSignal:
    points = STATUS_POINTS[project.status]
    return TrendingSignal(type=SignalType.STATUS, weight=points, label=f"{project.status.value.capitalize()} airdrop")


def _value_signal(project: Project) -> TrendingSignal | None:
    amount = parse_estimated_value(project.estimated_value)
    if amount is None or amount <= 0:
        return None

    points = next((p for minimum, p in VALUE_TIERS if amount >= minimum), POSITIVE_VALUE_POINTS)
    return TrendingSignal(type=SignalType.VALUE, weight=points, label=f"Est. value {format_usd(amount)}")


def _snapshot_signal(project: Project, now: datetime) -> TrendingSignal | None:
    if project.snapshot_date is None:
        return None

    days = (project.snapshot_date - now).total_seconds() / 86400
    if 0 <= days <= SNAPSHOT_IMMINENT_DAYS:
        points, label = SNAPSHOT_IMMINENT_POINTS, f"Snapshot in {math.ceil(days)}d"
    elif SNAPSHOT_IMMINENT_DAYS < days <= SNAPSHOT_UPCOMING_DAYS:
        points, label = SNAPSHOT_UPCOMING_POINTS, f"Snapshot in {math.ceil(days)}d"
    elif -SNAPSHOT_RECENT_DAYS <= days < 0:
        points, label = SNAPSHOT_RECENT_POINTS, f"Snapshot {math.ceil(-days)}d ago"
    else:
        return None
    return TrendingSignal(type=SignalType.SNAPSHOT, weight=points, label=label)


def _recency_signal(project: Project, now: datetime) -> TrendingSignal | None:
    if project.updated_at is None:
        return None

    hours = max((now - project.updated_at).total_seconds() / 3600, 0)
    for max_hours, points in RECENCY_TIERS:
        if hours <= max_hours:
            age = f"{math.floor(hours)}h" if hours < 24 else f"{math.floor(hours / 24)}d"
            return TrendingSignal(type=SignalType.RECENCY, weight=points, label=f"Updated {age} ago")
    return None


def _claim_signal(project: Project) -> TrendingSignal | None:
    if not project.claim_url:
        return None
    return TrendingSignal(type=SignalType.CLAIM, weight=CLAIM_POINTS, label="Claim live")


def _chain_signal(project: Project) -> TrendingSignal | None:
    chain_count = len(project.chains)
    if chain_count < 2:
        return None
    points = min(chain_count * POINTS_PER_CHAIN, MAX_CHAIN_POINTS)
    return TrendingSignal(type=SignalType.CHAINS, weight=points, label=f"{chain_count} chains")


def score_project_trending(project: Project, now: datetime) -> TrendingProjectSummary:
    """
    Score one project from its metadata.

    Parameters
    ----------
    project : Project
        Catalog entry
    now : datetime
        Reference time for snapshot and recency signals, naive values read as UTC

    Returns
    -------
    TrendingProjectSummary
        Clamped score with every contributing signal

    """
    now = as_utc(now)
    candidates = (
        _status_signal(project),
        _value_signal(project),
        _snapshot_signal(project, now),
        _recency_signal(project, now),
        _claim_signal(project),
        _chain_signal(project),
    )
    signals = [signal for signal in candidates if signal is not None]
    score = min(max(sum(signal.weight for signal in signals), 0), MAX_TRENDING_SCORE)

    return TrendingProjectSummary(
        project_id=project.id,
        name=project.name,
        status=project.status,
        trending_score=score,
        signals=signals,
        chains=project.chains,
        estimated_value=project.estimated_value,
        snapshot_date=project.snapshot_date,
        claim_url=project.claim_url,
        updated_at=project.updated_at,
    )


def filter_projects(
    projects: Iterable[Project],
    status: Iterable[ProjectStatus | str] | None = None,
    chain: str | None = None,
) -> list[Project]:
    """
    Keep projects matching a status set and a chain name.

    Parameters
    ----------
    projects : Iterable[Project]
        Catalog entries
    status : Iterable[ProjectStatus | str] | None
        Allowed statuses, any if None or empty
    chain : str | None
        Chain name matched case-insensitively, any if None

    Returns
    -------
    list[Project]
        Matching projects in input order

    """
    allowed = {ProjectStatus(s) for s in status} if status else None
    wanted_chain = chain.lower() if chain else None

    matched = []
    for project in projects:
        if allowed is not None and project.status not in allowed:
            continue
        if wanted_chain is not None and all(c.lower() != wanted_chain for c in project.chains):
            continue
        matched.append(project)
    return matched


def _ranking_key(summary: TrendingProjectSummary) -> tuple[int, float, str]:
    updated = summary.updated_at.timestamp() if summary.updated_at else float("-inf")
    return (-summary.trending_score, -updated, summary.project_id)


def calculate_trending_projects(
    projects: Sequence[Project],
    limit: int = DEFAULT_TRENDING_LIMIT,
    status: Iterable[ProjectStatus | str] | None = None,
    chain: str | None = None,
    now: datetime | None = None,
) -> list[TrendingProjectSummary]:
    """
    Rank projects by trending score.

    Projects are filtered, all of them scored and sorted, and only then
    truncated to ``limit``.

    Parameters
    ----------
    projects : Sequence[Project]
        Catalog snapshot
    limit : int
        Maximum number of entries returned
    status : Iterable[ProjectStatus | str] | None
        Allowed statuses, any if None
    chain : str | None
        Chain name filter, any if None
    now : datetime | None
        Reference time, naive values read as UTC. Uses the current UTC time if None.

    Returns
    -------
    list[TrendingProjectSummary]
        Sorted by score desc, then ``updated_at`` desc, then project id

    """
    now = as_utc(now) or datetime.now(UTC)
    summaries = [score_project_trending(project, now) for project in filter_projects(projects, status, chain)]
    summaries.sort(key=_ranking_key)
    return summaries[: max(limit, 0)]
