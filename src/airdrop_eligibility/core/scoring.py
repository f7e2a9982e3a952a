"""Per-project and overall eligibility scoring."""

import logging
from collections.abc import Sequence
from datetime import datetime

from airdrop_eligibility.core.criteria import calculate_criteria_percentage, evaluate_all
from airdrop_eligibility.core.models import AirdropCheckResult, CheckResult, Project, UserActivity
from airdrop_eligibility.core.weights import StatusWeights

logger = logging.getLogger(__name__)


def score_project(project: Project, activity: UserActivity) -> AirdropCheckResult:
    """
    Evaluate one project's criteria against a wallet profile.

    Parameters
    ----------
    project : Project
        Catalog entry
    activity : UserActivity
        Wallet profile

    Returns
    -------
    AirdropCheckResult
        Per-criterion results and the rounded percentage score

    """
    results = evaluate_all(project.criteria, activity)
    return AirdropCheckResult(
        project_id=project.id,
        project_name=project.name,
        status=project.status,
        score=calculate_criteria_percentage(results),
        criteria=results,
        estimated_value=project.estimated_value,
        snapshot_date=project.snapshot_date,
        claim_url=project.claim_url,
    )


def score_projects(projects: Sequence[Project], activity: UserActivity) -> list[AirdropCheckResult]:
    """Score every project against the same profile, preserving catalog order."""
    return [score_project(project, activity) for project in projects]


def calculate_overall_score(
    results: Sequence[AirdropCheckResult],
    weights: StatusWeights | None = None,
) -> int:
    """
    Status-weighted mean of per-project scores.

    Parameters
    ----------
    results : Sequence[AirdropCheckResult]
        Per-project results
    weights : StatusWeights | None
        Status weight table. Uses the configured weights if None.

    Returns
    -------
    int
        Overall score in 0..100

    """
    weights = weights or StatusWeights.from_config()
    return weights.weighted_mean((result.status, result.score) for result in results)


def build_check_result(
    address: str,
    projects: Sequence[Project],
    activity: UserActivity,
    timestamp: datetime,
    weights: StatusWeights | None = None,
) -> CheckResult:
    """
    Score a wallet across a catalog snapshot.

    Parameters
    ----------
    address : str
        Wallet address
    projects : Sequence[Project]
        Catalog snapshot
    activity : UserActivity
        Wallet profile
    timestamp : datetime
        Evaluation time recorded on the result
    weights : StatusWeights | None
        Status weight table. Uses the configured weights if None.

    Returns
    -------
    CheckResult
        Wallet result whose overall score derives from its per-project results

    """
    airdrops = score_projects(projects, activity)
    result = CheckResult(
        address=address,
        airdrops=airdrops,
        timestamp=timestamp,
        status_weights=weights or StatusWeights.from_config(),
    )
    logger.debug("Scored %s against %d projects: overall %d", address, len(airdrops), result.overall_score)
    return result
