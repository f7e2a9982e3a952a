"""Core functionality including models, registry, aggregation, criteria, and scoring."""

from airdrop_eligibility.core.aggregator import ActivityAggregator, aggregate_user_activity
from airdrop_eligibility.core.checker import (
    ChainDataSource,
    EligibilityChecker,
    ProjectCatalog,
    check_airdrop_eligibility,
)
from airdrop_eligibility.core.criteria import calculate_criteria_percentage, check_criterion, evaluate_all
from airdrop_eligibility.core.models import (
    AirdropCheckResult,
    CheckResult,
    Criterion,
    CriterionKind,
    CriterionResult,
    Project,
    ProjectStatus,
    TrendingProjectSummary,
    UserActivity,
)
from airdrop_eligibility.core.registry import ProtocolInfo, ProtocolRegistry
from airdrop_eligibility.core.scoring import calculate_overall_score, score_project
from airdrop_eligibility.core.trending import calculate_trending_projects
from airdrop_eligibility.core.weights import StatusWeights

__all__ = [
    "ActivityAggregator",
    "AirdropCheckResult",
    "ChainDataSource",
    "CheckResult",
    "Criterion",
    "CriterionKind",
    "CriterionResult",
    "EligibilityChecker",
    "Project",
    "ProjectCatalog",
    "ProjectStatus",
    "ProtocolInfo",
    "ProtocolRegistry",
    "StatusWeights",
    "TrendingProjectSummary",
    "UserActivity",
    "aggregate_user_activity",
    "calculate_criteria_percentage",
    "calculate_overall_score",
    "calculate_trending_projects",
    "check_airdrop_eligibility",
    "check_criterion",
    "evaluate_all",
    "score_project",
]
