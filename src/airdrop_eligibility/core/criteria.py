"""Evaluation of declarative eligibility criteria against a UserActivity profile."""

import logging
from collections.abc import Callable, Sequence
from decimal import Decimal

from airdrop_eligibility.core.models import (
    ChainActivity,
    Criterion,
    CriterionKind,
    CriterionResult,
    UserActivity,
)
from airdrop_eligibility.core.weights import round_half_up

logger = logging.getLogger(__name__)


def _lower(value: str | None) -> str:
    return (value or "").lower()


def _find_chain(activity: UserActivity, chain: str | None) -> ChainActivity | None:
    """First chain whose name contains the requested name (case-insensitive)."""
    wanted = _lower(chain)
    if not wanted:
        return None
    return next((c for c in activity.chains if wanted in c.chain_name.lower()), None)


def _compare(criterion: Criterion, actual: int | None) -> bool:
    """Compare a metric with the criterion threshold; a missing metric never matches."""
    if actual is None:
        return False
    return criterion.comparison.compare(actual, criterion.value)


def _has_chain_activity(criterion: Criterion, activity: UserActivity) -> bool:
    wanted = _lower(criterion.chain)
    return any(chain.chain_name.lower() == wanted for chain in activity.chains)


def _min_chain_tx_count(criterion: Criterion, activity: UserActivity) -> bool:
    chain = _find_chain(activity, criterion.chain)
    return _compare(criterion, chain.transaction_count if chain else None)


def _has_chain_balance(criterion: Criterion, activity: UserActivity) -> bool:
    chain = _find_chain(activity, criterion.chain)
    return chain is not None and chain.transaction_count > 0


def _min_chain_protocols(criterion: Criterion, activity: UserActivity) -> bool:
    # Counts across every chain whose name contains the key ("Arbitrum One" and "Arbitrum Nova").
    wanted = _lower(criterion.chain)
    chain_ids = {c.chain_id for c in activity.chains if wanted and wanted in c.chain_name.lower()}
    if not chain_ids:
        return False
    count = sum(1 for p in activity.protocols if p.chain_id in chain_ids)
    return _compare(criterion, count)


def _protocol_interaction(criterion: Criterion, activity: UserActivity) -> bool:
    wanted = _lower(criterion.protocol)
    return any(p.protocol.lower() == wanted for p in activity.protocols)


def _min_protocol_interactions(criterion: Criterion, activity: UserActivity) -> bool:
    wanted = _lower(criterion.protocol)
    matched = [p.interaction_count for p in activity.protocols if p.protocol.lower() == wanted]
    return _compare(criterion, sum(matched) if matched else None)


def _protocol_name_contains(criterion: Criterion, activity: UserActivity) -> bool:
    wanted = _lower(criterion.protocol)
    return bool(wanted) and any(wanted in p.protocol.lower() for p in activity.protocols)


def _has_nft(criterion: Criterion, activity: UserActivity) -> bool:
    nfts = activity.nfts
    if criterion.chain:
        wanted = _lower(criterion.chain)
        nfts = [nft for nft in nfts if wanted in nft.chain_name.lower()]
    return _compare(criterion, len(nfts) if nfts else None)


def _has_bridge_activity(criterion: Criterion, activity: UserActivity) -> bool:
    return len(activity.bridges) > 0


def _bridge_to(criterion: Criterion, activity: UserActivity) -> bool:
    wanted = _lower(criterion.protocol)
    return bool(wanted) and any(wanted in b.bridge.lower() for b in activity.bridges)


def _min_bridge_count(criterion: Criterion, activity: UserActivity) -> bool:
    if not activity.bridges:
        return False
    return _compare(criterion, sum(b.count for b in activity.bridges))


def _cross_chain(criterion: Criterion, activity: UserActivity) -> bool:
    # Bridge destinations are unknown, so any bridge use counts as one cross-chain hop.
    if not activity.bridges:
        return False
    return _compare(criterion, 1)


def _has_dex_swap(criterion: Criterion, activity: UserActivity) -> bool:
    swaps = activity.dex_swaps
    if criterion.protocol:
        wanted = _lower(criterion.protocol)
        swaps = [swap for swap in swaps if swap.dex.lower() == wanted]
    return _compare(criterion, sum(swap.count for swap in swaps) if swaps else None)


def _unrecognized(criterion: Criterion, activity: UserActivity) -> bool:
    logger.warning("Unrecognized criterion %r (check=%r); treating as not met", criterion.description, criterion.check)
    return False


CRITERION_CHECKS: dict[CriterionKind, Callable[[Criterion, UserActivity], bool]] = {
    CriterionKind.HAS_CHAIN_ACTIVITY: _has_chain_activity,
    CriterionKind.MIN_CHAIN_TX_COUNT: _min_chain_tx_count,
    CriterionKind.HAS_CHAIN_BALANCE: _has_chain_balance,
    CriterionKind.MIN_CHAIN_PROTOCOLS: _min_chain_protocols,
    CriterionKind.PROTOCOL_INTERACTION: _protocol_interaction,
    CriterionKind.MIN_PROTOCOL_INTERACTIONS: _min_protocol_interactions,
    CriterionKind.PROTOCOL_NAME_CONTAINS: _protocol_name_contains,
    # Platform usage is only visible through protocol interactions.
    CriterionKind.NFT_PLATFORM: _protocol_interaction,
    CriterionKind.HAS_NFT: _has_nft,
    CriterionKind.HAS_BRIDGE_ACTIVITY: _has_bridge_activity,
    CriterionKind.BRIDGE_TO: _bridge_to,
    CriterionKind.MIN_BRIDGE_COUNT: _min_bridge_count,
    CriterionKind.CROSS_CHAIN: _cross_chain,
    CriterionKind.HAS_DEX_SWAP: _has_dex_swap,
    CriterionKind.UNRECOGNIZED: _unrecognized,
}


def check_criterion(criterion: Criterion, activity: UserActivity) -> bool:
    """
    Check whether one criterion is met.

    Parameters
    ----------
    criterion : Criterion
        Rule to evaluate
    activity : UserActivity
        Wallet profile

    Returns
    -------
    bool
        True if met. Unrecognized criteria and metrics over absent data
        are never met.

    """
    check = CRITERION_CHECKS.get(criterion.kind, _unrecognized)
    return check(criterion, activity)


def evaluate_all(criteria: Sequence[Criterion], activity: UserActivity) -> list[CriterionResult]:
    """
    Evaluate criteria in order.

    Parameters
    ----------
    criteria : Sequence[Criterion]
        Rules of one project
    activity : UserActivity
        Wallet profile

    Returns
    -------
    list[CriterionResult]
        One result per criterion, same order as the input

    """
    return [CriterionResult(description=c.description, met=check_criterion(c, activity)) for c in criteria]


def calculate_criteria_percentage(results: Sequence[CriterionResult]) -> int:
    """
    Percentage of criteria met, rounded half-up.

    Parameters
    ----------
    results : Sequence[CriterionResult]
        Evaluation results

    Returns
    -------
    int
        0..100; exactly 0 for an empty list

    """
    if not results:
        return 0
    met = sum(1 for result in results if result.met)
    return round_half_up(Decimal(100 * met) / len(results))
