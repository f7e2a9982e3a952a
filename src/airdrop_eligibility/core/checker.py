"""Eligibility checker wiring data sources, the catalog, scoring, and caching."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, Protocol

from airdrop_eligibility.cache import ResultCache
from airdrop_eligibility.core.aggregator import ActivityAggregator
from airdrop_eligibility.core.models import CheckResult, Project, ProjectStatus, TrendingProjectSummary, UserActivity
from airdrop_eligibility.core.registry import ProtocolRegistry
from airdrop_eligibility.core.scoring import build_check_result
from airdrop_eligibility.core.trending import DEFAULT_TRENDING_LIMIT, calculate_trending_projects
from airdrop_eligibility.core.weights import StatusWeights
from airdrop_eligibility.errors import ConfigurationError

logger = logging.getLogger(__name__)


class ChainDataSource(Protocol):
    """
    Interface of the multi-chain fetch layer.

    Both methods are best-effort per chain: a chain whose fetch failed is
    absent from the returned mapping rather than raised.

    """

    def fetch_all_chain_transactions(self, address: str) -> Mapping[int, Sequence[Any]]:
        """Fetch transactions keyed by chain id."""
        ...

    def fetch_all_chain_nfts(self, address: str) -> Mapping[int, Sequence[Any]]:
        """Fetch NFT records keyed by chain id."""
        ...


class ProjectCatalog(Protocol):
    """Interface of the project catalog store."""

    def find_all_projects(self) -> list[Project]:
        """Read a point-in-time snapshot of every project."""
        ...


class EligibilityChecker:
    """
    Entry point for wallet eligibility checks and trending rankings.

    Workflow for a wallet check:
    1. Read the catalog snapshot (empty catalog is a configuration error)
    2. Fetch per-chain transactions and NFTs
    3. Aggregate them into a UserActivity profile
    4. Score every project and the wallet overall

    Results are memoized through the injected cache when one is given.

    Parameters
    ----------
    data_source : ChainDataSource
        Multi-chain fetch layer
    catalog : ProjectCatalog
        Project catalog
    registry : ProtocolRegistry | None
        Known contract table. Uses the configured defaults if None.
    cache : ResultCache | None
        Result cache, no memoization if None
    weights : StatusWeights | None
        Status weights for the overall score. Uses the configured weights if None.
    cache_ttl : float | None
        TTL in seconds for cached results. Uses the cache default if None.

    """

    def __init__(
        self,
        data_source: ChainDataSource,
        catalog: ProjectCatalog,
        registry: ProtocolRegistry | None = None,
        cache: ResultCache | None = None,
        weights: StatusWeights | None = None,
        cache_ttl: float | None = None,
    ) -> None:
        self.data_source = data_source
        self.catalog = catalog
        self.aggregator = ActivityAggregator(registry=registry)
        self.cache = cache
        self.weights = weights or StatusWeights.from_config()
        self.cache_ttl = cache_ttl

    def _memoized(self, namespace: str, parts: tuple[Any, ...], compute_fn: Any) -> Any:
        if self.cache is None:
            return compute_fn()
        key = ResultCache.make_key(namespace, *parts)
        return self.cache.get_or_compute(key, self.cache_ttl, compute_fn)

    def get_user_activity(self, address: str) -> UserActivity:
        """
        Fetch and aggregate activity for a wallet.

        Parameters
        ----------
        address : str
            Wallet address, any case

        Returns
        -------
        UserActivity
            Profile for the lowercased address

        """
        normalized = address.lower()
        return self._memoized("activity", (normalized,), lambda: self._aggregate(normalized))

    def _aggregate(self, address: str) -> UserActivity:
        chain_transactions = self.data_source.fetch_all_chain_transactions(address)
        chain_nfts = self.data_source.fetch_all_chain_nfts(address)
        logger.debug(
            "Fetched %s: transactions on chains %s, NFTs on chains %s",
            address,
            sorted(chain_transactions),
            sorted(chain_nfts),
        )
        return self.aggregator.aggregate(address, chain_transactions, chain_nfts)

    def check(self, address: str) -> CheckResult:
        """
        Check a wallet's eligibility across the catalog.

        Parameters
        ----------
        address : str
            Wallet address, any case

        Returns
        -------
        CheckResult
            Per-project and overall scores

        Raises
        ------
        ConfigurationError
            If the catalog holds no projects

        """
        normalized = address.lower()
        return self._memoized("eligibility", (normalized,), lambda: self._check(normalized))

    def _check(self, address: str) -> CheckResult:
        projects = self.catalog.find_all_projects()
        if not projects:
            msg = "No projects found in catalog"
            raise ConfigurationError(msg)

        activity = self.get_user_activity(address)
        return build_check_result(
            address,
            projects,
            activity,
            timestamp=datetime.now(UTC),
            weights=self.weights,
        )

    def trending(
        self,
        limit: int = DEFAULT_TRENDING_LIMIT,
        status: Iterable[ProjectStatus | str] | None = None,
        chain: str | None = None,
    ) -> list[TrendingProjectSummary]:
        """
        Rank catalog projects by trending score.

        Parameters
        ----------
        limit : int
            Maximum number of entries
        status : Iterable[ProjectStatus | str] | None
            Allowed statuses, any if None
        chain : str | None
            Chain name filter, any if None

        Returns
        -------
        list[TrendingProjectSummary]
            Ranked summaries; empty for an empty catalog

        """
        statuses = sorted(ProjectStatus(s).value for s in status) if status else []
        chain_key = chain.lower() if chain else None

        def compute() -> list[TrendingProjectSummary]:
            return calculate_trending_projects(
                self.catalog.find_all_projects(),
                limit=limit,
                status=statuses,
                chain=chain_key,
            )

        return self._memoized("trending", (limit, statuses, chain_key), compute)


def check_airdrop_eligibility(
    address: str,
    data_source: ChainDataSource,
    catalog: ProjectCatalog,
    registry: ProtocolRegistry | None = None,
    weights: StatusWeights | None = None,
) -> CheckResult:
    """
    Check a wallet's eligibility without caching.

    Parameters
    ----------
    address : str
        Wallet address, any case
    data_source : ChainDataSource
        Multi-chain fetch layer
    catalog : ProjectCatalog
        Project catalog
    registry : ProtocolRegistry | None
        Known contract table. Uses the configured defaults if None.
    weights : StatusWeights | None
        Status weights. Uses the configured weights if None.

    Returns
    -------
    CheckResult
        Per-project and overall scores

    Raises
    ------
    ConfigurationError
        If the catalog holds no projects

    """
    return EligibilityChecker(data_source, catalog, registry=registry, weights=weights).check(address)
