"""Activity aggregator folding raw multi-chain records into a UserActivity profile."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from airdrop_eligibility.core.models import (
    BridgeActivity,
    ChainActivity,
    ChainNFTRecord,
    ChainTransaction,
    DEXSwap,
    NFTActivity,
    ProtocolCategory,
    ProtocolInteraction,
    UserActivity,
)
from airdrop_eligibility.core.registry import ProtocolRegistry
from airdrop_eligibility.data import get_chain_names

logger = logging.getLogger(__name__)

ChainTransactions = Mapping[int, Sequence[ChainTransaction | Mapping[str, Any]]]
ChainNFTs = Mapping[int, Sequence[ChainNFTRecord | Mapping[str, Any]]]


def _by_chain(records: Mapping[Any, Sequence[Any]], model: type) -> list[tuple[int, list[Any]]]:
    """Coerce chain keys to int, validate records, and order chains by id."""
    chains = []
    for chain_id, items in records.items():
        validated = [item if isinstance(item, model) else model.model_validate(item) for item in items]
        chains.append((int(chain_id), validated))
    return sorted(chains, key=lambda pair: pair[0])


class ActivityAggregator:
    """
    Builds a UserActivity profile from already-fetched chain data.

    A chain whose fetch failed upstream is simply missing from the input
    mappings; it produces no ChainActivity entry and is never zero-filled.
    Transactions to addresses unknown to the registry are ignored.

    Parameters
    ----------
    registry : ProtocolRegistry | None
        Known contract table. Uses the configured defaults if None.
    chain_names : Mapping[int, str] | None
        Chain id to display name table. Uses the configured defaults if None.

    """

    def __init__(
        self,
        registry: ProtocolRegistry | None = None,
        chain_names: Mapping[int, str] | None = None,
    ) -> None:
        self.registry = registry if registry is not None else ProtocolRegistry.from_config()
        self.chain_names = dict(chain_names) if chain_names is not None else get_chain_names()

    def chain_name(self, chain_id: int) -> str:
        """Display name for a chain id, ``"Chain <id>"`` when unknown."""
        name = self.chain_names.get(chain_id)
        if name is None:
            logger.warning("Chain %d is not in the chain table", chain_id)
            return f"Chain {chain_id}"
        return name

    def aggregate(
        self,
        address: str,
        chain_transactions: ChainTransactions,
        chain_nfts: ChainNFTs,
    ) -> UserActivity:
        """
        Aggregate all activity for a wallet.

        Parameters
        ----------
        address : str
            Wallet address
        chain_transactions : ChainTransactions
            Transactions keyed by chain id
        chain_nfts : ChainNFTs
            NFT records keyed by chain id

        Returns
        -------
        UserActivity
            Complete profile built from whatever chains are present

        """
        transactions = _by_chain(chain_transactions, ChainTransaction)
        nft_records = _by_chain(chain_nfts, ChainNFTRecord)

        chains = self.analyze_chain_activity(transactions)
        protocols = self.detect_protocol_interactions(transactions)
        nfts = self.analyze_nft_activity(nft_records)
        bridges = self.detect_bridge_activity(protocols)
        dex_swaps = self.detect_dex_activity(protocols)

        logger.debug(
            "Aggregated %s: %d chains, %d protocol interactions, %d NFTs, %d bridges, %d DEXes",
            address,
            len(chains),
            len(protocols),
            len(nfts),
            len(bridges),
            len(dex_swaps),
        )

        return UserActivity(
            address=address,
            chains=chains,
            protocols=protocols,
            nfts=nfts,
            bridges=bridges,
            dex_swaps=dex_swaps,
        )

    def analyze_chain_activity(self, transactions: list[tuple[int, list[ChainTransaction]]]) -> list[ChainActivity]:
        """
        Summarize transaction counts and activity window per chain.

        Parameters
        ----------
        transactions : list[tuple[int, list[ChainTransaction]]]
            (chain id, transactions) pairs

        Returns
        -------
        list[ChainActivity]
            One entry per chain with at least one transaction

        """
        activities = []
        for chain_id, txs in transactions:
            if not txs:
                continue

            timestamps = [tx.block_signed_at for tx in txs]
            activities.append(
                ChainActivity(
                    chain_id=chain_id,
                    chain_name=self.chain_name(chain_id),
                    transaction_count=len(txs),
                    first_activity=min(timestamps),
                    last_activity=max(timestamps),
                )
            )
        return activities

    def detect_protocol_interactions(
        self,
        transactions: list[tuple[int, list[ChainTransaction]]],
    ) -> list[ProtocolInteraction]:
        """
        Match transaction recipients against the registry.

        Parameters
        ----------
        transactions : list[tuple[int, list[ChainTransaction]]]
            (chain id, transactions) pairs

        Returns
        -------
        list[ProtocolInteraction]
            One entry per (protocol, contract, chain), in first-seen order

        """
        interactions: dict[tuple[str, str, int], ProtocolInteraction] = {}

        for chain_id, txs in transactions:
            for tx in txs:
                if not tx.to_address:
                    continue

                to_address = tx.to_address.lower()
                info = self.registry.lookup(to_address)
                if info is None:
                    continue

                key = (info.name, to_address, chain_id)
                existing = interactions.get(key)
                if existing is None:
                    interactions[key] = ProtocolInteraction(
                        protocol=info.name,
                        contract_address=to_address,
                        chain_id=chain_id,
                        interaction_count=1,
                        first_interaction=tx.block_signed_at,
                        last_interaction=tx.block_signed_at,
                    )
                    continue

                existing.interaction_count += 1
                existing.first_interaction = min(existing.first_interaction, tx.block_signed_at)
                existing.last_interaction = max(existing.last_interaction, tx.block_signed_at)

        return list(interactions.values())

    def analyze_nft_activity(self, nft_records: list[tuple[int, list[ChainNFTRecord]]]) -> list[NFTActivity]:
        """
        List NFT records as activity entries.

        Every entry is typed ``"mint"``: the holdings feed does not say how
        the token was acquired.

        Parameters
        ----------
        nft_records : list[tuple[int, list[ChainNFTRecord]]]
            (chain id, NFT records) pairs

        Returns
        -------
        list[NFTActivity]
            One entry per (contract, token id, chain)

        """
        activities: dict[tuple[str, str, int], NFTActivity] = {}
        for chain_id, nfts in nft_records:
            for nft in nfts:
                key = (nft.contract_address.lower(), nft.token_id, chain_id)
                if key in activities:
                    continue
                activities[key] = NFTActivity(
                    contract_address=nft.contract_address,
                    token_id=nft.token_id,
                    chain_id=chain_id,
                    chain_name=self.chain_name(chain_id),
                )
        return list(activities.values())

    def _category_interactions(
        self,
        interactions: list[ProtocolInteraction],
        category: ProtocolCategory,
    ) -> list[ProtocolInteraction]:
        matched = []
        for interaction in interactions:
            info = self.registry.lookup(interaction.contract_address)
            if info is not None and info.category == category:
                matched.append(interaction)
        return matched

    def detect_bridge_activity(self, interactions: list[ProtocolInteraction]) -> list[BridgeActivity]:
        """
        Merge bridge contract interactions by bridge name.

        The destination chain is left at 0: a bridge call only shows the
        source side of the transfer.

        Parameters
        ----------
        interactions : list[ProtocolInteraction]
            Detected protocol interactions

        Returns
        -------
        list[BridgeActivity]
            One entry per bridge name

        """
        bridges: dict[str, BridgeActivity] = {}
        for interaction in self._category_interactions(interactions, ProtocolCategory.BRIDGE):
            existing = bridges.get(interaction.protocol)
            if existing is None:
                bridges[interaction.protocol] = BridgeActivity(
                    bridge=interaction.protocol,
                    from_chain=interaction.chain_id,
                    count=interaction.interaction_count,
                    last_bridge=interaction.last_interaction,
                )
                continue

            existing.count += interaction.interaction_count
            if existing.last_bridge is None or interaction.last_interaction > existing.last_bridge:
                existing.last_bridge = interaction.last_interaction

        return list(bridges.values())

    def detect_dex_activity(self, interactions: list[ProtocolInteraction]) -> list[DEXSwap]:
        """
        Merge DEX contract interactions by DEX name and chain.

        Parameters
        ----------
        interactions : list[ProtocolInteraction]
            Detected protocol interactions

        Returns
        -------
        list[DEXSwap]
            One entry per (DEX name, chain)

        """
        swaps: dict[tuple[str, int], DEXSwap] = {}
        for interaction in self._category_interactions(interactions, ProtocolCategory.DEX):
            key = (interaction.protocol, interaction.chain_id)
            existing = swaps.get(key)
            if existing is None:
                swaps[key] = DEXSwap(
                    dex=interaction.protocol,
                    chain_id=interaction.chain_id,
                    count=interaction.interaction_count,
                    last_swap=interaction.last_interaction,
                )
                continue

            existing.count += interaction.interaction_count
            if existing.last_swap is None or interaction.last_interaction > existing.last_swap:
                existing.last_swap = interaction.last_interaction

        return list(swaps.values())


def aggregate_user_activity(
    address: str,
    chain_transactions: ChainTransactions,
    chain_nfts: ChainNFTs,
    registry: ProtocolRegistry | None = None,
) -> UserActivity:
    """
    Aggregate raw chain data for one wallet into a UserActivity profile.

    Parameters
    ----------
    address : str
        Wallet address
    chain_transactions : ChainTransactions
        Transactions keyed by chain id; failed chains are absent
    chain_nfts : ChainNFTs
        NFT records keyed by chain id; failed chains are absent
    registry : ProtocolRegistry | None
        Known contract table. Uses the configured defaults if None.

    Returns
    -------
    UserActivity
        Aggregated profile

    """
    return ActivityAggregator(registry=registry).aggregate(address, chain_transactions, chain_nfts)
