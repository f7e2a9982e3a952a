"""Pytest fixtures for airdrop-eligibility tests."""

from datetime import UTC, datetime, timedelta

import pytest

from airdrop_eligibility.core.aggregator import ActivityAggregator
from airdrop_eligibility.core.models import ChainNFTRecord, ChainTransaction, UserActivity
from airdrop_eligibility.core.registry import ProtocolRegistry

WALLET = "0xd8da6bf26964af9d7eed9e03e53415d37aa96045"

UNISWAP = "0x68b3465833fb72a70ecdf485e0e4c7bd8665fc45"
UNISWAP_V3 = "0xe592427a0aece92de3edee1f18e0157c05861564"
STARGATE = "0x8731d54e9d02c286767d56ac03e8037c07e01e98"
HOP = "0x3666f603cc164936c1b87e207f36beba4ac5f18a"
ZORA = "0x7777777f279eba3d3ad8f4e708545291a6fdba8b"
UNKNOWN = "0x1111111111111111111111111111111111111111"

DAY_ZERO = datetime(2024, 1, 1, tzinfo=UTC)

CHAIN_NAMES = {1: "Ethereum", 8453: "Base", 42161: "Arbitrum", 7777777: "Zora"}


def make_tx(to_address: str | None, day: float, index: int = 0) -> ChainTransaction:
    """Build a transaction sent ``day`` days after DAY_ZERO."""
    return ChainTransaction(
        tx_hash=f"0x{index:064x}",
        block_signed_at=DAY_ZERO + timedelta(days=day),
        to_address=to_address,
        from_address=WALLET,
    )


@pytest.fixture
def registry() -> ProtocolRegistry:
    """Small registry with one protocol per category under test."""
    return ProtocolRegistry(
        {
            UNISWAP: {"name": "Uniswap", "category": "dex"},
            UNISWAP_V3: {"name": "Uniswap", "category": "dex"},
            STARGATE: {"name": "Stargate", "category": "bridge"},
            HOP: {"name": "Hop", "category": "bridge"},
            ZORA: {"name": "Zora", "category": "nft"},
        }
    )


@pytest.fixture
def aggregator(registry: ProtocolRegistry) -> ActivityAggregator:
    """Aggregator over the test registry and chain table."""
    return ActivityAggregator(registry=registry, chain_names=CHAIN_NAMES)


@pytest.fixture
def chain_transactions() -> dict[int, list[ChainTransaction]]:
    """
    Ethereum: 3 Uniswap, 2 Stargate, 1 unknown. Base: 1 Hop, 11 unknown.
    """
    ethereum = [
        make_tx(UNISWAP, 0, 1),
        make_tx(UNISWAP, 1, 2),
        make_tx(UNISWAP, 2, 3),
        make_tx(STARGATE, 3, 4),
        make_tx(STARGATE, 4, 5),
        make_tx(UNKNOWN, 5, 6),
    ]
    base = [make_tx(HOP, 6, 7)] + [make_tx(UNKNOWN, 7 + i, 8 + i) for i in range(11)]
    return {1: ethereum, 8453: base}


@pytest.fixture
def chain_nfts() -> dict[int, list[ChainNFTRecord]]:
    """One NFT on Zora."""
    return {7777777: [ChainNFTRecord(contract_address="0xabc", token_id="1")]}


@pytest.fixture
def activity(
    aggregator: ActivityAggregator,
    chain_transactions: dict[int, list[ChainTransaction]],
    chain_nfts: dict[int, list[ChainNFTRecord]],
) -> UserActivity:
    """Aggregated profile of the sample wallet."""
    return aggregator.aggregate(WALLET, chain_transactions, chain_nfts)
