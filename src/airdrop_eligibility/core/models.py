"""Data models for chain records, activity profiles, criteria, and results."""

import re
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    computed_field,
    field_validator,
    model_validator,
)

from airdrop_eligibility.core.weights import StatusWeights


def as_utc(value: datetime | None) -> datetime | None:
    """Read naive datetimes as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class ProjectStatus(StrEnum):
    """Lifecycle status of an airdrop project."""

    CONFIRMED = "confirmed"
    RUMORED = "rumored"
    SPECULATIVE = "speculative"
    EXPIRED = "expired"


class ProtocolCategory(StrEnum):
    """Category of a known protocol contract."""

    DEX = "dex"
    BRIDGE = "bridge"
    NFT = "nft"
    DEFI = "defi"
    LENDING = "lending"
    GAMING = "gaming"
    SOCIAL = "social"
    INFRASTRUCTURE = "infrastructure"


class CriterionKind(StrEnum):
    """Kind of eligibility check a criterion performs."""

    HAS_CHAIN_ACTIVITY = "has_chain_activity"
    MIN_CHAIN_TX_COUNT = "min_chain_tx_count"
    HAS_CHAIN_BALANCE = "has_chain_balance"
    MIN_CHAIN_PROTOCOLS = "min_chain_protocols"
    PROTOCOL_INTERACTION = "protocol_interaction"
    MIN_PROTOCOL_INTERACTIONS = "min_protocol_interactions"
    PROTOCOL_NAME_CONTAINS = "protocol_name_contains"
    NFT_PLATFORM = "nft_platform"
    HAS_NFT = "has_nft"
    HAS_BRIDGE_ACTIVITY = "has_bridge_activity"
    BRIDGE_TO = "bridge_to"
    MIN_BRIDGE_COUNT = "min_bridge_count"
    CROSS_CHAIN = "cross_chain"
    HAS_DEX_SWAP = "has_dex_swap"
    UNRECOGNIZED = "unrecognized"


class Comparison(StrEnum):
    """Numeric comparison operator."""

    GTE = ">="
    LTE = "<="
    GT = ">"
    LT = "<"
    EQ = "="

    def compare(self, actual: int, expected: int) -> bool:
        """Apply the operator as ``actual <op> expected``."""
        if self is Comparison.GTE:
            return actual >= expected
        if self is Comparison.LTE:
            return actual <= expected
        if self is Comparison.GT:
            return actual > expected
        if self is Comparison.LT:
            return actual < expected
        return actual == expected


class SignalType(StrEnum):
    """Kind of trending signal."""

    STATUS = "status"
    VALUE = "value"
    SNAPSHOT = "snapshot"
    RECENCY = "recency"
    CLAIM = "claim"
    CHAINS = "chains"


class LogEvent(BaseModel):
    """
    Decoded log event attached to a transaction.

    Attributes
    ----------
    sender_address : str | None
        Contract that emitted the event
    name : str | None
        Decoded event name (e.g., 'Transfer')
    params : dict
        Decoded event parameters

    """

    sender_address: str | None = None
    name: str | None = None
    params: dict = Field(default_factory=dict)


class ChainTransaction(BaseModel):
    """
    Raw transaction record as delivered by the chain data provider.

    Attributes
    ----------
    tx_hash : str
        Transaction hash
    block_signed_at : datetime
        Block timestamp
    to_address : str | None
        Recipient address, None for contract creations
    from_address : str | None
        Sender address
    log_events : list[LogEvent]
        Decoded log events

    """

    tx_hash: str
    block_signed_at: datetime
    to_address: str | None = None
    from_address: str | None = None
    log_events: list[LogEvent] = Field(default_factory=list)

    normalize_timestamp = field_validator("block_signed_at")(as_utc)


class ChainNFTRecord(BaseModel):
    """NFT held by the wallet on some chain."""

    contract_address: str
    token_id: str

    @field_validator("token_id", mode="before")
    @classmethod
    def _token_id_as_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class ChainActivity(BaseModel):
    """
    Transaction activity on a single chain.

    Only built for chains with at least one transaction.

    """

    chain_id: int
    chain_name: str
    transaction_count: int
    first_activity: datetime
    last_activity: datetime


class ProtocolInteraction(BaseModel):
    """
    Calls from the wallet to one known protocol contract on one chain.

    Attributes
    ----------
    protocol : str
        Protocol name from the registry
    contract_address : str
        Lowercase contract address
    chain_id : int
        Chain id
    interaction_count : int
        Number of transactions sent to the contract
    first_interaction : datetime
        Earliest transaction timestamp
    last_interaction : datetime
        Latest transaction timestamp

    """

    protocol: str
    contract_address: str
    chain_id: int
    interaction_count: int
    first_interaction: datetime
    last_interaction: datetime


class NFTActivity(BaseModel):
    """NFT activity entry; ``type`` is always ``"mint"`` (direction is not observable)."""

    contract_address: str
    token_id: str
    chain_id: int
    chain_name: str
    type: str = "mint"


class BridgeActivity(BaseModel):
    """
    Bridge usage merged by bridge name.

    ``to_chain`` is always 0: only the source side of a bridge transfer is visible.

    """

    bridge: str
    from_chain: int
    to_chain: int = 0
    count: int
    last_bridge: datetime | None = None


class DEXSwap(BaseModel):
    """DEX usage merged by DEX name and chain."""

    dex: str
    chain_id: int
    count: int
    last_swap: datetime | None = None


class UserActivity(BaseModel):
    """
    Normalized on-chain behavior profile for one wallet.

    Attributes
    ----------
    address : str
        Wallet address
    chains : list[ChainActivity]
        One entry per chain with at least one transaction
    protocols : list[ProtocolInteraction]
        Interactions with known protocol contracts
    nfts : list[NFTActivity]
        NFT records
    bridges : list[BridgeActivity]
        Bridge usage
    dex_swaps : list[DEXSwap]
        DEX usage

    """

    address: str
    chains: list[ChainActivity] = Field(default_factory=list)
    protocols: list[ProtocolInteraction] = Field(default_factory=list)
    nfts: list[NFTActivity] = Field(default_factory=list)
    bridges: list[BridgeActivity] = Field(default_factory=list)
    dex_swaps: list[DEXSwap] = Field(default_factory=list)


_CHECK_PATTERN = re.compile(r"^\s*([^<>=]+?)\s*(>=|<=|>|<|=)\s*(.*?)\s*$")


def _parse_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def parse_check(check: str) -> dict[str, Any]:
    """
    Translate a legacy ``"key<op>value"`` check string into criterion fields.

    Parameters
    ----------
    check : str
        Check string such as ``"base_tx>=10"`` or ``"protocol=uniswap"``

    Returns
    -------
    dict[str, Any]
        Keyword arguments for :class:`Criterion` (``kind`` plus parameters)

    """
    match = _CHECK_PATTERN.match(check.lower())
    if not match:
        return {"kind": CriterionKind.UNRECOGNIZED}

    key, operator, expected = match.groups()
    comparison = Comparison(operator)
    number = _parse_int(expected)

    if key == "chain":
        return {"kind": CriterionKind.HAS_CHAIN_ACTIVITY, "chain": expected}
    if key == "protocol":
        return {"kind": CriterionKind.PROTOCOL_INTERACTION, "protocol": expected}
    if key == "nft_platform":
        return {"kind": CriterionKind.NFT_PLATFORM, "protocol": expected}
    if key == "bridge_to":
        return {"kind": CriterionKind.BRIDGE_TO, "protocol": expected}

    if key == "bridge_count":
        kind, chain = CriterionKind.MIN_BRIDGE_COUNT, None
    elif key == "cross_chain_tx":
        kind, chain = CriterionKind.CROSS_CHAIN, None
    elif "_tx" in key:
        kind, chain = CriterionKind.MIN_CHAIN_TX_COUNT, key.replace("_tx", "")
    elif "_protocols" in key:
        kind, chain = CriterionKind.MIN_CHAIN_PROTOCOLS, key.replace("_protocols", "")
    else:
        kind, chain = None, None

    if kind is not None:
        if number is None:
            return {"kind": CriterionKind.UNRECOGNIZED}
        return {"kind": kind, "chain": chain, "comparison": comparison, "value": number}

    if "_balance" in key:
        return {"kind": CriterionKind.HAS_CHAIN_BALANCE, "chain": key.replace("_balance", "")}

    if not expected:
        return {"kind": CriterionKind.UNRECOGNIZED}
    return {"kind": CriterionKind.PROTOCOL_NAME_CONTAINS, "protocol": expected}


class Criterion(BaseModel):
    """
    One eligibility rule of a project.

    Catalog entries may carry a legacy ``check`` string instead of a
    ``kind``; it is parsed on construction. Unknown kinds and invalid
    parameters (operator, threshold) become ``CriterionKind.UNRECOGNIZED``
    and never match.

    Attributes
    ----------
    description : str
        Human-readable rule
    kind : CriterionKind
        Check to perform
    chain : str | None
        Chain name parameter
    protocol : str | None
        Protocol, bridge, or platform name parameter
    comparison : Comparison
        Operator for numeric kinds
    value : int
        Threshold for numeric kinds
    check : str | None
        Legacy check string, kept for display

    """

    description: str
    kind: CriterionKind = CriterionKind.UNRECOGNIZED
    chain: str | None = None
    protocol: str | None = None
    comparison: Comparison = Comparison.GTE
    value: int = 1
    check: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _resolve_kind(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "kind" not in data and data.get("check"):
            data.update(parse_check(str(data["check"])))
        elif "kind" in data and not (
            isinstance(data["kind"], str) and data["kind"] in CriterionKind._value2member_map_
        ):
            data["kind"] = CriterionKind.UNRECOGNIZED
        return data

    @model_validator(mode="wrap")
    @classmethod
    def _fail_closed(cls, data: Any, handler: ValidatorFunctionWrapHandler) -> "Criterion":
        # Bad parameters (operator, threshold, ...) disable this criterion only.
        try:
            return handler(data)
        except ValidationError:
            if not isinstance(data, dict) or not isinstance(data.get("description"), str):
                raise
            check = data.get("check")
            return handler(
                {
                    "description": data["description"],
                    "kind": CriterionKind.UNRECOGNIZED,
                    "check": None if check is None else str(check),
                }
            )


class CriterionResult(BaseModel):
    """Outcome of evaluating one criterion."""

    description: str
    met: bool


class Project(BaseModel):
    """
    Read-only catalog entry for an airdrop campaign.

    Attributes
    ----------
    id : str
        Project identifier
    name : str
        Display name
    status : ProjectStatus
        Campaign status
    criteria : list[Criterion]
        Eligibility rules
    snapshot_date : datetime | None
        Eligibility snapshot time
    estimated_value : float | str | None
        Estimated total value in USD, as a number or display string ('$20M')
    claim_url : str | None
        Claim page if claiming is open
    chains : list[str]
        Chain names the project runs on
    updated_at : datetime | None
        Last catalog update

    """

    id: str
    name: str
    status: ProjectStatus
    criteria: list[Criterion] = Field(default_factory=list)
    snapshot_date: datetime | None = None
    estimated_value: float | str | None = None
    claim_url: str | None = None
    chains: list[str] = Field(default_factory=list)
    updated_at: datetime | None = None

    normalize_dates = field_validator("snapshot_date", "updated_at")(as_utc)


class AirdropCheckResult(BaseModel):
    """Eligibility of one wallet for one project."""

    project_id: str
    project_name: str
    status: ProjectStatus
    score: int = Field(ge=0, le=100)
    criteria: list[CriterionResult] = Field(default_factory=list)
    estimated_value: float | str | None = None
    snapshot_date: datetime | None = None
    claim_url: str | None = None


class CheckResult(BaseModel):
    """
    Eligibility of one wallet across the whole catalog.

    ``overall_score`` is derived from ``airdrops`` and ``status_weights`` on
    every access. The weights are serialized with the result so a reloaded
    result reports the same overall score.

    """

    address: str
    airdrops: list[AirdropCheckResult]
    timestamp: datetime
    status_weights: StatusWeights = Field(default_factory=StatusWeights.from_config)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_score(self) -> int:
        """Status-weighted mean of per-project scores."""
        return self.status_weights.weighted_mean((result.status, result.score) for result in self.airdrops)


class TrendingSignal(BaseModel):
    """One contribution to a trending score."""

    type: SignalType
    weight: int
    label: str


class TrendingProjectSummary(BaseModel):
    """Wallet-independent ranking entry for a project."""

    project_id: str
    name: str
    status: ProjectStatus
    trending_score: int = Field(ge=0, le=100)
    signals: list[TrendingSignal] = Field(default_factory=list)
    chains: list[str] = Field(default_factory=list)
    estimated_value: float | str | None = None
    snapshot_date: datetime | None = None
    claim_url: str | None = None
    updated_at: datetime | None = None
