"""Status weights and rounding rules shared by the scoring functions."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, Field

from airdrop_eligibility.data import get_status_weights


def round_half_up(value: Decimal) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Python's ``round`` uses banker's rounding (``round(12.5) == 12``); scores
    are published with half-up rounding instead.

    Parameters
    ----------
    value : Decimal
        Unrounded value

    Returns
    -------
    int
        Rounded integer

    """
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StatusWeights(BaseModel):
    """
    Weight of each project status in the overall wallet score.

    Attributes
    ----------
    confirmed : float
        Weight for confirmed airdrops
    rumored : float
        Weight for rumored airdrops
    speculative : float
        Weight for speculative airdrops
    expired : float
        Weight for expired airdrops

    """

    confirmed: float = Field(default=1.5, ge=0)
    rumored: float = Field(default=1.0, ge=0)
    speculative: float = Field(default=0.5, ge=0)
    expired: float = Field(default=0.0, ge=0)

    @classmethod
    def from_config(cls) -> "StatusWeights":
        """Build weights from the ``status_weights`` configuration section."""
        return cls(**get_status_weights())

    @classmethod
    def equal(cls) -> "StatusWeights":
        """Weights that give every status the same influence."""
        return cls(confirmed=1.0, rumored=1.0, speculative=1.0, expired=1.0)

    def weight_for(self, status: str) -> float:
        """Get the weight for a project status value."""
        return getattr(self, str(status))

    def weighted_mean(self, scored: Iterable[tuple[str, int]]) -> int:
        """
        Status-weighted mean of per-project scores.

        Parameters
        ----------
        scored : Iterable[tuple[str, int]]
            Pairs of (project status, project score)

        Returns
        -------
        int
            Rounded mean in 0..100, 0 when the total weight is zero

        """
        total = Decimal("0")
        total_weight = Decimal("0")
        for status, score in scored:
            weight = Decimal(str(self.weight_for(status)))
            total += weight * score
            total_weight += weight

        if total_weight == 0:
            return 0
        return round_half_up(total / total_weight)
