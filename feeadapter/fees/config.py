"""Fee schedule consumed by the fee calculator."""

from dataclasses import dataclass

from feeadapter.constants import (
    BPS_DENOMINATOR,
    DEFAULT_BURN_SPLIT,
    DEFAULT_OPS_SPLIT,
    DEFAULT_REWARDS_SPLIT,
)


@dataclass(frozen=True)
class FeeSchedule:
    """The fee rate and its three-way split, all in basis points.

    This is the slice of the adapter configuration the fee calculator
    needs. It carries no recipients and no owner, so calculators never see
    anything they could misuse.

    Attributes:
        fee_bps: Fee rate applied to the full input amount
        ops_split: Share of the fee paid to the ops recipient
        burn_split: Share of the fee paid to the burn recipient
        rewards_split: Share of the fee paid to the rewards recipient.
            The rewards recipient also receives every rounding remainder.
    """

    fee_bps: int
    ops_split: int = DEFAULT_OPS_SPLIT
    burn_split: int = DEFAULT_BURN_SPLIT
    rewards_split: int = DEFAULT_REWARDS_SPLIT

    @property
    def splits(self) -> tuple[int, int, int]:
        return self.ops_split, self.burn_split, self.rewards_split

    @property
    def splits_valid(self) -> bool:
        """True if every split is non-negative and they sum to 10000."""
        return min(self.splits) >= 0 and sum(self.splits) == BPS_DENOMINATOR
