"""Fee distribution result type."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FeeDistribution:
    """Fee taken from one swap and how it is split.

    Attributes:
        amount_in: Full input amount the fee was computed on
        fee_amount: floor(amount_in * fee_bps / 10000)
        ops_share: floor(fee_amount * ops_split / 10000)
        burn_share: floor(fee_amount * burn_split / 10000)
        rewards_share: fee_amount - ops_share - burn_share

    Examples:
        # 1% of 100 tokens, default splits
        dist = FeeDistribution(
            amount_in=100 * 10**18,
            fee_amount=10**18,
            ops_share=333300000000000000,
            burn_share=333300000000000000,
            rewards_share=333400000000000000,
        )
        assert dist.amount_forwarded == 99 * 10**18

    Raises:
        ValueError: On construction, if the shares do not add up to the fee
            or the fee exceeds the input amount
    """

    amount_in: int
    fee_amount: int
    ops_share: int
    burn_share: int
    rewards_share: int

    def __post_init__(self) -> None:
        if min(self.ops_share, self.burn_share, self.rewards_share) < 0:
            raise ValueError(f"Negative fee share in {self}")
        if self.ops_share + self.burn_share + self.rewards_share != self.fee_amount:
            raise ValueError(f"Fee shares do not sum to fee_amount in {self}")
        if self.fee_amount > self.amount_in:
            raise ValueError(f"Fee {self.fee_amount} exceeds amount {self.amount_in}")

    @property
    def amount_forwarded(self) -> int:
        """Residual amount handed to the router."""
        return self.amount_in - self.fee_amount

    @property
    def shares(self) -> tuple[int, int, int]:
        """(ops, burn, rewards) in payout order."""
        return self.ops_share, self.burn_share, self.rewards_share

    @property
    def requires_fee(self) -> bool:
        """True if a non-zero fee is taken."""
        return self.fee_amount > 0
