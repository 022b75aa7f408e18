"""Fee calculator for the adapter.

Uses SafeInt for every intermediate product so that an amount which would
overflow uint256 on-chain raises ArithmeticOverflow instead of wrapping.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import structlog

from feeadapter.constants import BPS_DENOMINATOR
from feeadapter.errors import ArithmeticOverflow
from feeadapter.fees.config import FeeSchedule
from feeadapter.fees.result import FeeDistribution
from feeadapter.safe_int import S, SafeIntError

logger = structlog.get_logger()


def compute_fee_distribution(
    amount_in: int,
    fee_bps: int,
    ops_split: int,
    burn_split: int,
    rewards_split: int,
) -> FeeDistribution:
    """Compute the fee on amount_in and split it three ways.

    Formula:
        fee     = amount_in * fee_bps // 10000
        ops     = fee * ops_split // 10000
        burn    = fee * burn_split // 10000
        rewards = fee - ops - burn

    Rewards is computed by subtraction, so ops + burn + rewards == fee holds
    for every split triple. rewards_split is accepted for symmetry and only
    checked for range; it never enters the arithmetic.

    Raises:
        ArithmeticOverflow: If any input or intermediate value leaves uint256,
            or the splits would make rewards negative
    """
    try:
        amount = S(amount_in)
        S(rewards_split)
        fee = amount.mul_div(fee_bps, BPS_DENOMINATOR)
        ops = fee.mul_div(ops_split, BPS_DENOMINATOR)
        burn = fee.mul_div(burn_split, BPS_DENOMINATOR)
        rewards = fee - ops - burn
    except SafeIntError as err:
        logger.warning(
            "fee_calculation_overflow",
            amount_in=str(amount_in),
            fee_bps=fee_bps,
            splits=(ops_split, burn_split, rewards_split),
            reason=str(err),
        )
        raise ArithmeticOverflow(str(err)) from err

    return FeeDistribution(
        amount_in=amount.value,
        fee_amount=fee.value,
        ops_share=ops.value,
        burn_share=burn.value,
        rewards_share=rewards.value,
    )


@runtime_checkable
class FeeCalculator(Protocol):
    """Protocol for the adapter's replaceable fee logic.

    The adapter holds exactly one calculator at a time and replaces it only
    through the owner-gated upgrade_to() operation.
    """

    version: str

    def compute_distribution(self, amount_in: int, schedule: FeeSchedule) -> FeeDistribution:
        """Compute the fee distribution for a swap of amount_in.

        Args:
            amount_in: Full input amount of the swap
            schedule: Current fee rate and splits

        Returns:
            FeeDistribution whose shares sum exactly to its fee_amount
        """
        ...


class DefaultFeeCalculator:
    """Floor-division fee calculator with the remainder assigned to rewards."""

    version = "1.0.0"

    def compute_distribution(self, amount_in: int, schedule: FeeSchedule) -> FeeDistribution:
        distribution = compute_fee_distribution(
            amount_in,
            schedule.fee_bps,
            schedule.ops_split,
            schedule.burn_split,
            schedule.rewards_split,
        )
        logger.debug(
            "fee_calculated",
            amount_in=str(amount_in),
            fee_bps=schedule.fee_bps,
            fee=str(distribution.fee_amount),
            ops=str(distribution.ops_share),
            burn=str(distribution.burn_share),
            rewards=str(distribution.rewards_share),
        )
        return distribution

    def __repr__(self) -> str:
        return f"DefaultFeeCalculator(version={self.version!r})"


# Default calculator instance
DEFAULT_FEE_CALCULATOR = DefaultFeeCalculator()
