"""Fee computation for the adapter.

Usage:
    from feeadapter.fees import DEFAULT_FEE_CALCULATOR, FeeSchedule

    schedule = FeeSchedule(fee_bps=100)
    dist = DEFAULT_FEE_CALCULATOR.compute_distribution(amount_in, schedule)
    forwarded = dist.amount_forwarded
"""

from feeadapter.fees.calculator import (
    DEFAULT_FEE_CALCULATOR,
    DefaultFeeCalculator,
    FeeCalculator,
    compute_fee_distribution,
)
from feeadapter.fees.config import FeeSchedule
from feeadapter.fees.result import FeeDistribution

__all__ = [
    "FeeCalculator",
    "DefaultFeeCalculator",
    "DEFAULT_FEE_CALCULATOR",
    "compute_fee_distribution",
    "FeeSchedule",
    "FeeDistribution",
]
