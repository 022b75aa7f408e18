"""Tests for fee computation and distribution."""

import pytest

from feeadapter.errors import ArithmeticOverflow
from feeadapter.fees import (
    DEFAULT_FEE_CALCULATOR,
    DefaultFeeCalculator,
    FeeCalculator,
    FeeDistribution,
    FeeSchedule,
    compute_fee_distribution,
)
from feeadapter.safe_int import UINT256_MAX

E18 = 10**18


class TestComputeFeeDistribution:
    """Tests for the floor-division fee formula."""

    def test_one_percent_default_splits(self):
        """100 tokens at 100 bps: 1 token fee, split 3333/3333/3334."""
        dist = compute_fee_distribution(100 * E18, 100, 3333, 3333, 3334)

        assert dist.fee_amount == E18
        assert dist.ops_share == 333_300_000_000_000_000
        assert dist.burn_share == 333_300_000_000_000_000
        assert dist.rewards_share == 333_400_000_000_000_000
        assert dist.amount_forwarded == 99 * E18

    def test_skewed_splits(self):
        """Splits (1, 1, 9998) give nearly all of the fee to rewards."""
        dist = compute_fee_distribution(100 * E18, 100, 1, 1, 9998)

        assert dist.ops_share == 10**14
        assert dist.burn_share == 10**14
        assert dist.rewards_share == E18 - 2 * 10**14

    def test_fee_rounds_to_zero(self):
        """Amounts too small for a whole unit of fee pay nothing."""
        dist = compute_fee_distribution(99, 100, 3333, 3333, 3334)

        assert dist.fee_amount == 0
        assert dist.shares == (0, 0, 0)
        assert dist.amount_forwarded == 99
        assert not dist.requires_fee

    def test_remainder_goes_to_rewards(self):
        """A 1 unit fee cannot be split; rewards receives it."""
        dist = compute_fee_distribution(100, 100, 3333, 3333, 3334)

        assert dist.fee_amount == 1
        assert dist.shares == (0, 0, 1)

    def test_zero_fee_rate(self):
        dist = compute_fee_distribution(UINT256_MAX, 0, 3333, 3333, 3334)

        assert dist.fee_amount == 0
        assert dist.amount_forwarded == UINT256_MAX

    def test_max_fee_rate(self):
        dist = compute_fee_distribution(10_000, 1_000, 3333, 3333, 3334)

        assert dist.fee_amount == 1_000
        assert dist.amount_forwarded == 9_000

    @pytest.mark.parametrize(
        "splits",
        [(3333, 3333, 3334), (10_000, 0, 0), (0, 0, 10_000), (1, 1, 9998), (5000, 2500, 2500)],
    )
    @pytest.mark.parametrize("amount_in", [1, 9_999, 10**6 + 7, 123_456_789 * E18])
    def test_shares_sum_to_fee(self, amount_in, splits):
        """ops + burn + rewards == fee for every split triple."""
        dist = compute_fee_distribution(amount_in, 777, *splits)

        assert sum(dist.shares) == dist.fee_amount
        assert dist.fee_amount + dist.amount_forwarded == amount_in

    @pytest.mark.parametrize("fee_bps", [1, 30, 100, 1_000])
    def test_fee_monotonic_in_amount(self, fee_bps):
        """A larger input never pays a smaller fee."""
        amounts = [0, 1, 99, 100, 101, 10_000, 10**18, 10**30]
        fees = [compute_fee_distribution(a, fee_bps, 3333, 3333, 3334).fee_amount for a in amounts]

        assert fees == sorted(fees)

    @pytest.mark.parametrize("amount_in", [0, 1, 9_999, 10_001, 10**6 + 7, 123 * E18])
    def test_fee_monotonic_in_fee_bps(self, amount_in):
        """Raising the fee rate never lowers the fee on a fixed input."""
        fees = [
            compute_fee_distribution(amount_in, fee_bps, 3333, 3333, 3334).fee_amount
            for fee_bps in range(0, 1_001)
        ]

        assert fees == sorted(fees)
        assert fees[0] == 0
        assert fees[-1] == amount_in * 1_000 // 10_000

    def test_overflow_raises(self):
        """amount_in * fee_bps past uint256 raises instead of wrapping."""
        with pytest.raises(ArithmeticOverflow):
            compute_fee_distribution(UINT256_MAX, 1_000, 3333, 3333, 3334)

    def test_oversized_splits_raise(self):
        """Splits that would make rewards negative are rejected."""
        with pytest.raises(ArithmeticOverflow):
            compute_fee_distribution(100 * E18, 100, 6000, 6000, -2000)

    def test_overflow_is_arithmetic_error(self):
        assert issubclass(ArithmeticOverflow, ArithmeticError)


class TestFeeDistribution:
    """Tests for FeeDistribution invariants."""

    def test_shares_must_sum_to_fee(self):
        with pytest.raises(ValueError, match="do not sum"):
            FeeDistribution(100, 10, 3, 3, 3)

    def test_fee_cannot_exceed_amount(self):
        with pytest.raises(ValueError, match="exceeds"):
            FeeDistribution(5, 10, 0, 0, 10)

    def test_negative_share_rejected(self):
        with pytest.raises(ValueError, match="Negative"):
            FeeDistribution(100, 10, -1, 1, 10)


class TestFeeSchedule:
    def test_default_splits(self):
        schedule = FeeSchedule(fee_bps=30)

        assert schedule.splits == (3333, 3333, 3334)
        assert schedule.splits_valid

    def test_invalid_splits(self):
        assert not FeeSchedule(30, 4000, 3000, 2000).splits_valid
        assert not FeeSchedule(30, -1, 5001, 5000).splits_valid


class TestDefaultFeeCalculator:
    """Tests for the calculator protocol implementation."""

    def test_implements_protocol(self):
        assert isinstance(DEFAULT_FEE_CALCULATOR, FeeCalculator)
        assert isinstance(DEFAULT_FEE_CALCULATOR, DefaultFeeCalculator)

    def test_version(self):
        assert DEFAULT_FEE_CALCULATOR.version == "1.0.0"

    def test_uses_schedule(self):
        schedule = FeeSchedule(fee_bps=200, ops_split=5000, burn_split=5000, rewards_split=0)
        dist = DEFAULT_FEE_CALCULATOR.compute_distribution(10_000, schedule)

        assert dist.fee_amount == 200
        assert dist.shares == (100, 100, 0)

    def test_plain_object_is_not_calculator(self):
        assert not isinstance(object(), FeeCalculator)
