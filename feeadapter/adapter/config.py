"""Configuration store: validated, owner-gated adapter parameters."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from feeadapter.constants import (
    BPS_DENOMINATOR,
    DEFAULT_BURN_SPLIT,
    DEFAULT_OPS_SPLIT,
    DEFAULT_REWARDS_SPLIT,
    MAX_FEE_BPS,
    ZERO_ADDRESS,
)
from feeadapter.errors import (
    AlreadyInitialized,
    FeeTooHigh,
    InvalidAddress,
    NotInitialized,
    SplitsInvalid,
    Unauthorized,
)
from feeadapter.fees.config import FeeSchedule
from feeadapter.models.types import is_valid_address, normalize_address


def require_address(value: Any, name: str) -> str:
    """Normalize an address argument, rejecting malformed and zero addresses.

    Raises:
        InvalidAddress: If value is not a valid, non-zero address
    """
    if not is_valid_address(value):
        raise InvalidAddress(f"Invalid {name} address: {value!r}")
    address = normalize_address(value)
    if address == ZERO_ADDRESS:
        raise InvalidAddress(f"{name} cannot be the zero address")
    return address


def _require_bps(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Configuration:
    """Snapshot of every mutable adapter parameter.

    Instances are immutable; the store replaces the whole value on each
    validated update, so a reader never observes a half-applied change.
    """

    owner: str
    router: str
    fee_bps: int
    ops_recipient: str
    burn_recipient: str
    rewards_recipient: str
    ops_split: int = DEFAULT_OPS_SPLIT
    burn_split: int = DEFAULT_BURN_SPLIT
    rewards_split: int = DEFAULT_REWARDS_SPLIT

    @property
    def schedule(self) -> FeeSchedule:
        """Fee rate and splits, as consumed by the fee calculator."""
        return FeeSchedule(self.fee_bps, self.ops_split, self.burn_split, self.rewards_split)

    @property
    def recipients(self) -> tuple[str, str, str]:
        """(ops, burn, rewards) recipients in payout order."""
        return self.ops_recipient, self.burn_recipient, self.rewards_recipient


class ConfigurationStore:
    """Holds the adapter configuration and its owner gate.

    The store validates every update before applying it. It does not know
    about pausing; lifecycle rules are enforced by the adapter before it
    calls in here.
    """

    def __init__(self) -> None:
        self._config: Configuration | None = None

    @property
    def is_initialized(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> Configuration:
        """Current configuration.

        Raises:
            NotInitialized: Before initialize()
        """
        if self._config is None:
            raise NotInitialized()
        return self._config

    def initialize(
        self,
        *,
        owner: str,
        router: str,
        fee_bps: int,
        ops_recipient: str,
        burn_recipient: str,
        rewards_recipient: str,
    ) -> Configuration:
        """Create the configuration with default splits.

        Raises:
            AlreadyInitialized: If a configuration already exists
            FeeTooHigh: If fee_bps exceeds MAX_FEE_BPS
            InvalidAddress: If any address is invalid or zero
        """
        if self._config is not None:
            raise AlreadyInitialized()
        self._config = Configuration(
            owner=require_address(owner, "owner"),
            router=require_address(router, "router"),
            fee_bps=self._validated_fee(fee_bps),
            ops_recipient=require_address(ops_recipient, "ops recipient"),
            burn_recipient=require_address(burn_recipient, "burn recipient"),
            rewards_recipient=require_address(rewards_recipient, "rewards recipient"),
        )
        return self._config

    def require_owner(self, sender: str) -> None:
        """Raises Unauthorized unless sender is the current owner."""
        owner = self.config.owner
        if owner == ZERO_ADDRESS:
            raise Unauthorized("Ownable: ownership has been renounced")
        if not is_valid_address(sender) or normalize_address(sender) != owner:
            raise Unauthorized(f"Ownable: caller {sender} is not the owner")

    # --- Validated setters (caller has already passed require_owner) ---

    def set_fee_bps(self, fee_bps: int) -> None:
        self._replace(fee_bps=self._validated_fee(fee_bps))

    def set_splits(self, ops_split: int, burn_split: int, rewards_split: int) -> None:
        splits = tuple(
            _require_bps(v, n)
            for v, n in ((ops_split, "ops"), (burn_split, "burn"), (rewards_split, "rewards"))
        )
        if min(splits) < 0 or sum(splits) != BPS_DENOMINATOR:
            raise SplitsInvalid()
        self._replace(ops_split=splits[0], burn_split=splits[1], rewards_split=splits[2])

    def set_recipients(
        self, ops_recipient: str, burn_recipient: str, rewards_recipient: str
    ) -> None:
        self._replace(
            ops_recipient=require_address(ops_recipient, "ops recipient"),
            burn_recipient=require_address(burn_recipient, "burn recipient"),
            rewards_recipient=require_address(rewards_recipient, "rewards recipient"),
        )

    def set_router(self, router: str) -> None:
        self._replace(router=require_address(router, "router"))

    def set_owner(self, new_owner: str) -> None:
        self._replace(owner=require_address(new_owner, "new owner"))

    def clear_owner(self) -> None:
        """Renounce ownership. No address can pass require_owner afterwards."""
        self._replace(owner=ZERO_ADDRESS)

    @staticmethod
    def _validated_fee(fee_bps: int) -> int:
        fee_bps = _require_bps(fee_bps, "fee_bps")
        if fee_bps > MAX_FEE_BPS:
            raise FeeTooHigh()
        if fee_bps < 0:
            raise FeeTooHigh(f"Fee cannot be negative: {fee_bps}")
        return fee_bps

    def _replace(self, **changes: Any) -> None:
        self._config = dataclasses.replace(self.config, **changes)

    # --- Ledger snapshot support ---

    def snapshot(self) -> Configuration | None:
        return self._config

    def restore(self, state: Configuration | None) -> None:
        self._config = state
