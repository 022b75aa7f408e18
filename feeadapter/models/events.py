"""Event records emitted by the adapter.

Events are appended to the adapter's event log when an operation succeeds
and disappear with everything else when it is rolled back.
"""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class AdapterEvent:
    """Base class for adapter events."""

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, Any]:
        """Event fields plus its name, for logging and the HTTP API."""
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class Initialized(AdapterEvent):
    owner: str
    router: str
    fee_bps: int


@dataclass(frozen=True)
class OwnershipTransferred(AdapterEvent):
    previous_owner: str
    new_owner: str


@dataclass(frozen=True)
class FeeUpdated(AdapterEvent):
    old_fee_bps: int
    new_fee_bps: int


@dataclass(frozen=True)
class SplitsUpdated(AdapterEvent):
    ops_split: int
    burn_split: int
    rewards_split: int


@dataclass(frozen=True)
class RecipientsUpdated(AdapterEvent):
    ops_recipient: str
    burn_recipient: str
    rewards_recipient: str


@dataclass(frozen=True)
class RouterUpdated(AdapterEvent):
    old_router: str
    new_router: str


@dataclass(frozen=True)
class Paused(AdapterEvent):
    account: str


@dataclass(frozen=True)
class Unpaused(AdapterEvent):
    account: str


@dataclass(frozen=True)
class Upgraded(AdapterEvent):
    implementation: str


@dataclass(frozen=True)
class FeeTaken(AdapterEvent):
    user: str
    token: str
    fee_amount: int
    ops_share: int
    burn_share: int
    rewards_share: int


@dataclass(frozen=True)
class SwapForwarded(AdapterEvent):
    user: str
    router: str
    amount_in: int
    amount_forwarded: int
    amount_out: int


@dataclass(frozen=True)
class TokensRescued(AdapterEvent):
    token: str
    destination: str
    amount: int
