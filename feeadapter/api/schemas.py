"""Request and response bodies for the adapter HTTP API.

Amounts are serialized as decimal strings so JSON clients never round
uint256 values through floats.
"""

from pydantic import BaseModel, Field, field_serializer

from feeadapter.adapter.adapter import FeeRouterAdapter, SwapReceipt
from feeadapter.fees.result import FeeDistribution
from feeadapter.models.swap import SwapRequest
from feeadapter.models.types import Address, Uint256


class _Body(BaseModel):
    model_config = {"populate_by_name": True}


class SetFeeBody(_Body):
    """Admin bodies carry no caller; the server acts as its admin account."""

    fee_bps: int = Field(alias="feeBps")


class SetSplitsBody(_Body):
    ops_split: int = Field(alias="opsSplit")
    burn_split: int = Field(alias="burnSplit")
    rewards_split: int = Field(alias="rewardsSplit")


class SetRecipientsBody(_Body):
    ops_recipient: Address = Field(alias="opsRecipient")
    burn_recipient: Address = Field(alias="burnRecipient")
    rewards_recipient: Address = Field(alias="rewardsRecipient")


class SetRouterBody(_Body):
    router: Address


class TransferOwnershipBody(_Body):
    new_owner: Address = Field(alias="newOwner")


class RescueBody(_Body):
    token: Address
    destination: Address
    amount: Uint256


class SwapBody(SwapRequest):
    """A SwapRequest plus the submitting account."""

    sender: Address

    def to_request(self) -> SwapRequest:
        return SwapRequest.model_validate(self.model_dump(exclude={"sender"}))


class ConfigResponse(_Body):
    owner: str
    router: str
    fee_bps: int = Field(alias="feeBps")
    max_fee_bps: int = Field(alias="maxFeeBps")
    ops_split: int = Field(alias="opsSplit")
    burn_split: int = Field(alias="burnSplit")
    rewards_split: int = Field(alias="rewardsSplit")
    ops_recipient: str = Field(alias="opsRecipient")
    burn_recipient: str = Field(alias="burnRecipient")
    rewards_recipient: str = Field(alias="rewardsRecipient")
    paused: bool
    implementation: str

    @classmethod
    def from_adapter(cls, adapter: FeeRouterAdapter) -> "ConfigResponse":
        config = adapter.config
        return cls(
            owner=config.owner,
            router=config.router,
            fee_bps=config.fee_bps,
            max_fee_bps=adapter.MAX_FEE_BPS,
            ops_split=config.ops_split,
            burn_split=config.burn_split,
            rewards_split=config.rewards_split,
            ops_recipient=config.ops_recipient,
            burn_recipient=config.burn_recipient,
            rewards_recipient=config.rewards_recipient,
            paused=adapter.paused,
            implementation=adapter.implementation.version,
        )


class QuoteResponse(_Body):
    amount_in: int = Field(alias="amountIn")
    fee_amount: int = Field(alias="feeAmount")
    ops_share: int = Field(alias="opsShare")
    burn_share: int = Field(alias="burnShare")
    rewards_share: int = Field(alias="rewardsShare")
    amount_forwarded: int = Field(alias="amountForwarded")

    @field_serializer(
        "amount_in", "fee_amount", "ops_share", "burn_share", "rewards_share", "amount_forwarded"
    )
    def _as_str(self, value: int) -> str:
        return str(value)

    @classmethod
    def from_distribution(cls, distribution: FeeDistribution) -> "QuoteResponse":
        return cls(
            amount_in=distribution.amount_in,
            fee_amount=distribution.fee_amount,
            ops_share=distribution.ops_share,
            burn_share=distribution.burn_share,
            rewards_share=distribution.rewards_share,
            amount_forwarded=distribution.amount_forwarded,
        )


class SwapResponse(QuoteResponse):
    router: str
    amount_out: int = Field(alias="amountOut")
    calldata: str

    @field_serializer("amount_out")
    def _amount_out_as_str(self, value: int) -> str:
        return str(value)

    @classmethod
    def from_receipt(cls, receipt: SwapReceipt) -> "SwapResponse":
        distribution = receipt.distribution
        return cls(
            amount_in=distribution.amount_in,
            fee_amount=distribution.fee_amount,
            ops_share=distribution.ops_share,
            burn_share=distribution.burn_share,
            rewards_share=distribution.rewards_share,
            amount_forwarded=distribution.amount_forwarded,
            router=receipt.router,
            amount_out=receipt.amount_out,
            calldata=receipt.calldata,
        )
