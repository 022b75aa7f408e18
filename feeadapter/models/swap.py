"""Pydantic models for swap requests submitted to the adapter."""

from pydantic import BaseModel, Field, field_validator

from feeadapter.models.types import Address, Uint256


class SwapRequest(BaseModel):
    """A caller's request to swap an exact input amount through the adapter.

    The fields are passed to the router unchanged, except amount_in which
    is reduced by the adapter fee first.
    """

    amount_in: Uint256 = Field(alias="amountIn")
    amount_out_min: Uint256 = Field(default=0, alias="amountOutMin")
    path: list[Address] = Field(min_length=2)
    recipient: Address
    deadline: Uint256

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("amount_in")
    @classmethod
    def _positive_amount(cls, value: int) -> int:
        if value == 0:
            raise ValueError("amount_in must be positive")
        return value

    @property
    def token_in(self) -> str:
        """Input asset (first path element)."""
        return self.path[0]

    @property
    def token_out(self) -> str:
        """Output asset (last path element)."""
        return self.path[-1]
