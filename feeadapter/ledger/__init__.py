"""In-process ledger of tokens and accounts the adapter operates on."""

from feeadapter.ledger.ledger import Ledger, Snapshottable, derive_address
from feeadapter.ledger.token import (
    AssetToken,
    ERC20Token,
    InsufficientAllowance,
    InsufficientBalance,
    InvalidTransfer,
    TokenError,
)

__all__ = [
    "Ledger",
    "Snapshottable",
    "derive_address",
    "AssetToken",
    "ERC20Token",
    "TokenError",
    "InsufficientBalance",
    "InsufficientAllowance",
    "InvalidTransfer",
]
