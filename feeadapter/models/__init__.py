"""Data models for the fee router adapter."""

from feeadapter.models.events import (
    AdapterEvent,
    FeeTaken,
    FeeUpdated,
    Initialized,
    OwnershipTransferred,
    Paused,
    RecipientsUpdated,
    RouterUpdated,
    SplitsUpdated,
    SwapForwarded,
    TokensRescued,
    Unpaused,
    Upgraded,
)
from feeadapter.models.swap import SwapRequest
from feeadapter.models.types import Address, Uint256, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "normalize_address",
    # Requests
    "SwapRequest",
    # Events
    "AdapterEvent",
    "Initialized",
    "OwnershipTransferred",
    "FeeUpdated",
    "SplitsUpdated",
    "RecipientsUpdated",
    "RouterUpdated",
    "Paused",
    "Unpaused",
    "Upgraded",
    "FeeTaken",
    "SwapForwarded",
    "TokensRescued",
]
