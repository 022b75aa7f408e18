"""Exchange routers the adapter can forward swaps to."""

from feeadapter.router.base import (
    SWAP_EXACT_TOKENS_SELECTOR,
    InsufficientOutputAmount,
    RouteExpired,
    RouterError,
    SwapRouter,
    UnknownPair,
    encode_swap_calldata,
)
from feeadapter.router.uniswap_v2 import ConstantProductRouter, sort_tokens

__all__ = [
    "SwapRouter",
    "RouterError",
    "RouteExpired",
    "InsufficientOutputAmount",
    "UnknownPair",
    "SWAP_EXACT_TOKENS_SELECTOR",
    "encode_swap_calldata",
    "ConstantProductRouter",
    "sort_tokens",
]
