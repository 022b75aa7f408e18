"""The fee router adapter and its configuration/lifecycle components."""

from feeadapter.adapter.adapter import FeeRouterAdapter, SwapReceipt
from feeadapter.adapter.config import Configuration, ConfigurationStore
from feeadapter.adapter.lifecycle import AdapterPolicy, Lifecycle, LifecycleState, ReentrancyGuard

__all__ = [
    "FeeRouterAdapter",
    "SwapReceipt",
    "Configuration",
    "ConfigurationStore",
    "AdapterPolicy",
    "Lifecycle",
    "LifecycleState",
    "ReentrancyGuard",
]
