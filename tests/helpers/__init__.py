"""Test helpers for the fee router adapter.

Usage:
    from tests.helpers import OWNER, USER, DEADLINE, E18
    from tests.helpers.mocks import MockRouter
"""

from tests.helpers.constants import (
    BURN,
    DEADLINE,
    E18,
    NOW,
    OPS,
    OWNER,
    REWARDS,
    STRANGER,
    USER,
)

__all__ = [
    "NOW",
    "DEADLINE",
    "E18",
    "OWNER",
    "OPS",
    "BURN",
    "REWARDS",
    "USER",
    "STRANGER",
]
