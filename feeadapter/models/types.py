"""Shared type definitions for adapter models.

These types are used by the swap request models and the HTTP API.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

# Maximum uint256 value
UINT256_MAX = 2**256 - 1


def validate_uint256(value: Any) -> int:
    """Validate that a value is a uint256 and return it as an int.

    Accepts ints and decimal strings (JSON clients send large amounts as
    strings to avoid float precision loss).

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 must be an integer, got bool")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")

    return value


def validate_address(value: Any) -> str:
    """Validate an address and return it normalized to lowercase.

    Raises:
        ValueError: If value is not a 0x-prefixed 40 hex char string
    """
    if not is_valid_address(value):
        raise ValueError(f"Invalid address: {value!r} (must be 0x + 40 hex chars)")
    return normalize_address(value)


# Address, normalized to lowercase on validation
Address = Annotated[str, BeforeValidator(validate_address)]

# 256-bit unsigned integer, accepted as int or decimal string
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an address to lowercase with 0x prefix.

    Args:
        address: An address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses.

    Raises:
        ValueError: If validate=True and address is not a valid address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: Any) -> bool:
    """Check if a value is a 0x-prefixed, 40 hex char address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False
