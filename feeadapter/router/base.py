"""Interface of the underlying exchange the adapter forwards swaps to."""

from typing import Protocol, runtime_checkable

from eth_abi import encode  # type: ignore[attr-defined]

from feeadapter.models.types import is_valid_address

# Function selector of swapExactTokensForTokens(uint256,uint256,address[],address,uint256)
SWAP_EXACT_TOKENS_SELECTOR = "0x38ed1739"


class RouterError(Exception):
    """Base class for router failures."""

    pass


class RouteExpired(RouterError):
    """The swap deadline passed before execution."""

    pass


class InsufficientOutputAmount(RouterError):
    """The swap would return less than amount_out_min."""

    pass


class UnknownPair(RouterError):
    """No liquidity exists for a hop in the path."""

    pass


@runtime_checkable
class SwapRouter(Protocol):
    """Exact-input swap entry point of an exchange router.

    The adapter treats implementations as opaque and untrusted: it approves
    the router for the forwarded amount, calls this method once, and only
    trusts the returned amount after checking it against amount_out_min.
    """

    address: str

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> int:
        """Swap exactly amount_in of path[0] for path[-1], paying recipient.

        Args:
            amount_in: Input amount, pulled from sender via transfer_from
            amount_out_min: Minimum acceptable output (slippage protection)
            path: Token addresses, first is input and last is output
            recipient: Address receiving the output tokens
            deadline: Unix timestamp after which the swap must fail
            sender: Account calling the router (the adapter)

        Returns:
            Realized output amount

        Raises:
            RouterError: If the swap cannot be executed
        """
        ...


def encode_swap_calldata(
    amount_in: int,
    amount_out_min: int,
    path: list[str],
    recipient: str,
    deadline: int,
) -> str:
    """ABI-encode a swap_exact_tokens_for_tokens call as router calldata.

    Returns:
        Hex calldata: selector followed by the encoded arguments

    Raises:
        ValueError: If any address is invalid
    """
    for i, addr in enumerate(path):
        if not is_valid_address(addr):
            raise ValueError(f"Invalid address in path[{i}]: {addr}")
    if not is_valid_address(recipient):
        raise ValueError(f"Invalid recipient address: {recipient}")

    path_bytes = [bytes.fromhex(addr[2:]) for addr in path]
    recipient_bytes = bytes.fromhex(recipient[2:])

    encoded_args = encode(
        ["uint256", "uint256", "address[]", "address", "uint256"],
        [amount_in, amount_out_min, path_bytes, recipient_bytes, deadline],
    )
    return SWAP_EXACT_TOKENS_SELECTOR + encoded_args.hex()
