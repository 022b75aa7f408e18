"""Constant product router (UniswapV2 math) on top of the ledger.

Pairs are plain ledger accounts: a pair's reserves are its token balances,
so every swap moves real balances and rolls back with the ledger.
"""

from __future__ import annotations

import structlog

from feeadapter.ledger.ledger import Ledger, derive_address
from feeadapter.models.types import normalize_address
from feeadapter.router.base import (
    InsufficientOutputAmount,
    RouteExpired,
    RouterError,
    UnknownPair,
    encode_swap_calldata,
)
from feeadapter.safe_int import S

logger = structlog.get_logger()


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Order a token pair canonically (lowest address first).

    Raises:
        RouterError: If both tokens are the same
    """
    a, b = normalize_address(token_a), normalize_address(token_b)
    if a == b:
        raise RouterError("UniswapV2Library: IDENTICAL_ADDRESSES")
    return (a, b) if a < b else (b, a)


class ConstantProductRouter:
    """UniswapV2-style router with multi-hop exact-input swaps.

    Formula: amount_out = (in * fee * res_out) / (res_in * 10000 + in * fee)
    where fee = 10000 - fee_bps (9970 for the standard 0.3% pool fee).

    Args:
        ledger: Ledger holding the pair balances
        address: Router address. Derived from "router" if not given.
        fee_bps: Pool fee in basis points (30 = 0.3%)
    """

    def __init__(self, ledger: Ledger, address: str | None = None, fee_bps: int = 30) -> None:
        self.ledger = ledger
        self.address = normalize_address(address or derive_address("router"), validate=True)
        self.fee_bps = fee_bps
        self._pairs: dict[tuple[str, str], str] = {}
        ledger.register_contract(self)

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier for AMM math (10000 - fee_bps)."""
        return 10000 - self.fee_bps

    # --- Pairs ---

    def pair_for(self, token_a: str, token_b: str) -> str:
        """Address of the pair for two tokens.

        Raises:
            UnknownPair: If the pair has no liquidity
        """
        key = sort_tokens(token_a, token_b)
        try:
            return self._pairs[key]
        except KeyError:
            raise UnknownPair(f"No pair for {key[0]}/{key[1]}") from None

    def add_liquidity(
        self,
        token_a: str,
        token_b: str,
        amount_a: int,
        amount_b: int,
        *,
        sender: str,
    ) -> str:
        """Deposit both tokens into the pair, creating it if needed.

        The sender must have approved the router for both amounts.

        Returns:
            Pair address
        """
        key = sort_tokens(token_a, token_b)
        pair = self._pairs.get(key) or derive_address(f"pair:{key[0]}:{key[1]}")
        with self.ledger.atomic():
            self.ledger.token(token_a).transfer_from(sender, pair, amount_a, sender=self.address)
            self.ledger.token(token_b).transfer_from(sender, pair, amount_b, sender=self.address)
        self._pairs[key] = pair
        logger.info(
            "liquidity_added",
            pair=pair,
            token_a=normalize_address(token_a),
            token_b=normalize_address(token_b),
            amount_a=str(amount_a),
            amount_b=str(amount_b),
        )
        return pair

    def get_reserves(self, token_in: str, token_out: str) -> tuple[int, int]:
        """Reserves ordered as (reserve_in, reserve_out)."""
        pair = self.pair_for(token_in, token_out)
        return (
            self.ledger.token(token_in).balance_of(pair),
            self.ledger.token(token_out).balance_of(pair),
        )

    # --- Math ---

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Output amount for a single hop using the constant product formula."""
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_with_fee = S(amount_in) * S(self.fee_multiplier)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(10000) + amount_in_with_fee

        return (numerator // denominator).value

    def get_amounts_out(self, amount_in: int, path: list[str]) -> list[int]:
        """Amounts at every step of path, starting with amount_in.

        Raises:
            RouterError: If the path is shorter than two tokens
            UnknownPair: If any hop has no pair
        """
        if len(path) < 2:
            raise RouterError("UniswapV2Library: INVALID_PATH")
        amounts = [amount_in]
        for token_in, token_out in zip(path, path[1:], strict=False):
            reserve_in, reserve_out = self.get_reserves(token_in, token_out)
            amounts.append(self.get_amount_out(amounts[-1], reserve_in, reserve_out))
        return amounts

    # --- Swaps ---

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
        """Swap an exact input along path, paying the output to recipient.

        Raises:
            RouteExpired: If deadline is before the ledger timestamp
            InsufficientOutputAmount: If the output is below amount_out_min
            UnknownPair: If any hop has no pair
        """
        if deadline < self.ledger.timestamp:
            raise RouteExpired("UniswapV2Router: EXPIRED")

        amounts = self.get_amounts_out(amount_in, path)
        if amounts[-1] < amount_out_min:
            raise InsufficientOutputAmount(
                f"UniswapV2Router: INSUFFICIENT_OUTPUT_AMOUNT ({amounts[-1]} < {amount_out_min})"
            )

        with self.ledger.atomic():
            first_pair = self.pair_for(path[0], path[1])
            self.ledger.token(path[0]).transfer_from(
                sender, first_pair, amounts[0], sender=self.address
            )
            for i in range(len(path) - 1):
                pair = self.pair_for(path[i], path[i + 1])
                to = self.pair_for(path[i + 1], path[i + 2]) if i < len(path) - 2 else recipient
                self.ledger.token(path[i + 1]).transfer(to, amounts[i + 1], sender=pair)

        logger.debug(
            "router_swap_executed",
            path=[p[-8:] for p in path],
            amount_in=str(amount_in),
            amount_out=str(amounts[-1]),
        )
        return amounts[-1]

    def encode_swap(
        self,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        recipient: str,
        deadline: int,
    ) -> tuple[str, str]:
        """Encode a swap as calldata for this router.

        Returns:
            Tuple of (router_address, calldata)

        Raises:
            ValueError: If any address is invalid
        """
        calldata = encode_swap_calldata(amount_in, amount_out_min, path, recipient, deadline)
        return self.address, calldata
