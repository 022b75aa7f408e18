"""ERC20-style fungible tokens held in a ledger.

Tokens track balances and allowances in base units (no decimals scaling)
and enforce the same checks an ERC20 contract does before moving funds.
Failures raise TokenError subclasses and leave the token untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import structlog

from feeadapter.constants import ZERO_ADDRESS
from feeadapter.models.types import normalize_address
from feeadapter.safe_int import S, SafeIntError

logger = structlog.get_logger()


class TokenError(Exception):
    """Base class for token transfer errors."""

    pass


class InsufficientBalance(TokenError):
    """Sender balance is below the transfer amount."""

    pass


class InsufficientAllowance(TokenError):
    """Spender allowance is below the transfer amount."""

    pass


class InvalidTransfer(TokenError):
    """Transfer to or from the zero address, or an amount outside uint256."""

    pass


@runtime_checkable
class AssetToken(Protocol):
    """Asset transfer interface consumed by the adapter.

    Implementations signal failure either by raising TokenError or by
    returning False, as some deployed tokens do.
    """

    address: str

    def balance_of(self, account: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def approve(self, spender: str, amount: int, *, sender: str) -> bool: ...

    def transfer(self, to: str, amount: int, *, sender: str) -> bool: ...

    def transfer_from(self, owner: str, to: str, amount: int, *, sender: str) -> bool: ...


@dataclass
class TokenState:
    """Mutable storage of a token, snapshotted by the ledger."""

    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[tuple[str, str], int] = field(default_factory=dict)
    total_supply: int = 0

    def copy(self) -> TokenState:
        return TokenState(dict(self.balances), dict(self.allowances), self.total_supply)


class ERC20Token:
    """In-memory ERC20 token.

    Args:
        address: Token address
        name: Human readable name
        symbol: Ticker symbol
        decimals: Display decimals (amounts are always base units)
    """

    def __init__(self, address: str, name: str, symbol: str, decimals: int = 18) -> None:
        self.address = normalize_address(address, validate=True)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._state = TokenState()

    def __repr__(self) -> str:
        return f"ERC20Token({self.symbol}, {self.address})"

    # --- Views ---

    @property
    def total_supply(self) -> int:
        return self._state.total_supply

    def balance_of(self, account: str) -> int:
        return self._state.balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        key = (normalize_address(owner), normalize_address(spender))
        return self._state.allowances.get(key, 0)

    # --- Mutations ---

    def approve(self, spender: str, amount: int, *, sender: str) -> bool:
        """Set spender's allowance over sender's balance to amount."""
        owner, spender = normalize_address(sender), normalize_address(spender)
        if ZERO_ADDRESS in (owner, spender):
            raise InvalidTransfer("ERC20: approve to or from the zero address")
        self._state.allowances[(owner, spender)] = self._checked(amount)
        return True

    def transfer(self, to: str, amount: int, *, sender: str) -> bool:
        """Move amount from sender to to."""
        self._move(normalize_address(sender), normalize_address(to), self._checked(amount))
        return True

    def transfer_from(self, owner: str, to: str, amount: int, *, sender: str) -> bool:
        """Move amount from owner to to, spending sender's allowance."""
        owner, to, spender = (normalize_address(a) for a in (owner, to, sender))
        amount = self._checked(amount)
        allowed = self._state.allowances.get((owner, spender), 0)
        if allowed < amount:
            raise InsufficientAllowance(
                f"ERC20: insufficient allowance ({allowed} < {amount}) for {spender}"
            )
        self._move(owner, to, amount)
        self._state.allowances[(owner, spender)] = allowed - amount
        return True

    def mint(self, to: str, amount: int) -> None:
        """Create amount new tokens for to."""
        to = normalize_address(to)
        if to == ZERO_ADDRESS:
            raise InvalidTransfer("ERC20: mint to the zero address")
        amount = self._checked(amount)
        try:
            supply = (S(self._state.total_supply) + amount).value
        except SafeIntError as err:
            raise InvalidTransfer(f"ERC20: mint overflows total supply: {err}") from err
        self._state.total_supply = supply
        self._state.balances[to] = self.balance_of(to) + amount
        logger.debug("token_minted", token=self.symbol, to=to, amount=str(amount))

    def _move(self, source: str, to: str, amount: int) -> None:
        if ZERO_ADDRESS in (source, to):
            raise InvalidTransfer("ERC20: transfer to or from the zero address")
        balance = self._state.balances.get(source, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"ERC20: transfer amount exceeds balance ({balance} < {amount}) of {source}"
            )
        self._state.balances[source] = balance - amount
        self._state.balances[to] = self._state.balances.get(to, 0) + amount

    @staticmethod
    def _checked(amount: int) -> int:
        try:
            return S(amount).value
        except (SafeIntError, TypeError) as err:
            raise InvalidTransfer(f"ERC20: invalid amount {amount!r}") from err

    # --- Ledger snapshot support ---

    def snapshot(self) -> TokenState:
        return self._state.copy()

    def restore(self, state: TokenState) -> None:
        self._state = state.copy()
