"""Transactional ledger holding tokens and stateful participants.

The ledger stands in for the chain the adapter runs on: it owns the block
clock, derives account addresses, and gives operations all-or-nothing
semantics through atomic().
"""

from __future__ import annotations

import hashlib
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Protocol

import structlog

from feeadapter.ledger.token import ERC20Token
from feeadapter.models.types import normalize_address

logger = structlog.get_logger()


class Snapshottable(Protocol):
    """Anything whose state the ledger must roll back on failure."""

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...


def derive_address(label: str) -> str:
    """Deterministic address for a human readable label.

    The same label always yields the same address, which keeps deployments
    and tests reproducible.
    """
    digest = hashlib.sha256(label.encode()).hexdigest()
    return "0x" + digest[-40:]


class Ledger:
    """World state shared by tokens, routers and the adapter.

    Args:
        clock: Returns the current block timestamp in unix seconds.
            Defaults to wall-clock time.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock or (lambda: int(time.time()))
        self._tokens: dict[str, ERC20Token] = {}
        self._contracts: dict[str, Any] = {}
        self._participants: list[Snapshottable] = []
        self._depth = 0

    @property
    def timestamp(self) -> int:
        """Current block timestamp."""
        return self._clock()

    # --- Tokens ---

    def deploy_token(
        self,
        name: str,
        symbol: str,
        *,
        initial_supply: int = 0,
        holder: str | None = None,
        decimals: int = 18,
        address: str | None = None,
    ) -> ERC20Token:
        """Create a token, optionally minting initial_supply to holder."""
        token = ERC20Token(address or derive_address(f"token:{symbol}"), name, symbol, decimals)
        self.add_token(token)
        if initial_supply:
            if holder is None:
                raise ValueError("holder is required when minting an initial supply")
            token.mint(holder, initial_supply)
        logger.info(
            "token_deployed",
            symbol=symbol,
            address=token.address,
            initial_supply=str(initial_supply),
        )
        return token

    def add_token(self, token: ERC20Token) -> ERC20Token:
        """Register an already constructed token (e.g. a subclass with custom rules).

        Raises:
            ValueError: If a token is already deployed at the same address
        """
        if token.address in self._tokens:
            raise ValueError(f"Token already deployed at {token.address}")
        self._tokens[token.address] = token
        return token

    def token(self, address: str) -> ERC20Token:
        """Look up a deployed token.

        Raises:
            KeyError: If no token is deployed at address
        """
        try:
            return self._tokens[normalize_address(address)]
        except KeyError:
            raise KeyError(f"No token deployed at {address}") from None

    @property
    def tokens(self) -> list[ERC20Token]:
        return list(self._tokens.values())

    # --- Contracts ---

    def register_contract(self, contract: Any) -> Any:
        """Make contract reachable by its address attribute.

        Raises:
            ValueError: If the address is already taken
        """
        address = normalize_address(contract.address, validate=True)
        if address in self._contracts or address in self._tokens:
            raise ValueError(f"Address already in use: {address}")
        self._contracts[address] = contract
        return contract

    def contract(self, address: str) -> Any | None:
        """Contract deployed at address, or None for a plain account."""
        return self._contracts.get(normalize_address(address))

    # --- Transactions ---

    def register(self, participant: Snapshottable) -> None:
        """Include participant's state in every atomic() snapshot."""
        self._participants.append(participant)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run the enclosed block as one all-or-nothing unit.

        Every token and registered participant is snapshotted on entry.
        If the block raises, all of them are restored, anything registered
        inside the block is dropped, and the exception propagates
        unchanged. Scopes nest: an inner failure caught by the
        caller only rolls back the inner scope.
        """
        token_states = {address: token.snapshot() for address, token in self._tokens.items()}
        participant_states = [p.snapshot() for p in self._participants]
        contract_keys = set(self._contracts)
        self._depth += 1
        try:
            yield
        except BaseException:
            for address in set(self._tokens) - token_states.keys():
                del self._tokens[address]
            for address in set(self._contracts) - contract_keys:
                del self._contracts[address]
            del self._participants[len(participant_states) :]
            for address, state in token_states.items():
                self._tokens[address].restore(state)
            for participant, state in zip(self._participants, participant_states, strict=True):
                participant.restore(state)
            logger.debug("ledger_rolled_back", depth=self._depth)
            raise
        finally:
            self._depth -= 1

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0
