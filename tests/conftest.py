"""Pytest configuration and fixtures."""

from dataclasses import dataclass

import pytest

from feeadapter.adapter.adapter import FeeRouterAdapter
from feeadapter.ledger.ledger import Ledger
from feeadapter.ledger.token import ERC20Token
from tests.helpers import BURN, E18, NOW, OPS, OWNER, REWARDS, USER
from tests.helpers.mocks import MockRouter

# Initial fee for the adapter fixture (1%)
FEE_BPS = 100


@dataclass
class Clock:
    """Settable block clock for the test ledger."""

    now: int = NOW

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def ledger(clock: Clock) -> Ledger:
    """Ledger whose timestamp is controlled by the clock fixture."""
    return Ledger(clock=clock)


@pytest.fixture
def token(ledger: Ledger) -> ERC20Token:
    """Test token with 1M supply held by the owner."""
    return ledger.deploy_token(
        "Test Token", "TEST", initial_supply=1_000_000 * E18, holder=OWNER
    )


@pytest.fixture
def other_token(ledger: Ledger, mock_router: MockRouter) -> ERC20Token:
    """Output token for two-token paths. The mock router holds its supply."""
    return ledger.deploy_token(
        "Other Token",
        "OTHER",
        initial_supply=1_000_000 * E18,
        holder=mock_router.address,
    )


@pytest.fixture
def mock_router(ledger: Ledger) -> MockRouter:
    return MockRouter(ledger)


@pytest.fixture
def uninitialized_adapter(ledger: Ledger) -> FeeRouterAdapter:
    return FeeRouterAdapter(ledger)


@pytest.fixture
def adapter(uninitialized_adapter: FeeRouterAdapter, mock_router: MockRouter) -> FeeRouterAdapter:
    """Adapter initialized by OWNER with a 1% fee and the mock router."""
    uninitialized_adapter.initialize(
        mock_router.address, FEE_BPS, OPS, BURN, REWARDS, sender=OWNER
    )
    return uninitialized_adapter


@pytest.fixture
def fund_user(token: ERC20Token, adapter: FeeRouterAdapter):
    """Mint amount to USER and approve the adapter for it."""

    def _fund(amount: int, account: str = USER, asset: ERC20Token | None = None) -> None:
        asset = asset or token
        asset.mint(account, amount)
        asset.approve(adapter.address, amount, sender=account)

    return _fund
