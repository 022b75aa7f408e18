"""Deployment of a fee router adapter onto a fresh ledger.

Builds the same setup as the production deploy: an example token minted to
the deployer and an adapter initialized with the router, fee and
recipients. When no external router address is configured, a local
constant product router is deployed and seeded with liquidity so swaps
work end to end.

Usage:
    feeadapter-deploy --fee-bps 30
    FEE_ADAPTER_ROUTER_ADDRESS=0x... feeadapter-deploy
"""

from __future__ import annotations

import argparse
import dataclasses
import functools
import os
from dataclasses import dataclass, field
from typing import Any

import structlog

from feeadapter.adapter.adapter import FeeRouterAdapter
from feeadapter.adapter.lifecycle import AdapterPolicy
from feeadapter.constants import BPS_DENOMINATOR
from feeadapter.ledger.ledger import Ledger, derive_address
from feeadapter.ledger.token import ERC20Token
from feeadapter.models.types import normalize_address
from feeadapter.router.uniswap_v2 import ConstantProductRouter

logger = structlog.get_logger()

# Example token supply minted to the deployer (1M tokens, 18 decimals)
INITIAL_SUPPLY = 1_000_000 * 10**18

# Liquidity seeded into the local router's EXMPL/WOKT pair
SEED_LIQUIDITY = 100_000 * 10**18

DEFAULT_FEE_BPS = 30


@dataclass(frozen=True)
class DeploySettings:
    """Deployment parameters.

    Attributes:
        deployer: Deployer address; becomes owner and default recipient
        fee_bps: Initial adapter fee (30 = 0.3%)
        router_address: External router to configure. If None, a local
            ConstantProductRouter is deployed instead.
        ops_recipient, burn_recipient, rewards_recipient: Fee recipients.
            Default to the deployer.
        policy: Adapter behavior flags
    """

    deployer: str = field(default_factory=lambda: derive_address("deployer"))
    fee_bps: int = DEFAULT_FEE_BPS
    router_address: str | None = None
    ops_recipient: str | None = None
    burn_recipient: str | None = None
    rewards_recipient: str | None = None
    policy: AdapterPolicy = field(default_factory=AdapterPolicy)

    @classmethod
    def from_env(cls) -> DeploySettings:
        """Read settings from environment variables.

        - FEE_ADAPTER_ROUTER_ADDRESS (or OKX_ROUTER_ADDRESS): external router
        - FEE_ADAPTER_FEE_BPS: initial fee (default 30)
        - FEE_ADAPTER_DEPLOYER: deployer address
        - FEE_ADAPTER_ADMIN_WHILE_PAUSED: see AdapterPolicy
        """
        router = os.environ.get("FEE_ADAPTER_ROUTER_ADDRESS") or os.environ.get(
            "OKX_ROUTER_ADDRESS"
        )
        deployer = os.environ.get("FEE_ADAPTER_DEPLOYER")
        return cls(
            deployer=normalize_address(deployer, validate=True)
            if deployer
            else derive_address("deployer"),
            fee_bps=int(os.environ.get("FEE_ADAPTER_FEE_BPS", str(DEFAULT_FEE_BPS))),
            router_address=normalize_address(router, validate=True) if router else None,
            policy=AdapterPolicy.from_env(),
        )


@dataclass
class Deployment:
    """Everything created by deploy()."""

    ledger: Ledger
    token: ERC20Token
    adapter: FeeRouterAdapter
    settings: DeploySettings
    router: ConstantProductRouter | None = None
    quote_token: ERC20Token | None = None

    @property
    def router_address(self) -> str:
        return self.adapter.router


def deploy(settings: DeploySettings | None = None, ledger: Ledger | None = None) -> Deployment:
    """Deploy the example token, an optional local router and the adapter."""
    settings = settings or DeploySettings()
    ledger = ledger or Ledger()
    deployer = settings.deployer

    logger.info("deployment_started", deployer=deployer)

    token = ledger.deploy_token(
        "Example Token", "EXMPL", initial_supply=INITIAL_SUPPLY, holder=deployer
    )

    router: ConstantProductRouter | None = None
    quote_token: ERC20Token | None = None
    router_address = settings.router_address
    if router_address is None:
        quote_token = ledger.deploy_token(
            "Wrapped OKT", "WOKT", initial_supply=SEED_LIQUIDITY, holder=deployer
        )
        router = ConstantProductRouter(ledger)
        token.approve(router.address, SEED_LIQUIDITY, sender=deployer)
        quote_token.approve(router.address, SEED_LIQUIDITY, sender=deployer)
        router.add_liquidity(
            token.address,
            quote_token.address,
            SEED_LIQUIDITY,
            SEED_LIQUIDITY,
            sender=deployer,
        )
        router_address = router.address

    adapter = FeeRouterAdapter(ledger, policy=settings.policy)
    adapter.initialize(
        router_address,
        settings.fee_bps,
        settings.ops_recipient or deployer,
        settings.burn_recipient or deployer,
        settings.rewards_recipient or deployer,
        sender=deployer,
    )

    logger.info(
        "deployment_complete",
        token=token.address,
        adapter=adapter.address,
        router=router_address,
        local_router=router is not None,
    )
    return Deployment(
        ledger=ledger,
        token=token,
        adapter=adapter,
        settings=settings,
        router=router,
        quote_token=quote_token,
    )


@functools.cache
def get_default_deployment() -> Deployment:
    """Process-wide deployment configured from the environment."""
    return deploy(DeploySettings.from_env())


def format_summary(deployment: Deployment) -> str:
    """Human readable deployment summary."""
    adapter = deployment.adapter
    lines = [
        "=== Deployment Summary ===",
        f"ExampleERC20: {deployment.token.address}",
        f"FeeRouterAdapter: {adapter.address}",
        f"Implementation: {type(adapter.implementation).__name__} "
        f"v{adapter.implementation.version}",
        "",
        "Configuration:",
        f"- Router: {adapter.router}" + (" (local)" if deployment.router else ""),
        f"- Fee: {adapter.fee_bps} bps ({adapter.fee_bps * 100 / BPS_DENOMINATOR:.2f}%)",
        f"- Ops Recipient: {adapter.ops_recipient}",
        f"- Burn Recipient: {adapter.burn_recipient}",
        f"- Rewards Recipient: {adapter.rewards_recipient}",
        f"- Splits: {adapter.ops_split}/{adapter.burn_split}/{adapter.rewards_split}",
    ]
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Deploy a fee router adapter")
    parser.add_argument(
        "--fee-bps",
        type=int,
        default=None,
        help="Adapter fee in basis points (default: FEE_ADAPTER_FEE_BPS or 30)",
    )
    parser.add_argument(
        "--router",
        default=None,
        help="External router address (default: deploy a local router)",
    )
    args = parser.parse_args(argv)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ]
    )

    settings = DeploySettings.from_env()
    overrides: dict[str, Any] = {}
    if args.fee_bps is not None:
        overrides["fee_bps"] = args.fee_bps
    if args.router is not None:
        overrides["router_address"] = normalize_address(args.router, validate=True)
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    deployment = deploy(settings)
    print(f"\n{format_summary(deployment)}")
    print("\nDeployment complete!")


if __name__ == "__main__":
    main()
