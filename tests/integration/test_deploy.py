"""Tests for the deployment script."""

import pytest

from feeadapter.deploy import (
    DEFAULT_FEE_BPS,
    INITIAL_SUPPLY,
    SEED_LIQUIDITY,
    DeploySettings,
    deploy,
    format_summary,
    main,
)
from feeadapter.ledger.ledger import Ledger, derive_address
from tests.helpers import DEADLINE, E18, NOW, USER

EXTERNAL_ROUTER = "0x" + "5c" * 20


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "FEE_ADAPTER_ROUTER_ADDRESS",
        "OKX_ROUTER_ADDRESS",
        "FEE_ADAPTER_FEE_BPS",
        "FEE_ADAPTER_DEPLOYER",
        "FEE_ADAPTER_ADMIN_WHILE_PAUSED",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDeploySettings:
    def test_defaults(self):
        settings = DeploySettings.from_env()

        assert settings.fee_bps == DEFAULT_FEE_BPS
        assert settings.router_address is None
        assert settings.deployer == derive_address("deployer")
        assert settings.policy.allow_admin_while_paused

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("OKX_ROUTER_ADDRESS", EXTERNAL_ROUTER.upper().replace("0X", "0x"))
        monkeypatch.setenv("FEE_ADAPTER_FEE_BPS", "45")
        monkeypatch.setenv("FEE_ADAPTER_ADMIN_WHILE_PAUSED", "false")

        settings = DeploySettings.from_env()

        assert settings.router_address == EXTERNAL_ROUTER
        assert settings.fee_bps == 45
        assert not settings.policy.allow_admin_while_paused

    def test_invalid_router_env(self, monkeypatch):
        monkeypatch.setenv("FEE_ADAPTER_ROUTER_ADDRESS", "0x1234")
        with pytest.raises(ValueError):
            DeploySettings.from_env()


class TestDeploy:
    def test_local_router(self):
        deployment = deploy(ledger=Ledger(clock=lambda: NOW))
        deployer = deployment.settings.deployer
        adapter = deployment.adapter

        assert deployment.router is not None
        assert adapter.router == deployment.router.address
        assert adapter.owner == deployer
        assert adapter.fee_bps == DEFAULT_FEE_BPS
        assert adapter.config.recipients == (deployer, deployer, deployer)
        assert deployment.token.balance_of(deployer) == INITIAL_SUPPLY - SEED_LIQUIDITY
        assert deployment.token.symbol == "EXMPL"

    def test_local_router_swaps(self):
        deployment = deploy(ledger=Ledger(clock=lambda: NOW))
        token, quote_token, adapter = (
            deployment.token,
            deployment.quote_token,
            deployment.adapter,
        )
        token.transfer(USER, 10 * E18, sender=deployment.settings.deployer)
        token.approve(adapter.address, 10 * E18, sender=USER)

        receipt = adapter.swap_exact_tokens_for_tokens_with_fee(
            10 * E18, 1, [token.address, quote_token.address], USER, DEADLINE, sender=USER
        )

        assert receipt.distribution.fee_amount == 10 * E18 * DEFAULT_FEE_BPS // 10_000
        assert quote_token.balance_of(USER) == receipt.amount_out > 0

    def test_external_router(self):
        deployment = deploy(DeploySettings(router_address=EXTERNAL_ROUTER, fee_bps=10))

        assert deployment.router is None
        assert deployment.quote_token is None
        assert deployment.router_address == EXTERNAL_ROUTER
        assert deployment.adapter.fee_bps == 10
        assert deployment.token.balance_of(deployment.settings.deployer) == INITIAL_SUPPLY

    def test_summary(self):
        summary = format_summary(deploy())

        assert "FeeRouterAdapter:" in summary
        assert "Fee: 30 bps (0.30%)" in summary
        assert "(local)" in summary


class TestMain:
    def test_prints_summary(self, capsys):
        main(["--fee-bps", "50", "--router", EXTERNAL_ROUTER])

        out = capsys.readouterr().out
        assert "Fee: 50 bps (0.50%)" in out
        assert EXTERNAL_ROUTER in out
        assert "Deployment complete!" in out
