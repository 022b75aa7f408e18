"""Tests for the adapter HTTP API.

The adapter is injected through FastAPI dependency overrides, so each test
runs against its own ledger.
"""

import pytest
from fastapi.testclient import TestClient

from feeadapter.api.endpoints import ADMIN_TOKEN_ENV, get_adapter, get_admin_account
from feeadapter.api.main import ERROR_STATUS, MAX_REQUEST_SIZE, app
from feeadapter.errors import FeeAdapterError
from feeadapter.router import RouterError
from tests.helpers import DEADLINE, E18, OWNER, STRANGER, USER

AMOUNT = 100 * E18
ADMIN_TOKEN = "test-admin-token"
AUTH = {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def client(adapter, monkeypatch):
    monkeypatch.setenv(ADMIN_TOKEN_ENV, ADMIN_TOKEN)
    app.dependency_overrides[get_adapter] = lambda: adapter
    app.dependency_overrides[get_admin_account] = lambda: OWNER
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def swap_payload(token, amount=AMOUNT, sender=USER, **overrides):
    payload = {
        "amountIn": str(amount),
        "amountOutMin": "0",
        "path": [token.address, token.address],
        "recipient": USER,
        "deadline": DEADLINE,
        "sender": sender,
    }
    payload.update(overrides)
    return payload


class TestReadEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_config(self, client, mock_router):
        response = client.get("/config")

        assert response.status_code == 200
        data = response.json()
        assert data["owner"] == OWNER
        assert data["router"] == mock_router.address
        assert data["feeBps"] == 100
        assert data["maxFeeBps"] == 1000
        assert (data["opsSplit"], data["burnSplit"], data["rewardsSplit"]) == (3333, 3333, 3334)
        assert data["paused"] is False
        assert data["implementation"] == "1.0.0"

    def test_config_uninitialized(self, uninitialized_adapter):
        app.dependency_overrides[get_adapter] = lambda: uninitialized_adapter
        try:
            response = TestClient(app).get("/config")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 409
        assert response.json()["error"] == "NotInitialized"

    def test_quote(self, client):
        response = client.get("/quote", params={"amountIn": str(AMOUNT)})

        assert response.status_code == 200
        data = response.json()
        assert data["feeAmount"] == str(E18)
        assert data["amountForwarded"] == str(AMOUNT - E18)
        assert data["rewardsShare"] == "333400000000000000"

    def test_quote_requires_positive_amount(self, client):
        assert client.get("/quote", params={"amountIn": "0"}).status_code == 422

    def test_events(self, client):
        response = client.get("/events")

        assert response.status_code == 200
        assert [e["event"] for e in response.json()] == ["OwnershipTransferred", "Initialized"]


class TestSwapEndpoint:
    def test_swap(self, client, fund_user, token, mock_router):
        fund_user(AMOUNT)

        response = client.post("/swap", json=swap_payload(token))

        assert response.status_code == 200
        data = response.json()
        assert data["feeAmount"] == str(E18)
        assert data["amountOut"] == str(AMOUNT - E18)
        assert data["router"] == mock_router.address
        assert data["calldata"].startswith("0x38ed1739")
        assert token.balance_of(USER) == AMOUNT - E18

    def test_missing_allowance(self, client, token):
        token.mint(USER, AMOUNT)

        response = client.post("/swap", json=swap_payload(token))

        assert response.status_code == 400
        assert response.json()["error"] == "TransferFailed"

    def test_paused(self, client, adapter, fund_user, token):
        fund_user(AMOUNT)
        adapter.pause(sender=OWNER)

        response = client.post("/swap", json=swap_payload(token))

        assert response.status_code == 503
        assert response.json()["detail"] == "Pausable: paused"

    def test_router_failure(self, client, fund_user, token, mock_router):
        fund_user(AMOUNT)
        mock_router.fail_with = RouterError("boom")

        response = client.post("/swap", json=swap_payload(token))

        assert response.status_code == 502
        assert token.balance_of(USER) == AMOUNT

    def test_expired(self, client, fund_user, token):
        fund_user(AMOUNT)
        response = client.post("/swap", json=swap_payload(token, deadline=0))
        assert response.status_code == 422
        assert response.json()["error"] == "DeadlineExpired"

    def test_invalid_body(self, client, token):
        response = client.post("/swap", json=swap_payload(token, path=[token.address]))
        assert response.status_code == 422

    def test_request_too_large(self, client):
        response = client.post(
            "/swap",
            content=b"x" * (MAX_REQUEST_SIZE + 1),
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 413


class TestAdminEndpoints:
    def test_set_fee(self, client, adapter):
        response = client.post("/admin/fee", json={"feeBps": 250}, headers=AUTH)

        assert response.status_code == 200
        assert response.json()["feeBps"] == 250
        assert adapter.fee_bps == 250

    def test_set_fee_too_high(self, client):
        response = client.post("/admin/fee", json={"feeBps": 1001}, headers=AUTH)

        assert response.status_code == 422
        assert response.json()["detail"] == "Fee too high"

    def test_admin_account_not_owner(self, client, adapter):
        """A valid token still acts as the configured account, not the owner."""
        app.dependency_overrides[get_admin_account] = lambda: STRANGER

        response = client.post("/admin/fee", json={"feeBps": 1}, headers=AUTH)

        assert response.status_code == 403
        assert response.json()["error"] == "Unauthorized"
        assert adapter.fee_bps == 100

    def test_set_splits(self, client, adapter):
        response = client.post(
            "/admin/splits",
            json={"opsSplit": 4000, "burnSplit": 3000, "rewardsSplit": 3000},
            headers=AUTH,
        )
        assert response.status_code == 200
        assert adapter.ops_split == 4000

    def test_set_splits_invalid(self, client):
        response = client.post(
            "/admin/splits",
            json={"opsSplit": 4000, "burnSplit": 3000, "rewardsSplit": 2000},
            headers=AUTH,
        )
        assert response.status_code == 422
        assert response.json()["error"] == "SplitsInvalid"

    def test_set_recipients(self, client, adapter):
        response = client.post(
            "/admin/recipients",
            json={
                "opsRecipient": STRANGER,
                "burnRecipient": STRANGER,
                "rewardsRecipient": USER,
            },
            headers=AUTH,
        )
        assert response.status_code == 200
        assert adapter.rewards_recipient == USER

    def test_set_router(self, client, adapter):
        response = client.post("/admin/router", json={"router": STRANGER}, headers=AUTH)
        assert response.status_code == 200
        assert response.json()["router"] == STRANGER

    def test_pause_unpause(self, client, adapter):
        assert client.post("/admin/pause", headers=AUTH).json()["paused"] is True
        assert client.post("/admin/unpause", headers=AUTH).json()["paused"] is False

    def test_unpause_while_active(self, client):
        response = client.post("/admin/unpause", headers=AUTH)
        assert response.status_code == 409
        assert response.json()["error"] == "SystemNotHalted"

    def test_transfer_ownership(self, client, adapter):
        response = client.post("/admin/ownership", json={"newOwner": USER}, headers=AUTH)
        assert response.status_code == 200
        assert adapter.owner == USER

        # The server's account is no longer the owner.
        assert client.post("/admin/pause", headers=AUTH).status_code == 403

    def test_rescue(self, client, adapter, token):
        token.mint(adapter.address, E18)

        response = client.post(
            "/admin/rescue",
            json={"token": token.address, "destination": USER, "amount": str(E18)},
            headers=AUTH,
        )

        assert response.status_code == 200
        assert response.json()["amount"] == str(E18)
        assert token.balance_of(USER) == E18


class TestAdminAuth:
    """Admin routes need the server's bearer token; the body cannot name a caller."""

    def test_anonymous_rescue_rejected(self, client, adapter, token):
        token.mint(adapter.address, 10 * E18)
        owner = client.get("/config").json()["owner"]

        response = client.post(
            "/admin/rescue",
            json={
                "sender": owner,
                "token": token.address,
                "destination": STRANGER,
                "amount": str(10 * E18),
            },
        )

        assert response.status_code == 401
        assert token.balance_of(STRANGER) == 0
        assert token.balance_of(adapter.address) == 10 * E18

    def test_anonymous_pause_rejected(self, client, adapter):
        response = client.post("/admin/pause", json={"sender": OWNER})

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert adapter.paused is False

    def test_wrong_token(self, client, adapter):
        response = client.post(
            "/admin/fee",
            json={"sender": OWNER, "feeBps": 0},
            headers={"Authorization": "Bearer guess"},
        )

        assert response.status_code == 403
        assert adapter.fee_bps == 100

    def test_admin_disabled_without_configured_token(self, client, adapter, monkeypatch):
        monkeypatch.delenv(ADMIN_TOKEN_ENV)

        response = client.post("/admin/pause", headers=AUTH)

        assert response.status_code == 403
        assert adapter.paused is False

    @pytest.mark.parametrize(
        "path",
        [
            "/admin/fee",
            "/admin/splits",
            "/admin/recipients",
            "/admin/router",
            "/admin/ownership",
            "/admin/pause",
            "/admin/unpause",
            "/admin/rescue",
        ],
    )
    def test_every_admin_route_guarded(self, client, path):
        assert client.post(path, json={"sender": OWNER}).status_code == 401


class TestErrorStatus:
    def test_every_error_is_mapped(self):
        """Each concrete adapter error has an explicit HTTP status."""
        import feeadapter.errors as errors

        concrete = {
            obj
            for obj in vars(errors).values()
            if isinstance(obj, type)
            and issubclass(obj, FeeAdapterError)
            and obj is not FeeAdapterError
        }
        assert concrete == set(ERROR_STATUS)
