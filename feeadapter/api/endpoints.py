"""API endpoints for the fee router adapter.

Handlers are async and do not await, so requests run one at a time on the
event loop and each adapter operation completes before the next starts.
"""

import os
import secrets
from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from feeadapter.adapter.adapter import FeeRouterAdapter
from feeadapter.api.schemas import (
    ConfigResponse,
    QuoteResponse,
    RescueBody,
    SetFeeBody,
    SetRecipientsBody,
    SetRouterBody,
    SetSplitsBody,
    SwapBody,
    SwapResponse,
    TransferOwnershipBody,
)
from feeadapter.deploy import get_default_deployment
from feeadapter.models.types import UINT256_MAX, normalize_address

logger = structlog.get_logger()

router = APIRouter()


def get_adapter() -> FeeRouterAdapter:
    """Dependency provider for the adapter instance.

    Override this in tests to inject another adapter:
        app.dependency_overrides[get_adapter] = lambda: adapter
    """
    return get_default_deployment().adapter


@router.get("/config", response_model=ConfigResponse)
async def read_config(adapter: FeeRouterAdapter = Depends(get_adapter)) -> ConfigResponse:
    """Public configuration getters."""
    return ConfigResponse.from_adapter(adapter)


@router.get("/quote", response_model=QuoteResponse)
async def quote(
    amount_in: int = Query(alias="amountIn", gt=0, le=UINT256_MAX),
    adapter: FeeRouterAdapter = Depends(get_adapter),
) -> QuoteResponse:
    """Fee a swap of amountIn would pay under the current configuration."""
    return QuoteResponse.from_distribution(adapter.quote(amount_in))


@router.get("/events")
async def list_events(adapter: FeeRouterAdapter = Depends(get_adapter)) -> list[dict[str, Any]]:
    return [event.to_dict() for event in adapter.events]


@router.post("/swap", response_model=SwapResponse)
async def swap(body: SwapBody, adapter: FeeRouterAdapter = Depends(get_adapter)) -> SwapResponse:
    """Submit a swap on behalf of body.sender.

    Error Handling:
        - Invalid request schema: 422 (Pydantic)
        - Adapter errors: mapped to HTTP statuses by the app's error handler
    """
    logger.info(
        "received_swap",
        sender=body.sender,
        amount_in=str(body.amount_in),
        hops=len(body.path) - 1,
    )
    receipt = adapter.swap(body.to_request(), sender=body.sender)
    return SwapResponse.from_receipt(receipt)


# --- Admin ---

ADMIN_TOKEN_ENV = "FEE_ADAPTER_ADMIN_TOKEN"
ADMIN_ACCOUNT_ENV = "FEE_ADAPTER_ADMIN_ACCOUNT"

bearer = HTTPBearer(auto_error=False)


def get_admin_account() -> str:
    """Account the server signs admin calls as.

    FEE_ADAPTER_ADMIN_ACCOUNT if set, otherwise the default deployment's
    deployer (the account that initialized the adapter).
    """
    configured = os.environ.get(ADMIN_ACCOUNT_ENV)
    if configured:
        return normalize_address(configured, validate=True)
    return get_default_deployment().settings.deployer


def require_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    account: str = Depends(get_admin_account),
) -> str:
    """Check the bearer token against FEE_ADAPTER_ADMIN_TOKEN.

    Returns:
        The admin account to act as

    Raises:
        HTTPException: 401 without a bearer token, 403 if the token is wrong
            or no admin token is configured on the server
    """
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Missing admin credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    expected = os.environ.get(ADMIN_TOKEN_ENV)
    if not expected or not secrets.compare_digest(
        credentials.credentials.encode(), expected.encode()
    ):
        logger.warning("admin_auth_failed", admin_configured=bool(expected))
        raise HTTPException(status_code=403, detail="Invalid admin credentials")
    return account


admin = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


@admin.post("/fee", response_model=ConfigResponse)
async def set_fee(
    body: SetFeeBody,
    adapter: FeeRouterAdapter = Depends(get_adapter),
    sender: str = Depends(require_admin),
) -> ConfigResponse:
    adapter.set_fee_bps(body.fee_bps, sender=sender)
    return ConfigResponse.from_adapter(adapter)


@admin.post("/splits", response_model=ConfigResponse)
async def set_splits(
    body: SetSplitsBody,
    adapter: FeeRouterAdapter = Depends(get_adapter),
    sender: str = Depends(require_admin),
) -> ConfigResponse:
    adapter.set_splits(body.ops_split, body.burn_split, body.rewards_split, sender=sender)
    return ConfigResponse.from_adapter(adapter)


@admin.post("/recipients", response_model=ConfigResponse)
async def set_recipients(
    body: SetRecipientsBody,
    adapter: FeeRouterAdapter = Depends(get_adapter),
    sender: str = Depends(require_admin),
) -> ConfigResponse:
    adapter.set_recipients(
        body.ops_recipient, body.burn_recipient, body.rewards_recipient, sender=sender
    )
    return ConfigResponse.from_adapter(adapter)


@admin.post("/router", response_model=ConfigResponse)
async def set_router(
    body: SetRouterBody,
    adapter: FeeRouterAdapter = Depends(get_adapter),
    sender: str = Depends(require_admin),
) -> ConfigResponse:
    adapter.set_router(body.router, sender=sender)
    return ConfigResponse.from_adapter(adapter)


@admin.post("/ownership", response_model=ConfigResponse)
async def transfer_ownership(
    body: TransferOwnershipBody,
    adapter: FeeRouterAdapter = Depends(get_adapter),
    sender: str = Depends(require_admin),
) -> ConfigResponse:
    adapter.transfer_ownership(body.new_owner, sender=sender)
    return ConfigResponse.from_adapter(adapter)


@admin.post("/pause", response_model=ConfigResponse)
async def pause(
    adapter: FeeRouterAdapter = Depends(get_adapter),
    sender: str = Depends(require_admin),
) -> ConfigResponse:
    adapter.pause(sender=sender)
    return ConfigResponse.from_adapter(adapter)


@admin.post("/unpause", response_model=ConfigResponse)
async def unpause(
    adapter: FeeRouterAdapter = Depends(get_adapter),
    sender: str = Depends(require_admin),
) -> ConfigResponse:
    adapter.unpause(sender=sender)
    return ConfigResponse.from_adapter(adapter)


@admin.post("/rescue")
async def rescue(
    body: RescueBody,
    adapter: FeeRouterAdapter = Depends(get_adapter),
    sender: str = Depends(require_admin),
) -> dict[str, str]:
    adapter.rescue_tokens(body.token, body.destination, body.amount, sender=sender)
    return {"token": body.token, "destination": body.destination, "amount": str(body.amount)}


router.include_router(admin)
