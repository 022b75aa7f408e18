"""Fee router adapter.

The adapter sits between a caller and an exchange router. On every swap it
takes custody of the input, pays a basis-point fee to three recipients and
forwards the remainder to the router, relaying the router's output.

Each public operation runs inside Ledger.atomic(): either every effect
(balances, allowances, configuration, events) is applied, or none is.
Fee payouts are finished before the router is called, and the reentrancy
guard is held across that call so a hostile router cannot re-enter.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, ClassVar

import structlog

from feeadapter.adapter.config import Configuration, ConfigurationStore, require_address
from feeadapter.adapter.lifecycle import (
    DEFAULT_POLICY,
    AdapterPolicy,
    Lifecycle,
    LifecycleState,
    ReentrancyGuard,
)
from feeadapter.constants import MAX_FEE_BPS, ZERO_ADDRESS
from feeadapter.errors import (
    DeadlineExpired,
    FeeAdapterError,
    InvalidImplementation,
    RouterCallFailed,
    TransferFailed,
)
from feeadapter.fees.calculator import DEFAULT_FEE_CALCULATOR, FeeCalculator
from feeadapter.fees.result import FeeDistribution
from feeadapter.ledger.ledger import Ledger, derive_address
from feeadapter.ledger.token import AssetToken, TokenError
from feeadapter.models.events import (
    AdapterEvent,
    FeeTaken,
    FeeUpdated,
    Initialized,
    OwnershipTransferred,
    Paused,
    RecipientsUpdated,
    RouterUpdated,
    SplitsUpdated,
    SwapForwarded,
    TokensRescued,
    Unpaused,
    Upgraded,
)
from feeadapter.models.swap import SwapRequest
from feeadapter.models.types import normalize_address
from feeadapter.router.base import SwapRouter, encode_swap_calldata

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapReceipt:
    """Outcome of a successful swap.

    Attributes:
        request: The request as submitted
        distribution: Fee taken on the full amount_in and its split
        router: Router the residual was forwarded to
        amount_out: Output reported by the router, unchanged
        calldata: ABI calldata of the router call the adapter made
    """

    request: SwapRequest
    distribution: FeeDistribution
    router: str
    amount_out: int
    calldata: str

    @property
    def amount_forwarded(self) -> int:
        return self.distribution.amount_forwarded


@dataclass(frozen=True)
class _AdapterSnapshot:
    config: Configuration | None
    state: LifecycleState
    implementation: FeeCalculator
    events: tuple[AdapterEvent, ...]


class FeeRouterAdapter:
    """Fee-taking intermediary in front of a SwapRouter.

    Args:
        ledger: Ledger the adapter holds custody in
        address: Adapter address. Derived from "adapter" if not given.
        policy: Behavior flags (see AdapterPolicy)
        implementation: Initial fee calculator
    """

    MAX_FEE_BPS: ClassVar[int] = MAX_FEE_BPS

    def __init__(
        self,
        ledger: Ledger,
        address: str | None = None,
        policy: AdapterPolicy | None = None,
        implementation: FeeCalculator | None = None,
    ) -> None:
        self.ledger = ledger
        self.address = normalize_address(address or derive_address("adapter"), validate=True)
        self.policy = policy or DEFAULT_POLICY
        self._store = ConfigurationStore()
        self._lifecycle = Lifecycle()
        self._guard = ReentrancyGuard()
        self._implementation: FeeCalculator = implementation or DEFAULT_FEE_CALCULATOR
        self._events: list[AdapterEvent] = []
        ledger.register_contract(self)
        ledger.register(self)

    def __repr__(self) -> str:
        return f"FeeRouterAdapter({self.address}, state={self._lifecycle.state.value})"

    # =========================================================================
    # Public getters
    # =========================================================================

    @property
    def config(self) -> Configuration:
        return self._store.config

    @property
    def owner(self) -> str:
        return self._store.config.owner

    @property
    def router(self) -> str:
        return self._store.config.router

    @property
    def fee_bps(self) -> int:
        return self._store.config.fee_bps

    @property
    def ops_split(self) -> int:
        return self._store.config.ops_split

    @property
    def burn_split(self) -> int:
        return self._store.config.burn_split

    @property
    def rewards_split(self) -> int:
        return self._store.config.rewards_split

    @property
    def ops_recipient(self) -> str:
        return self._store.config.ops_recipient

    @property
    def burn_recipient(self) -> str:
        return self._store.config.burn_recipient

    @property
    def rewards_recipient(self) -> str:
        return self._store.config.rewards_recipient

    @property
    def state(self) -> LifecycleState:
        return self._lifecycle.state

    @property
    def paused(self) -> bool:
        return self._lifecycle.paused

    @property
    def initialized(self) -> bool:
        return self._lifecycle.initialized

    @property
    def implementation(self) -> FeeCalculator:
        return self._implementation

    @property
    def events(self) -> tuple[AdapterEvent, ...]:
        return tuple(self._events)

    # =========================================================================
    # Initialization
    # =========================================================================

    def initialize(
        self,
        router: str,
        fee_bps: int,
        ops_recipient: str,
        burn_recipient: str,
        rewards_recipient: str,
        *,
        sender: str,
    ) -> None:
        """One-shot setup. sender becomes the owner; splits take their defaults.

        Raises:
            AlreadyInitialized: On any call after the first successful one
            FeeTooHigh: If fee_bps exceeds MAX_FEE_BPS
            InvalidAddress: If any address is invalid or zero
        """
        try:
            with self.ledger.atomic():
                self._lifecycle.mark_initialized()
                config = self._store.initialize(
                    owner=sender,
                    router=router,
                    fee_bps=fee_bps,
                    ops_recipient=ops_recipient,
                    burn_recipient=burn_recipient,
                    rewards_recipient=rewards_recipient,
                )
                self._emit(OwnershipTransferred(ZERO_ADDRESS, config.owner))
                self._emit(Initialized(config.owner, config.router, config.fee_bps))
        except FeeAdapterError as err:
            self._log_rejected("initialize", sender, err)
            raise

        logger.info(
            "adapter_initialized",
            adapter=self.address,
            owner=config.owner,
            router=config.router,
            fee_bps=config.fee_bps,
            splits=(config.ops_split, config.burn_split, config.rewards_split),
        )

    # =========================================================================
    # Admin operations
    # =========================================================================

    def set_fee_bps(self, fee_bps: int, *, sender: str) -> None:
        """Raises FeeTooHigh if fee_bps > MAX_FEE_BPS (1000 itself is allowed)."""
        with self._admin("set_fee_bps", sender):
            old = self._store.config.fee_bps
            self._store.set_fee_bps(fee_bps)
            self._emit(FeeUpdated(old_fee_bps=old, new_fee_bps=fee_bps))
        logger.info("fee_updated", old_fee_bps=old, new_fee_bps=fee_bps)

    def set_splits(
        self, ops_split: int, burn_split: int, rewards_split: int, *, sender: str
    ) -> None:
        """Replace all three splits. Raises SplitsInvalid unless they sum to 10000."""
        with self._admin("set_splits", sender):
            self._store.set_splits(ops_split, burn_split, rewards_split)
            self._emit(SplitsUpdated(ops_split, burn_split, rewards_split))
        logger.info("splits_updated", ops=ops_split, burn=burn_split, rewards=rewards_split)

    def set_recipients(
        self,
        ops_recipient: str,
        burn_recipient: str,
        rewards_recipient: str,
        *,
        sender: str,
    ) -> None:
        with self._admin("set_recipients", sender):
            self._store.set_recipients(ops_recipient, burn_recipient, rewards_recipient)
            self._emit(RecipientsUpdated(*self._store.config.recipients))
        logger.info("recipients_updated", recipients=self._store.config.recipients)

    def set_router(self, router: str, *, sender: str) -> None:
        with self._admin("set_router", sender):
            old = self._store.config.router
            self._store.set_router(router)
            self._emit(RouterUpdated(old_router=old, new_router=self._store.config.router))
        logger.info("router_updated", old_router=old, new_router=self._store.config.router)

    def transfer_ownership(self, new_owner: str, *, sender: str) -> None:
        with self._admin("transfer_ownership", sender):
            old = self._store.config.owner
            self._store.set_owner(new_owner)
            self._emit(OwnershipTransferred(old, self._store.config.owner))
        logger.info("ownership_transferred", previous_owner=old, new_owner=self.owner)

    def renounce_ownership(self, *, sender: str) -> None:
        """Give up ownership for good. Every admin operation fails afterwards."""
        with self._admin("renounce_ownership", sender):
            old = self._store.config.owner
            self._store.clear_owner()
            self._emit(OwnershipTransferred(old, self._store.config.owner))
        logger.warning("ownership_renounced", previous_owner=old)

    def pause(self, *, sender: str) -> None:
        """Halt swaps. Fails with SystemHalted if already paused."""
        with self._admin("pause", sender, lifecycle_op=True):
            self._lifecycle.pause()
            self._emit(Paused(account=normalize_address(sender)))
        logger.info("adapter_paused", account=sender)

    def unpause(self, *, sender: str) -> None:
        """Resume swaps. Fails with SystemNotHalted if not paused."""
        with self._admin("unpause", sender, lifecycle_op=True):
            self._lifecycle.unpause()
            self._emit(Unpaused(account=normalize_address(sender)))
        logger.info("adapter_unpaused", account=sender)

    def upgrade_to(self, implementation: FeeCalculator, *, sender: str) -> None:
        """Replace the active fee calculator.

        Raises:
            InvalidImplementation: If implementation is not a FeeCalculator
        """
        with self._admin("upgrade_to", sender):
            if not isinstance(implementation, FeeCalculator):
                raise InvalidImplementation(
                    f"{type(implementation).__name__} does not implement FeeCalculator"
                )
            self._implementation = implementation
            label = f"{type(implementation).__name__}@{implementation.version}"
            self._emit(Upgraded(implementation=label))
        logger.info(
            "implementation_upgraded",
            implementation=type(implementation).__name__,
            version=implementation.version,
        )

    def rescue_tokens(self, token: str, destination: str, amount: int, *, sender: str) -> None:
        """Move amount of token from adapter custody to destination.

        Raises:
            TransferFailed: If custody holds less than amount
        """
        with self._guard.enter(), self._admin("rescue_tokens", sender):
            destination = require_address(destination, "destination")
            asset = self._token(token)
            self._safe_transfer(asset, destination, amount)
            self._emit(TokensRescued(asset.address, destination, amount))
        logger.info("tokens_rescued", token=token, destination=destination, amount=str(amount))

    # =========================================================================
    # Fees and swaps
    # =========================================================================

    def quote(self, amount_in: int) -> FeeDistribution:
        """Fee distribution a swap of amount_in would produce right now."""
        self._lifecycle.require_initialized()
        return self._distribution(amount_in)

    def swap_exact_tokens_for_tokens_with_fee(
        self,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> SwapReceipt:
        """Positional form of swap(), matching the router's argument order."""
        request = SwapRequest(
            amount_in=amount_in,
            amount_out_min=amount_out_min,
            path=path,
            recipient=recipient,
            deadline=deadline,
        )
        return self.swap(request, sender=sender)

    def swap(self, request: SwapRequest, *, sender: str) -> SwapReceipt:
        """Take the fee from request.amount_in and forward the rest to the router.

        Raises:
            NotInitialized: Before initialize()
            ReentrantCall: If called from inside another guarded operation
            SystemHalted: While paused
            DeadlineExpired: If request.deadline is before the ledger timestamp
            TransferFailed: If the pull or any fee payout fails
            RouterCallFailed: If the router fails or returns too little
            ArithmeticOverflow: If fee arithmetic leaves uint256
            InvalidImplementation: If the calculator's distribution is not
                computed on request.amount_in
        """
        sender = require_address(sender, "sender")
        try:
            with self._guard.enter(), self.ledger.atomic():
                self._lifecycle.require_active()
                if request.deadline < self.ledger.timestamp:
                    raise DeadlineExpired(
                        f"Deadline expired ({request.deadline} < {self.ledger.timestamp})"
                    )
                config = self._store.config
                distribution = self._distribution(request.amount_in)
                token_in = self._token(request.token_in)

                self._safe_transfer_from(token_in, sender, request.amount_in)
                self._distribute(token_in, config, distribution)
                fee = distribution.fee_amount
                self._emit(FeeTaken(sender, token_in.address, fee, *distribution.shares))

                amount_out = self._forward(token_in, config.router, request, distribution)
                self._emit(
                    SwapForwarded(
                        user=sender,
                        router=config.router,
                        amount_in=request.amount_in,
                        amount_forwarded=distribution.amount_forwarded,
                        amount_out=amount_out,
                    )
                )
        except FeeAdapterError as err:
            self._log_rejected("swap", sender, err, amount_in=str(request.amount_in))
            raise

        logger.info(
            "swap_forwarded",
            user=sender,
            token_in=request.token_in[-8:],
            token_out=request.token_out[-8:],
            amount_in=str(request.amount_in),
            fee=str(distribution.fee_amount),
            amount_out=str(amount_out),
        )
        calldata = encode_swap_calldata(
            distribution.amount_forwarded,
            request.amount_out_min,
            list(request.path),
            request.recipient,
            request.deadline,
        )
        return SwapReceipt(request, distribution, config.router, amount_out, calldata)

    def _distribute(
        self, token: AssetToken, config: Configuration, distribution: FeeDistribution
    ) -> None:
        for recipient, share in zip(config.recipients, distribution.shares, strict=True):
            if share > 0:
                self._safe_transfer(token, recipient, share)

    def _forward(
        self,
        token: AssetToken,
        router_address: str,
        request: SwapRequest,
        distribution: FeeDistribution,
    ) -> int:
        router = self.ledger.contract(router_address)
        if not isinstance(router, SwapRouter):
            raise RouterCallFailed(f"Router {router_address} is not a swap router")

        forwarded = distribution.amount_forwarded
        self._call_token(token.approve, (router.address, forwarded), "approve")
        try:
            amount_out = router.swap_exact_tokens_for_tokens(
                forwarded,
                request.amount_out_min,
                list(request.path),
                request.recipient,
                request.deadline,
                sender=self.address,
            )
        except Exception as err:
            logger.warning(
                "router_call_failed",
                router=router_address,
                error_type=type(err).__name__,
                error=str(err),
            )
            raise RouterCallFailed(f"Router call failed: {err}") from err

        if isinstance(amount_out, bool) or not isinstance(amount_out, int):
            raise RouterCallFailed(f"Router returned a non-integer amount: {amount_out!r}")
        if amount_out < request.amount_out_min:
            raise RouterCallFailed(
                f"Router output {amount_out} is below amount_out_min {request.amount_out_min}"
            )

        self._call_token(token.approve, (router.address, 0), "approve")
        return amount_out

    # =========================================================================
    # Token helpers
    # =========================================================================

    def _token(self, address: str) -> AssetToken:
        try:
            return self.ledger.token(address)
        except KeyError as err:
            raise TransferFailed(f"No token deployed at {address}") from err

    def _safe_transfer(self, token: AssetToken, to: str, amount: int) -> None:
        self._call_token(token.transfer, (to, amount), "transfer")

    def _safe_transfer_from(self, token: AssetToken, owner: str, amount: int) -> None:
        self._call_token(token.transfer_from, (owner, self.address, amount), "transferFrom")

    def _call_token(self, method: Callable[..., bool], args: tuple[Any, ...], name: str) -> None:
        """Call a token method from the adapter, treating raise or False as failure."""
        try:
            ok = method(*args, sender=self.address)
        except TokenError as err:
            raise TransferFailed(f"{name} failed: {err}") from err
        if ok is False:
            raise TransferFailed(f"{name} returned false")

    # =========================================================================
    # Internals
    # =========================================================================

    @contextmanager
    def _admin(self, operation: str, sender: str, *, lifecycle_op: bool = False) -> Iterator[None]:
        """Owner-gated, atomic admin scope."""
        try:
            self._lifecycle.require_initialized()
            self._store.require_owner(sender)
            if not lifecycle_op:
                self._lifecycle.require_admin_allowed(self.policy)
            with self.ledger.atomic():
                yield
        except FeeAdapterError as err:
            self._log_rejected(operation, sender, err)
            raise

    def _distribution(self, amount_in: int) -> FeeDistribution:
        """Fee distribution from the active calculator, on the full amount_in."""
        distribution = self._implementation.compute_distribution(
            amount_in, self._store.config.schedule
        )
        if distribution.amount_in != amount_in:
            raise InvalidImplementation(
                f"Calculator {self._implementation.version} computed the fee on "
                f"{distribution.amount_in}, not {amount_in}"
            )
        return distribution

    def _emit(self, event: AdapterEvent) -> None:
        self._events.append(event)

    def _log_rejected(
        self, operation: str, sender: str, err: FeeAdapterError, **extra: Any
    ) -> None:
        logger.warning(
            f"{operation}_rejected",
            sender=sender,
            error=type(err).__name__,
            reason=str(err),
            **extra,
        )

    # --- Ledger snapshot support ---

    def snapshot(self) -> _AdapterSnapshot:
        return _AdapterSnapshot(
            config=self._store.snapshot(),
            state=self._lifecycle.snapshot(),
            implementation=self._implementation,
            events=tuple(self._events),
        )

    def restore(self, state: _AdapterSnapshot) -> None:
        self._store.restore(state.config)
        self._lifecycle.restore(state.state)
        self._implementation = state.implementation
        self._events = list(state.events)
