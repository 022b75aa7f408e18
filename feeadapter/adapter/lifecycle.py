"""Lifecycle state machine, pause policy and reentrancy guard."""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from feeadapter.errors import (
    AlreadyInitialized,
    NotInitialized,
    ReentrantCall,
    SystemHalted,
    SystemNotHalted,
)


class LifecycleState(str, Enum):
    """Adapter lifecycle: UNINITIALIZED -> ACTIVE <-> PAUSED."""

    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    PAUSED = "paused"


@dataclass(frozen=True)
class AdapterPolicy:
    """Behavior flags for the adapter.

    Attributes:
        allow_admin_while_paused: If True (default), configuration setters,
            ownership changes, upgrades and rescue keep working while the
            adapter is paused. If False they fail with SystemHalted;
            unpause() is always allowed.
    """

    allow_admin_while_paused: bool = True

    @classmethod
    def from_env(cls) -> AdapterPolicy:
        """Load flags from FEE_ADAPTER_* environment variables."""
        raw = os.environ.get("FEE_ADAPTER_ADMIN_WHILE_PAUSED", "true")
        return cls(allow_admin_while_paused=raw.lower() in ("true", "1", "yes"))


DEFAULT_POLICY = AdapterPolicy()


class Lifecycle:
    """Tracks the lifecycle state and validates transitions."""

    def __init__(self) -> None:
        self._state = LifecycleState.UNINITIALIZED

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state is not LifecycleState.UNINITIALIZED

    @property
    def paused(self) -> bool:
        return self._state is LifecycleState.PAUSED

    def mark_initialized(self) -> None:
        """Leave UNINITIALIZED. Succeeds exactly once per adapter."""
        if self.initialized:
            raise AlreadyInitialized()
        self._state = LifecycleState.ACTIVE

    def require_initialized(self) -> None:
        if not self.initialized:
            raise NotInitialized()

    def require_active(self) -> None:
        self.require_initialized()
        if self.paused:
            raise SystemHalted()

    def require_admin_allowed(self, policy: AdapterPolicy) -> None:
        """Apply the pause policy to a non-lifecycle admin operation."""
        self.require_initialized()
        if self.paused and not policy.allow_admin_while_paused:
            raise SystemHalted("Admin operations are disabled while paused")

    def pause(self) -> None:
        self.require_active()
        self._state = LifecycleState.PAUSED

    def unpause(self) -> None:
        self.require_initialized()
        if not self.paused:
            raise SystemNotHalted()
        self._state = LifecycleState.ACTIVE

    # --- Ledger snapshot support ---

    def snapshot(self) -> LifecycleState:
        return self._state

    def restore(self, state: LifecycleState) -> None:
        self._state = state


class ReentrancyGuard:
    """Rejects nested entry into guarded operations.

    The flag is held for the full duration of the guarded block, including
    the external router call, and released however the block exits.
    """

    def __init__(self) -> None:
        self._entered = False

    @property
    def entered(self) -> bool:
        return self._entered

    @contextmanager
    def enter(self) -> Iterator[None]:
        if self._entered:
            raise ReentrantCall()
        self._entered = True
        try:
            yield
        finally:
            self._entered = False
