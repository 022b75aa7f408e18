"""Error taxonomy for the fee router adapter.

Every adapter operation either completes or raises one of these errors
after its effects have been rolled back. There is no partial failure mode,
and no error is retried inside the adapter.

The default messages mirror the revert strings of the deployed contract so
that callers matching on messages keep working.
"""


class FeeAdapterError(Exception):
    """Base class for all adapter errors."""

    default_message = "Fee adapter error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


# --- Lifecycle ---


class AlreadyInitialized(FeeAdapterError):
    """initialize() was called on an adapter that is already initialized."""

    default_message = "Initializable: contract is already initialized"


class NotInitialized(FeeAdapterError):
    """An operation other than initialize() was called before initialization."""

    default_message = "Initializable: contract is not initialized"


class SystemHalted(FeeAdapterError):
    """The adapter is paused."""

    default_message = "Pausable: paused"


class SystemNotHalted(FeeAdapterError):
    """unpause() was called while the adapter is active."""

    default_message = "Pausable: not paused"


class ReentrantCall(FeeAdapterError):
    """A guarded operation was entered while another one was in progress."""

    default_message = "ReentrancyGuard: reentrant call"


class InvalidImplementation(FeeAdapterError):
    """upgrade_to() was given an object that is not a fee calculator."""

    default_message = "ERC1967: new implementation is not UUPS"


# --- Access control and configuration ---


class Unauthorized(FeeAdapterError):
    """The caller is not the current owner."""

    default_message = "Ownable: caller is not the owner"


class FeeTooHigh(FeeAdapterError):
    """Fee rate exceeds MAX_FEE_BPS."""

    default_message = "Fee too high"


class SplitsInvalid(FeeAdapterError):
    """Split triple does not sum to 10000 bps."""

    default_message = "Splits must sum to 10000"


class InvalidAddress(FeeAdapterError, ValueError):
    """An address argument is malformed or the zero address."""

    default_message = "Invalid address"


# --- Swap path ---


class DeadlineExpired(FeeAdapterError):
    """The swap deadline is before the current ledger timestamp."""

    default_message = "Deadline expired"


class TransferFailed(FeeAdapterError):
    """An asset transfer into or out of adapter custody failed."""

    default_message = "Transfer failed"


class RouterCallFailed(FeeAdapterError):
    """The underlying router reverted or returned too little output."""

    default_message = "Router call failed"


class ArithmeticOverflow(FeeAdapterError, ArithmeticError):
    """Fee arithmetic left the uint256 range."""

    default_message = "Arithmetic overflow"
