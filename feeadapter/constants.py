"""Protocol constants for the fee router adapter.

Centralizes basis-point parameters and well-known addresses.
"""

# Basis points denominator (10000 bps = 100%)
BPS_DENOMINATOR = 10_000

# Upper bound for the adapter fee (1000 bps = 10%)
MAX_FEE_BPS = 1_000

# Default fee splits applied at initialization.
# Rewards takes the extra basis point so the three sum to BPS_DENOMINATOR.
DEFAULT_OPS_SPLIT = 3_333
DEFAULT_BURN_SPLIT = 3_333
DEFAULT_REWARDS_SPLIT = 3_334

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
