"""Fee Router Adapter - fee-taking swap intermediary."""

from feeadapter.adapter import FeeRouterAdapter, SwapReceipt
from feeadapter.deploy import Deployment, deploy
from feeadapter.ledger import Ledger

__version__ = "0.1.0"
__all__ = ["FeeRouterAdapter", "SwapReceipt", "Ledger", "Deployment", "deploy", "__version__"]
