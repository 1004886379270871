"""
BitBadges Toolkit Network Module

HTTP client for the BitBadges ledger API.
"""

from .ledger_client import (
    LedgerAPIClient,
    LedgerAPIConfig,
    SimulationResult,
    LedgerAPIError,
    LedgerAuthError,
    LedgerConnectionError,
    TransactionRejectedError,
)

__all__ = [
    "LedgerAPIClient",
    "LedgerAPIConfig",
    "SimulationResult",
    "LedgerAPIError",
    "LedgerAuthError",
    "LedgerConnectionError",
    "TransactionRejectedError",
]
