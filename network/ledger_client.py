"""
BitBadges Toolkit - Ledger API Client

This module provides a client for the BitBadges indexer/ledger REST API with
API key authentication, connection pooling, retry handling and request
statistics. Transactions can be simulated only after they pass the
toolkit's validation rules.
"""

import json
import logging
import os
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from validator.core import ValidationEngine, ValidationReport, create_default_validator

DEFAULT_API_URL = "https://api.bitbadges.io"
TESTNET_SUFFIX = "/testnet"
API_KEY_ENV = "BITBADGES_API_KEY"
API_KEY_HEADER = "x-api-key"

SIMULATION_CONTEXT = {"address": "bb1simulation", "chain": "eth"}
DEFAULT_FEE = {
    "amount": [{"denom": "ubadge", "amount": "5000"}],
    "gas": "500000",
}


class LedgerAPIError(Exception):
    """Base exception for ledger API errors."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"Ledger API Error {status_code}: {message}")


class LedgerAuthError(LedgerAPIError):
    """Missing or rejected API key."""
    pass


class LedgerConnectionError(LedgerAPIError):
    """Exception for connection failures and timeouts."""
    pass


class TransactionRejectedError(LedgerAPIError):
    """Raised when a transaction fails validation before it is sent."""

    def __init__(self, report: ValidationReport):
        self.report = report
        errors = report.errors
        summary = errors[0].message if errors else "validation failed"
        super().__init__(-1, f"Transaction rejected with {len(errors)} error(s): {summary}")


@dataclass
class LedgerAPIConfig:
    """Configuration for the ledger API connection."""
    api_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    testnet: bool = False
    timeout: int = 30
    max_retries: int = 3
    backoff_factor: float = 1.0

    @property
    def base_url(self) -> str:
        base = self.api_url.rstrip("/")
        return f"{base}{TESTNET_SUFFIX}" if self.testnet else base

    @classmethod
    def from_env(cls, **overrides) -> 'LedgerAPIConfig':
        """Create config from environment variables, then apply overrides."""
        values = {
            "api_url": os.getenv("BITBADGES_API_URL", DEFAULT_API_URL),
            "api_key": os.getenv(API_KEY_ENV),
            "testnet": os.getenv("BITBADGES_TESTNET", "false").lower() == "true",
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Configuration with the API key redacted."""
        return {
            "api_url": self.api_url,
            "api_key": "***" if self.api_key else None,
            "testnet": self.testnet,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "backoff_factor": self.backoff_factor,
        }


@dataclass
class SimulationResult:
    """Outcome of a dry-run transaction."""
    valid: bool
    gas_used: Optional[str] = None
    events: List[Any] = field(default_factory=list)
    simulation_error: Optional[str] = None

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> 'SimulationResult':
        results = data.get("results") or [{}]
        result = results[0] or {}
        if result.get("error"):
            return cls(valid=False, simulation_error=str(result["error"]))
        return cls(valid=True, gas_used=result.get("gasUsed"), events=result.get("events") or [])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "gas_used": self.gas_used,
            "events": self.events,
            "simulation_error": self.simulation_error,
        }


class LedgerAPIClient:
    """
    Client for the BitBadges REST API.

    Every endpoint is a JSON POST authenticated with the ``x-api-key``
    header. Retries on 429 and 5xx responses are handled by the session
    adapter.
    """

    def __init__(self, config: Optional[LedgerAPIConfig] = None,
                 validator: Optional[ValidationEngine] = None):
        """
        Initialize the ledger API client.

        Args:
            config: API configuration (uses environment if None)
            validator: Engine used by submit_validated (default engine if None)
        """
        self.config = config or LedgerAPIConfig.from_env()
        self.validator = validator
        self.logger = logging.getLogger("network.ledger_client")

        self.session = requests.Session()

        retry_strategy = Retry(
            total=self.config.max_retries,
            backoff_factor=self.config.backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["POST"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy, pool_maxsize=10)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self._stats = {
            "total_requests": 0,
            "successful_requests": 0,
            "failed_requests": 0,
            "total_time": 0.0,
            "last_request_time": None
        }
        self._stats_lock = threading.Lock()

    def _record(self, success: bool, elapsed: float = 0.0):
        with self._stats_lock:
            self._stats["total_requests"] += 1
            self._stats["total_time"] += elapsed
            self._stats["last_request_time"] = datetime.now(timezone.utc)
            if success:
                self._stats["successful_requests"] += 1
            else:
                self._stats["failed_requests"] += 1

    def _request(self, endpoint: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        POST a JSON body to an API endpoint.

        Args:
            endpoint: Path below the base URL
            body: Request body

        Returns:
            Decoded JSON response

        Raises:
            LedgerAuthError: If no API key is configured or it is rejected
            LedgerConnectionError: On network failures and timeouts
            LedgerAPIError: On any other non-200 response
        """
        if not self.config.api_key:
            raise LedgerAuthError(
                -1, f"{API_KEY_ENV} environment variable not set. Set it to use API query tools."
            )

        url = f"{self.config.base_url}{endpoint}"
        headers = {
            "Content-Type": "application/json",
            API_KEY_HEADER: self.config.api_key,
        }

        self.logger.debug(f"POST {url}")
        start_time = time.time()

        try:
            response = self.session.post(
                url,
                data=json.dumps(body or {}),
                headers=headers,
                timeout=self.config.timeout
            )
        except requests.exceptions.Timeout:
            self._record(False, time.time() - start_time)
            raise LedgerConnectionError(-1, f"Request timed out after {self.config.timeout}s")
        except requests.exceptions.ConnectionError as e:
            self._record(False, time.time() - start_time)
            raise LedgerConnectionError(-1, f"Connection error: {e}")
        except requests.exceptions.RequestException as e:
            self._record(False, time.time() - start_time)
            raise LedgerAPIError(-1, f"Request failed: {e}")

        elapsed = time.time() - start_time

        if response.status_code in (401, 403):
            self._record(False, elapsed)
            raise LedgerAuthError(response.status_code, "Authentication failed")

        if response.status_code != 200:
            self._record(False, elapsed)
            raise LedgerAPIError(response.status_code, response.text or str(response.reason))

        try:
            data = response.json()
        except ValueError as e:
            self._record(False, elapsed)
            raise LedgerAPIError(response.status_code, f"Invalid JSON response: {e}")

        self._record(True, elapsed)
        return data

    def get_collections(self, collection_ids: List[str],
                        fetch_total_and_mint_balances: bool = False) -> Dict[str, Any]:
        """Fetch collection documents by id."""
        request = {
            "collectionsToFetch": [
                {"collectionId": str(collection_id),
                 "fetchTotalAndMintBalances": fetch_total_and_mint_balances}
                for collection_id in collection_ids
            ]
        }
        return self._request("/api/v0/collections", request)

    def get_balance(self, collection_id: str, address: str) -> Dict[str, Any]:
        """Fetch an address's balance in a collection."""
        endpoint = f"/api/v0/collections/{quote(str(collection_id), safe='')}/balance/{quote(address, safe='')}"
        return self._request(endpoint, {})

    def search(self, search_value: str, collection_id: Optional[str] = None) -> Dict[str, Any]:
        request: Dict[str, Any] = {"searchValue": search_value}
        if collection_id is not None:
            request["specificCollectionId"] = str(collection_id)
        return self._request("/api/v0/search", request)

    def verify_ownership(self, address: str, requirements: Dict[str, Any]) -> Dict[str, Any]:
        """Check an address against asset ownership requirements."""
        request = {
            "address": address,
            "assetOwnershipRequirements": requirements,
        }
        return self._request("/api/v0/verifyOwnershipRequirements", request)

    def simulate(self, transaction: Dict[str, Any]) -> SimulationResult:
        """
        Dry-run a transaction document.

        The document's ``messages`` are sent with its ``memo`` and ``fee``,
        falling back to an empty memo and the default fee.
        """
        messages = transaction.get("messages")
        if not isinstance(messages, list):
            raise LedgerAPIError(-1, 'Invalid transaction: Missing "messages" array')

        request = {
            "txs": [{
                "context": dict(SIMULATION_CONTEXT),
                "messages": messages,
                "memo": transaction.get("memo") or "",
                "fee": transaction.get("fee") or DEFAULT_FEE,
            }]
        }

        result = SimulationResult.from_response(self._request("/api/v0/simulate", request))
        if result.valid:
            self.logger.info(f"Simulation succeeded, gas used: {result.gas_used}")
        else:
            self.logger.info(f"Simulation failed: {result.simulation_error}")
        return result

    def submit_validated(self, transaction: Any) -> SimulationResult:
        """
        Validate a transaction and simulate it only when it is valid.

        Args:
            transaction: Transaction JSON text or parsed document

        Returns:
            SimulationResult from the API

        Raises:
            TransactionRejectedError: If validation reports any error
        """
        validator = self.validator or create_default_validator()

        if isinstance(transaction, str):
            report = validator.validate_json(transaction)
        else:
            report = validator.validate_document(transaction)

        if not report.valid:
            self.logger.warning(f"Transaction rejected before simulation: {len(report.errors)} errors")
            raise TransactionRejectedError(report)

        document = json.loads(transaction) if isinstance(transaction, str) else transaction
        return self.simulate(document)

    def get_stats(self) -> Dict[str, Any]:
        """Get client request statistics."""
        with self._stats_lock:
            stats = self._stats.copy()

        total = stats["total_requests"]
        return {
            **stats,
            "average_request_time": stats["total_time"] / total if total > 0 else 0,
            "success_rate": stats["successful_requests"] / total if total > 0 else 0,
            "config": self.config.to_dict(),
        }

    def close(self):
        """Close the HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
