"""Solana JSON-RPC client — signature listing and transaction lookup.

Async HTTP client for the two read-only RPC methods the watcher needs:
- ``getSignaturesForAddress`` — most recent signatures, newest first
- ``getTransaction`` — balances and account keys of one transaction

Rate limiting (HTTP 429 or a JSON-RPC error carrying 429) is raised as
:class:`RateLimitedError`; every other failure as :class:`TransientFetchError`.
"""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Any

import httpx

from sol_watch.errors.ledger_errors import RateLimitedError, TransientFetchError
from sol_watch.ledger.models import SignatureInfo, TransactionDetail

if TYPE_CHECKING:
    from sol_watch.config.settings import RPCConfig

logger = logging.getLogger(__name__)

_RATE_LIMIT_STATUS = 429


class SolanaRPCClient:
    """Async JSON-RPC client for a Solana node.

    Usage::

        rpc = SolanaRPCClient(config)
        await rpc.connect()
        try:
            sigs = await rpc.get_signatures_for_address(address, limit=10)
            detail = await rpc.get_transaction(sigs[0].signature)
        finally:
            await rpc.close()
    """

    def __init__(self, config: RPCConfig) -> None:
        """Initialize the RPC client.

        Args:
            config: RPC configuration (url, commitment, timeout).
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None
        self._ids = itertools.count(1)

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._config.url,
            headers={"Content-Type": "application/json"},
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_signatures_for_address(self, address: str, limit: int) -> list[SignatureInfo]:
        """List the most recent transaction signatures touching *address*.

        Args:
            address: Base58 account address.
            limit: Maximum number of signatures to return.

        Returns:
            Signatures ordered newest first. Empty if the address has none.

        Raises:
            RateLimitedError: The node refused the call with 429.
            TransientFetchError: Any other transport or RPC failure.
        """
        result = await self._call(
            "getSignaturesForAddress",
            [address, {"limit": limit, "commitment": self._config.commitment.value}],
        )
        if not result:
            return []
        return [SignatureInfo.from_dict(item) for item in result]

    async def get_transaction(self, signature: str) -> TransactionDetail | None:
        """Fetch balance detail for a confirmed transaction.

        Args:
            signature: Transaction signature (Base58).

        Returns:
            TransactionDetail, or None when the node has no record of the
            transaction or returned it without metadata.

        Raises:
            RateLimitedError: The node refused the call with 429.
            TransientFetchError: Any other transport or RPC failure.
        """
        result = await self._call(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "json",
                    "commitment": self._config.commitment.value,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )
        if not result or not result.get("meta"):
            return None
        return TransactionDetail.from_dict(signature, result)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _call(self, method: str, params: list[Any]) -> Any:
        """Send one JSON-RPC request and return its ``result`` member."""
        client = self._ensure_connected()
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}

        try:
            response = await client.post("", json=payload)
        except httpx.HTTPError as exc:
            raise TransientFetchError(f"{method} request failed: {exc}") from exc

        if response.status_code == _RATE_LIMIT_STATUS:
            raise RateLimitedError(f"{method} rate limited (429)")
        if response.status_code >= 400:
            raise TransientFetchError(
                f"{method} failed ({response.status_code}): {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            body: dict[str, Any] = response.json()
        except ValueError as exc:
            raise TransientFetchError(f"{method} returned invalid JSON") from exc

        error = body.get("error")
        if error:
            self._raise_for_rpc_error(method, error)
        return body.get("result")

    @staticmethod
    def _raise_for_rpc_error(method: str, error: Any) -> None:
        """Raise the matching ledger error for a JSON-RPC ``error`` member."""
        if isinstance(error, dict):
            code = error.get("code")
            message = str(error.get("message", ""))
        else:
            code = None
            message = str(error)
        if code == _RATE_LIMIT_STATUS or "429" in message or "too many requests" in message.lower():
            raise RateLimitedError(f"{method} rate limited: {message}")
        raise TransientFetchError(f"{method} RPC error {code}: {message}")

    def _ensure_connected(self) -> httpx.AsyncClient:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            msg = "SolanaRPCClient is not connected. Call connect() first."
            raise TransientFetchError(msg, status_code=500)
        return self._client
