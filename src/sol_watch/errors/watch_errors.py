"""WatchError — base exception class for all sol-watch errors."""

from __future__ import annotations


class WatchError(Exception):
    """Base error for all watcher operations.

    Attributes:
        message: Human-readable error description.
        status_code: Suggested HTTP status code.
        code: Machine-readable error code string.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        code: str = "watch-error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class InvalidAddressError(WatchError):
    """Address is not a valid Base58-encoded 32-byte public key."""

    def __init__(self, address: str) -> None:
        super().__init__(
            f"invalid Solana address: {address!r}",
            status_code=400,
            code="invalid-address",
        )
        self.address = address


class QuotaExceededError(WatchError):
    """Tenant already watches as many addresses as its plan allows."""

    def __init__(self, tenant_id: str, plan: str, limit: int) -> None:
        super().__init__(
            f"wallet limit reached ({plan} - {limit})",
            status_code=403,
            code="quota-exceeded",
        )
        self.tenant_id = tenant_id
        self.limit = limit
