"""
Transport and transaction exceptions.

These exceptions are raised while talking to the node: when the
connection itself fails, when the node answers with a JSON-RPC error,
and when a submitted transaction does not settle successfully.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from ethwrap.errors.base import EthWrapError

if TYPE_CHECKING:
    from ethwrap.models import TransactionReceipt


class TransportError(EthWrapError):
    """
    Raised when the node cannot be reached or returns a malformed response.

    Example:
        >>> raise TransportError("Connection refused", endpoint="http://localhost:8545")
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if endpoint:
            details["endpoint"] = endpoint
        super().__init__(message, code="TRANSPORT_ERROR", details=details)
        self.endpoint = endpoint


class RpcProtocolError(EthWrapError):
    """
    Raised when the node answers with a well-formed JSON-RPC error.

    Attributes:
        rpc_code: JSON-RPC error code (e.g. 3 for execution reverted)
        rpc_message: Error message reported by the node
        data: Optional ``data`` member of the error object
    """

    def __init__(self, rpc_code: int, rpc_message: str, data: Any = None) -> None:
        details: Dict[str, Any] = {"rpc_code": rpc_code}
        if data is not None:
            details["data"] = data
        super().__init__(rpc_message, code="RPC_ERROR", details=details)
        self.rpc_code = rpc_code
        self.rpc_message = rpc_message
        self.data = data


class TransactionError(EthWrapError):
    """Raised when a transaction could not be submitted or settled."""

    def __init__(
        self,
        message: str,
        *,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="TRANSACTION_FAILED", tx_hash=tx_hash, details=details)


class TransactionTimeoutError(TransactionError):
    """Raised when the receipt wait policy gives up on a pending transaction."""

    def __init__(self, tx_hash: str, timeout: float) -> None:
        super().__init__(
            f"Transaction receipt was not generated after {timeout} seconds for transaction: {tx_hash}",
            tx_hash=tx_hash,
            details={"timeout": timeout},
        )
        self.code = "TRANSACTION_TIMEOUT"
        self.timeout = timeout


class RevertedTransaction(TransactionError):
    """
    Raised when a transaction was mined but its receipt reports failure.

    The reason is recovered by replaying the call against the node; the
    receipt itself carries no revert data.

    Attributes:
        receipt: The failed transaction receipt
        status: Receipt status value
        gas_used: Gas used, or None if the node did not report it
        reason: Best-effort human-readable revert reason
        encoded_data: Raw ABI-encoded revert payload, if the node returned one
    """

    def __init__(
        self,
        receipt: "TransactionReceipt",
        *,
        reason: str,
        encoded_data: Optional[str] = None,
    ) -> None:
        gas_used = receipt.gas_used
        message = (
            f"Transaction {receipt.transaction_hash} has failed with status: {receipt.status}. "
            f"Gas used: {gas_used if gas_used is not None else 'unknown'}. "
            f"Revert reason: '{reason}'."
        )
        super().__init__(
            message,
            tx_hash=receipt.transaction_hash,
            details={
                "status": receipt.status,
                "gas_used": gas_used,
                "reason": reason,
                "encoded_data": encoded_data,
            },
        )
        self.code = "TRANSACTION_REVERTED"
        self.receipt = receipt
        self.status = receipt.status
        self.gas_used = gas_used
        self.reason = reason
        self.encoded_data = encoded_data
