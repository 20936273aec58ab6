"""
Base exception class for ethwrap.

All engine exceptions inherit from EthWrapError, which provides
structured error information including error codes, transaction hashes,
and additional context details.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class EthWrapError(Exception):
    """
    Base exception for all contract engine errors.

    Provides structured error information that can be serialized and logged.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "TRANSACTION_REVERTED").
        tx_hash: Optional transaction hash related to the error.
        details: Optional dictionary with additional error context.

    Example:
        >>> raise EthWrapError(
        ...     "Transaction failed",
        ...     code="TRANSACTION_FAILED",
        ...     tx_hash="0x123...",
        ...     details={"gas_used": 21000}
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "ETHWRAP_ERROR",
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.tx_hash = tx_hash
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error message."""
        parts = [f"[{self.code}] {self.message}"]
        if self.tx_hash and self.tx_hash not in self.message:
            parts.append(f"(tx: {self.tx_hash[:10]}...)")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"tx_hash={self.tx_hash!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "tx_hash": self.tx_hash,
            "details": self.details,
        }


class ValidationError(EthWrapError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, code="VALIDATION_ERROR", details=details)
        self.field = field


class InvalidAddressError(ValidationError):
    """
    Raised when an Ethereum address is malformed.

    Example:
        >>> raise InvalidAddressError("0x12", field="to", reason="too short")
    """

    def __init__(
        self,
        address: str,
        *,
        field: str = "address",
        reason: Optional[str] = None,
    ) -> None:
        message = f"Invalid {field}: {address!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, field=field, details={"address": address})
        self.code = "INVALID_ADDRESS"
        self.address = address
        self.reason = reason


class InvalidAmountError(ValidationError):
    """Raised when a wei amount is negative or does not fit in uint256."""

    def __init__(self, amount: Any, *, field: str = "value", reason: Optional[str] = None) -> None:
        message = f"Invalid {field}: {amount!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, field=field, details={"amount": str(amount)})
        self.code = "INVALID_AMOUNT"
        self.amount = amount
        self.reason = reason
