"""
Contract-level exceptions.

Raised by read calls, deployments and operations that need state the
handle does not have.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ethwrap.errors.base import EthWrapError


class ContractCallError(EthWrapError):
    """Raised when a read-only contract call fails or is reverted by the EVM."""

    def __init__(
        self,
        message: str,
        *,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="CONTRACT_CALL_FAILED", details=details)
        self.reason = reason


class ConversionError(ContractCallError):
    """
    Raised when a returned value cannot be adapted to the requested type.

    Example:
        >>> raise ConversionError("Empty value (0x) returned from contract")
    """

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details=details)
        self.code = "CONVERSION_ERROR"


class DeploymentError(EthWrapError):
    """Raised when a deployment receipt carries no contract address."""

    def __init__(self, message: str, *, tx_hash: Optional[str] = None) -> None:
        super().__init__(message, code="DEPLOYMENT_FAILED", tx_hash=tx_hash)


class UnsupportedOperation(EthWrapError):
    """Raised when a handle lacks the binary or address an operation needs."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="UNSUPPORTED_OPERATION")


class NameResolutionError(EthWrapError):
    """Raised when a contract name cannot be resolved to an address."""

    def __init__(self, name: str, reason: Optional[str] = None) -> None:
        message = f"Unable to resolve address for name: {name}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, code="NAME_RESOLUTION_FAILED", details={"name": name})
        self.name = name
