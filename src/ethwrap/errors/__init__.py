"""
Exception hierarchy for ethwrap.

All exceptions derive from EthWrapError and carry a machine-readable
code, an optional transaction hash and a details dict.
"""

from ethwrap.errors.base import (
    EthWrapError,
    InvalidAddressError,
    InvalidAmountError,
    ValidationError,
)
from ethwrap.errors.contract import (
    ContractCallError,
    ConversionError,
    DeploymentError,
    NameResolutionError,
    UnsupportedOperation,
)
from ethwrap.errors.transaction import (
    RevertedTransaction,
    RpcProtocolError,
    TransactionError,
    TransactionTimeoutError,
    TransportError,
)

__all__ = [
    "EthWrapError",
    "ValidationError",
    "InvalidAddressError",
    "InvalidAmountError",
    "TransportError",
    "RpcProtocolError",
    "TransactionError",
    "TransactionTimeoutError",
    "RevertedTransaction",
    "ContractCallError",
    "ConversionError",
    "DeploymentError",
    "UnsupportedOperation",
    "NameResolutionError",
]
