"""Revert classification and reason decoding.

A call outcome is either an RPC error or a result that looks successful.
Solidity's ``require``/``revert`` with a message produces a result (or error
data) starting with the ``Error(string)`` selector; an EIP-3668
``OffchainLookup`` error returned with code 3 is a request for off-chain
data, not a revert.

Mined receipts carry no revert data, so the reason for a failed
transaction is recovered by replaying the same call with ``eth_call`` at
the receipt's block (:func:`replay_revert`).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex

from .constants import EIP3668_SELECTOR, ERROR_METHOD_ID, EXECUTION_REVERTED_CODE
from .models import CallResponse, TransactionReceipt, TransactionRequest
from .utils.logging import get_logger

if TYPE_CHECKING:
    from .manager import TransactionManager

__all__ = [
    "RevertKind",
    "RevertOutcome",
    "decode_revert",
    "decode_revert_reason",
    "is_offchain_lookup",
    "is_reverted",
    "revert_reason",
    "revert_reason_encoded_data",
    "replay_revert",
]

_logger = get_logger(__name__)


class RevertKind(str, Enum):
    NO_ERROR = "no-error"
    RPC_ERROR = "rpc-error"
    ABI_ENCODED_REVERT = "abi-encoded-revert"
    OFFCHAIN_LOOKUP = "offchain-lookup"


@dataclass(frozen=True)
class RevertOutcome:
    """Classified call outcome.

    Attributes:
        kind: What the node reported
        reason: Human-readable reason, if one could be recovered
        encoded_data: The RPC error's ``data`` member, verbatim
    """

    kind: RevertKind
    reason: Optional[str] = None
    encoded_data: Any = None

    @property
    def is_reverted(self) -> bool:
        return self.kind in (RevertKind.RPC_ERROR, RevertKind.ABI_ENCODED_REVERT)


def is_offchain_lookup(data: Any) -> bool:
    """True if ``data`` starts with the EIP-3668 ``OffchainLookup`` selector."""
    return (
        isinstance(data, str)
        and len(data) >= len(EIP3668_SELECTOR)
        and data[: len(EIP3668_SELECTOR)].lower() == EIP3668_SELECTOR
    )


def _is_error_in_result(result: Optional[str]) -> bool:
    return result is not None and result.lower().startswith(ERROR_METHOD_ID)


def decode_revert_reason(raw: str) -> Optional[str]:
    """Decode Solidity revert reason from ``Error(string)`` data.

    Args:
        raw: Hex-encoded data starting with the ``0x08c379a0`` selector

    Returns:
        Decoded revert reason string, or None if ``raw`` is not an
        ``Error(string)`` payload or decoding fails
    """
    if not _is_error_in_result(raw):
        return None
    try:
        (reason,) = decode(["string"], decode_hex(raw[len(ERROR_METHOD_ID):]))
    except (DecodingError, ValueError, UnicodeDecodeError):
        # ValueError: invalid hex string
        # UnicodeDecodeError: invalid UTF-8 in reason bytes
        return None
    return reason


def decode_revert(response: CallResponse) -> RevertOutcome:
    """Classify a call response and extract its revert reason."""
    error = response.error
    encoded_data = error.data if error is not None else None

    if error is not None and error.code == EXECUTION_REVERTED_CODE and error.data is not None:
        if is_offchain_lookup(error.data):
            return RevertOutcome(RevertKind.OFFCHAIN_LOOKUP, error.message, encoded_data)

    if _is_error_in_result(response.result):
        return RevertOutcome(
            RevertKind.ABI_ENCODED_REVERT,
            decode_revert_reason(response.result),
            encoded_data,
        )
    if error is not None:
        return RevertOutcome(RevertKind.RPC_ERROR, error.message, encoded_data)
    return RevertOutcome(RevertKind.NO_ERROR)


def is_reverted(response: CallResponse) -> bool:
    return decode_revert(response).is_reverted


def revert_reason(response: CallResponse) -> Optional[str]:
    return decode_revert(response).reason


def revert_reason_encoded_data(response: CallResponse) -> Any:
    return decode_revert(response).encoded_data


def replay_revert(
    manager: "TransactionManager",
    request: TransactionRequest,
    receipt: TransactionReceipt,
) -> RevertOutcome:
    """Re-run a failed transaction as ``eth_call`` at its block to recover the revert reason.

    Args:
        manager: Transaction manager used to reach the node
        request: The transaction intent that was submitted
        receipt: The failed receipt (only its block number is used)

    Returns:
        Classified outcome of the replayed call
    """
    block = receipt.block_number if receipt.block_number is not None else "latest"
    _logger.debug(
        "Replaying failed transaction",
        extra={"tx_hash": receipt.transaction_hash, "block": block},
    )
    return decode_revert(manager.call(request, block))
