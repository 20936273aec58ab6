"""Data models shared by the executor, the manager and contract handles.

Receipts and logs are converted from web3 ``AttributeDict`` objects (or raw
JSON-RPC dicts) into frozen dataclasses with hex strings and ints, so the
rest of the engine never deals with ``HexBytes`` or camelCase keys.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

__all__ = [
    "TransactionRequest",
    "Log",
    "TransactionReceipt",
    "EmptyTransactionReceipt",
    "RpcErrorDetail",
    "CallResponse",
    "CodeResponse",
    "BlockSelector",
]

# Block tag ("latest", "pending", ...) or block number
BlockSelector = Union[str, int]


def to_hex(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, int):
        return hex(value)
    return str(value)


def to_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (bytes, bytearray)):
        return int.from_bytes(value, "big")
    return int(str(value), 16) if str(value).startswith("0x") else int(value)


def block_selector_param(block: BlockSelector) -> str:
    """JSON-RPC form of a block selector."""
    return hex(block) if isinstance(block, int) else block


@dataclass(frozen=True)
class TransactionRequest:
    """Transaction intent built fresh for every call; ``to`` is None for contract creation."""

    from_address: str
    to: Optional[str]
    data: str
    value: int = 0
    gas_price: Optional[int] = None
    gas_limit: Optional[int] = None

    @property
    def is_creation(self) -> bool:
        return self.to is None

    def to_tx_params(self) -> Dict[str, Any]:
        """Parameters in web3.py ``TxParams`` form (int quantities)."""
        params: Dict[str, Any] = {"from": self.from_address, "data": self.data, "value": self.value}
        if self.to is not None:
            params["to"] = self.to
        if self.gas_price is not None:
            params["gasPrice"] = self.gas_price
        if self.gas_limit is not None:
            params["gas"] = self.gas_limit
        return params

    def to_rpc_params(self) -> Dict[str, Any]:
        """Parameters in raw JSON-RPC form (hex quantities), as used by ``eth_call``."""
        params: Dict[str, Any] = {"from": self.from_address, "data": self.data, "value": hex(self.value)}
        if self.to is not None:
            params["to"] = self.to
        return params


@dataclass(frozen=True)
class Log:
    address: Optional[str]
    topics: Tuple[str, ...]
    data: str
    block_number: Optional[int] = None
    transaction_hash: Optional[str] = None
    log_index: Optional[int] = None

    @classmethod
    def from_web3(cls, raw: Mapping[str, Any]) -> "Log":
        return cls(
            address=raw.get("address"),
            topics=tuple(to_hex(t) for t in raw.get("topics") or ()),
            data=to_hex(raw.get("data")) or "0x",
            block_number=to_int(raw.get("blockNumber")),
            transaction_hash=to_hex(raw.get("transactionHash")),
            log_index=to_int(raw.get("logIndex")),
        )


@dataclass(frozen=True)
class TransactionReceipt:
    transaction_hash: str
    status: Optional[int] = None
    contract_address: Optional[str] = None
    gas_used: Optional[int] = None
    block_number: Optional[int] = None
    from_address: Optional[str] = None
    to: Optional[str] = None
    logs: Tuple[Log, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return False

    @property
    def is_status_ok(self) -> bool:
        # Pre-Byzantium receipts have no status field
        return self.status is None or self.status == 1

    @classmethod
    def from_web3(cls, raw: Mapping[str, Any]) -> "TransactionReceipt":
        return cls(
            transaction_hash=to_hex(raw.get("transactionHash")),
            status=to_int(raw.get("status")),
            contract_address=raw.get("contractAddress"),
            gas_used=to_int(raw.get("gasUsed")),
            block_number=to_int(raw.get("blockNumber")),
            from_address=raw.get("from"),
            to=raw.get("to"),
            logs=tuple(Log.from_web3(log) for log in raw.get("logs") or ()),
        )


@dataclass(frozen=True)
class EmptyTransactionReceipt(TransactionReceipt):
    """Synthetic receipt for a submitted but not awaited transaction; only the hash is known."""

    @property
    def is_empty(self) -> bool:
        return True


@dataclass(frozen=True)
class RpcErrorDetail:
    """The ``error`` member of a JSON-RPC response."""

    code: int
    message: str
    data: Any = None

    @classmethod
    def from_response(cls, error: Mapping[str, Any]) -> "RpcErrorDetail":
        return cls(
            code=int(error.get("code", 0)),
            message=str(error.get("message", "")),
            data=error.get("data"),
        )


@dataclass(frozen=True)
class CallResponse:
    """Outcome of ``eth_call``: a hex result, or an RPC error."""

    result: Optional[str] = None
    error: Optional[RpcErrorDetail] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class CodeResponse:
    """Outcome of ``eth_getCode``."""

    code: Optional[str] = None
    error: Optional[RpcErrorDetail] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None
