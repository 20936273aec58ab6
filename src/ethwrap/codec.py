"""ABI codec adapter.

Thin layer over ``eth_abi`` and ``eth_utils`` that gives the rest of the
engine a small, typed vocabulary: :class:`Function` and :class:`Event`
descriptors, and :class:`TypedValue` results that keep the ABI type next
to the decoded Python value.

Example:
    >>> fn = Function("balanceOf", [TypedValue("address", owner)], ["uint256"])
    >>> data = encode_function_call(fn)
    >>> decode_return(raw_result, fn.output_types)
    [TypedValue(abi_type='uint256', value=1000)]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import (
    decode_hex,
    event_signature_to_log_topic,
    function_signature_to_4byte_selector,
    to_checksum_address,
)

from .errors import ConversionError, ValidationError

__all__ = [
    "TypedValue",
    "Function",
    "Event",
    "EventParameter",
    "encode_function_call",
    "encode_constructor",
    "decode_return",
    "decode_indexed_value",
    "event_signature_hash",
    "address_to_string",
    "is_dynamic_type",
]


@dataclass(frozen=True)
class TypedValue:
    """A decoded (or to-be-encoded) value together with its ABI type."""

    abi_type: str
    value: Any

    @property
    def is_struct(self) -> bool:
        return self.abi_type.startswith("(") or self.abi_type.startswith("tuple")

    def __str__(self) -> str:
        if self.abi_type == "address":
            return address_to_string(self.value)
        return str(self.value)


@dataclass(frozen=True)
class Function:
    """A contract function call: name, typed inputs and declared output types."""

    name: str
    inputs: Sequence[TypedValue] = field(default_factory=tuple)
    output_types: Sequence[str] = field(default_factory=tuple)

    @property
    def input_types(self) -> List[str]:
        return [arg.abi_type for arg in self.inputs]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> str:
        return "0x" + function_signature_to_4byte_selector(self.signature).hex()


@dataclass(frozen=True)
class EventParameter:
    abi_type: str
    indexed: bool = False
    name: str = ""


@dataclass(frozen=True)
class Event:
    """An event descriptor; parameter order is the declared Solidity order."""

    name: str
    parameters: Sequence[EventParameter] = field(default_factory=tuple)

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(p.abi_type for p in self.parameters)})"

    @property
    def indexed_parameters(self) -> List[EventParameter]:
        return [p for p in self.parameters if p.indexed]

    @property
    def non_indexed_parameters(self) -> List[EventParameter]:
        return [p for p in self.parameters if not p.indexed]


def _to_bytes(hex_data: Optional[str]) -> bytes:
    if not hex_data:
        return b""
    try:
        return decode_hex(hex_data)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Invalid hex data: {hex_data!r}", field="data") from e


def _encode_args(types: Sequence[str], values: Sequence[Any]) -> bytes:
    try:
        return encode(list(types), list(values))
    except (EncodingError, TypeError, ValueError) as e:
        raise ValidationError(f"Unable to ABI-encode arguments {list(types)}: {e}") from e


def encode_function_call(function: Function) -> str:
    """Encode a function call as 0x-prefixed calldata (selector + arguments)."""
    selector = function_signature_to_4byte_selector(function.signature)
    encoded = _encode_args(function.input_types, [arg.value for arg in function.inputs])
    return "0x" + (selector + encoded).hex()


def encode_constructor(args: Sequence[TypedValue]) -> str:
    """Encode constructor arguments as bare hex (no prefix), ready to append to bytecode."""
    if not args:
        return ""
    return _encode_args([a.abi_type for a in args], [a.value for a in args]).hex()


def decode_return(hex_data: Optional[str], output_types: Sequence[str]) -> List[TypedValue]:
    """
    Decode a raw call result against the function's declared output types.

    An empty result (``None``, ``""`` or ``"0x"``) decodes to an empty list.

    Raises:
        ConversionError: If the data does not match the output types
    """
    data = _to_bytes(hex_data)
    if not data or not output_types:
        return []
    try:
        values = decode(list(output_types), data)
    except DecodingError as e:
        raise ConversionError(
            f"Unable to decode response {hex_data} as {list(output_types)}: {e}"
        ) from e
    return [TypedValue(t, v) for t, v in zip(output_types, values)]


def is_dynamic_type(abi_type: str) -> bool:
    """True for types whose indexed topic holds a keccak hash instead of the value."""
    return (
        abi_type in ("string", "bytes")
        or abi_type.endswith("]")
        or abi_type.startswith("(")
        or abi_type.startswith("tuple")
    )


def decode_indexed_value(topic: str, abi_type: str) -> TypedValue:
    """
    Decode a single indexed event parameter from its topic.

    Dynamic types are returned as the raw ``bytes32`` topic.
    """
    data = _to_bytes(topic)
    if is_dynamic_type(abi_type):
        return TypedValue("bytes32", data)
    try:
        (value,) = decode([abi_type], data)
    except DecodingError as e:
        raise ConversionError(f"Unable to decode topic {topic} as {abi_type}: {e}") from e
    return TypedValue(abi_type, value)


def event_signature_hash(event: Event) -> str:
    """Return topic 0 for ``event``: 0x + keccak(``Name(type1,...)``)."""
    return "0x" + event_signature_to_log_topic(event.signature).hex()


def address_to_string(address: Any) -> str:
    """Canonical (EIP-55) text form of an address given as text or 20 bytes."""
    return to_checksum_address(address)

