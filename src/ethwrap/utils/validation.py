"""
Validation utilities for ethwrap.

Provides input validation functions for:
- Ethereum addresses
- Wei amounts
- Hex payloads (calldata, bytecode)

All validation functions raise ValidationError (or subclasses) on failure.
"""

from __future__ import annotations

import re
from typing import Union

from eth_utils import to_checksum_address

from ethwrap.constants import MAX_UINT256
from ethwrap.errors import InvalidAddressError, InvalidAmountError, ValidationError

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_HEX_RE = re.compile(r"^0x[0-9a-fA-F]*$")


def validate_address(address: str, field_name: str = "address") -> str:
    """
    Validate Ethereum address format.

    Args:
        address: Address to validate
        field_name: Field name for error messages

    Returns:
        EIP-55 checksummed address

    Raises:
        InvalidAddressError: If address is invalid
    """
    if not address:
        raise InvalidAddressError(
            "" if not address else str(address),
            field=field_name,
            reason=f"{field_name} is required",
        )

    if not isinstance(address, str):
        raise InvalidAddressError(
            str(address),
            field=field_name,
            reason=f"{field_name} must be a string",
        )

    # Check format: 0x + 40 hex chars
    if not _ADDRESS_RE.match(address):
        raise InvalidAddressError(
            address,
            field=field_name,
            reason="must be 0x followed by 40 hex characters",
        )

    return to_checksum_address(address)


def is_address(value: object) -> bool:
    """Return True if ``value`` is 0x followed by 40 hex characters."""
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value))


def validate_amount(
    amount: Union[int, str],
    field_name: str = "value",
    max_amount: int = MAX_UINT256,
) -> int:
    """
    Validate a native-currency amount in wei.

    Args:
        amount: Amount in wei (integer or decimal string)
        field_name: Field name for error messages
        max_amount: Maximum allowed amount (default: uint256 max)

    Returns:
        Validated amount as integer

    Raises:
        InvalidAmountError: If amount is invalid
    """
    if isinstance(amount, bool):
        raise InvalidAmountError(amount, field=field_name, reason="must be an integer")
    try:
        amount_int = int(amount) if isinstance(amount, str) else amount
    except (ValueError, TypeError):
        raise InvalidAmountError(amount, field=field_name, reason="must be a valid number") from None

    if not isinstance(amount_int, int):
        raise InvalidAmountError(amount, field=field_name, reason="must be an integer")

    if amount_int < 0:
        raise InvalidAmountError(amount_int, field=field_name, reason="cannot be negative")

    if amount_int > max_amount:
        raise InvalidAmountError(
            amount_int,
            field=field_name,
            reason=f"exceeds maximum allowed ({max_amount})",
        )

    return amount_int


def validate_hex(value: str, field_name: str = "data") -> str:
    """
    Validate 0x-prefixed hex text of any (even) length.

    Args:
        value: Hex string to validate
        field_name: Field name for error messages

    Returns:
        The value unchanged

    Raises:
        ValidationError: If value is not 0x-prefixed hex
    """
    if not isinstance(value, str) or not _HEX_RE.match(value):
        raise ValidationError(
            f"Invalid {field_name}: must be 0x followed by hex characters",
            field=field_name,
        )
    if len(value) % 2:
        raise ValidationError(
            f"Invalid {field_name}: odd number of hex characters",
            field=field_name,
        )
    return value


__all__ = [
    "validate_address",
    "is_address",
    "validate_amount",
    "validate_hex",
]
