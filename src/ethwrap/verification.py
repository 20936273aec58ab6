"""Deployed bytecode verification.

solc appends a CBOR-encoded metadata section (source hash, compiler
version) to runtime bytecode. It changes with comments and build settings,
so it is stripped before comparing on-chain code with a known binary.
"""

from typing import Optional

from eth_utils import remove_0x_prefix

from .constants import METADATA_HASH_INDICATORS

__all__ = ["strip_metadata", "is_code_valid"]


def _metadata_index(code: str) -> Optional[int]:
    positions = [code.find(indicator) for indicator in METADATA_HASH_INDICATORS]
    found = [p for p in positions if p != -1]
    return min(found) if found else None


def strip_metadata(code: str) -> str:
    """Drop the hex prefix and everything from the first metadata marker on.

    When several markers occur, the one at the earliest position wins.
    """
    code = remove_0x_prefix(code or "")
    index = _metadata_index(code)
    return code if index is None else code[:index]


def is_code_valid(code: Optional[str], binary: str) -> bool:
    """True if the stripped on-chain ``code`` is non-empty and occurs in ``binary``.

    ``binary`` may hold several concatenated contracts, so a substring
    match is enough.
    """
    stripped = strip_metadata(code)
    return bool(stripped) and stripped in binary
