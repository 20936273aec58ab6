"""Library linking for deployment bytecode.

Contracts that call external libraries are compiled with placeholders
where the library addresses go. Three placeholder conventions are in use:

- current solc / hardhat: ``__$`` + first 34 hex chars of
  ``keccak("<source>:<library>")`` + ``$__``
- old solc: ``__<source>:<library>`` padded with ``_`` to 40 characters
- old truffle: ``__<library>`` padded with ``_`` to 40 characters

Every convention is substituted for every reference; references that do
not occur in the binary are ignored.
"""

from dataclasses import dataclass
from typing import Iterable

from eth_utils import keccak, remove_0x_prefix

from .constants import LIBRARY_HASH_PREFIX_LENGTH, LIBRARY_PLACEHOLDER_LENGTH
from .utils.validation import validate_address

__all__ = ["LinkReference", "link_binary_with_references", "library_placeholders"]


@dataclass(frozen=True)
class LinkReference:
    source: str
    library_name: str
    address: str

    def __post_init__(self):
        validate_address(self.address, "address")


def _padded(name: str) -> str:
    return "__" + name + "_" * (LIBRARY_PLACEHOLDER_LENGTH - len(name) - 2)


def library_placeholders(source: str, library_name: str) -> tuple:
    """Return the (current, old solc, old truffle) placeholders for a library."""
    qualified = f"{source}:{library_name}"
    digest = keccak(text=qualified).hex()
    return (
        "__$" + digest[:LIBRARY_HASH_PREFIX_LENGTH] + "$__",
        _padded(qualified),
        _padded(library_name),
    )


def link_binary_with_references(binary: str, links: Iterable[LinkReference]) -> str:
    """Replace library placeholders in ``binary`` with deployed library addresses.

    Args:
        binary: Hex bytecode containing placeholders
        links: Library references, applied in order

    Returns:
        The linked bytecode
    """
    linked = binary
    for link in links:
        replacement = remove_0x_prefix(link.address).lower()
        for placeholder in library_placeholders(link.source, link.library_name):
            linked = linked.replace(placeholder, replacement)
    return linked
