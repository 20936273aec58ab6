"""Contract name resolution.

Contract handles accept either an address or an ENS name. The name is
resolved once, when the handle is constructed.
"""

from typing import Optional, Protocol

from web3 import Web3

from .errors import NameResolutionError
from .utils.logging import get_logger
from .utils.validation import is_address

__all__ = ["NameResolver", "EnsResolver"]

_logger = get_logger(__name__)


class NameResolver(Protocol):
    def resolve(self, name_or_address: Optional[str]) -> Optional[str]:
        ...


class EnsResolver:
    """Resolve ENS names through ``web3.ens``; addresses and empty values pass through."""

    def __init__(self, w3: Web3):
        self.w3 = w3

    def resolve(self, name_or_address: Optional[str]) -> Optional[str]:
        if not name_or_address or is_address(name_or_address):
            return name_or_address
        try:
            address = self.w3.ens.address(name_or_address)
        except Exception as e:
            raise NameResolutionError(name_or_address, str(e)) from e
        if address is None:
            raise NameResolutionError(name_or_address, "no address record")
        _logger.debug("Resolved ENS name", extra={"ens_name": name_or_address, "address": address})
        return address
