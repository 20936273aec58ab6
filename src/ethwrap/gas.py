"""Gas pricing strategies.

A contract handle owns exactly one strategy. There are two variants,
modelled as a closed tagged union: every strategy carries ``kind`` and the
``supports_fee_market`` capability flag, and the executor switches on the
flag rather than on the Python type.

- :class:`LegacyGasStrategy`: fixed ``gasPrice`` and gas limit.
- :class:`FeeMarketGasStrategy`: EIP-1559 priority fee and max fee plus the
  chain id for replay protection.

In both, ``limit`` is either a constant or a callable that receives the
fully assembled :class:`~ethwrap.models.TransactionRequest`, so it can be
estimated from destination, payload and value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from web3 import Web3

from .constants import (
    DEFAULT_GAS_LIMIT,
    DEFAULT_GAS_PRICE,
    GAS_ESTIMATION_BUFFER,
    MAX_FEE_MULTIPLIER,
    MAX_GAS_LIMIT,
    MIN_MAX_FEE_GWEI,
    PRIORITY_FEE_GWEI,
)
from .models import TransactionRequest
from .utils.logging import get_logger

__all__ = [
    "GasStrategyKind",
    "GasLimit",
    "LegacyGasStrategy",
    "FeeMarketGasStrategy",
    "GasStrategy",
    "default_gas_strategy",
    "estimated_gas_limit",
]

_logger = get_logger(__name__)

GasLimit = Union[int, Callable[[TransactionRequest], int]]


class GasStrategyKind(str, Enum):
    LEGACY = "legacy"
    FEE_MARKET = "fee-market"


def _resolve_limit(limit: GasLimit, request: Optional[TransactionRequest]) -> int:
    if callable(limit):
        if request is None:
            raise ValueError("Gas limit depends on the pending transaction; pass the request")
        return int(limit(request))
    return int(limit)


@dataclass(frozen=True)
class LegacyGasStrategy:
    price: int
    limit: GasLimit

    kind = GasStrategyKind.LEGACY
    supports_fee_market = False

    def gas_price(self) -> int:
        return self.price

    def gas_limit(self, request: Optional[TransactionRequest] = None) -> int:
        return _resolve_limit(self.limit, request)


@dataclass(frozen=True)
class FeeMarketGasStrategy:
    """EIP-1559 pricing.

    ``max_fee >= max_priority_fee`` is the caller's responsibility. ``price``
    is only used if the fee-market submission is not applicable and the
    executor falls back to a legacy transaction; it defaults to ``max_fee``.
    """

    chain_id: int
    max_priority_fee: int
    max_fee: int
    limit: GasLimit
    price: Optional[int] = None

    kind = GasStrategyKind.FEE_MARKET
    supports_fee_market = True

    def gas_price(self) -> int:
        return self.price if self.price is not None else self.max_fee

    def gas_limit(self, request: Optional[TransactionRequest] = None) -> int:
        return _resolve_limit(self.limit, request)

    @classmethod
    def from_latest_block(
        cls,
        w3: Web3,
        chain_id: int,
        limit: GasLimit = DEFAULT_GAS_LIMIT,
    ) -> "FeeMarketGasStrategy":
        """Price from the latest block's base fee.

        ``maxFeePerGas`` is twice the base fee (floored at ``MIN_MAX_FEE_GWEI``)
        and the tip is ``PRIORITY_FEE_GWEI``. The result is computed once;
        build a new strategy to re-price.
        """
        latest_block = w3.eth.get_block("latest")
        base_fee = latest_block.get("baseFeePerGas", 0)
        max_fee = max(base_fee * MAX_FEE_MULTIPLIER, Web3.to_wei(MIN_MAX_FEE_GWEI, "gwei"))
        priority_fee = Web3.to_wei(PRIORITY_FEE_GWEI, "gwei")
        _logger.debug(
            "Priced fee-market strategy",
            extra={"base_fee": base_fee, "max_fee": max_fee, "priority_fee": priority_fee},
        )
        return cls(
            chain_id=chain_id,
            max_priority_fee=priority_fee,
            max_fee=max_fee,
            limit=limit,
        )


GasStrategy = Union[LegacyGasStrategy, FeeMarketGasStrategy]


def default_gas_strategy() -> LegacyGasStrategy:
    """Legacy strategy with the library-wide default price (4.1 gwei) and limit (9M)."""
    return LegacyGasStrategy(price=DEFAULT_GAS_PRICE, limit=DEFAULT_GAS_LIMIT)


def estimated_gas_limit(
    w3: Web3,
    buffer: float = GAS_ESTIMATION_BUFFER,
    cap: int = MAX_GAS_LIMIT,
) -> Callable[[TransactionRequest], int]:
    """Build a gas-limit callable backed by ``eth_estimateGas``.

    Args:
        w3: Web3 instance used for the estimate
        buffer: Multiplier buffer for safety margin (default 1.15 = 15%)
        cap: Upper bound for the returned limit

    Returns:
        Callable computing the limit for a pending transaction
    """

    def _estimate(request: TransactionRequest) -> int:
        base = w3.eth.estimate_gas(request.to_tx_params())
        estimated = int(base * buffer)
        # Cap to prevent excessive gas from a misbehaving RPC
        return min(estimated, cap)

    return _estimate
