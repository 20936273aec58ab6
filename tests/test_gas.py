"""
Tests for gas pricing strategies.
"""

from types import SimpleNamespace

import pytest

from conftest import CONTRACT_ADDRESS, SENDER
from ethwrap.constants import DEFAULT_GAS_LIMIT, DEFAULT_GAS_PRICE
from ethwrap.gas import (
    FeeMarketGasStrategy,
    GasStrategyKind,
    LegacyGasStrategy,
    default_gas_strategy,
    estimated_gas_limit,
)
from ethwrap.models import TransactionRequest

REQUEST = TransactionRequest(from_address=SENDER, to=CONTRACT_ADDRESS, data="0x1234", value=5)


class TestLegacyGasStrategy:
    """Tests for LegacyGasStrategy."""

    def test_default_strategy(self) -> None:
        strategy = default_gas_strategy()

        assert strategy.kind == GasStrategyKind.LEGACY
        assert strategy.supports_fee_market is False
        assert strategy.gas_price() == DEFAULT_GAS_PRICE == 4_100_000_000
        assert strategy.gas_limit() == DEFAULT_GAS_LIMIT == 9_000_000

    def test_callable_limit_receives_request(self) -> None:
        seen = []

        def limit(request: TransactionRequest) -> int:
            seen.append(request)
            return 50_000 + len(request.data)

        strategy = LegacyGasStrategy(price=1, limit=limit)

        assert strategy.gas_limit(REQUEST) == 50_006
        assert seen == [REQUEST]

    def test_callable_limit_without_request_raises(self) -> None:
        strategy = LegacyGasStrategy(price=1, limit=lambda request: 21_000)
        with pytest.raises(ValueError):
            strategy.gas_limit()


class TestFeeMarketGasStrategy:
    """Tests for FeeMarketGasStrategy."""

    def test_tag_and_fields(self) -> None:
        strategy = FeeMarketGasStrategy(chain_id=11155111, max_priority_fee=2, max_fee=100, limit=21_000)

        assert strategy.kind == GasStrategyKind.FEE_MARKET
        assert strategy.supports_fee_market is True
        assert strategy.gas_limit(REQUEST) == 21_000

    def test_fallback_price_defaults_to_max_fee(self) -> None:
        strategy = FeeMarketGasStrategy(chain_id=1, max_priority_fee=2, max_fee=100, limit=21_000)
        assert strategy.gas_price() == 100

        priced = FeeMarketGasStrategy(chain_id=1, max_priority_fee=2, max_fee=100, limit=21_000, price=7)
        assert priced.gas_price() == 7

    def test_from_latest_block_doubles_base_fee(self) -> None:
        block = {"baseFeePerGas": 10_000_000_000}
        w3 = SimpleNamespace(eth=SimpleNamespace(get_block=lambda tag: block))

        strategy = FeeMarketGasStrategy.from_latest_block(w3, chain_id=8453, limit=100_000)

        assert strategy.chain_id == 8453
        assert strategy.max_fee == 20_000_000_000
        assert strategy.max_priority_fee == 1_000_000
        assert strategy.gas_limit() == 100_000

    def test_from_latest_block_floors_max_fee(self) -> None:
        w3 = SimpleNamespace(eth=SimpleNamespace(get_block=lambda tag: {"baseFeePerGas": 1}))

        strategy = FeeMarketGasStrategy.from_latest_block(w3, chain_id=1)

        assert strategy.max_fee == 10_000_000
        assert strategy.max_fee >= strategy.max_priority_fee


class TestEstimatedGasLimit:
    """Tests for the eth_estimateGas-backed limit."""

    def test_applies_buffer(self) -> None:
        calls = []

        def estimate_gas(params):
            calls.append(params)
            return 100_000

        w3 = SimpleNamespace(eth=SimpleNamespace(estimate_gas=estimate_gas))
        limit = estimated_gas_limit(w3)

        # 15% buffer, truncated to an int
        assert 114_999 <= limit(REQUEST) <= 115_000
        assert calls[0]["to"] == CONTRACT_ADDRESS
        assert calls[0]["data"] == "0x1234"
        assert calls[0]["value"] == 5

    def test_caps_estimate(self) -> None:
        w3 = SimpleNamespace(eth=SimpleNamespace(estimate_gas=lambda params: 50_000_000))
        assert estimated_gas_limit(w3, cap=30_000_000)(REQUEST) == 30_000_000

    def test_usable_as_strategy_limit(self) -> None:
        w3 = SimpleNamespace(eth=SimpleNamespace(estimate_gas=lambda params: 20_000))
        strategy = LegacyGasStrategy(price=1, limit=estimated_gas_limit(w3, buffer=1.5))
        assert strategy.gas_limit(REQUEST) == 30_000
