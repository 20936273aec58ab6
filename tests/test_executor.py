"""
Tests for TransactionExecutor.

Tests cover:
- Request construction for calls and contract creation
- Fee-market first, legacy fallback ordering
- RPC error mapping
- Revert reason recovery by replay
- Empty receipts skipping the status check
"""

import pytest

from conftest import (
    CONTRACT_ADDRESS,
    SENDER,
    TX_HASH,
    encode_error_string,
    make_receipt,
)
from ethwrap.errors import (
    InvalidAmountError,
    RevertedTransaction,
    RpcProtocolError,
    TransactionError,
    TransportError,
)
from ethwrap.executor import TransactionExecutor
from ethwrap.gas import FeeMarketGasStrategy, LegacyGasStrategy
from ethwrap.models import CallResponse, EmptyTransactionReceipt, RpcErrorDetail

LEGACY = LegacyGasStrategy(price=5_000_000_000, limit=100_000)
FEE_MARKET = FeeMarketGasStrategy(chain_id=11155111, max_priority_fee=1, max_fee=50, limit=200_000)


def make_executor(manager, strategy=LEGACY, address=CONTRACT_ADDRESS):
    return TransactionExecutor(manager, lambda: address, lambda: strategy)


class TestBuildRequest:
    """Tests for transaction intent construction."""

    def test_call_targets_contract(self, manager) -> None:
        request = make_executor(manager).build_request("0xabcd", 3, constructor=False)

        assert request.from_address == SENDER
        assert request.to == CONTRACT_ADDRESS
        assert request.data == "0xabcd"
        assert request.value == 3

    def test_constructor_has_no_destination(self, manager) -> None:
        request = make_executor(manager).build_request("0x6080", 0, constructor=True)
        assert request.to is None
        assert request.is_creation

    def test_unset_address_has_no_destination(self, manager) -> None:
        request = make_executor(manager, address="").build_request("0x", 0, constructor=False)
        assert request.to is None


class TestSubmission:
    """Tests for strategy dispatch."""

    def test_legacy_strategy_sends_legacy_only(self, manager) -> None:
        receipt = make_executor(manager).execute("0xabcd", 0, "transfer")

        assert receipt.transaction_hash == TX_HASH
        assert [kind for kind, _ in manager.sent] == ["legacy"]
        sent = manager.sent[0][1]
        assert sent["gas_price"] == 5_000_000_000
        assert sent["gas_limit"] == 100_000
        assert sent["to"] == CONTRACT_ADDRESS
        assert sent["constructor"] is False

    def test_fee_market_attempted_first(self, manager) -> None:
        """A fee-market receipt means legacy is never attempted."""
        manager.fee_market_receipt = make_receipt()

        make_executor(manager, FEE_MARKET).execute("0xabcd", 7, "transfer")

        assert [kind for kind, _ in manager.sent] == ["fee-market"]
        sent = manager.sent[0][1]
        assert sent["chain_id"] == 11155111
        assert sent["max_priority_fee"] == 1
        assert sent["max_fee"] == 50
        assert sent["gas_limit"] == 200_000
        assert sent["value"] == 7

    def test_falls_back_to_legacy_without_fee_market_receipt(self, manager) -> None:
        manager.fee_market_receipt = None

        make_executor(manager, FEE_MARKET).execute("0xabcd", 0, "transfer")

        assert [kind for kind, _ in manager.sent] == ["fee-market", "legacy"]
        assert manager.sent[1][1]["gas_price"] == 50

    def test_constructor_flag_reaches_manager(self, manager) -> None:
        make_executor(manager).execute("0x6080", 0, "deploy", constructor=True)

        sent = manager.sent[0][1]
        assert sent["to"] is None
        assert sent["constructor"] is True

    def test_gas_limit_callable_sees_request(self, manager) -> None:
        seen = []
        strategy = LegacyGasStrategy(price=1, limit=lambda request: seen.append(request) or 42_000)

        make_executor(manager, strategy).execute("0xabcd", 9, "transfer")

        assert manager.sent[0][1]["gas_limit"] == 42_000
        assert seen[0].data == "0xabcd"
        assert seen[0].value == 9

    def test_strategy_read_per_execution(self, manager) -> None:
        strategies = [LEGACY]
        executor = TransactionExecutor(manager, lambda: CONTRACT_ADDRESS, lambda: strategies[0])

        executor.execute("0x01", 0, "a")
        strategies[0] = LegacyGasStrategy(price=9, limit=21_000)
        executor.execute("0x02", 0, "b")

        assert [s["gas_price"] for _, s in manager.sent] == [5_000_000_000, 9]

    def test_gas_limit_failure_becomes_transaction_error(self, manager) -> None:
        def estimate(request):
            raise ValueError("execution reverted: paused")

        strategy = LegacyGasStrategy(price=1, limit=estimate)

        with pytest.raises(TransactionError, match="paused") as exc_info:
            make_executor(manager, strategy).execute("0x01", 0, "transfer")

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert manager.sent == []

    def test_gas_limit_package_error_propagates(self, manager) -> None:
        def estimate(request):
            raise TransportError("connection refused")

        strategy = LegacyGasStrategy(price=1, limit=estimate)

        with pytest.raises(TransportError):
            make_executor(manager, strategy).execute("0x01", 0, "transfer")
        assert manager.sent == []

    def test_negative_value_rejected_before_submission(self, manager) -> None:
        with pytest.raises(InvalidAmountError):
            make_executor(manager).execute("0x01", -1, "transfer")
        assert manager.sent == []


class TestErrors:
    """Tests for failure mapping."""

    def test_rpc_error_with_data(self, manager) -> None:
        manager.legacy_receipt = RpcProtocolError(-32000, "insufficient funds", data="0xdeadbeef")

        with pytest.raises(TransactionError) as exc_info:
            make_executor(manager).execute("0x01", 0, "transfer")

        assert exc_info.value.message == "0xdeadbeef"
        assert exc_info.value.code == "TRANSACTION_FAILED"

    def test_rpc_error_without_data(self, manager) -> None:
        manager.legacy_receipt = RpcProtocolError(-32000, "nonce too low")

        with pytest.raises(TransactionError) as exc_info:
            make_executor(manager).execute("0x01", 0, "transfer")

        assert exc_info.value.message == "JsonRpcError thrown with code -32000. Message: nonce too low"

    def test_transport_error_propagates(self, manager) -> None:
        manager.legacy_receipt = TransportError("connection refused")

        with pytest.raises(TransportError):
            make_executor(manager).execute("0x01", 0, "transfer")

    def test_reverted_receipt_replays_for_reason(self, manager) -> None:
        """A failed receipt raises RevertedTransaction with the replayed reason."""
        manager.legacy_receipt = make_receipt(status=0, gas_used=30_123, block_number=99)
        manager.call_response = CallResponse(result=encode_error_string("Insufficient balance"))

        with pytest.raises(RevertedTransaction) as exc_info:
            make_executor(manager).execute("0xabcd", 0, "transfer")

        error = exc_info.value
        assert error.tx_hash == TX_HASH
        assert error.reason == "Insufficient balance"
        assert error.status == 0
        assert error.gas_used == 30_123
        assert TX_HASH in error.message
        assert "Insufficient balance" in error.message

        request, block = manager.calls[0]
        assert block == 99
        assert request.data == "0xabcd"
        assert request.to == CONTRACT_ADDRESS

    def test_reverted_receipt_with_rpc_error_replay(self, manager) -> None:
        manager.legacy_receipt = make_receipt(status=0)
        data = encode_error_string("Paused")
        manager.call_response = CallResponse(error=RpcErrorDetail(3, "execution reverted: Paused", data))

        with pytest.raises(RevertedTransaction) as exc_info:
            make_executor(manager).execute("0x01", 0, "transfer")

        assert exc_info.value.reason == "execution reverted: Paused"
        assert exc_info.value.encoded_data == data

    def test_reverted_receipt_without_recoverable_reason(self, manager) -> None:
        manager.legacy_receipt = make_receipt(status=0)
        manager.call_response = CallResponse(result="0x")

        with pytest.raises(RevertedTransaction) as exc_info:
            make_executor(manager).execute("0x01", 0, "transfer")

        assert exc_info.value.reason == "N/A"

    def test_status_none_is_success(self, manager) -> None:
        manager.legacy_receipt = make_receipt(status=None)

        make_executor(manager).execute("0x01", 0, "transfer")

        assert manager.calls == []

    def test_empty_receipt_skips_status_check(self, manager) -> None:
        manager.legacy_receipt = EmptyTransactionReceipt(transaction_hash=TX_HASH)

        receipt = make_executor(manager).execute("0x01", 0, "transfer")

        assert receipt.is_empty
        assert manager.calls == []
