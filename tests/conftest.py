"""
Shared fixtures and stubs for ethwrap tests.

No test talks to a node: contract handles run against
StubTransactionManager, and Web3TransactionManager runs against
StubProvider, which answers raw JSON-RPC requests from a table.
"""

from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
from eth_abi import encode

from ethwrap.codec import Event, EventParameter, TypedValue, event_signature_hash
from ethwrap.constants import ERROR_METHOD_ID
from ethwrap.manager import TransactionManager
from ethwrap.models import (
    CallResponse,
    CodeResponse,
    Log,
    TransactionReceipt,
    TransactionRequest,
)


# =============================================================================
# Test Constants
# =============================================================================

SENDER = "0x1234567890123456789012345678901234567890"
CONTRACT_ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
RECIPIENT = "0x9876543210987654321098765432109876543210"
TX_HASH = "0x" + "ab" * 32
CREATED_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"

TRANSFER_EVENT = Event(
    "Transfer",
    (
        EventParameter("address", indexed=True, name="from"),
        EventParameter("address", indexed=True, name="to"),
        EventParameter("uint256", name="value"),
    ),
)


def encode_error_string(message: str) -> str:
    """ABI-encode ``Error(string)`` revert data."""
    return ERROR_METHOD_ID + encode(["string"], [message]).hex()


def encode_words(types: List[str], values: List[Any]) -> str:
    return "0x" + encode(types, values).hex()


def address_topic(address: str) -> str:
    return "0x" + "00" * 12 + address[2:].lower()


def transfer_log(sender: str = SENDER, recipient: str = RECIPIENT, amount: int = 1000) -> Log:
    return Log(
        address=CONTRACT_ADDRESS,
        topics=(event_signature_hash(TRANSFER_EVENT), address_topic(sender), address_topic(recipient)),
        data=encode_words(["uint256"], [amount]),
        block_number=7,
        transaction_hash=TX_HASH,
        log_index=0,
    )


def make_receipt(**overrides: Any) -> TransactionReceipt:
    fields: Dict[str, Any] = {
        "transaction_hash": TX_HASH,
        "status": 1,
        "gas_used": 21000,
        "block_number": 7,
        "from_address": SENDER,
        "to": CONTRACT_ADDRESS,
    }
    fields.update(overrides)
    return TransactionReceipt(**fields)


# =============================================================================
# Stubs
# =============================================================================


class StubTransactionManager(TransactionManager):
    """In-memory transaction manager recording every request."""

    def __init__(self, from_address: str = SENDER):
        self._from_address = from_address
        self.call_response: CallResponse = CallResponse(result="0x")
        self.code_response: CodeResponse = CodeResponse(code="0x")
        self.legacy_receipt: Any = make_receipt()
        self.fee_market_receipt: Any = None
        self.calls: List[Tuple[TransactionRequest, Any]] = []
        self.code_requests: List[Tuple[str, Any]] = []
        self.sent: List[Tuple[str, Dict[str, Any]]] = []

    @property
    def from_address(self) -> str:
        return self._from_address

    def call(self, request, block="latest"):
        self.calls.append((request, block))
        return self.call_response

    def get_code(self, address, block="latest"):
        self.code_requests.append((address, block))
        return self.code_response

    def send_legacy(self, to, data, value, gas_price, gas_limit, constructor=False):
        self.sent.append(
            (
                "legacy",
                {
                    "to": to,
                    "data": data,
                    "value": value,
                    "gas_price": gas_price,
                    "gas_limit": gas_limit,
                    "constructor": constructor,
                },
            )
        )
        return _produce(self.legacy_receipt)

    def send_fee_market(self, chain_id, to, data, value, gas_limit, max_priority_fee, max_fee, constructor=False):
        self.sent.append(
            (
                "fee-market",
                {
                    "chain_id": chain_id,
                    "to": to,
                    "data": data,
                    "value": value,
                    "gas_limit": gas_limit,
                    "max_priority_fee": max_priority_fee,
                    "max_fee": max_fee,
                    "constructor": constructor,
                },
            )
        )
        return _produce(self.fee_market_receipt)


def _produce(outcome: Any) -> Any:
    if isinstance(outcome, BaseException):
        raise outcome
    return outcome


class StubProvider:
    """Answers JSON-RPC requests from a method table.

    Table values are either a plain result, a callable ``params -> result``,
    or a dict with an ``error`` key used as the whole response.
    """

    endpoint_uri = "http://stub.local:8545"

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses: Dict[str, Any] = responses or {}
        self.requests: List[Tuple[str, list]] = []

    def make_request(self, method: str, params: list) -> Dict[str, Any]:
        self.requests.append((method, params))
        if method not in self.responses:
            raise ConnectionError(f"no stub for {method}")
        outcome = self.responses[method]
        if callable(outcome):
            outcome = outcome(params)
        if isinstance(outcome, dict) and "error" in outcome:
            return {"jsonrpc": "2.0", "id": 1, **outcome}
        return {"jsonrpc": "2.0", "id": 1, "result": outcome}

    def methods(self) -> List[str]:
        return [m for m, _ in self.requests]


class StubAccount:
    """Signer stand-in that records the transaction dicts it signs."""

    def __init__(self, address: str = SENDER):
        self.address = address
        self.signed: List[Dict[str, Any]] = []

    def sign_transaction(self, tx: Dict[str, Any]):
        self.signed.append(dict(tx))
        return SimpleNamespace(raw_transaction=b"\x02\xf8\x01")


def make_w3(provider: StubProvider, wait: Optional[Callable[..., Any]] = None) -> SimpleNamespace:
    """Minimal object exposing the parts of ``Web3`` the manager uses."""

    def _default_wait(tx_hash, timeout=None, poll_latency=None):
        return {
            "transactionHash": bytes.fromhex(tx_hash[2:]),
            "status": 1,
            "gasUsed": 21000,
            "blockNumber": 7,
            "contractAddress": None,
            "logs": [],
        }

    return SimpleNamespace(provider=provider, eth=SimpleNamespace(wait_for_transaction_receipt=wait or _default_wait))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture()
def manager() -> StubTransactionManager:
    return StubTransactionManager()


@pytest.fixture()
def w3() -> SimpleNamespace:
    # Contract handles only touch w3 for ENS names; tests pass plain addresses
    return SimpleNamespace()


@pytest.fixture()
def typed_address() -> TypedValue:
    return TypedValue("address", RECIPIENT)
