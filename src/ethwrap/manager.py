"""Transaction managers: the boundary to the node and the signer.

:class:`TransactionManager` is the interface the executor and contract
handles depend on. :class:`Web3TransactionManager` implements it with
web3.py for transport and eth_account for local signing; without an
account it falls back to node-side ``eth_sendTransaction``.

JSON-RPC envelopes are read directly from the provider so that an
``error`` member is reported as data (reads) or as
:class:`~ethwrap.errors.RpcProtocolError` (submissions), while failures to
reach the node become :class:`~ethwrap.errors.TransportError`.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.exceptions import TimeExhausted

from .config import Network, TransactionManagerConfig, get_network_config
from .errors import (
    RpcProtocolError,
    TransactionTimeoutError,
    TransportError,
    ValidationError,
)
from .models import (
    BlockSelector,
    CallResponse,
    CodeResponse,
    EmptyTransactionReceipt,
    RpcErrorDetail,
    TransactionReceipt,
    TransactionRequest,
    block_selector_param,
    to_hex,
    to_int,
)
from .utils.logging import get_logger
from .utils.validation import validate_address

__all__ = ["TransactionManager", "Web3TransactionManager", "connect"]

_logger = get_logger(__name__)


class TransactionManager(ABC):
    """Submits transactions and read calls on behalf of one sender."""

    @property
    @abstractmethod
    def from_address(self) -> str:
        """Address of the sender."""

    @abstractmethod
    def call(self, request: TransactionRequest, block: BlockSelector = "latest") -> CallResponse:
        """Execute ``eth_call``; RPC errors are returned, not raised."""

    @abstractmethod
    def get_code(self, address: str, block: BlockSelector = "latest") -> CodeResponse:
        """Execute ``eth_getCode``; RPC errors are returned, not raised."""

    @abstractmethod
    def send_legacy(
        self,
        to: Optional[str],
        data: str,
        value: int,
        gas_price: int,
        gas_limit: int,
        constructor: bool = False,
    ) -> TransactionReceipt:
        """Submit a legacy (``gasPrice``) transaction and wait for its receipt."""

    @abstractmethod
    def send_fee_market(
        self,
        chain_id: int,
        to: Optional[str],
        data: str,
        value: int,
        gas_limit: int,
        max_priority_fee: int,
        max_fee: int,
        constructor: bool = False,
    ) -> Optional[TransactionReceipt]:
        """Submit an EIP-1559 transaction and wait for its receipt.

        Returns None when fee-market pricing is not applicable, in which
        case the caller falls back to a legacy submission.
        """


class Web3TransactionManager(TransactionManager):
    """Transaction manager over a web3.py provider.

    Example:
        >>> w3 = connect(Network.SEPOLIA)
        >>> manager = Web3TransactionManager.from_private_key(w3, "0x...")
    """

    def __init__(
        self,
        w3: Web3,
        account: Optional[LocalAccount] = None,
        from_address: Optional[str] = None,
        config: Optional[TransactionManagerConfig] = None,
    ):
        if account is None and from_address is None:
            raise ValidationError("Either an account or a from_address is required", field="from_address")
        self.w3 = w3
        self.account = account
        self.config = config or TransactionManagerConfig()
        self._from_address = account.address if account is not None else validate_address(from_address, "from_address")
        self._next_nonce: Optional[int] = None
        self._chain_id: Optional[int] = None

    @classmethod
    def from_private_key(
        cls,
        w3: Web3,
        private_key: str,
        config: Optional[TransactionManagerConfig] = None,
    ) -> "Web3TransactionManager":
        # Sanitize private key errors to prevent key leakage in stack traces
        try:
            account: LocalAccount = Account.from_key(private_key)
        except Exception:
            raise ValidationError("Invalid private key format (key not shown for security)") from None
        return cls(w3, account=account, config=config)

    @property
    def from_address(self) -> str:
        return self._from_address

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def call(self, request: TransactionRequest, block: BlockSelector = "latest") -> CallResponse:
        response = self._request("eth_call", [request.to_rpc_params(), block_selector_param(block)])
        error = self._error_of(response)
        if error is not None:
            _logger.debug(
                "eth_call returned error",
                extra={"to": request.to, "rpc_code": error.code, "rpc_message": error.message},
            )
            return CallResponse(error=error)
        return CallResponse(result=response.get("result"))

    def get_code(self, address: str, block: BlockSelector = "latest") -> CodeResponse:
        response = self._request("eth_getCode", [address, block_selector_param(block)])
        error = self._error_of(response)
        if error is not None:
            return CodeResponse(error=error)
        return CodeResponse(code=response.get("result"))

    # ------------------------------------------------------------------
    # Submissions
    # ------------------------------------------------------------------
    def send_legacy(
        self,
        to: Optional[str],
        data: str,
        value: int,
        gas_price: int,
        gas_limit: int,
        constructor: bool = False,
    ) -> TransactionReceipt:
        tx: Dict[str, Any] = {
            "data": data,
            "value": value,
            "gas": gas_limit,
            "gasPrice": gas_price,
        }
        if self.account is not None:
            tx["chainId"] = self._get_chain_id()
        return self._send(tx, None if constructor else to)

    def send_fee_market(
        self,
        chain_id: int,
        to: Optional[str],
        data: str,
        value: int,
        gas_limit: int,
        max_priority_fee: int,
        max_fee: int,
        constructor: bool = False,
    ) -> Optional[TransactionReceipt]:
        latest_block = self._result("eth_getBlockByNumber", ["latest", False]) or {}
        if latest_block.get("baseFeePerGas") is None:
            _logger.warning(
                "Node does not report a base fee, fee-market submission not applicable",
                extra={"chain_id": chain_id},
            )
            return None

        tx: Dict[str, Any] = {
            "type": 2,
            "chainId": chain_id,
            "data": data,
            "value": value,
            "gas": gas_limit,
            "maxPriorityFeePerGas": max_priority_fee,
            "maxFeePerGas": max_fee,
        }
        return self._send(tx, None if constructor else to)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _send(self, tx: Dict[str, Any], to: Optional[str]) -> TransactionReceipt:
        """Sign (or delegate signing of) ``tx`` and wait for the receipt.

        A ``None`` destination leaves ``to`` out of the transaction so the
        node treats it as a contract creation.
        """
        if to is not None:
            tx["to"] = Web3.to_checksum_address(to)

        if self.account is not None:
            tx["nonce"] = self._nonce()
            signed = self.account.sign_transaction(tx)
            try:
                tx_hash = self._result("eth_sendRawTransaction", [to_hex(bytes(signed.raw_transaction))])
            except (RpcProtocolError, TransportError):
                # Rejected nonce was never consumed; re-read it from the node next time
                self._next_nonce = None
                raise
        else:
            # Node-managed account: the node assigns the nonce and signs
            rpc_tx = {"from": self._from_address}
            rpc_tx.update({key: hex(val) if isinstance(val, int) else val for key, val in tx.items()})
            tx_hash = self._result("eth_sendTransaction", [rpc_tx])

        _logger.debug("Transaction submitted", extra={"tx_hash": tx_hash, "to": to})
        return self._wait(tx_hash)

    def _wait(self, tx_hash: str) -> TransactionReceipt:
        if not self.config.wait_for_receipt:
            return EmptyTransactionReceipt(transaction_hash=tx_hash)
        try:
            raw = self.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.config.receipt_timeout,
                poll_latency=self.config.poll_latency,
            )
        except TimeExhausted:
            raise TransactionTimeoutError(tx_hash, self.config.receipt_timeout) from None
        except Exception as e:
            raise TransportError(f"Failed while waiting for receipt of {tx_hash}: {e}") from e
        return TransactionReceipt.from_web3(raw)

    def _nonce(self) -> int:
        if self.config.manual_nonce:
            if self._next_nonce is None:
                self._next_nonce = self._pending_nonce()
            nonce = self._next_nonce
            self._next_nonce += 1
            return nonce
        return self._pending_nonce()

    def _pending_nonce(self) -> int:
        return to_int(self._result("eth_getTransactionCount", [self._from_address, "pending"]))

    def _get_chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = to_int(self._result("eth_chainId", []))
        return self._chain_id

    def _request(self, method: str, params: list) -> Mapping[str, Any]:
        """Send a raw JSON-RPC request and return the response envelope.

        Raises:
            TransportError: If the node is unreachable or the response is malformed
        """
        try:
            response = self.w3.provider.make_request(method, params)
        except Exception as e:
            raise TransportError(f"{method} failed: {e}", endpoint=self._endpoint()) from e
        if not isinstance(response, Mapping) or ("result" not in response and "error" not in response):
            raise TransportError(f"Malformed JSON-RPC response to {method}: {response!r}", endpoint=self._endpoint())
        return response

    def _result(self, method: str, params: list) -> Any:
        """Like :meth:`_request` but raise :class:`RpcProtocolError` on an error response."""
        response = self._request(method, params)
        error = self._error_of(response)
        if error is not None:
            raise RpcProtocolError(error.code, error.message, error.data)
        return response.get("result")

    @staticmethod
    def _error_of(response: Mapping[str, Any]) -> Optional[RpcErrorDetail]:
        error = response.get("error")
        if not error:
            return None
        if isinstance(error, Mapping):
            return RpcErrorDetail.from_response(error)
        return RpcErrorDetail(code=0, message=str(error))

    def _endpoint(self) -> Optional[str]:
        return getattr(self.w3.provider, "endpoint_uri", None)


def connect(
    network: Union[Network, str],
    rpc_url: Optional[str] = None,
    timeout: Optional[float] = None,
    config: Optional[TransactionManagerConfig] = None,
) -> Web3:
    """Build a ``Web3`` instance over HTTP.

    Args:
        network: A :class:`Network` preset, its name, or a full RPC URL
        rpc_url: Override the preset's RPC URL
        timeout: HTTP request timeout in seconds; defaults to
            ``config.request_timeout``
        config: Manager configuration supplying the default timeout

    Returns:
        Web3 instance bound to an ``HTTPProvider``
    """
    if timeout is None:
        timeout = (config or TransactionManagerConfig()).request_timeout
    if isinstance(network, Network) or network in {n.value for n in Network}:
        url = get_network_config(Network(network), rpc_url).rpc_url
    else:
        url = rpc_url or network
    # Configure HTTPProvider with timeout so a stalled node cannot block forever
    return Web3(Web3.HTTPProvider(url, request_kwargs={"timeout": timeout}))
