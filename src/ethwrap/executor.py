"""Transaction execution.

The executor turns a payload into a mined receipt for one contract handle:
it builds the transaction intent, prices it with the handle's gas
strategy, submits it through the transaction manager and maps every
failure to a terminal exception. Nothing is retried here.
"""

from typing import Callable, Optional

from .constants import MISSING_REASON
from .errors import EthWrapError, RevertedTransaction, RpcProtocolError, TransactionError
from .gas import GasStrategy
from .manager import TransactionManager
from .models import TransactionReceipt, TransactionRequest
from .revert import replay_revert
from .utils.logging import get_logger
from .utils.validation import validate_amount

__all__ = ["TransactionExecutor"]

_logger = get_logger(__name__)


class TransactionExecutor:
    """Submits transactions for a single destination.

    The destination and gas strategy are read through callables on every
    execution, so a handle whose address is set after deployment, or whose
    strategy is replaced, is picked up without rebuilding the executor.
    Transactions already submitted are unaffected by such changes.
    """

    def __init__(
        self,
        transaction_manager: TransactionManager,
        address_provider: Callable[[], Optional[str]],
        strategy_provider: Callable[[], GasStrategy],
    ):
        self.transaction_manager = transaction_manager
        self._address_provider = address_provider
        self._strategy_provider = strategy_provider

    def build_request(self, data: str, value: int, constructor: bool) -> TransactionRequest:
        """Build the transaction intent. Creation transactions have no destination."""
        return TransactionRequest(
            from_address=self.transaction_manager.from_address,
            to=None if constructor else (self._address_provider() or None),
            data=data,
            value=value,
        )

    def execute(
        self,
        data: str,
        value: int,
        function_name: str,
        constructor: bool = False,
    ) -> TransactionReceipt:
        """Submit ``data`` and wait for the receipt.

        Args:
            data: 0x-prefixed calldata, or creation bytecode + constructor args
            value: Wei to send along
            function_name: Used for logging only
            constructor: True for a contract creation

        Returns:
            The transaction receipt (an ``EmptyTransactionReceipt`` when the
            manager does not wait)

        Raises:
            TransactionError: If the node rejected the submission or the gas
                limit could not be computed
            RevertedTransaction: If the transaction was mined with a failed status
            TransactionTimeoutError: If the receipt wait gave up
            TransportError: If the node could not be reached
        """
        value = validate_amount(value, "value")
        strategy = self._strategy_provider()
        request = self.build_request(data, value, constructor)
        manager = self.transaction_manager

        try:
            gas_limit = strategy.gas_limit(request)
        except EthWrapError:
            raise
        except Exception as e:
            raise TransactionError(f"Gas limit estimation failed for {function_name}: {e}") from e

        receipt: Optional[TransactionReceipt] = None
        try:
            if strategy.supports_fee_market:
                _logger.info(
                    "Submitting fee-market transaction",
                    extra={"function": function_name, "to": request.to, "chain_id": strategy.chain_id},
                )
                receipt = manager.send_fee_market(
                    strategy.chain_id,
                    request.to,
                    data,
                    value,
                    gas_limit,
                    strategy.max_priority_fee,
                    strategy.max_fee,
                    constructor,
                )

            if receipt is None:
                if strategy.supports_fee_market:
                    _logger.info(
                        "Fee-market submission produced no receipt, falling back to legacy pricing",
                        extra={"function": function_name},
                    )
                else:
                    _logger.info(
                        "Submitting legacy transaction",
                        extra={"function": function_name, "to": request.to},
                    )
                receipt = manager.send_legacy(
                    request.to,
                    data,
                    value,
                    strategy.gas_price(),
                    gas_limit,
                    constructor,
                )
        except RpcProtocolError as error:
            if error.data is not None:
                raise TransactionError(str(error.data)) from error
            raise TransactionError(
                f"JsonRpcError thrown with code {error.rpc_code}. Message: {error.rpc_message}"
            ) from error

        if not receipt.is_empty and not receipt.is_status_ok:
            outcome = replay_revert(manager, request, receipt)
            _logger.warning(
                "Transaction reverted",
                extra={
                    "function": function_name,
                    "tx_hash": receipt.transaction_hash,
                    "status": receipt.status,
                    "reason": outcome.reason,
                },
            )
            raise RevertedTransaction(
                receipt,
                reason=outcome.reason or MISSING_REASON,
                encoded_data=outcome.encoded_data,
            )
        return receipt
