"""Contract handle for generated wrappers.

:class:`Contract` is the base every generated wrapper builds on. It
executes read calls and transactions, deploys bytecode, checks deployed
code against the known binary and decodes events from receipts.

A handle is created either by :meth:`Contract.deploy`, which records the
deployment receipt, or by :meth:`Contract.load` for an existing address,
which has no receipt. The contract address is resolved (ENS name to
address) once, in the constructor.

Example:
    >>> w3 = connect(Network.SEPOLIA)
    >>> manager = Web3TransactionManager.from_private_key(w3, "0x...")
    >>> token = Contract.load("0x...", w3, manager)
    >>> fn = Function("balanceOf", [TypedValue("address", manager.from_address)], ["uint256"])
    >>> token.execute_call_single_value_return(fn, int)
    1000000
"""

from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union

from eth_utils import add_0x_prefix, remove_0x_prefix
from web3 import Web3

from . import events as _events
from .codec import Event, Function, TypedValue, address_to_string, decode_return, encode_function_call
from .constants import BIN_NOT_PROVIDED, DEFAULT_BLOCK, FUNC_DEPLOY
from .ens import EnsResolver, NameResolver
from .errors import ContractCallError, ConversionError, DeploymentError, UnsupportedOperation
from .executor import TransactionExecutor
from .gas import GasStrategy, LegacyGasStrategy, default_gas_strategy
from .linking import link_binary_with_references
from .manager import TransactionManager
from .models import BlockSelector, Log, TransactionReceipt, TransactionRequest
from .remote import RemoteCall, RemoteFunctionCall
from .revert import decode_revert
from .utils.logging import LogContext, get_logger
from .utils.validation import validate_hex
from .verification import is_code_valid

__all__ = ["Contract", "ContractFactory"]

_logger = get_logger(__name__)

C = TypeVar("C", bound="Contract")

# Constructor capability of a generated wrapper: (address, w3, manager, gas strategy) -> handle
ContractFactory = Callable[[Optional[str], Web3, TransactionManager, GasStrategy], "Contract"]


class Contract:
    """Base contract handle.

    Generated wrappers subclass it, set ``BINARY`` and
    ``STATIC_DEPLOYED_ADDRESSES`` and pass ``binary=`` through to this
    constructor.
    """

    BIN_NOT_PROVIDED = BIN_NOT_PROVIDED
    FUNC_DEPLOY = FUNC_DEPLOY

    # network id -> address of known deployments, provided by generated wrappers
    STATIC_DEPLOYED_ADDRESSES: Dict[str, str] = {}

    def __init__(
        self,
        contract_address: Optional[str],
        w3: Web3,
        transaction_manager: TransactionManager,
        gas_strategy: Optional[GasStrategy] = None,
        binary: str = BIN_NOT_PROVIDED,
        name_resolver: Optional[NameResolver] = None,
    ):
        self.w3 = w3
        self.transaction_manager = transaction_manager
        self.name_resolver = name_resolver or EnsResolver(w3)
        self.contract_address: str = self.name_resolver.resolve(contract_address) or ""
        self._binary = binary
        self.gas_strategy: GasStrategy = gas_strategy or default_gas_strategy()
        self.transaction_receipt: Optional[TransactionReceipt] = None
        self.default_block: BlockSelector = DEFAULT_BLOCK
        self._deployed_addresses: Dict[str, str] = {}
        self._executor = TransactionExecutor(
            transaction_manager,
            address_provider=lambda: self.contract_address,
            strategy_provider=lambda: self.gas_strategy,
        )
        self._log = LogContext(_logger, contract=type(self).__name__)

    @classmethod
    def load(
        cls: Type[C],
        contract_address: str,
        w3: Web3,
        transaction_manager: TransactionManager,
        gas_strategy: Optional[GasStrategy] = None,
        **kwargs: Any,
    ) -> C:
        """Build a handle for an already deployed contract (no deployment receipt)."""
        return cls(contract_address, w3, transaction_manager, gas_strategy, **kwargs)

    @property
    def binary(self) -> str:
        return self._binary

    def set_contract_address(self, contract_address: str) -> None:
        self.contract_address = contract_address

    def set_transaction_receipt(self, receipt: TransactionReceipt) -> None:
        self.transaction_receipt = receipt

    def get_transaction_receipt(self) -> Optional[TransactionReceipt]:
        """Receipt of the deployment that created this handle; None for loaded handles."""
        return self.transaction_receipt

    def set_gas_strategy(self, gas_strategy: GasStrategy) -> None:
        self.gas_strategy = gas_strategy

    @property
    def gas_price(self) -> int:
        return self.gas_strategy.gas_price()

    def set_gas_price(self, price: int) -> None:
        """Switch to legacy pricing at ``price``, keeping the current gas limit."""
        self.gas_strategy = LegacyGasStrategy(price=price, limit=self.gas_strategy.limit)

    def set_default_block(self, block: BlockSelector) -> None:
        """Query historical state: read calls use ``block`` instead of ``latest``."""
        self.default_block = block

    # ------------------------------------------------------------------
    # Known deployments
    # ------------------------------------------------------------------
    def static_deployed_address(self, network_id: str) -> Optional[str]:
        return self.STATIC_DEPLOYED_ADDRESSES.get(str(network_id))

    def set_deployed_address(self, network_id: str, address: str) -> None:
        self._deployed_addresses[str(network_id)] = address

    def get_deployed_address(self, network_id: str) -> Optional[str]:
        address = self._deployed_addresses.get(str(network_id))
        return address if address is not None else self.static_deployed_address(network_id)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------
    def is_valid(self) -> bool:
        """Check that the code at ``contract_address`` is this wrapper's contract.

        The on-chain code (metadata stripped) must be non-empty and occur in
        the stored binary. A node error while fetching the code counts as
        not valid.

        Raises:
            UnsupportedOperation: If the wrapper has no binary or no address
        """
        if not self._binary or self._binary == BIN_NOT_PROVIDED:
            raise UnsupportedOperation(
                "Contract binary not present in contract wrapper, "
                "please generate your wrapper with the contract binary"
            )
        if not self.contract_address:
            raise UnsupportedOperation(
                "Contract address not set, deploy the contract or load it from an address first"
            )

        response = self.transaction_manager.get_code(self.contract_address, "latest")
        if response.has_error:
            self._log.warning(
                "eth_getCode failed, treating contract as invalid",
                extra={"address": self.contract_address, "rpc_message": response.error.message},
            )
            return False
        return is_code_valid(response.code, self._binary)

    # ------------------------------------------------------------------
    # Read calls
    # ------------------------------------------------------------------
    def _call(self, function: Function) -> Optional[str]:
        request = TransactionRequest(
            from_address=self.transaction_manager.from_address,
            to=self.contract_address,
            data=encode_function_call(function),
        )
        response = self.transaction_manager.call(request, self.default_block)
        outcome = decode_revert(response)
        if outcome.is_reverted:
            raise ContractCallError(
                f"Contract Call has been reverted by the EVM with the reason: '{outcome.reason}'.",
                reason=outcome.reason,
                details={"function": function.name, "encoded_data": outcome.encoded_data},
            )
        return response.result

    def execute_call(self, function: Function) -> List[TypedValue]:
        """Execute a constant function call and decode its outputs."""
        return decode_return(self._call(function), function.output_types)

    def execute_call_without_decoding(self, function: Function) -> Optional[str]:
        return self._call(function)

    def execute_call_single_value_return(self, function: Function, return_type: Optional[type] = None) -> Any:
        """Execute a call and unwrap its single output.

        Args:
            function: Function to call
            return_type: None to get the ``TypedValue`` (or None if nothing
                came back); ``TypedValue`` to require the wrapper; a Python
                type to get the primitive value

        Raises:
            ConversionError: If nothing was returned or the value cannot be
                represented as ``return_type``
        """
        values = self.execute_call(function)
        result = values[0] if values else None
        if return_type is None:
            return result
        if result is None:
            raise ConversionError("Empty value (0x) returned from contract")

        if isinstance(result, return_type):
            return result
        if result.abi_type == "address" and return_type is str:
            return address_to_string(result.value)
        if isinstance(result.value, return_type):
            return result.value
        raise ConversionError(
            f"Unable to convert response: {result.value!r} to expected type: {return_type.__name__}"
        )

    def execute_call_multiple_value_return(self, function: Function) -> List[TypedValue]:
        return self.execute_call(function)

    def execute_remote_call_single_value_return(
        self, function: Function, return_type: Optional[type] = None
    ) -> RemoteFunctionCall:
        return RemoteFunctionCall(function, lambda: self.execute_call_single_value_return(function, return_type))

    def execute_remote_call_multiple_value_return(self, function: Function) -> RemoteFunctionCall:
        return RemoteFunctionCall(function, lambda: self.execute_call_multiple_value_return(function))

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    def execute_transaction(self, function: Function, value: int = 0) -> TransactionReceipt:
        return self._executor.execute(encode_function_call(function), value, function.name)

    def execute_remote_call_transaction(self, function: Function, value: int = 0) -> RemoteFunctionCall:
        return RemoteFunctionCall(function, lambda: self.execute_transaction(function, value))

    # ------------------------------------------------------------------
    # Deployment
    # ------------------------------------------------------------------
    @classmethod
    def deploy(
        cls,
        w3: Web3,
        transaction_manager: TransactionManager,
        gas_strategy: GasStrategy,
        binary: str,
        encoded_constructor: str = "",
        value: int = 0,
        factory: Optional[ContractFactory] = None,
    ) -> "Contract":
        """Deploy ``binary`` + ``encoded_constructor`` and return a handle bound to the new address.

        Args:
            w3: Web3 instance
            transaction_manager: Sender of the creation transaction
            gas_strategy: Pricing for the creation transaction and the new handle
            binary: Creation bytecode, already linked
            encoded_constructor: ABI-encoded constructor arguments (hex)
            value: Wei to endow the contract with
            factory: Constructor capability of the wrapper type; defaults to ``cls``

        Raises:
            DeploymentError: If the receipt carries no contract address
            ValidationError: If the bytecode is not hex (e.g. unlinked libraries)
            RevertedTransaction: If the creation transaction failed
        """
        factory = factory or cls
        # No address: the creation transaction must not have a destination
        contract = factory(None, w3, transaction_manager, gas_strategy)
        data = add_0x_prefix(remove_0x_prefix(binary) + remove_0x_prefix(encoded_constructor or ""))
        # Unlinked library placeholders fail here, before anything is sent
        validate_hex(data, "binary")

        receipt = contract._executor.execute(data, value, FUNC_DEPLOY, constructor=True)
        if not receipt.contract_address:
            raise DeploymentError("Empty contract address returned", tx_hash=receipt.transaction_hash)

        contract.set_contract_address(receipt.contract_address)
        contract.set_transaction_receipt(receipt)
        contract._log.info(
            "Contract deployed",
            extra={"address": receipt.contract_address, "tx_hash": receipt.transaction_hash},
        )
        return contract

    @classmethod
    def deploy_remote_call(
        cls,
        w3: Web3,
        transaction_manager: TransactionManager,
        gas_strategy: GasStrategy,
        binary: str,
        encoded_constructor: str = "",
        value: int = 0,
        factory: Optional[ContractFactory] = None,
    ) -> RemoteCall:
        return RemoteCall(
            lambda: cls.deploy(w3, transaction_manager, gas_strategy, binary, encoded_constructor, value, factory)
        )

    link_binary_with_references = staticmethod(link_binary_with_references)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    static_extract_event_parameters = staticmethod(_events.extract_event_parameters)
    static_extract_event_parameters_with_log = staticmethod(_events.extract_event_parameters_with_log)

    def extract_event_parameters(
        self, event: Event, source: Union[Log, TransactionReceipt]
    ) -> Union[Optional[_events.EventValues], List[_events.EventValues]]:
        """Decode ``event`` from one log, or from every log of a receipt."""
        if isinstance(source, TransactionReceipt):
            return _events.extract_receipt_event_parameters(event, source)
        return _events.extract_event_parameters(event, source)

    def extract_event_parameters_with_log(
        self, event: Event, source: Union[Log, TransactionReceipt]
    ) -> Union[Optional[_events.EventValuesWithLog], List[_events.EventValuesWithLog]]:
        if isinstance(source, TransactionReceipt):
            return _events.extract_receipt_event_parameters_with_log(event, source)
        return _events.extract_event_parameters_with_log(event, source)

    @staticmethod
    def convert_to_native(values: List[TypedValue]) -> List[Any]:
        """Unwrap typed values to Python values; struct values keep their wrapper."""
        return [v if v.is_struct else v.value for v in values]
