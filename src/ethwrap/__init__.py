"""
ethwrap - contract invocation and deployment engine for EVM chains.

The engine behind generated contract wrappers: it encodes typed function
calls, prices and submits transactions, waits for receipts, decodes return
values, revert reasons and events, links library placeholders and checks
deployed bytecode.

Quick Start:
    >>> from ethwrap import Contract, Function, TypedValue, Web3TransactionManager, connect
    >>> w3 = connect("sepolia")
    >>> manager = Web3TransactionManager.from_private_key(w3, "0x...")
    >>> counter = Contract.load("0x...", w3, manager)
    >>> receipt = counter.execute_transaction(Function("increment"))
    >>> counter.execute_call_single_value_return(Function("count", output_types=["uint256"]), int)

Modules:
- `contract`: Contract handle (calls, transactions, deployment, verification)
- `executor`: Transaction submission and failure mapping
- `gas`: Legacy and fee-market gas strategies
- `manager`: Transport and signing boundary (web3.py, eth_account)
- `revert`: Revert classification and reason decoding
- `events`: Event log extraction
- `linking`: Library placeholder linking
- `verification`: Deployed bytecode verification
- `errors`: Exception hierarchy
- `utils`: Validation and logging
"""

from ethwrap.version import __version__, __version_info__

from ethwrap.codec import (
    Event,
    EventParameter,
    Function,
    TypedValue,
    address_to_string,
    decode_indexed_value,
    decode_return,
    encode_constructor,
    encode_function_call,
    event_signature_hash,
)
from ethwrap.config import (
    NETWORKS,
    Network,
    NetworkConfig,
    TransactionManagerConfig,
    get_network_config,
)
from ethwrap.contract import Contract, ContractFactory
from ethwrap.ens import EnsResolver, NameResolver
from ethwrap.errors import (
    ContractCallError,
    ConversionError,
    DeploymentError,
    EthWrapError,
    InvalidAddressError,
    InvalidAmountError,
    NameResolutionError,
    RevertedTransaction,
    RpcProtocolError,
    TransactionError,
    TransactionTimeoutError,
    TransportError,
    UnsupportedOperation,
    ValidationError,
)
from ethwrap.events import (
    EventValues,
    EventValuesWithLog,
    extract_event_parameters,
    extract_event_parameters_with_log,
    extract_receipt_event_parameters,
    extract_receipt_event_parameters_with_log,
)
from ethwrap.executor import TransactionExecutor
from ethwrap.gas import (
    FeeMarketGasStrategy,
    GasStrategy,
    GasStrategyKind,
    LegacyGasStrategy,
    default_gas_strategy,
    estimated_gas_limit,
)
from ethwrap.linking import LinkReference, link_binary_with_references
from ethwrap.manager import TransactionManager, Web3TransactionManager, connect
from ethwrap.models import (
    CallResponse,
    CodeResponse,
    EmptyTransactionReceipt,
    Log,
    RpcErrorDetail,
    TransactionReceipt,
    TransactionRequest,
)
from ethwrap.remote import RemoteCall, RemoteFunctionCall
from ethwrap.revert import (
    RevertKind,
    RevertOutcome,
    decode_revert,
    decode_revert_reason,
    is_offchain_lookup,
)
from ethwrap.verification import is_code_valid, strip_metadata
from ethwrap.utils.logging import configure_logging, get_logger

__all__ = [
    "__version__",
    "__version_info__",
    # Contract handle
    "Contract",
    "ContractFactory",
    "TransactionExecutor",
    "RemoteCall",
    "RemoteFunctionCall",
    # Codec
    "Function",
    "Event",
    "EventParameter",
    "TypedValue",
    "encode_function_call",
    "encode_constructor",
    "decode_return",
    "decode_indexed_value",
    "event_signature_hash",
    "address_to_string",
    # Gas
    "GasStrategy",
    "GasStrategyKind",
    "LegacyGasStrategy",
    "FeeMarketGasStrategy",
    "default_gas_strategy",
    "estimated_gas_limit",
    # Transport
    "TransactionManager",
    "Web3TransactionManager",
    "connect",
    "NameResolver",
    "EnsResolver",
    # Config
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "get_network_config",
    "TransactionManagerConfig",
    # Models
    "TransactionRequest",
    "TransactionReceipt",
    "EmptyTransactionReceipt",
    "Log",
    "RpcErrorDetail",
    "CallResponse",
    "CodeResponse",
    # Reverts
    "RevertKind",
    "RevertOutcome",
    "decode_revert",
    "decode_revert_reason",
    "is_offchain_lookup",
    # Events
    "EventValues",
    "EventValuesWithLog",
    "extract_event_parameters",
    "extract_event_parameters_with_log",
    "extract_receipt_event_parameters",
    "extract_receipt_event_parameters_with_log",
    # Bytecode
    "LinkReference",
    "link_binary_with_references",
    "strip_metadata",
    "is_code_valid",
    # Errors
    "EthWrapError",
    "ValidationError",
    "InvalidAddressError",
    "InvalidAmountError",
    "TransportError",
    "RpcProtocolError",
    "TransactionError",
    "TransactionTimeoutError",
    "RevertedTransaction",
    "ContractCallError",
    "ConversionError",
    "DeploymentError",
    "UnsupportedOperation",
    "NameResolutionError",
    # Logging
    "configure_logging",
    "get_logger",
]
