"""Constants for ethwrap.

This module defines all constant values used across the engine,
including ABI selectors, bytecode metadata markers, gas parameters
and validation bounds.
"""

# ABI Encoding Constants
ABI_SELECTOR_LENGTH = 4
ABI_WORD_LENGTH = 32
ADDRESS_HEX_LENGTH = 40

# keccak("Error(string)")[:4]
ERROR_METHOD_ID = "0x08c379a0"
# keccak("OffchainLookup(address,string[],bytes,bytes4,bytes)")[:4] (EIP-3668)
EIP3668_SELECTOR = "0x556f1830"

# Placeholder used when neither the call nor the replay produced a reason
MISSING_REASON = "N/A"

# RPC error code returned by nodes for execution reverts
EXECUTION_REVERTED_CODE = 3

# Contract binary sentinel for wrappers generated without a bin file
BIN_NOT_PROVIDED = "Bin file was not provided"
FUNC_DEPLOY = "deploy"

# Trailing CBOR metadata markers appended by solc, checked in this order
METADATA_HASH_INDICATORS = (
    "a165627a7a72305820",  # Swarm legacy (bzzr0)
    "a265627a7a72315820",  # Swarm (bzzr1)
    "a2646970667358221220",  # IPFS
    "a164736f6c634300080a000a",  # solc (None)
)

# Library placeholders
LIBRARY_PLACEHOLDER_LENGTH = 40
LIBRARY_HASH_PREFIX_LENGTH = 34

# Gas Constants
DEFAULT_GAS_PRICE = 4_100_000_000  # 4.1 gwei
DEFAULT_GAS_LIMIT = 9_000_000
GAS_ESTIMATION_BUFFER = 1.15
MAX_FEE_MULTIPLIER = 2
MIN_MAX_FEE_GWEI = "0.01"
PRIORITY_FEE_GWEI = "0.001"
MAX_GAS_LIMIT = 30_000_000  # block gas limit on mainnet

# Amount Validation Constants
MAX_UINT256 = 2**256 - 1

# Network Constants
PROVIDER_TIMEOUT_SECONDS = 30
RECEIPT_TIMEOUT_SECONDS = 120
RECEIPT_POLL_LATENCY_SECONDS = 0.1

DEFAULT_BLOCK = "latest"

__all__ = [
    "ABI_SELECTOR_LENGTH",
    "ABI_WORD_LENGTH",
    "ADDRESS_HEX_LENGTH",
    "ERROR_METHOD_ID",
    "EIP3668_SELECTOR",
    "MISSING_REASON",
    "EXECUTION_REVERTED_CODE",
    "BIN_NOT_PROVIDED",
    "FUNC_DEPLOY",
    "METADATA_HASH_INDICATORS",
    "LIBRARY_PLACEHOLDER_LENGTH",
    "LIBRARY_HASH_PREFIX_LENGTH",
    "DEFAULT_GAS_PRICE",
    "DEFAULT_GAS_LIMIT",
    "GAS_ESTIMATION_BUFFER",
    "MAX_FEE_MULTIPLIER",
    "MIN_MAX_FEE_GWEI",
    "PRIORITY_FEE_GWEI",
    "MAX_GAS_LIMIT",
    "MAX_UINT256",
    "PROVIDER_TIMEOUT_SECONDS",
    "RECEIPT_TIMEOUT_SECONDS",
    "RECEIPT_POLL_LATENCY_SECONDS",
    "DEFAULT_BLOCK",
]
