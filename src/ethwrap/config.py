"""
Configuration for ethwrap.

Network presets are plain dataclasses; behavioural settings for the
transaction manager are frozen pydantic models so they validate on
construction and can be shared between handles.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    PROVIDER_TIMEOUT_SECONDS,
    RECEIPT_POLL_LATENCY_SECONDS,
    RECEIPT_TIMEOUT_SECONDS,
)

__all__ = [
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "get_network_config",
    "TransactionManagerConfig",
]


class Network(str, Enum):
    MAINNET = "mainnet"
    SEPOLIA = "sepolia"
    HOLESKY = "holesky"
    BASE = "base"
    BASE_SEPOLIA = "base-sepolia"


@dataclass(frozen=True)
class NetworkConfig:
    name: Network
    chain_id: int
    rpc_url: str

    @property
    def network_id(self) -> str:
        """Key used for the known-deployment registry of contract handles."""
        return str(self.chain_id)


NETWORKS: dict[Network, NetworkConfig] = {
    Network.MAINNET: NetworkConfig(
        name=Network.MAINNET,
        chain_id=1,
        rpc_url="https://ethereum-rpc.publicnode.com",
    ),
    Network.SEPOLIA: NetworkConfig(
        name=Network.SEPOLIA,
        chain_id=11155111,
        rpc_url="https://ethereum-sepolia-rpc.publicnode.com",
    ),
    Network.HOLESKY: NetworkConfig(
        name=Network.HOLESKY,
        chain_id=17000,
        rpc_url="https://ethereum-holesky-rpc.publicnode.com",
    ),
    Network.BASE: NetworkConfig(
        name=Network.BASE,
        chain_id=8453,
        rpc_url="https://mainnet.base.org",
    ),
    Network.BASE_SEPOLIA: NetworkConfig(
        name=Network.BASE_SEPOLIA,
        chain_id=84532,
        rpc_url="https://sepolia.base.org",
    ),
}


def get_network_config(network: Network, rpc_url: Optional[str] = None) -> NetworkConfig:
    cfg = NETWORKS[Network(network)]
    if rpc_url:
        return replace(cfg, rpc_url=rpc_url)
    return cfg


class TransactionManagerConfig(BaseModel):
    """
    Submission and receipt-wait policy for a transaction manager.

    Example:
        ```python
        config = TransactionManagerConfig(receipt_timeout=300, poll_latency=1.0)
        ```
    """

    model_config = ConfigDict(frozen=True)

    receipt_timeout: float = Field(
        default=RECEIPT_TIMEOUT_SECONDS,
        gt=0,
        description="Seconds to wait for a receipt before giving up",
    )
    poll_latency: float = Field(
        default=RECEIPT_POLL_LATENCY_SECONDS,
        gt=0,
        description="Seconds between receipt polls",
    )
    wait_for_receipt: bool = Field(
        default=True,
        description="Block until mined; when False an empty receipt is returned right after submission",
    )
    manual_nonce: bool = Field(
        default=False,
        description="Track nonces locally instead of asking the node before every submission",
    )
    request_timeout: float = Field(
        default=PROVIDER_TIMEOUT_SECONDS,
        gt=0,
        description="HTTP request timeout in seconds used by connect()",
    )
