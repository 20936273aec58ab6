#!/usr/bin/env python3
"""
Example: a hand-written ERC-20 wrapper on top of ethwrap.Contract

This shows what a generated wrapper looks like and how it is used:
- Load an existing token and read balances
- Send a transfer with fee-market pricing
- Decode Transfer events from the receipt
- Check the deployed code against the wrapper's binary

Run this example against a local node (anvil, hardhat):
    ETHWRAP_RPC_URL=http://127.0.0.1:8545 \
    ETHWRAP_PRIVATE_KEY=0x... \
    ETHWRAP_TOKEN=0x... \
    python examples/token_wrapper.py
"""

import os
from typing import List

from ethwrap import (
    Contract,
    Event,
    EventParameter,
    FeeMarketGasStrategy,
    Function,
    RevertedTransaction,
    TypedValue,
    Web3TransactionManager,
    configure_logging,
    connect,
    estimated_gas_limit,
)
from ethwrap.events import EventValuesWithLog


class ERC20(Contract):
    """Minimal ERC-20 wrapper, in the shape a code generator emits."""

    # Runtime binary of the token, used by is_valid(); left out here
    BINARY = Contract.BIN_NOT_PROVIDED

    FUNC_BALANCEOF = "balanceOf"
    FUNC_TRANSFER = "transfer"

    TRANSFER_EVENT = Event(
        "Transfer",
        [
            EventParameter("address", indexed=True, name="from"),
            EventParameter("address", indexed=True, name="to"),
            EventParameter("uint256", name="value"),
        ],
    )

    def __init__(self, contract_address, w3, transaction_manager, gas_strategy=None, **kwargs):
        kwargs.setdefault("binary", self.BINARY)
        super().__init__(contract_address, w3, transaction_manager, gas_strategy, **kwargs)

    def balance_of(self, owner: str):
        fn = Function(self.FUNC_BALANCEOF, [TypedValue("address", owner)], ["uint256"])
        return self.execute_remote_call_single_value_return(fn, int)

    def transfer(self, to: str, amount: int):
        fn = Function(self.FUNC_TRANSFER, [TypedValue("address", to), TypedValue("uint256", amount)])
        return self.execute_remote_call_transaction(fn)

    def get_transfer_events(self, receipt) -> List[EventValuesWithLog]:
        return self.extract_event_parameters_with_log(self.TRANSFER_EVENT, receipt)


def main() -> None:
    configure_logging("INFO")

    rpc_url = os.environ.get("ETHWRAP_RPC_URL", "http://127.0.0.1:8545")
    private_key = os.environ["ETHWRAP_PRIVATE_KEY"]
    token_address = os.environ["ETHWRAP_TOKEN"]
    recipient = os.environ.get("ETHWRAP_RECIPIENT", "0x70997970C51812dc3A010C7d01b50e0d17dc79C8")

    w3 = connect(rpc_url)
    manager = Web3TransactionManager.from_private_key(w3, private_key)
    strategy = FeeMarketGasStrategy.from_latest_block(
        w3,
        chain_id=w3.eth.chain_id,
        limit=estimated_gas_limit(w3),
    )

    token = ERC20.load(token_address, w3, manager, strategy)

    print(f"Sender balance:    {token.balance_of(manager.from_address).send()}")

    try:
        receipt = token.transfer(recipient, 1_000).send()
    except RevertedTransaction as e:
        print(f"Transfer reverted: {e.reason}")
        return

    print(f"Transfer mined in block {receipt.block_number} ({receipt.transaction_hash})")
    for event in token.get_transfer_events(receipt):
        sender, to = (str(v) for v in event.indexed_values)
        (value,) = event.non_indexed_values
        print(f"  Transfer {sender} -> {to}: {value.value}")

    print(f"Recipient balance: {token.balance_of(recipient).send()}")


if __name__ == "__main__":
    main()
