"""Event log extraction.

Stateless helpers that match logs against an :class:`~ethwrap.codec.Event`
and decode their parameters. They need no contract handle, so offline
indexers can run them directly over stored receipts.

Example:
    >>> transfer = Event("Transfer", [
    ...     EventParameter("address", indexed=True),
    ...     EventParameter("address", indexed=True),
    ...     EventParameter("uint256"),
    ... ])
    >>> for match in extract_event_parameters_with_log(transfer, receipt):
    ...     sender, recipient = match.indexed_values
    ...     (amount,) = match.non_indexed_values
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .codec import Event, TypedValue, decode_indexed_value, decode_return, event_signature_hash
from .models import Log, TransactionReceipt

__all__ = [
    "EventValues",
    "EventValuesWithLog",
    "extract_event_parameters",
    "extract_event_parameters_with_log",
    "extract_receipt_event_parameters",
    "extract_receipt_event_parameters_with_log",
]


@dataclass(frozen=True)
class EventValues:
    indexed_values: List[TypedValue]
    non_indexed_values: List[TypedValue]


@dataclass(frozen=True)
class EventValuesWithLog(EventValues):
    log: Optional[Log] = None


def extract_event_parameters(event: Event, log: Log) -> Optional[EventValues]:
    """Decode ``log`` as ``event``.

    Returns None if the log has no topics or its first topic is not the
    event's signature hash, or if its topic count does not match the
    event's indexed parameters. Otherwise non-indexed values are decoded from
    the data blob and each indexed value from its own topic, both in
    declared parameter order.
    """
    topics = log.topics
    if not topics or topics[0].lower() != event_signature_hash(event):
        return None
    # ERC-20 and ERC-721 Transfer share topic 0 but index a different number of parameters
    if len(topics) != 1 + len(event.indexed_parameters):
        return None

    non_indexed_values = decode_return(
        log.data, [p.abi_type for p in event.non_indexed_parameters]
    )
    indexed_values = [
        decode_indexed_value(topics[i + 1], param.abi_type)
        for i, param in enumerate(event.indexed_parameters)
    ]
    return EventValues(indexed_values, non_indexed_values)


def extract_event_parameters_with_log(event: Event, log: Log) -> Optional[EventValuesWithLog]:
    values = extract_event_parameters(event, log)
    if values is None:
        return None
    return EventValuesWithLog(values.indexed_values, values.non_indexed_values, log)


def extract_receipt_event_parameters(event: Event, receipt: TransactionReceipt) -> List[EventValues]:
    """All matches of ``event`` in the receipt, in log order."""
    matches = (extract_event_parameters(event, log) for log in receipt.logs)
    return [m for m in matches if m is not None]


def extract_receipt_event_parameters_with_log(
    event: Event, receipt: TransactionReceipt
) -> List[EventValuesWithLog]:
    matches = (extract_event_parameters_with_log(event, log) for log in receipt.logs)
    return [m for m in matches if m is not None]
