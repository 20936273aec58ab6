"""Deferred contract calls.

Generated wrappers return these instead of executing immediately: the
call runs on :meth:`RemoteCall.send`, on the calling thread.
:meth:`RemoteCall.send_async` submits the same blocking call to an
executor for callers that want a cancellable future.
"""

from __future__ import annotations

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Generic, List, Optional, TypeVar

from .codec import Function, TypedValue, decode_return, encode_function_call

__all__ = ["RemoteCall", "RemoteFunctionCall"]

T = TypeVar("T")

_default_executor: Optional[ThreadPoolExecutor] = None
_default_executor_lock = threading.Lock()


def _get_default_executor() -> ThreadPoolExecutor:
    global _default_executor
    with _default_executor_lock:
        if _default_executor is None:
            _default_executor = ThreadPoolExecutor(thread_name_prefix="ethwrap")
    return _default_executor


class RemoteCall(Generic[T]):
    def __init__(self, fn: Callable[[], T]):
        self._fn = fn

    def send(self) -> T:
        """Execute the call and block until it completes."""
        return self._fn()

    def send_async(self, executor: Optional[Executor] = None) -> "Future[T]":
        """Execute the call on ``executor`` (a shared thread pool by default)."""
        return (executor or _get_default_executor()).submit(self._fn)


class RemoteFunctionCall(RemoteCall[T]):
    """A :class:`RemoteCall` that also exposes the encoded function it will send."""

    def __init__(self, function: Function, fn: Callable[[], T]):
        super().__init__(fn)
        self.function = function

    def encode_function_call(self) -> str:
        return encode_function_call(self.function)

    def decode_function_response(self, response: str) -> List[TypedValue]:
        return decode_return(response, self.function.output_types)
