"""
Tests for deferred remote calls.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import RECIPIENT, encode_words
from ethwrap import remote as ethwrap_remote
from ethwrap.codec import Function, TypedValue
from ethwrap.remote import RemoteCall, RemoteFunctionCall


def test_send_runs_on_demand() -> None:
    calls = []
    remote = RemoteCall(lambda: calls.append(1) or "done")

    assert calls == []
    assert remote.send() == "done"
    assert remote.send() == "done"
    assert calls == [1, 1]


def test_send_async_default_executor() -> None:
    future = RemoteCall(lambda: 41 + 1).send_async()
    assert future.result(timeout=5) == 42


def test_default_executor_created_once_across_threads(monkeypatch) -> None:
    monkeypatch.setattr(ethwrap_remote, "_default_executor", None)
    barrier = threading.Barrier(8)
    pools = []

    def worker():
        barrier.wait()
        pools.append(ethwrap_remote._get_default_executor())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert len(pools) == 8
    assert len({id(p) for p in pools}) == 1
    pools[0].shutdown(wait=False)


def test_send_async_custom_executor() -> None:
    with ThreadPoolExecutor(max_workers=1) as executor:
        future = RemoteCall(lambda: "x").send_async(executor)
        assert future.result(timeout=5) == "x"


def test_send_async_propagates_errors() -> None:
    def boom():
        raise ValueError("boom")

    future = RemoteCall(boom).send_async()
    with pytest.raises(ValueError, match="boom"):
        future.result(timeout=5)


def test_remote_function_call_codec() -> None:
    fn = Function("balanceOf", [TypedValue("address", RECIPIENT)], ["uint256"])
    remote = RemoteFunctionCall(fn, lambda: None)

    assert remote.function is fn
    assert remote.encode_function_call().startswith("0x70a08231")
    assert remote.decode_function_response(encode_words(["uint256"], [3])) == [TypedValue("uint256", 3)]
