import asyncio

import pytest

from cosmosclient.errors import (InvalidTxHashError, NodeRequestError, RpcError, TxQueryError,
                                 WaitTimeoutError)
from cosmosclient.types import TxResult
from cosmosclient.wait import latest_block_height, wait_for_block_height, wait_for_tx

from .conftest import FakeNode

NOT_FOUND = RpcError(method="tx", code=-32603, message="Internal error", data="tx (ABCD) not found")


# ---------- wait_for_block_height ----------


@pytest.mark.asyncio
async def test_block_height_reached_after_polling():
    node = FakeNode(heights=[1, 2, 3])

    await wait_for_block_height(node, 3, timeout=1.0, poll_interval=0)

    assert node.methods() == ["status", "status", "status"]


@pytest.mark.asyncio
async def test_block_height_already_reached():
    node = FakeNode(heights=[10])

    await wait_for_block_height(node, 3, poll_interval=0)

    assert node.methods() == ["status"]


@pytest.mark.asyncio
async def test_block_height_deadline():
    node = FakeNode(heights=[1])

    with pytest.raises(WaitTimeoutError) as excinfo:
        await wait_for_block_height(node, 5, timeout=0.05, poll_interval=0.01)

    assert str(excinfo.value) == "timeout exceeded waiting for block: deadline exceeded"
    assert len(node.calls) >= 1


@pytest.mark.asyncio
async def test_deadline_is_a_builtin_timeout_error():
    node = FakeNode(heights=[1])

    with pytest.raises(TimeoutError):
        await wait_for_block_height(node, 5, timeout=0.05, poll_interval=0.01)


@pytest.mark.asyncio
async def test_block_height_status_error_is_not_retried():
    node = FakeNode(heights=[RuntimeError("oups")])

    with pytest.raises(NodeRequestError) as excinfo:
        await wait_for_block_height(node, 5, timeout=1.0, poll_interval=0)

    assert str(excinfo.value) == "error while requesting node 'http://localhost:26657': oups"
    assert node.methods() == ["status"]


@pytest.mark.asyncio
async def test_latest_block_height():
    assert await latest_block_height(FakeNode(heights=[42])) == 42


# ---------- wait_for_tx ----------


@pytest.mark.asyncio
async def test_tx_found_immediately():
    result = TxResult(hash="ABCD", height=7)
    node = FakeNode(txs=[result])

    got = await wait_for_tx(node, "abcd", timeout=1.0, poll_interval=0)

    assert got == result
    assert node.calls == [("tx", b"\xab\xcd", False)]


@pytest.mark.asyncio
async def test_tx_found_after_one_block():
    result = TxResult(hash="ABCD", height=11)
    node = FakeNode(heights=[10, 11], txs=[NOT_FOUND, result])

    got = await wait_for_tx(node, "abcd", timeout=1.0, poll_interval=0)

    assert got == result
    # lookup, latest height (10), wait for 11, lookup again
    assert node.methods() == ["tx", "status", "status", "tx"]


@pytest.mark.asyncio
async def test_tx_malformed_hash_makes_no_calls():
    node = FakeNode()

    with pytest.raises(InvalidTxHashError) as excinfo:
        await wait_for_tx(node, "zzz", timeout=1.0)

    assert str(excinfo.value).startswith("unable to decode tx hash 'zzz': ")
    assert node.calls == []


@pytest.mark.asyncio
async def test_tx_other_error_fails_immediately():
    node = FakeNode(txs=[RuntimeError("oups")])

    with pytest.raises(TxQueryError) as excinfo:
        await wait_for_tx(node, "abcd", timeout=1.0, poll_interval=0)

    assert str(excinfo.value) == "fetching tx 'abcd': error while requesting node 'http://localhost:26657': oups"
    assert node.methods() == ["tx"]


@pytest.mark.asyncio
async def test_tx_deadline():
    node = FakeNode(heights=[1], txs=[NOT_FOUND])

    with pytest.raises(WaitTimeoutError) as excinfo:
        await wait_for_tx(node, "abcd", timeout=0.05, poll_interval=0.01)

    assert str(excinfo.value) == "timeout exceeded waiting for tx 'abcd': deadline exceeded"


@pytest.mark.asyncio
async def test_cancellation_propagates():
    node = FakeNode(heights=[1])
    task = asyncio.create_task(wait_for_block_height(node, 100, poll_interval=10))
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert node.methods() == ["status"]
