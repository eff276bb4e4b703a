"""
cosmosclient.wait
=================

Confirmation polling against a node.

Primary entry points
--------------------
- wait_for_block_height(node, height, *, timeout=None, poll_interval=1.0)
    Polls `status()` until the latest block height reaches `height`.

- wait_for_tx(node, tx_hash, *, timeout=None, poll_interval=1.0) -> TxResult
    Looks the transaction up by hash. While the node answers "not found" it
    waits for the next block and looks again.

- latest_block_height(node) -> int

Both loops share the same shape: query, return on success, sleep on the one
expected condition, raise on anything else. `timeout` (seconds, None for no
deadline) bounds the whole call and surfaces as WaitTimeoutError naming what
was awaited; cancellation of the calling task propagates unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .config import DEFAULT_POLL_INTERVAL
from .errors import InvalidTxHashError, NodeRequestError, TxQueryError, WaitTimeoutError
from .interfaces import NodeClient
from .types import NodeStatus, TxResult

log = logging.getLogger(__name__)

__all__ = ["node_error", "node_status", "latest_block_height", "wait_for_block_height", "wait_for_tx"]


def node_error(node: NodeClient, exc: BaseException) -> NodeRequestError:
    if isinstance(exc, NodeRequestError):
        return exc
    return NodeRequestError(getattr(node, "address", ""), exc)


async def node_status(node: NodeClient) -> NodeStatus:
    """`node.status()` with failures wrapped as NodeRequestError."""
    try:
        return await node.status()
    except Exception as e:
        raise node_error(node, e) from e


async def latest_block_height(node: NodeClient) -> int:
    return (await node_status(node)).latest_block_height


async def _poll_block_height(node: NodeClient, height: int, poll_interval: float) -> None:
    while True:
        current = await latest_block_height(node)
        if current >= height:
            return
        log.debug("waiting for block %d (latest %d)", height, current)
        await asyncio.sleep(poll_interval)


async def _poll_tx(node: NodeClient, tx_hash: str, raw_hash: bytes, poll_interval: float) -> TxResult:
    while True:
        try:
            return await node.tx(raw_hash, False)
        except Exception as e:
            if "not found" not in str(e):
                raise TxQueryError(tx_hash, node_error(node, e)) from e
            log.debug("tx %s not found yet: %s", tx_hash, e)

        height = await latest_block_height(node)
        await _poll_block_height(node, height + 1, poll_interval)


async def wait_for_block_height(
    node: NodeClient,
    height: int,
    *,
    timeout: Optional[float] = None,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> None:
    try:
        async with asyncio.timeout(timeout):
            await _poll_block_height(node, height, poll_interval)
    except TimeoutError as e:
        raise WaitTimeoutError("block") from e


async def wait_for_tx(
    node: NodeClient,
    tx_hash: str,
    *,
    timeout: Optional[float] = None,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> TxResult:
    """
    Wait until `tx_hash` (hex) is included in a block and return its result.

    A malformed hash fails before the node is contacted.
    """
    try:
        raw_hash = bytes.fromhex(tx_hash)
    except ValueError as e:
        raise InvalidTxHashError(tx_hash, str(e)) from e

    try:
        async with asyncio.timeout(timeout):
            return await _poll_tx(node, tx_hash, raw_hash, poll_interval)
    except TimeoutError as e:
        raise WaitTimeoutError(f"tx '{tx_hash}'") from e
