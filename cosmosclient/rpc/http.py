"""
HTTP adapters (async, httpx).

- `HttpAdapter`: shared httpx.AsyncClient plumbing, JSON helpers and retries
  on transient transport failures and 429/5xx gateway statuses.
- `NodeRpcClient`: CometBFT JSON-RPC 2.0 client (`status`, `tx`,
  `broadcast_tx_*`), the default `NodeClient`.

Example:
    from cosmosclient.rpc.http import NodeRpcClient
    async with NodeRpcClient("http://localhost:26657") as rpc:
        st = await rpc.status()
        print(st.network, st.latest_block_height)
"""

from __future__ import annotations

import base64
import json
import logging
import time
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Union

import httpx

from ..errors import JsonRpcCode, RpcError, from_jsonrpc_error
from ..types import BroadcastResult, NodeStatus, TxResult
from ..utils.retry import Backoff, RetryError, aretry_call
from ..version import USER_AGENT

log = logging.getLogger(__name__)

JSON = Union[dict, list, str, int, float, bool, None]
Params = Union[Sequence[Any], Mapping[str, Any], None]

BROADCAST_METHODS = {
    "sync": "broadcast_tx_sync",
    "async": "broadcast_tx_async",
    "block": "broadcast_tx_commit",
}

__all__ = ["HttpAdapter", "NodeRpcClient", "BROADCAST_METHODS"]


class _TransientError(Exception):
    """Transport-level failure worth another attempt."""


def _now_ms() -> int:
    return int(time.time() * 1000)


def _is_retriable_http(status: int) -> bool:
    # Typical transient HTTP statuses: 429/502/503/504
    return status in (429, 502, 503, 504)


@dataclass
class HttpAdapter:
    """Base for the httpx-backed adapters."""

    address: str
    timeout: float = 10.0
    max_retries: int = 3
    backoff_base: float = 0.15
    headers: Optional[Mapping[str, str]] = None
    transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False)
    _client: httpx.AsyncClient = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.address = self.address.rstrip("/")
        merged_headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.headers:
            merged_headers.update(dict(self.headers))
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers=merged_headers,
            transport=self.transport,
        )

    # --- context manager -------------------------------------------------

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # --- plumbing ----------------------------------------------------------

    async def _send(self, label: str, send, *, retry: bool = True) -> httpx.Response:  # noqa: ANN001
        """
        Run `send()` (a coroutine factory returning a response), retrying
        transient failures. Exhausted retries surface as RpcError(TRANSPORT_ERROR).
        """

        async def _once() -> httpx.Response:
            log.debug("request %s %s", self.address, label)
            try:
                r = await send()
            except httpx.TransportError as e:
                raise _TransientError(str(e) or type(e).__name__) from e
            if _is_retriable_http(r.status_code):
                raise _TransientError(f"HTTP {r.status_code}")
            return r

        try:
            return await aretry_call(
                _once,
                policy=Backoff(retries=self.max_retries if retry else 0, base=self.backoff_base),
                exceptions=(_TransientError,),
                label=label,
            )
        except RetryError as e:
            raise RpcError(
                method=label,
                code=JsonRpcCode.TRANSPORT_ERROR,
                message="transport failed",
                data=str(e.last_exception),
            ) from e

    @staticmethod
    def _json(label: str, r: httpx.Response) -> Any:
        try:
            return r.json()
        except ValueError as e:
            raise RpcError(
                method=label,
                code=JsonRpcCode.INTERNAL_ERROR,
                message="non-JSON response",
                data=f"HTTP {r.status_code}: {r.text[:256]}",
                http_status=r.status_code,
            ) from e


@dataclass
class NodeRpcClient(HttpAdapter):
    """Async JSON-RPC 2.0 client for a CometBFT node."""

    _id_counter: Iterator[int] = field(default_factory=lambda: count(start=_now_ms()), repr=False)

    async def request(self, method: str, params: Params = None, *, retry: bool = True) -> JSON:
        """Perform a single JSON-RPC request and return `result` or raise RpcError."""
        payload = self._make_payload(method, params)
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        r = await self._send(method, lambda: self._client.post(self.address, content=body), retry=retry)
        resp = self._json(method, r)

        if not isinstance(resp, dict):
            raise RpcError(method=method, code=JsonRpcCode.INTERNAL_ERROR, message="invalid JSON-RPC response", data=resp)
        if resp.get("error"):
            raise from_jsonrpc_error(resp["error"], method=method, http_status=r.status_code)
        if "result" not in resp:
            raise RpcError(method=method, code=JsonRpcCode.INTERNAL_ERROR, message="malformed JSON-RPC response", data=resp)
        return resp["result"]

    # --- node methods ------------------------------------------------------

    async def status(self) -> NodeStatus:
        return NodeStatus.from_rpc_dict(await self.request("status", {}))

    async def tx(self, hash: bytes, prove: bool = False) -> TxResult:
        result = await self.request("tx", {"hash": base64.b64encode(hash).decode("ascii"), "prove": prove})
        return TxResult.from_rpc_dict(result)

    async def broadcast_tx(self, tx_bytes: bytes, mode: str = "sync") -> BroadcastResult:
        try:
            method = BROADCAST_METHODS[mode]
        except KeyError:
            raise ValueError(f"unknown broadcast mode {mode!r}") from None
        # Broadcasts are sent at most once.
        result = await self.request(method, {"tx": base64.b64encode(tx_bytes).decode("ascii")}, retry=False)
        return BroadcastResult.from_rpc_dict(result)

    # --- internals -------------------------------------------------------

    def _make_payload(self, method: str, params: Params) -> Dict[str, Any]:
        if params is None:
            params = {}
        elif isinstance(params, Mapping):
            params = dict(params)
        else:
            params = list(params)
        return {"jsonrpc": "2.0", "id": next(self._id_counter), "method": method, "params": params}
