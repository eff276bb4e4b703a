"""
Cosmos REST (gRPC-gateway) adapters over httpx.

- RestAccountRetriever : /cosmos/auth/v1beta1/accounts/{address}
- RestBankQueryClient  : /cosmos/bank/v1beta1/balances/{address}/by_denom
- RestGasometer        : /cosmos/tx/v1beta1/simulate

Gateway errors arrive as {"code": <grpc code>, "message": "..."} with a
non-2xx status and are raised as RpcError carrying that message, so an
"account ... not found" reaches the caller with the node's own wording.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..coins import Coin
from ..errors import JsonRpcCode, RpcError
from ..tx.build import build_unsigned_tx
from ..tx.factory import TxFactory
from ..tx.messages import AnyMsg
from ..types import SimulationResult
from .http import HttpAdapter

__all__ = ["RestAdapter", "RestAccountRetriever", "RestBankQueryClient", "RestGasometer"]


@dataclass
class RestAdapter(HttpAdapter):
    async def get(self, path: str, params: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        label = f"GET {path}"
        r = await self._send(label, lambda: self._client.get(self.address + path, params=params))
        return self._check(label, r)

    async def post(self, path: str, body: Mapping[str, Any]) -> Dict[str, Any]:
        label = f"POST {path}"
        content = json.dumps(body, separators=(",", ":"))
        r = await self._send(label, lambda: self._client.post(self.address + path, content=content))
        return self._check(label, r)

    def _check(self, label: str, r) -> Dict[str, Any]:  # noqa: ANN001
        resp = self._json(label, r)
        if r.status_code >= 400 or not isinstance(resp, dict):
            err = resp if isinstance(resp, dict) else {}
            raise RpcError(
                method=label,
                code=int(err.get("code", JsonRpcCode.SERVER_ERROR)),
                message=str(err.get("message", f"HTTP {r.status_code}")),
                http_status=r.status_code,
            )
        return resp


def _base_account(account: Mapping[str, Any]) -> Mapping[str, Any]:
    # Vesting and module accounts wrap the base account
    for key in ("base_account", "base_vesting_account"):
        if key in account:
            return _base_account(account[key])
    return account


@dataclass
class RestAccountRetriever(RestAdapter):
    async def get_account(self, address: str) -> Dict[str, Any]:
        resp = await self.get(f"/cosmos/auth/v1beta1/accounts/{address}")
        account = resp.get("account")
        if not isinstance(account, dict):
            raise RpcError(
                method="GET account",
                code=JsonRpcCode.INTERNAL_ERROR,
                message=f"malformed account response for {address}",
                data=resp,
            )
        return account

    async def ensure_exists(self, address: str) -> None:
        await self.get_account(address)

    async def get_account_number_sequence(self, address: str) -> Tuple[int, int]:
        base = _base_account(await self.get_account(address))
        return int(base.get("account_number") or 0), int(base.get("sequence") or 0)


@dataclass
class RestBankQueryClient(RestAdapter):
    async def balance(self, address: str, denom: str) -> Coin:
        resp = await self.get(
            f"/cosmos/bank/v1beta1/balances/{address}/by_denom", params={"denom": denom}
        )
        bal = resp.get("balance") or {"denom": denom, "amount": "0"}
        return Coin.from_json(bal)


@dataclass
class RestGasometer(RestAdapter):
    """Estimates gas by simulating the unsigned transaction on the node."""

    async def calculate_gas(
        self, factory: TxFactory, msgs: Sequence[AnyMsg]
    ) -> Tuple[SimulationResult, int]:
        tx = build_unsigned_tx(factory, msgs)
        resp = await self.post(
            "/cosmos/tx/v1beta1/simulate",
            {"tx_bytes": base64.b64encode(tx.encode()).decode("ascii")},
        )
        sim = SimulationResult.from_rest_dict(resp)
        adjustment = factory.gas_adjustment or 1.0
        return sim, int(adjustment * sim.gas_used)
