"""
Node-facing result types.

Dataclasses for what the node and the REST API return to the client: node
status, transaction lookups, broadcast acknowledgments and gas simulations.
Each has a `from_rpc_dict()` helper that accepts the CometBFT / Cosmos REST
JSON shape (numbers may arrive as decimal strings).

Nothing here performs network I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

__all__ = ["NodeStatus", "TxResult", "BroadcastResult", "SimulationResult"]


def _int(v: Any, default: int = 0) -> int:
    if v is None or v == "":
        return default
    return int(v)


@dataclass(frozen=True)
class NodeStatus:
    network: str
    latest_block_height: int
    latest_block_hash: str = ""
    node_id: str = ""
    moniker: str = ""
    catching_up: bool = False

    @classmethod
    def from_rpc_dict(cls, d: Mapping[str, Any]) -> "NodeStatus":
        node_info = d.get("node_info") or {}
        sync_info = d.get("sync_info") or {}
        return cls(
            network=str(node_info.get("network", "")),
            latest_block_height=_int(sync_info.get("latest_block_height")),
            latest_block_hash=str(sync_info.get("latest_block_hash", "")),
            node_id=str(node_info.get("id", "")),
            moniker=str(node_info.get("moniker", "")),
            catching_up=bool(sync_info.get("catching_up", False)),
        )


@dataclass(frozen=True)
class TxResult:
    """A transaction as indexed by the node."""

    hash: str
    height: int
    index: int = 0
    code: int = 0
    log: str = ""
    gas_wanted: int = 0
    gas_used: int = 0
    tx: str = ""  # base64 tx bytes as returned by the node
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return self.code == 0

    @classmethod
    def from_rpc_dict(cls, d: Mapping[str, Any]) -> "TxResult":
        res = d.get("tx_result") or {}
        return cls(
            hash=str(d.get("hash", "")),
            height=_int(d.get("height")),
            index=_int(d.get("index")),
            code=_int(res.get("code")),
            log=str(res.get("log", "")),
            gas_wanted=_int(res.get("gas_wanted")),
            gas_used=_int(res.get("gas_used")),
            tx=str(d.get("tx", "")),
            raw=dict(d),
        )


@dataclass(frozen=True)
class BroadcastResult:
    """Node acknowledgment of a submitted transaction."""

    hash: str
    code: int = 0
    log: str = ""
    codespace: str = ""
    height: int = 0

    @classmethod
    def from_rpc_dict(cls, d: Mapping[str, Any]) -> "BroadcastResult":
        # broadcast_tx_commit nests the results; a failed check_tx wins
        if "check_tx" in d:
            check = d.get("check_tx") or {}
            deliver = d.get("tx_result") or d.get("deliver_tx") or {}
            res = check if _int(check.get("code")) != 0 else deliver
        else:
            res = d
        return cls(
            hash=str(d.get("hash", "")),
            code=_int(res.get("code")),
            log=str(res.get("log", "")),
            codespace=str(res.get("codespace", "")),
            height=_int(d.get("height")),
        )


@dataclass(frozen=True)
class SimulationResult:
    gas_wanted: int
    gas_used: int
    raw: Optional[Dict[str, Any]] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_rest_dict(cls, d: Mapping[str, Any]) -> "SimulationResult":
        info = d.get("gas_info") or {}
        return cls(
            gas_wanted=_int(info.get("gas_wanted")),
            gas_used=_int(info.get("gas_used")),
            raw=dict(d),
        )
