"""
Collaborator interfaces consumed by the client.

Every network-facing dependency is a `typing.Protocol`, so tests (and
alternative transports) can pass any object with the right coroutine methods.
The httpx-backed defaults live in `cosmosclient.rpc` and `cosmosclient.faucet`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, Sequence, Tuple, runtime_checkable

if TYPE_CHECKING:
    from .account.keyring import Account
    from .coins import Coin
    from .faucet import TransferRequest, TransferResponse
    from .tx.build import Tx
    from .tx.factory import TxFactory
    from .tx.messages import AnyMsg
    from .tx.sign import Signature
    from .types import BroadcastResult, NodeStatus, SimulationResult, TxResult

__all__ = [
    "NodeClient",
    "AccountRetriever",
    "BankQueryClient",
    "Gasometer",
    "FaucetClient",
    "Signer",
]


@runtime_checkable
class NodeClient(Protocol):
    """CometBFT RPC surface: status, tx lookup, broadcast."""

    address: str

    async def status(self) -> "NodeStatus": ...

    async def tx(self, hash: bytes, prove: bool = False) -> "TxResult": ...

    async def broadcast_tx(self, tx_bytes: bytes, mode: str = "sync") -> "BroadcastResult": ...


@runtime_checkable
class AccountRetriever(Protocol):
    async def ensure_exists(self, address: str) -> None: ...

    async def get_account_number_sequence(self, address: str) -> Tuple[int, int]: ...


@runtime_checkable
class BankQueryClient(Protocol):
    async def balance(self, address: str, denom: str) -> "Coin": ...


@runtime_checkable
class Gasometer(Protocol):
    async def calculate_gas(
        self, factory: "TxFactory", msgs: Sequence["AnyMsg"]
    ) -> Tuple[Optional["SimulationResult"], int]:
        """Return the simulation result and the adjusted gas estimate."""
        ...


@runtime_checkable
class FaucetClient(Protocol):
    async def transfer(self, request: "TransferRequest") -> "TransferResponse": ...


@runtime_checkable
class Signer(Protocol):
    async def sign(self, factory: "TxFactory", account: "Account", tx: "Tx") -> Optional["Signature"]: ...
