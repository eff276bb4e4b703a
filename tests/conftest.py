"""
Shared pytest fixtures:
- Recording fakes for every client collaborator (node, account retriever,
  bank, gasometer, faucet, signer). Each records its calls and replays a
  scripted list of answers; the last answer repeats.
- An in-memory keyring.
- `make_client`: builds a Client wired to the fakes.
"""
from __future__ import annotations

import typing as t
from types import SimpleNamespace

import pytest

from cosmosclient.account.keyring import AccountRegistry
from cosmosclient.client import Client
from cosmosclient.coins import Coin
from cosmosclient.config import ClientConfig
from cosmosclient.faucet import TransferRequest, TransferResponse
from cosmosclient.types import BroadcastResult, NodeStatus, SimulationResult, TxResult

NODE_ADDRESS = "http://localhost:26657"
CHAIN_ID = "mychain"


def _next(script: list) -> t.Any:
    item = script.pop(0) if len(script) > 1 else script[0]
    if isinstance(item, BaseException):
        raise item
    return item


class FakeNode:
    """Minimal in-memory CometBFT node."""

    def __init__(
        self,
        *,
        heights: t.Sequence[t.Any] = (1,),
        txs: t.Sequence[t.Any] = (TxResult(hash="ABCD", height=1),),
        network: str = CHAIN_ID,
    ) -> None:
        self.address = NODE_ADDRESS
        self.network = network
        self.heights = list(heights)
        self.txs = list(txs)
        self.broadcast_results: list = [BroadcastResult(hash="ABCD")]
        self.calls: list = []

    def methods(self) -> list:
        return [c[0] for c in self.calls]

    async def status(self) -> NodeStatus:
        self.calls.append(("status",))
        return NodeStatus(network=self.network, latest_block_height=_next(self.heights))

    async def tx(self, hash: bytes, prove: bool = False) -> TxResult:
        self.calls.append(("tx", hash, prove))
        return _next(self.txs)

    async def broadcast_tx(self, tx_bytes: bytes, mode: str = "sync") -> BroadcastResult:
        self.calls.append(("broadcast_tx", tx_bytes, mode))
        return _next(self.broadcast_results)


class FakeAccountRetriever:
    def __init__(self, *, number: int = 1, sequence: int = 2, exists_error: t.Optional[BaseException] = None) -> None:
        self.number = number
        self.sequence = sequence
        self.exists_error = exists_error
        self.calls: list = []

    async def ensure_exists(self, address: str) -> None:
        self.calls.append(("ensure_exists", address))
        if self.exists_error is not None:
            raise self.exists_error

    async def get_account_number_sequence(self, address: str) -> t.Tuple[int, int]:
        self.calls.append(("get_account_number_sequence", address))
        return self.number, self.sequence


class FakeBank:
    def __init__(self, balances: t.Sequence[t.Any] = (1000,)) -> None:
        self.balances = list(balances)
        self.calls: list = []

    async def balance(self, address: str, denom: str) -> Coin:
        self.calls.append(("balance", address, denom))
        return Coin(denom=denom, amount=_next(self.balances))


class FakeGasometer:
    def __init__(self, estimate: int = 42) -> None:
        self.estimate = estimate
        self.calls: list = []

    async def calculate_gas(self, factory, msgs):  # noqa: ANN001
        self.calls.append(("calculate_gas", factory, tuple(msgs)))
        return SimulationResult(gas_wanted=self.estimate, gas_used=self.estimate), self.estimate


class FakeFaucet:
    def __init__(self, responses: t.Sequence[t.Any] = (TransferResponse(),)) -> None:
        self.responses = list(responses)
        self.calls: t.List[TransferRequest] = []

    async def transfer(self, request: TransferRequest) -> TransferResponse:
        self.calls.append(request)
        return _next(self.responses)


class FakeSigner:
    """Signer that records what it was asked to sign and returns no signature."""

    def __init__(self) -> None:
        self.calls: list = []

    async def sign(self, factory, account, tx):  # noqa: ANN001
        self.calls.append((factory, account, tx))
        return None


@pytest.fixture
def fakes() -> SimpleNamespace:
    return SimpleNamespace(
        node=FakeNode(),
        retriever=FakeAccountRetriever(),
        bank=FakeBank(),
        gasometer=FakeGasometer(),
        faucet=FakeFaucet(),
        signer=FakeSigner(),
    )


@pytest.fixture
def keyring() -> AccountRegistry:
    return AccountRegistry("memory")


@pytest.fixture
def make_client(fakes: SimpleNamespace, keyring: AccountRegistry):
    """Async factory: `client = await make_client(config, **collaborator_overrides)`."""

    async def _make(config: t.Optional[ClientConfig] = None, **overrides: t.Any) -> Client:
        kwargs = dict(
            rpc=fakes.node,
            account_retriever=fakes.retriever,
            bank=fakes.bank,
            gasometer=fakes.gasometer,
            faucet=fakes.faucet,
            signer=fakes.signer,
            keyring=keyring,
        )
        kwargs.update(overrides)
        return await Client.connect(config or ClientConfig(), **kwargs)

    return _make
