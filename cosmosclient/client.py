"""
cosmosclient.client
===================

The `Client` façade: one object holding the configuration and the network
collaborators, exposing account resolution, tx creation/broadcast and
confirmation polling.

    async with await Client.connect(ClientConfig().with_faucet()) as client:
        alice = client.account("alice")
        msg = msg_send(client.address("alice"), bob_address, parse_coins("1token"))
        res = await client.broadcast(alice, msg)
        await client.wait_for_tx(res.hash, timeout=30)

Every collaborator can be injected; the ones left out default to the httpx
adapters built from the config, and only those are closed by `aclose()`.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .account.keyring import Account, AccountRegistry
from .config import ClientConfig
from .errors import AccountNotFoundError, Bech32DecodeError, BroadcastError, TxBuildError
from .faucet import HttpFaucetClient
from .funding import ensure_funded
from .gas import resolve_gas_and_fees
from .interfaces import AccountRetriever, BankQueryClient, FaucetClient, Gasometer, NodeClient, Signer
from .rpc.http import HttpAdapter, NodeRpcClient
from .rpc.rest import RestAccountRetriever, RestBankQueryClient, RestGasometer
from .tx.build import Tx, build_unsigned_tx
from .tx.factory import TxFactory, prepare_factory
from .tx.messages import AnyMsg
from .tx.sign import KeyringSigner, attach_signature
from .types import BroadcastResult, NodeStatus, TxResult
from .utils import bech32
from . import wait as _wait

log = logging.getLogger(__name__)

__all__ = ["Client"]


class Client:
    def __init__(
        self,
        config: ClientConfig,
        *,
        chain_id: str,
        rpc: NodeClient,
        account_retriever: AccountRetriever,
        bank: BankQueryClient,
        gasometer: Gasometer,
        faucet: Optional[FaucetClient],
        signer: Signer,
        keyring: AccountRegistry,
        owned: Optional[List[HttpAdapter]] = None,
    ) -> None:
        self.config = config
        self.chain_id = chain_id
        self.home = config.home_for(chain_id)
        self.rpc = rpc
        self.account_retriever = account_retriever
        self.bank = bank
        self.gasometer = gasometer
        self.faucet = faucet
        self.signer = signer
        self.keyring = keyring
        self._owned = list(owned or [])

    @classmethod
    async def connect(
        cls,
        config: Optional[ClientConfig] = None,
        *,
        rpc: Optional[NodeClient] = None,
        account_retriever: Optional[AccountRetriever] = None,
        bank: Optional[BankQueryClient] = None,
        gasometer: Optional[Gasometer] = None,
        faucet: Optional[FaucetClient] = None,
        signer: Optional[Signer] = None,
        keyring: Optional[AccountRegistry] = None,
    ) -> "Client":
        """
        Build a client, asking the node for its chain id.

        Raises NodeRequestError when the node cannot be reached.
        """
        config = config or ClientConfig()
        owned: List[HttpAdapter] = []

        def _http(factory, address: str):  # noqa: ANN001
            adapter = factory(
                address,
                timeout=config.request_timeout,
                max_retries=config.max_retries,
                backoff_base=config.backoff_factor,
                headers=config.http_headers(),
            )
            owned.append(adapter)
            return adapter

        try:
            if rpc is None:
                rpc = _http(NodeRpcClient, config.node_address)
            status = await _wait.node_status(rpc)
            chain_id = status.network
            log.debug("connected to %s (chain %s)", config.node_address, chain_id)

            if keyring is None:
                keyring = AccountRegistry(config.keyring_backend, config.home_for(chain_id))
            if account_retriever is None:
                account_retriever = _http(RestAccountRetriever, config.api_address)
            if bank is None:
                bank = _http(RestBankQueryClient, config.api_address)
            if gasometer is None:
                gasometer = _http(RestGasometer, config.api_address)
            if faucet is None and config.faucet_enabled:
                faucet = _http(HttpFaucetClient, config.faucet_address)
        except BaseException:
            for adapter in owned:
                await adapter.aclose()
            raise

        return cls(
            config,
            chain_id=chain_id,
            rpc=rpc,
            account_retriever=account_retriever,
            bank=bank,
            gasometer=gasometer,
            faucet=faucet,
            signer=signer or KeyringSigner(),
            keyring=keyring,
            owned=owned,
        )

    async def aclose(self) -> None:
        owned, self._owned = self._owned, []
        for adapter in owned:
            await adapter.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    # --- accounts ------------------------------------------------------------

    @property
    def tx_factory(self) -> TxFactory:
        """Template factory: chain id, keyring and default gas settings."""
        return TxFactory(chain_id=self.chain_id, keyring=self.keyring)

    def account(self, name_or_address: str) -> Account:
        """Resolve by key name, falling back to a bech32 address."""
        if self.keyring.has(name_or_address):
            return self.keyring.get_by_name(name_or_address)
        raw = self._decode_address(name_or_address)
        try:
            return self.keyring.get_by_address(raw)
        except AccountNotFoundError:
            raise AccountNotFoundError(name_or_address) from None

    def address(self, name: str) -> str:
        return self.keyring.get_by_name(name).address(self.config.address_prefix)

    def _decode_address(self, address: str) -> bytes:
        prefix = self.config.address_prefix
        try:
            hrp, raw = bech32.decode_bytes(address)
        except bech32.Bech32Error as e:
            raise Bech32DecodeError(f"decoding bech32 failed: {e}") from e
        if hrp != prefix:
            raise Bech32DecodeError(f"invalid Bech32 prefix; expected {prefix}, got {hrp}")
        return raw

    # --- node ------------------------------------------------------------------

    async def status(self) -> NodeStatus:
        return await _wait.node_status(self.rpc)

    async def latest_block_height(self) -> int:
        return await _wait.latest_block_height(self.rpc)

    async def wait_for_block_height(self, height: int, *, timeout: Optional[float] = None) -> None:
        await _wait.wait_for_block_height(
            self.rpc, height, timeout=timeout, poll_interval=self.config.poll_interval
        )

    async def wait_for_next_block(self, *, timeout: Optional[float] = None) -> None:
        await self.wait_for_n_blocks(1, timeout=timeout)

    async def wait_for_n_blocks(self, n: int, *, timeout: Optional[float] = None) -> None:
        start = await self.latest_block_height()
        await self.wait_for_block_height(start + n, timeout=timeout)

    async def wait_for_tx(self, tx_hash: str, *, timeout: Optional[float] = None) -> TxResult:
        return await _wait.wait_for_tx(
            self.rpc, tx_hash, timeout=timeout, poll_interval=self.config.poll_interval
        )

    # --- transactions ------------------------------------------------------------

    async def create_tx(self, account: Account, *msgs: AnyMsg) -> Tx:
        """
        Fund (when a faucet is configured), prepare, price and sign a tx for
        `account`. The result is ready for `broadcast_tx`.
        """
        self.config.gas.validate()
        if not msgs:
            raise TxBuildError("at least one message is required")
        address = account.address(self.config.address_prefix)

        if self.config.faucet_enabled and self.faucet is not None:
            await ensure_funded(
                self.bank,
                self.faucet,
                address,
                self.config.faucet_denom,
                self.config.faucet_min_amount,
            )

        factory = await prepare_factory(self.account_retriever, self.tx_factory, address)
        factory = await resolve_gas_and_fees(self.gasometer, factory, self.config.gas, msgs)

        tx = build_unsigned_tx(factory, msgs)
        sig = await self.signer.sign(factory, account, tx)
        if sig is not None:
            tx = attach_signature(tx, sig)
        return tx

    async def broadcast_tx(self, tx: Tx) -> BroadcastResult:
        try:
            res = await self.rpc.broadcast_tx(tx.encode(), self.config.broadcast_mode)
        except Exception as e:
            if "not found" in str(e):
                raise BroadcastError("make sure that your account has enough balance") from e
            raise _wait.node_error(self.rpc, e) from e
        if res.code != 0:
            raise BroadcastError(f"error code: '{res.code}' msg: '{res.log}'", code=res.code, log=res.log)
        return res

    async def broadcast(self, account: Account, *msgs: AnyMsg) -> BroadcastResult:
        return await self.broadcast_tx(await self.create_tx(account, *msgs))
