from pathlib import Path

import pytest

from cosmosclient.client import Client
from cosmosclient.config import ClientConfig
from cosmosclient.errors import (AccountNotFoundError, Bech32DecodeError, BroadcastError,
                                 NodeRequestError, RpcError)
from cosmosclient.tx.messages import msg_send
from cosmosclient.coins import Coin
from cosmosclient.types import BroadcastResult
from cosmosclient.utils import bech32

from .conftest import FakeNode


@pytest.mark.asyncio
async def test_connect_learns_chain_id_and_home(make_client, fakes):
    client = await make_client()

    assert client.chain_id == "mychain"
    assert client.home == str(Path.home() / ".mychain")
    assert fakes.node.methods() == ["status"]
    assert client.tx_factory.chain_id == "mychain"
    assert client.tx_factory.gas == 300000
    assert client.tx_factory.sign_mode == "SIGN_MODE_UNSPECIFIED"


@pytest.mark.asyncio
async def test_connect_keeps_configured_home(make_client, tmp_path):
    client = await make_client(ClientConfig(home=str(tmp_path)))
    assert client.home == str(tmp_path)


@pytest.mark.asyncio
async def test_connect_fails_when_node_unreachable(make_client):
    node = FakeNode(heights=[RuntimeError("oups")])

    with pytest.raises(NodeRequestError) as excinfo:
        await make_client(rpc=node)

    assert str(excinfo.value) == "error while requesting node 'http://localhost:26657': oups"


@pytest.mark.asyncio
async def test_status_wraps_node_errors(make_client, fakes):
    fakes.node.heights = [7, RuntimeError("oups")]
    client = await make_client()

    with pytest.raises(NodeRequestError) as excinfo:
        await client.status()

    assert str(excinfo.value) == "error while requesting node 'http://localhost:26657': oups"


# ---------- account resolution ----------


@pytest.mark.asyncio
async def test_account_by_name_and_by_address(make_client, keyring):
    alice = keyring.create("alice")
    client = await make_client()

    assert client.account("alice") == alice
    assert client.account(alice.address("cosmos")) == alice


@pytest.mark.asyncio
async def test_account_unknown_name_is_a_bech32_error(make_client):
    client = await make_client()

    with pytest.raises(Bech32DecodeError) as excinfo:
        client.account("unknown")

    assert str(excinfo.value) == "decoding bech32 failed: invalid bech32 string length 7"


@pytest.mark.asyncio
async def test_account_wrong_prefix(make_client, keyring):
    alice = keyring.create("alice")
    client = await make_client()

    with pytest.raises(Bech32DecodeError) as excinfo:
        client.account(alice.address("test"))

    assert str(excinfo.value) == "invalid Bech32 prefix; expected cosmos, got test"


@pytest.mark.asyncio
async def test_account_valid_address_without_key(make_client):
    client = await make_client()
    addr = bech32.encode_bytes("cosmos", b"\x01" * 20)

    with pytest.raises(AccountNotFoundError) as excinfo:
        client.account(addr)

    assert str(excinfo.value) == f'account "{addr}" does not exist'


@pytest.mark.asyncio
async def test_address_by_name(make_client, keyring):
    alice = keyring.create("alice")
    client = await make_client()

    first = client.address("alice")
    assert first == alice.address("cosmos")
    assert first.startswith("cosmos1")
    assert client.address("alice") == first


@pytest.mark.asyncio
async def test_resolving_a_name_twice_gives_the_same_account(make_client, keyring):
    keyring.create("alice")
    client = await make_client()

    assert client.account("alice") == client.account("alice")
    assert client.address("alice") == client.address("alice")


@pytest.mark.asyncio
async def test_address_unknown_name(make_client):
    client = await make_client()

    with pytest.raises(AccountNotFoundError) as excinfo:
        client.address("unknown")

    assert str(excinfo.value) == 'account "unknown" does not exist'


@pytest.mark.asyncio
async def test_address_uses_configured_prefix(make_client, keyring):
    alice = keyring.create("alice")
    client = await make_client(ClientConfig(address_prefix="osmo"))

    assert client.address("alice").startswith("osmo1")
    assert client.account(alice.address("osmo")) == alice


# ---------- broadcast ----------


@pytest.mark.asyncio
async def test_broadcast_submits_encoded_tx(make_client, fakes, keyring):
    alice = keyring.create("alice")
    client = await make_client()
    msg = msg_send(alice.address("cosmos"), "cosmos1dest", (Coin("token", 5),))

    tx = await client.create_tx(alice, msg)
    res = await client.broadcast_tx(tx)

    assert res.hash == "ABCD"
    assert fakes.node.calls[-1] == ("broadcast_tx", tx.encode(), "sync")


@pytest.mark.asyncio
async def test_broadcast_nonzero_code(make_client, fakes, keyring):
    alice = keyring.create("alice")
    fakes.node.broadcast_results = [BroadcastResult(hash="ABCD", code=13, log="insufficient fee")]
    client = await make_client()

    with pytest.raises(BroadcastError) as excinfo:
        await client.broadcast(alice, msg_send("a", "b", (Coin("token", 1),)))

    assert str(excinfo.value) == "error code: '13' msg: 'insufficient fee'"
    assert excinfo.value.code == 13


@pytest.mark.asyncio
async def test_broadcast_not_found_hints_at_balance(make_client, fakes, keyring):
    alice = keyring.create("alice")
    fakes.node.broadcast_results = [RpcError(method="broadcast_tx_sync", code=-32603, message="account not found")]
    client = await make_client()

    with pytest.raises(BroadcastError) as excinfo:
        await client.broadcast(alice, msg_send("a", "b", (Coin("token", 1),)))

    assert str(excinfo.value) == "make sure that your account has enough balance"


@pytest.mark.asyncio
async def test_broadcast_other_node_error(make_client, fakes, keyring):
    alice = keyring.create("alice")
    fakes.node.broadcast_results = [RuntimeError("connection reset")]
    client = await make_client()

    with pytest.raises(NodeRequestError) as excinfo:
        await client.broadcast(alice, msg_send("a", "b", (Coin("token", 1),)))

    assert "connection reset" in str(excinfo.value)


# ---------- block helpers & lifecycle ----------


@pytest.mark.asyncio
async def test_wait_for_n_blocks(make_client, fakes):
    fakes.node.heights = [1, 4, 5, 6]
    client = await make_client(ClientConfig(poll_interval=0))

    await client.wait_for_n_blocks(2)

    # connect, starting height, then polls until 6
    assert fakes.node.methods() == ["status"] * 4


@pytest.mark.asyncio
async def test_wait_for_next_block(make_client, fakes):
    fakes.node.heights = [1, 4, 4, 5]
    client = await make_client(ClientConfig(poll_interval=0))

    await client.wait_for_next_block()

    assert fakes.node.methods() == ["status"] * 4


@pytest.mark.asyncio
async def test_default_adapters_send_configured_headers(fakes, keyring):
    config = ClientConfig(user_agent="mytool/1.0")
    client = await Client.connect(config, rpc=fakes.node, keyring=keyring)

    async with client:
        for adapter in client._owned:
            assert adapter._client.headers["User-Agent"] == "mytool/1.0"
            assert adapter._client.headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_aclose_closes_default_adapters(fakes, keyring):
    client = await Client.connect(ClientConfig(), rpc=fakes.node, keyring=keyring)
    adapters = list(client._owned)
    assert len(adapters) == 3

    async with client:
        pass

    assert client._owned == []
    assert all(a._client.is_closed for a in adapters)
