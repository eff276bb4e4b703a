import logging

import pytest

from cosmosclient.errors import FundingUnavailableError, QueryFailedError
from cosmosclient.faucet import TransferResponse
from cosmosclient.funding import ensure_funded

from .conftest import FakeBank, FakeFaucet

ADDR = "cosmos1abc"


@pytest.mark.asyncio
async def test_enough_balance_is_a_noop():
    bank, faucet = FakeBank([100]), FakeFaucet()

    bal = await ensure_funded(bank, faucet, ADDR, "token", 100)

    assert bal.amount == 100
    assert faucet.calls == []
    assert bank.calls == [("balance", ADDR, "token")]


@pytest.mark.asyncio
async def test_low_balance_tops_up_once():
    bank, faucet = FakeBank([10, 500]), FakeFaucet()

    bal = await ensure_funded(bank, faucet, ADDR, "token", 100)

    assert bal.amount == 500
    assert [r.address for r in faucet.calls] == [ADDR]
    assert len(bank.calls) == 2


@pytest.mark.asyncio
async def test_still_low_after_top_up_is_accepted(caplog):
    bank, faucet = FakeBank([10, 20]), FakeFaucet()

    with caplog.at_level(logging.WARNING, logger="cosmosclient.funding"):
        bal = await ensure_funded(bank, faucet, ADDR, "token", 100)

    assert bal.amount == 20
    assert len(faucet.calls) == 1
    assert len(bank.calls) == 2
    assert any("still" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_faucet_failure():
    bank, faucet = FakeBank([0]), FakeFaucet([ConnectionError("refused")])

    with pytest.raises(FundingUnavailableError) as excinfo:
        await ensure_funded(bank, faucet, ADDR, "token", 100)

    assert str(excinfo.value) == "cannot retrieve funds from faucet: refused"
    assert len(bank.calls) == 1


@pytest.mark.asyncio
async def test_faucet_response_error():
    bank, faucet = FakeBank([0]), FakeFaucet([TransferResponse(error="no funds")])

    with pytest.raises(FundingUnavailableError) as excinfo:
        await ensure_funded(bank, faucet, ADDR, "token", 100)

    assert str(excinfo.value) == "cannot retrieve funds from faucet: no funds"


@pytest.mark.asyncio
async def test_balance_query_failure():
    bank, faucet = FakeBank([RuntimeError("boom")]), FakeFaucet()

    with pytest.raises(QueryFailedError) as excinfo:
        await ensure_funded(bank, faucet, ADDR, "token", 100)

    assert str(excinfo.value) == f"querying balance of {ADDR} in token: boom"
    assert faucet.calls == []
