"""
Funding gate: top up an account from the faucet before sending a tx.

One balance query; when it is below the minimum, one faucet transfer and one
more balance query. A balance that is still short afterwards is logged and
accepted, the transaction decides whether it can pay.
"""

from __future__ import annotations

import logging

from .coins import Coin
from .errors import FundingUnavailableError, QueryFailedError
from .faucet import TransferRequest
from .interfaces import BankQueryClient, FaucetClient

log = logging.getLogger(__name__)

__all__ = ["ensure_funded"]


async def _balance(bank: BankQueryClient, address: str, denom: str) -> Coin:
    try:
        return await bank.balance(address, denom)
    except QueryFailedError:
        raise
    except Exception as e:
        raise QueryFailedError(f"querying balance of {address} in {denom}", e) from e


async def ensure_funded(
    bank: BankQueryClient,
    faucet: FaucetClient,
    address: str,
    denom: str,
    min_amount: int,
) -> Coin:
    """Return the balance seen last (after the top-up, if one happened)."""
    balance = await _balance(bank, address, denom)
    if balance.amount >= min_amount:
        return balance

    log.info("balance of %s is %s, requesting funds from faucet", address, balance)
    try:
        resp = await faucet.transfer(TransferRequest(address=address))
    except Exception as e:
        raise FundingUnavailableError(str(e) or type(e).__name__) from e
    if resp.error:
        raise FundingUnavailableError(resp.error)

    balance = await _balance(bank, address, denom)
    if balance.amount < min_amount:
        log.warning(
            "balance of %s is still %s after faucet transfer (minimum %d%s)",
            address,
            balance,
            min_amount,
            denom,
        )
    return balance
