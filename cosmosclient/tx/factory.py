"""
Transaction factory: the per-call bundle of chain id, account state, gas and
fee used to assemble one transaction.

`Client.tx_factory` holds the template (chain id, keyring, gas defaults,
sign mode). `prepare_factory` copies it for a signer, filling in the on-chain
account number and sequence.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Optional

from ..coins import Coins
from ..config import DEFAULT_GAS_ADJUSTMENT, DEFAULT_GAS_LIMIT
from .build import SIGN_MODE_UNSPECIFIED

if TYPE_CHECKING:
    from ..account.keyring import AccountRegistry
    from ..interfaces import AccountRetriever

__all__ = ["TxFactory", "prepare_factory"]


@dataclass(frozen=True)
class TxFactory:
    chain_id: str
    keyring: Optional["AccountRegistry"] = field(default=None, compare=False, repr=False)
    gas: int = DEFAULT_GAS_LIMIT
    gas_adjustment: float = DEFAULT_GAS_ADJUSTMENT
    sign_mode: str = SIGN_MODE_UNSPECIFIED
    account_number: int = 0
    sequence: int = 0
    fees: Coins = ()
    fee_payer: str = ""
    fee_granter: str = ""
    memo: str = ""
    timeout_height: int = 0

    def with_gas(self, gas: int) -> "TxFactory":
        return replace(self, gas=int(gas))

    def with_gas_adjustment(self, adjustment: float) -> "TxFactory":
        return replace(self, gas_adjustment=float(adjustment))

    def with_fees(self, fees: Coins) -> "TxFactory":
        return replace(self, fees=tuple(fees))

    def with_account_number(self, account_number: int) -> "TxFactory":
        return replace(self, account_number=int(account_number))

    def with_sequence(self, sequence: int) -> "TxFactory":
        return replace(self, sequence=int(sequence))


async def prepare_factory(retriever: "AccountRetriever", factory: TxFactory, address: str) -> TxFactory:
    """
    Copy `factory` for `address`, filling account number and sequence from
    the chain when the template leaves them at 0.

    Errors from `ensure_exists` reach the caller as the same exception object.
    """
    await retriever.ensure_exists(address)

    if factory.account_number == 0 or factory.sequence == 0:
        num, seq = await retriever.get_account_number_sequence(address)
        if factory.account_number == 0:
            factory = factory.with_account_number(num)
        if factory.sequence == 0:
            factory = factory.with_sequence(seq)
    return factory
