"""
cosmosclient.coins
==================

Coin amounts as used in fees, gas prices and balances.

- Coin     : denom + non-negative integer amount
- DecCoin  : denom + non-negative decimal amount (gas prices)
- Coins    : tuple of Coin, sorted by denom, no duplicates

Parsing accepts the comma separated notation used on the command line and in
config files: "10token,5stake" or "0.025token".
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Mapping, Tuple

__all__ = [
    "Coin",
    "DecCoin",
    "Coins",
    "DecCoins",
    "parse_coin",
    "parse_coins",
    "parse_dec_coins",
    "fees_from_gas_prices",
    "coins_to_json",
    "coins_from_json",
]

_DENOM = r"[a-zA-Z][a-zA-Z0-9/:._-]{2,127}"
_COIN_RE = re.compile(rf"^([0-9]+)\s*({_DENOM})$")
_DEC_COIN_RE = re.compile(rf"^([0-9]+(?:\.[0-9]+)?|\.[0-9]+)\s*({_DENOM})$")


@dataclass(frozen=True, slots=True)
class Coin:
    denom: str
    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"negative coin amount: {self.amount}")

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"

    def to_json(self) -> Dict[str, str]:
        return {"denom": self.denom, "amount": str(self.amount)}

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> "Coin":
        return cls(denom=str(obj["denom"]), amount=int(obj["amount"]))


@dataclass(frozen=True, slots=True)
class DecCoin:
    denom: str
    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"negative coin amount: {self.amount}")

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


Coins = Tuple[Coin, ...]
DecCoins = Tuple[DecCoin, ...]


def _split(s: str) -> list[str]:
    return [part.strip() for part in s.split(",") if part.strip()]


def _check_unique(denoms: Iterable[str], raw: str) -> None:
    seen = set()
    for d in denoms:
        if d in seen:
            raise ValueError(f"duplicate denomination {d} in {raw!r}")
        seen.add(d)


def parse_coin(s: str) -> Coin:
    m = _COIN_RE.match(s.strip())
    if not m:
        raise ValueError(f"invalid coin expression: {s!r}")
    return Coin(denom=m.group(2), amount=int(m.group(1)))


def parse_coins(s: str) -> Coins:
    """
    Parse "10token,5stake" into Coins. Zero amounts are dropped and the
    result is sorted by denom; an empty string yields ().
    """
    coins = [parse_coin(part) for part in _split(s)]
    _check_unique((c.denom for c in coins), s)
    return tuple(sorted((c for c in coins if c.amount), key=lambda c: c.denom))


def parse_dec_coins(s: str) -> DecCoins:
    out = []
    for part in _split(s):
        m = _DEC_COIN_RE.match(part)
        if not m:
            raise ValueError(f"invalid decimal coin expression: {part!r}")
        try:
            amount = Decimal(m.group(1))
        except InvalidOperation as e:
            raise ValueError(f"invalid decimal coin expression: {part!r}") from e
        out.append(DecCoin(denom=m.group(2), amount=amount))
    _check_unique((c.denom for c in out), s)
    return tuple(sorted(out, key=lambda c: c.denom))


def fees_from_gas_prices(gas_prices: DecCoins, gas_limit: int) -> Coins:
    """fee = ceil(price × gas_limit) for every gas price denom."""
    fees = []
    for gp in gas_prices:
        amount = int(math.ceil(gp.amount * Decimal(gas_limit)))
        fees.append(Coin(denom=gp.denom, amount=amount))
    return tuple(fees)


def coins_to_json(coins: Iterable[Coin]) -> list[Dict[str, str]]:
    return [c.to_json() for c in coins]


def coins_from_json(items: Iterable[Mapping[str, Any]]) -> Coins:
    return tuple(Coin.from_json(it) for it in items)
