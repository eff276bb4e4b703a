"""
Gas and fee policy.

Turns a `GasConfig` into a concrete gas limit and fee on a `TxFactory`:

- gas "" or "auto": simulate once through the gasometer, then add
  SIMULATION_GAS_BUFFER to the adjusted estimate.
- any other gas string: base-10 unsigned integer. An unparseable literal
  falls back to DEFAULT_GAS_LIMIT (logged, not raised).
- fees: explicit coins, used as-is; otherwise gas prices × final gas limit
  (rounded up per denom); otherwise no fee.

The gas limit is always settled before a price-derived fee is computed.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence

from .coins import fees_from_gas_prices, parse_coins, parse_dec_coins
from .config import DEFAULT_GAS_ADJUSTMENT, DEFAULT_GAS_LIMIT, GasConfig
from .errors import TxBuildError
from .interfaces import Gasometer
from .tx.factory import TxFactory
from .tx.messages import AnyMsg

log = logging.getLogger(__name__)

SIMULATION_GAS_BUFFER = 20000

_UINT64_MAX = 2**64 - 1
_DIGITS_RE = re.compile(r"^[0-9]+$")

__all__ = ["SIMULATION_GAS_BUFFER", "parse_gas_limit", "resolve_gas_and_fees"]


def parse_gas_limit(gas: str) -> int:
    """Parse a literal gas limit; raises ValueError for anything but a uint64."""
    if not _DIGITS_RE.match(gas):
        raise ValueError(f"invalid gas limit {gas!r}")
    value = int(gas, 10)
    if value > _UINT64_MAX:
        raise ValueError(f"gas limit {gas!r} out of range")
    return value


async def resolve_gas_and_fees(
    gasometer: Gasometer,
    factory: TxFactory,
    gas_config: GasConfig,
    msgs: Sequence[AnyMsg],
) -> TxFactory:
    gas_config.validate()

    if gas_config.gas_adjustment not in (0, DEFAULT_GAS_ADJUSTMENT):
        factory = factory.with_gas_adjustment(gas_config.gas_adjustment)

    if gas_config.simulate:
        _, adjusted = await gasometer.calculate_gas(factory, msgs)
        gas = int(adjusted) + SIMULATION_GAS_BUFFER
        log.debug("simulated gas: estimate=%d limit=%d", adjusted, gas)
    else:
        try:
            gas = parse_gas_limit(gas_config.gas)
        except ValueError:
            log.warning("unparseable gas limit %r, using default %d", gas_config.gas, DEFAULT_GAS_LIMIT)
            gas = DEFAULT_GAS_LIMIT
    factory = factory.with_gas(gas)

    try:
        if gas_config.fees:
            factory = factory.with_fees(parse_coins(gas_config.fees))
        elif gas_config.gas_prices:
            prices = parse_dec_coins(gas_config.gas_prices)
            factory = factory.with_fees(fees_from_gas_prices(prices, factory.gas))
    except ValueError as e:
        raise TxBuildError(f"invalid fee configuration: {e}") from e
    return factory
