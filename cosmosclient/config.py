"""
Client configuration: node endpoints, keyring, gas/fee policy and faucet.

- Loads sane defaults and supports overrides via environment variables (COSMOSCLIENT_*).
- Provides helpers for building HTTP headers and validating endpoints.
- `GasConfig.validate()` enforces that fees and gas prices are never both set.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConflictingGasConfigError
from .version import USER_AGENT

DEFAULT_NODE_ADDRESS = "http://localhost:26657"
DEFAULT_API_ADDRESS = "http://localhost:1317"
DEFAULT_FAUCET_ADDRESS = "http://localhost:4500"
DEFAULT_ADDRESS_PREFIX = "cosmos"
DEFAULT_KEYRING_BACKEND = "test"
DEFAULT_BROADCAST_MODE = "sync"
DEFAULT_GAS_LIMIT = 300000
DEFAULT_GAS = str(DEFAULT_GAS_LIMIT)
DEFAULT_GAS_ADJUSTMENT = 1.0
DEFAULT_FAUCET_DENOM = "token"
DEFAULT_FAUCET_MIN_AMOUNT = 100
DEFAULT_POLL_INTERVAL = 1.0

GAS_AUTO = "auto"

BROADCAST_MODES = ("sync", "async", "block")
KEYRING_BACKENDS = ("memory", "test")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


def _ensure_broadcast_mode(mode: str) -> str:
    if mode not in BROADCAST_MODES:
        raise ValueError(f"broadcast mode must be one of {BROADCAST_MODES}, got: {mode!r}")
    return mode


def _ensure_keyring_backend(backend: str) -> str:
    if backend not in KEYRING_BACKENDS:
        raise ValueError(f"keyring backend must be one of {KEYRING_BACKENDS}, got: {backend!r}")
    return backend


def default_home(chain_id: str) -> str:
    """Home directory used when none is configured: ~/.<chain_id>."""
    return str(Path.home() / f".{chain_id}")


@dataclass(frozen=True, slots=True)
class GasConfig:
    """
    Gas and fee policy.

    gas:            literal gas limit, or "" / "auto" to simulate
    gas_adjustment: multiplier applied to simulated gas
    fees:           explicit fee coins, e.g. "10token"
    gas_prices:     per-unit prices, e.g. "0.025token"

    `fees` and `gas_prices` are mutually exclusive.
    """

    gas: str = DEFAULT_GAS
    gas_adjustment: float = DEFAULT_GAS_ADJUSTMENT
    fees: str = ""
    gas_prices: str = ""

    def validate(self) -> "GasConfig":
        if self.fees and self.gas_prices:
            raise ConflictingGasConfigError()
        return self

    @property
    def simulate(self) -> bool:
        return self.gas == "" or self.gas == GAS_AUTO


@dataclass(frozen=True, slots=True)
class ClientConfig:
    # Endpoints
    node_address: str = DEFAULT_NODE_ADDRESS
    api_address: str = DEFAULT_API_ADDRESS
    # Accounts
    address_prefix: str = DEFAULT_ADDRESS_PREFIX
    keyring_backend: str = DEFAULT_KEYRING_BACKEND
    home: Optional[str] = None
    # Tx policy
    broadcast_mode: str = DEFAULT_BROADCAST_MODE
    gas: GasConfig = field(default_factory=GasConfig)
    # Faucet; None disables the funding gate
    faucet_address: Optional[str] = None
    faucet_denom: str = DEFAULT_FAUCET_DENOM
    faucet_min_amount: int = DEFAULT_FAUCET_MIN_AMOUNT
    # Polling / HTTP behavior
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = 10.0
    max_retries: int = 3
    backoff_factor: float = 0.25
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        _ensure_scheme(self.node_address, ("http", "https"))
        _ensure_scheme(self.api_address, ("http", "https"))
        _ensure_scheme(self.faucet_address, ("http", "https"))
        _ensure_broadcast_mode(self.broadcast_mode)
        _ensure_keyring_backend(self.keyring_backend)

    @classmethod
    def from_env(cls, prefix: str = "COSMOSCLIENT_") -> "ClientConfig":
        """
        Create config from environment variables:

        COSMOSCLIENT_NODE               (http/https, CometBFT RPC)
        COSMOSCLIENT_API                (http/https, REST API)
        COSMOSCLIENT_ADDRESS_PREFIX     (str)
        COSMOSCLIENT_KEYRING_BACKEND    (memory|test)
        COSMOSCLIENT_HOME               (path)
        COSMOSCLIENT_BROADCAST_MODE     (sync|async|block)
        COSMOSCLIENT_GAS                (int, "auto" or "")
        COSMOSCLIENT_GAS_ADJUSTMENT     (float)
        COSMOSCLIENT_FEES               (coins)
        COSMOSCLIENT_GAS_PRICES         (dec coins)
        COSMOSCLIENT_FAUCET             (http/https) optional
        COSMOSCLIENT_FAUCET_DENOM       (str)
        COSMOSCLIENT_FAUCET_MIN_AMOUNT  (int)
        COSMOSCLIENT_POLL_INTERVAL      (float seconds)
        COSMOSCLIENT_REQUEST_TIMEOUT    (float seconds, HTTP)
        """
        gas = GasConfig(
            gas=_env(f"{prefix}GAS", DEFAULT_GAS) or "",
            gas_adjustment=float(_env(f"{prefix}GAS_ADJUSTMENT", str(DEFAULT_GAS_ADJUSTMENT))),
            fees=_env(f"{prefix}FEES", "") or "",
            gas_prices=_env(f"{prefix}GAS_PRICES", "") or "",
        )
        return cls(
            node_address=_env(f"{prefix}NODE", DEFAULT_NODE_ADDRESS) or DEFAULT_NODE_ADDRESS,
            api_address=_env(f"{prefix}API", DEFAULT_API_ADDRESS) or DEFAULT_API_ADDRESS,
            address_prefix=_env(f"{prefix}ADDRESS_PREFIX", DEFAULT_ADDRESS_PREFIX) or DEFAULT_ADDRESS_PREFIX,
            keyring_backend=_env(f"{prefix}KEYRING_BACKEND", DEFAULT_KEYRING_BACKEND) or DEFAULT_KEYRING_BACKEND,
            home=_env(f"{prefix}HOME") or None,
            broadcast_mode=_env(f"{prefix}BROADCAST_MODE", DEFAULT_BROADCAST_MODE) or DEFAULT_BROADCAST_MODE,
            gas=gas,
            faucet_address=_env(f"{prefix}FAUCET") or None,
            faucet_denom=_env(f"{prefix}FAUCET_DENOM", DEFAULT_FAUCET_DENOM) or DEFAULT_FAUCET_DENOM,
            faucet_min_amount=int(_env(f"{prefix}FAUCET_MIN_AMOUNT", str(DEFAULT_FAUCET_MIN_AMOUNT))),
            poll_interval=float(_env(f"{prefix}POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL))),
            request_timeout=float(_env(f"{prefix}REQUEST_TIMEOUT", "10.0")),
        )

    def with_overrides(self, **overrides: Any) -> "ClientConfig":
        """
        Copy with keyword overrides. Unknown keys are ignored.

        Gas policy keys (gas, gas_adjustment, fees, gas_prices) may be given
        flat; they are folded into the nested GasConfig.
        """
        gas_keys = {k: overrides.pop(k) for k in ("gas_adjustment", "fees", "gas_prices") if k in overrides}
        if isinstance(overrides.get("gas"), str):
            gas_keys["gas"] = overrides.pop("gas")
        known = self.to_dict().keys()
        data = {k: v for k, v in overrides.items() if k in known}
        if gas_keys:
            data["gas"] = replace(data.get("gas", self.gas), **gas_keys)
        return replace(self, **data)

    def with_faucet(
        self,
        address: Optional[str] = DEFAULT_FAUCET_ADDRESS,
        denom: str = "",
        min_amount: int = 0,
    ) -> "ClientConfig":
        """
        Enable the funding gate. An empty denom or a zero minimum keep the
        defaults ("token", 100).
        """
        return replace(
            self,
            faucet_address=address,
            faucet_denom=denom or DEFAULT_FAUCET_DENOM,
            faucet_min_amount=min_amount or DEFAULT_FAUCET_MIN_AMOUNT,
        )

    @property
    def faucet_enabled(self) -> bool:
        return bool(self.faucet_address)

    def home_for(self, chain_id: str) -> str:
        return self.home or default_home(chain_id)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_address": self.node_address,
            "api_address": self.api_address,
            "address_prefix": self.address_prefix,
            "keyring_backend": self.keyring_backend,
            "home": self.home,
            "broadcast_mode": self.broadcast_mode,
            "gas": self.gas,
            "faucet_address": self.faucet_address,
            "faucet_denom": self.faucet_denom,
            "faucet_min_amount": int(self.faucet_min_amount),
            "poll_interval": float(self.poll_interval),
            "request_timeout": float(self.request_timeout),
            "max_retries": int(self.max_retries),
            "backoff_factor": float(self.backoff_factor),
            "user_agent": self.user_agent,
        }


__all__ = [
    "ClientConfig",
    "GasConfig",
    "default_home",
    "DEFAULT_NODE_ADDRESS",
    "DEFAULT_API_ADDRESS",
    "DEFAULT_FAUCET_ADDRESS",
    "DEFAULT_ADDRESS_PREFIX",
    "DEFAULT_KEYRING_BACKEND",
    "DEFAULT_BROADCAST_MODE",
    "DEFAULT_GAS",
    "DEFAULT_GAS_LIMIT",
    "DEFAULT_GAS_ADJUSTMENT",
    "DEFAULT_FAUCET_DENOM",
    "DEFAULT_FAUCET_MIN_AMOUNT",
    "DEFAULT_POLL_INTERVAL",
    "GAS_AUTO",
    "BROADCAST_MODES",
    "KEYRING_BACKENDS",
]
