"""
Typed error classes for cosmosclient.

These are raised by the client façade, the gas/fee resolver, the funding gate,
the confirmation pollers and the network adapters so callers can catch
specific failure modes while still being able to catch the base
`CosmosClientError`.

Messages are part of the public surface: tools built on top of the client
match on them, so they are kept short and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional

__all__ = [
    "CosmosClientError",
    "ConflictingGasConfigError",
    "AccountNotFoundError",
    "Bech32DecodeError",
    "KeyringError",
    "RpcError",
    "JsonRpcCode",
    "from_jsonrpc_error",
    "NodeRequestError",
    "QueryFailedError",
    "FundingUnavailableError",
    "InvalidTxHashError",
    "WaitTimeoutError",
    "TxQueryError",
    "TxBuildError",
    "BroadcastError",
]


class CosmosClientError(Exception):
    """Base class for all client errors."""


class ConflictingGasConfigError(CosmosClientError):
    """Raised when both fees and gas prices are configured."""

    def __init__(self) -> None:
        super().__init__("cannot provide both fees and gas prices")


@dataclass(eq=False)
class AccountNotFoundError(CosmosClientError):
    """No key in the keyring matches the given name or address."""

    name_or_address: str

    def __str__(self) -> str:
        return f'account "{self.name_or_address}" does not exist'


@dataclass(eq=False)
class Bech32DecodeError(CosmosClientError):
    """
    An identifier could not be decoded as an account address.

    Kept distinct from `AccountNotFoundError`: this one means the string is
    not a usable address at all, the other that nobody owns it.
    """

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class KeyringError(CosmosClientError):
    """Keyring storage or key import/export failed."""

    message: str

    def __str__(self) -> str:
        return self.message


class JsonRpcCode(IntEnum):
    # JSON-RPC 2.0 reserved codes
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Server errors (implementation-defined range: -32099 to -32000)
    SERVER_ERROR = -32000

    # Client-side codes used by the HTTP adapters
    TRANSPORT_ERROR = -32098


@dataclass(eq=False)
class RpcError(CosmosClientError):
    """Raised when a JSON-RPC or REST call fails or returns an error object."""

    method: Optional[str]
    code: int
    message: str
    data: Optional[Any] = None
    http_status: Optional[int] = None

    def __str__(self) -> str:
        parts = [f"RPC[{self.method or '-'}] code={self.code} msg={self.message!r}"]
        if self.http_status is not None:
            parts.append(f"http={self.http_status}")
        if self.data is not None:
            parts.append(f"data={self.data!r}")
        return " ".join(parts)


def from_jsonrpc_error(
    err_obj: Dict[str, Any],
    *,
    method: Optional[str] = None,
    http_status: Optional[int] = None,
) -> RpcError:
    """
    Convert a JSON-RPC error object into RpcError.

    `err_obj` should resemble: {"code": int, "message": str, "data": any?}
    """
    return RpcError(
        method=method,
        code=int(err_obj.get("code", JsonRpcCode.SERVER_ERROR)),
        message=str(err_obj.get("message", "Unknown JSON-RPC error")),
        data=err_obj.get("data"),
        http_status=http_status,
    )


@dataclass(eq=False)
class NodeRequestError(CosmosClientError):
    """A request to the node failed; carries the node address for context."""

    node: str
    cause: BaseException

    def __str__(self) -> str:
        return f"error while requesting node '{self.node}': {self.cause}"


@dataclass(eq=False)
class QueryFailedError(CosmosClientError):
    """A state query (balance, account) failed."""

    operation: str
    cause: BaseException

    def __str__(self) -> str:
        return f"{self.operation}: {self.cause}"


@dataclass(eq=False)
class FundingUnavailableError(CosmosClientError):
    """The faucet could not be reached or refused the transfer."""

    reason: str

    def __str__(self) -> str:
        return f"cannot retrieve funds from faucet: {self.reason}"


@dataclass(eq=False)
class InvalidTxHashError(CosmosClientError):
    tx_hash: str
    reason: str

    def __str__(self) -> str:
        return f"unable to decode tx hash '{self.tx_hash}': {self.reason}"


@dataclass(eq=False)
class WaitTimeoutError(CosmosClientError, TimeoutError):
    """The caller's deadline elapsed while polling the node; also a builtin TimeoutError."""

    condition: str

    def __str__(self) -> str:
        return f"timeout exceeded waiting for {self.condition}: deadline exceeded"


@dataclass(eq=False)
class TxQueryError(CosmosClientError):
    tx_hash: str
    cause: BaseException

    def __str__(self) -> str:
        return f"fetching tx '{self.tx_hash}': {self.cause}"


@dataclass(eq=False)
class TxBuildError(CosmosClientError):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class BroadcastError(CosmosClientError):
    """
    Raised when the node rejects a broadcast transaction.

    Fields:
      - message: human-readable description
      - code: ABCI result code (if the node returned one)
      - log: raw log returned by the node
    """

    message: str
    code: Optional[int] = None
    log: Optional[str] = None

    def __str__(self) -> str:
        return self.message
