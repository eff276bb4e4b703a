"""
cosmosclient: async Python client for Cosmos SDK chains.
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import ClientConfig, GasConfig  # noqa: F401
from .errors import (  # noqa: F401
    AccountNotFoundError,
    Bech32DecodeError,
    BroadcastError,
    ConflictingGasConfigError,
    CosmosClientError,
    FundingUnavailableError,
    InvalidTxHashError,
    KeyringError,
    NodeRequestError,
    QueryFailedError,
    RpcError,
    TxBuildError,
    TxQueryError,
    WaitTimeoutError,
)

# Client
from .client import Client  # noqa: F401

# Accounts
from .account.keyring import Account, AccountRegistry  # noqa: F401

# Coins
from .coins import Coin, DecCoin, parse_coins, parse_dec_coins  # noqa: F401

# Tx helpers
from .tx.build import Tx, build_unsigned_tx  # noqa: F401
from .tx.factory import TxFactory  # noqa: F401
from .tx.messages import AnyMsg, msg_send  # noqa: F401
from .tx.sign import KeyringSigner, Signature  # noqa: F401

# Network adapters
from .rpc.http import NodeRpcClient  # noqa: F401
from .rpc.rest import RestAccountRetriever, RestBankQueryClient, RestGasometer  # noqa: F401
from .faucet import HttpFaucetClient, TransferRequest, TransferResponse  # noqa: F401

# Results
from .types import BroadcastResult, NodeStatus, SimulationResult, TxResult  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "ClientConfig", "GasConfig", "Client",
    # Errors
    "CosmosClientError", "ConflictingGasConfigError", "AccountNotFoundError",
    "Bech32DecodeError", "KeyringError", "RpcError", "NodeRequestError",
    "QueryFailedError", "FundingUnavailableError", "InvalidTxHashError",
    "WaitTimeoutError", "TxQueryError", "TxBuildError", "BroadcastError",
    # Accounts
    "Account", "AccountRegistry",
    # Coins
    "Coin", "DecCoin", "parse_coins", "parse_dec_coins",
    # Tx
    "Tx", "TxFactory", "AnyMsg", "msg_send", "build_unsigned_tx",
    "KeyringSigner", "Signature",
    # Adapters
    "NodeRpcClient", "RestAccountRetriever", "RestBankQueryClient", "RestGasometer",
    "HttpFaucetClient", "TransferRequest", "TransferResponse",
    # Results
    "NodeStatus", "TxResult", "BroadcastResult", "SimulationResult",
]
