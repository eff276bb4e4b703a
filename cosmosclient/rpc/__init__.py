from .http import HttpAdapter, NodeRpcClient
from .rest import RestAccountRetriever, RestBankQueryClient, RestGasometer

__all__ = [
    "HttpAdapter",
    "NodeRpcClient",
    "RestAccountRetriever",
    "RestBankQueryClient",
    "RestGasometer",
]
