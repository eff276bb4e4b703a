"""
Faucet client.

The faucet is a small HTTP service in front of a funded account. It takes

    POST / {"address": "cosmos1...", "coins": ["10token"]}

and answers {"error": ""} (or with a non-empty error). An empty `coins` list
asks for the faucet's default amount.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from .rpc.rest import RestAdapter

log = logging.getLogger(__name__)

__all__ = ["TransferRequest", "TransferResponse", "HttpFaucetClient"]


@dataclass(frozen=True)
class TransferRequest:
    address: str
    coins: List[str] = field(default_factory=list)

    def to_json(self) -> dict:
        return {"address": self.address, "coins": list(self.coins)}


@dataclass(frozen=True)
class TransferResponse:
    error: str = ""


@dataclass
class HttpFaucetClient(RestAdapter):
    async def transfer(self, request: TransferRequest) -> TransferResponse:
        log.debug("faucet transfer to %s", request.address)
        resp = await self.post("/", request.to_json())
        return TransferResponse(error=str(resp.get("error") or ""))
