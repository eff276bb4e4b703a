"""
Transaction messages.

Messages are opaque to the client: a type URL plus an ordered mapping of
fields. `AnyMsg` keeps insertion order so the JSON rendering matches what
the caller built, field for field.

    msg = msg_send("cosmos1...", "cosmos1...", parse_coins("1token"))
    msg.to_json()
    # {"@type": "/cosmos.bank.v1beta1.MsgSend", "from_address": ..., ...}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping

from ..coins import Coin, coins_to_json

TYPE_KEY = "@type"
MSG_SEND_TYPE_URL = "/cosmos.bank.v1beta1.MsgSend"

__all__ = ["AnyMsg", "msg_send", "MSG_SEND_TYPE_URL"]


@dataclass(frozen=True)
class AnyMsg:
    type_url: str
    value: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.type_url:
            raise ValueError("message type_url must not be empty")
        if TYPE_KEY in self.value:
            raise ValueError(f"message fields must not contain {TYPE_KEY!r}")

    def to_json(self) -> Dict[str, Any]:
        return {TYPE_KEY: self.type_url, **self.value}

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> "AnyMsg":
        if TYPE_KEY not in obj:
            raise ValueError(f"message is missing {TYPE_KEY!r}")
        return cls(type_url=str(obj[TYPE_KEY]), value={k: v for k, v in obj.items() if k != TYPE_KEY})

    # Binary form: the value travels as compact JSON bytes, like the value of
    # a protobuf Any, so field order survives canonical CBOR map sorting.
    def to_wire(self) -> list:
        return [self.type_url, json.dumps(self.value, separators=(",", ":")).encode("utf-8")]

    @classmethod
    def from_wire(cls, item: Any) -> "AnyMsg":
        if not isinstance(item, list) or len(item) != 2:
            raise ValueError("message must be a [type_url, value] pair")
        type_url, value = item
        return cls(type_url=str(type_url), value=json.loads(bytes(value).decode("utf-8")))


def msg_send(from_address: str, to_address: str, amount: Iterable[Coin]) -> AnyMsg:
    """Bank send of `amount` from one address to another."""
    return AnyMsg(
        MSG_SEND_TYPE_URL,
        {
            "from_address": from_address,
            "to_address": to_address,
            "amount": coins_to_json(amount),
        },
    )
