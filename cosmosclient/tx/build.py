"""
cosmosclient.tx.build
=====================

Transaction model and the unsigned-transaction builder.

A `Tx` is body + auth info + signatures, mirroring the Cosmos SDK layout:

    Tx
    ├── body       messages, memo, timeout_height, extension option lists
    ├── auth_info  signer_infos, fee {amount, gas_limit, payer, granter}, tip
    └── signatures one per signer, in signer order

Two encodings are provided and both decode back to an equal `Tx`:

- JSON (`Tx.encode_json` / `Tx.from_json`): field order and presence are
  fixed. Empty lists are rendered as `[]`, the absent tip as `null`, integers
  as decimal strings and binary values as base64.
- Binary (`Tx.encode` / `Tx.decode`): deterministic CBOR via
  `cosmosclient.utils.cbor`, used for broadcasting, hashing and sign bytes.

Example
-------
    tx = build_unsigned_tx(factory, [msg_send(a, b, parse_coins("1token"))])
    tx.encode_json()
    # {"body":{"messages":[...],"memo":"","timeout_height":"0",...},...}
"""

from __future__ import annotations

import base64
import hashlib
import json
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from ..coins import Coin, Coins, coins_from_json, coins_to_json
from ..errors import TxBuildError
from ..utils.cbor import CBORDecodeError
from ..utils.cbor import dumps as cbor_dumps
from ..utils.cbor import loads as cbor_loads
from .messages import AnyMsg

if TYPE_CHECKING:
    from .factory import TxFactory

ED25519_PUBKEY_TYPE_URL = "/cosmos.crypto.ed25519.PubKey"

SIGN_MODE_UNSPECIFIED = "SIGN_MODE_UNSPECIFIED"
SIGN_MODE_DIRECT = "SIGN_MODE_DIRECT"

__all__ = [
    "Tx",
    "TxBody",
    "AuthInfo",
    "Fee",
    "SignerInfo",
    "build_unsigned_tx",
    "ED25519_PUBKEY_TYPE_URL",
    "SIGN_MODE_UNSPECIFIED",
    "SIGN_MODE_DIRECT",
]


def _b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")


def _unb64(s: str) -> bytes:
    return base64.b64decode(s, validate=True)


# -----------------------------------------------------------------------------
# Model
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Fee:
    amount: Coins = ()
    gas_limit: int = 0
    payer: str = ""
    granter: str = ""

    def to_json(self) -> Dict[str, Any]:
        return {
            "amount": coins_to_json(self.amount),
            "gas_limit": str(self.gas_limit),
            "payer": self.payer,
            "granter": self.granter,
        }

    @classmethod
    def from_json(cls, d: Mapping[str, Any]) -> "Fee":
        return cls(
            amount=coins_from_json(d["amount"]),
            gas_limit=int(d["gas_limit"]),
            payer=d["payer"],
            granter=d["granter"],
        )

    def to_wire(self) -> Dict[str, Any]:
        return {
            "amount": [[c.denom, c.amount] for c in self.amount],
            "gas_limit": self.gas_limit,
            "payer": self.payer,
            "granter": self.granter,
        }

    @classmethod
    def from_wire(cls, d: Mapping[str, Any]) -> "Fee":
        return cls(
            amount=tuple(Coin(denom=denom, amount=amount) for denom, amount in d["amount"]),
            gas_limit=d["gas_limit"],
            payer=d["payer"],
            granter=d["granter"],
        )


@dataclass(frozen=True)
class SignerInfo:
    public_key: bytes
    sequence: int
    mode: str = SIGN_MODE_DIRECT
    key_type_url: str = ED25519_PUBKEY_TYPE_URL

    def to_json(self) -> Dict[str, Any]:
        return {
            "public_key": {"@type": self.key_type_url, "key": _b64(self.public_key)},
            "mode_info": {"single": {"mode": self.mode}},
            "sequence": str(self.sequence),
        }

    @classmethod
    def from_json(cls, d: Mapping[str, Any]) -> "SignerInfo":
        return cls(
            public_key=_unb64(d["public_key"]["key"]),
            sequence=int(d["sequence"]),
            mode=d["mode_info"]["single"]["mode"],
            key_type_url=d["public_key"]["@type"],
        )

    def to_wire(self) -> Dict[str, Any]:
        return {
            "public_key": self.public_key,
            "key_type_url": self.key_type_url,
            "mode": self.mode,
            "sequence": self.sequence,
        }

    @classmethod
    def from_wire(cls, d: Mapping[str, Any]) -> "SignerInfo":
        return cls(
            public_key=bytes(d["public_key"]),
            sequence=d["sequence"],
            mode=d["mode"],
            key_type_url=d["key_type_url"],
        )


@dataclass(frozen=True)
class TxBody:
    messages: Tuple[AnyMsg, ...]
    memo: str = ""
    timeout_height: int = 0
    extension_options: Tuple[AnyMsg, ...] = ()
    non_critical_extension_options: Tuple[AnyMsg, ...] = ()

    def to_json(self) -> Dict[str, Any]:
        return {
            "messages": [m.to_json() for m in self.messages],
            "memo": self.memo,
            "timeout_height": str(self.timeout_height),
            "extension_options": [m.to_json() for m in self.extension_options],
            "non_critical_extension_options": [m.to_json() for m in self.non_critical_extension_options],
        }

    @classmethod
    def from_json(cls, d: Mapping[str, Any]) -> "TxBody":
        return cls(
            messages=tuple(AnyMsg.from_json(m) for m in d["messages"]),
            memo=d["memo"],
            timeout_height=int(d["timeout_height"]),
            extension_options=tuple(AnyMsg.from_json(m) for m in d["extension_options"]),
            non_critical_extension_options=tuple(
                AnyMsg.from_json(m) for m in d["non_critical_extension_options"]
            ),
        )

    def to_wire(self) -> Dict[str, Any]:
        return {
            "messages": [m.to_wire() for m in self.messages],
            "memo": self.memo,
            "timeout_height": self.timeout_height,
            "extension_options": [m.to_wire() for m in self.extension_options],
            "non_critical_extension_options": [m.to_wire() for m in self.non_critical_extension_options],
        }

    @classmethod
    def from_wire(cls, d: Mapping[str, Any]) -> "TxBody":
        return cls(
            messages=tuple(AnyMsg.from_wire(m) for m in d["messages"]),
            memo=d["memo"],
            timeout_height=d["timeout_height"],
            extension_options=tuple(AnyMsg.from_wire(m) for m in d["extension_options"]),
            non_critical_extension_options=tuple(
                AnyMsg.from_wire(m) for m in d["non_critical_extension_options"]
            ),
        )


@dataclass(frozen=True)
class AuthInfo:
    fee: Fee
    signer_infos: Tuple[SignerInfo, ...] = ()
    # Tips are never set by this client; kept so the encoding shows `null`.
    tip: Optional[Dict[str, Any]] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "signer_infos": [s.to_json() for s in self.signer_infos],
            "fee": self.fee.to_json(),
            "tip": self.tip,
        }

    @classmethod
    def from_json(cls, d: Mapping[str, Any]) -> "AuthInfo":
        return cls(
            fee=Fee.from_json(d["fee"]),
            signer_infos=tuple(SignerInfo.from_json(s) for s in d["signer_infos"]),
            tip=d["tip"],
        )

    def to_wire(self) -> Dict[str, Any]:
        return {
            "signer_infos": [s.to_wire() for s in self.signer_infos],
            "fee": self.fee.to_wire(),
            "tip": self.tip,
        }

    @classmethod
    def from_wire(cls, d: Mapping[str, Any]) -> "AuthInfo":
        return cls(
            fee=Fee.from_wire(d["fee"]),
            signer_infos=tuple(SignerInfo.from_wire(s) for s in d["signer_infos"]),
            tip=d["tip"],
        )


@dataclass(frozen=True)
class Tx:
    body: TxBody
    auth_info: AuthInfo
    signatures: Tuple[bytes, ...] = field(default=())

    # --- signatures ----------------------------------------------------------

    def with_signature(self, signer_info: SignerInfo, signature: bytes) -> "Tx":
        """Append a signer (and its signature) after the existing ones."""
        auth = replace(self.auth_info, signer_infos=self.auth_info.signer_infos + (signer_info,))
        return replace(self, auth_info=auth, signatures=self.signatures + (bytes(signature),))

    # --- JSON ------------------------------------------------------------------

    def to_json(self) -> Dict[str, Any]:
        return {
            "body": self.body.to_json(),
            "auth_info": self.auth_info.to_json(),
            "signatures": [_b64(s) for s in self.signatures],
        }

    def encode_json(self) -> str:
        return json.dumps(self.to_json(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, data: Union[str, bytes, Mapping[str, Any]]) -> "Tx":
        try:
            d = json.loads(data) if isinstance(data, (str, bytes)) else data
            return cls(
                body=TxBody.from_json(d["body"]),
                auth_info=AuthInfo.from_json(d["auth_info"]),
                signatures=tuple(_unb64(s) for s in d["signatures"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise TxBuildError(f"invalid tx json: {e}") from e

    # --- binary ----------------------------------------------------------------

    def body_bytes(self) -> bytes:
        return cbor_dumps(self.body.to_wire())

    def auth_info_bytes(self) -> bytes:
        return cbor_dumps(self.auth_info.to_wire())

    def encode(self) -> bytes:
        return cbor_dumps(
            {
                "body": self.body.to_wire(),
                "auth_info": self.auth_info.to_wire(),
                "signatures": list(self.signatures),
            }
        )

    @classmethod
    def decode(cls, raw: bytes) -> "Tx":
        try:
            d = cbor_loads(raw)
            return cls(
                body=TxBody.from_wire(d["body"]),
                auth_info=AuthInfo.from_wire(d["auth_info"]),
                signatures=tuple(bytes(s) for s in d["signatures"]),
            )
        except (CBORDecodeError, KeyError, TypeError, ValueError) as e:
            raise TxBuildError(f"invalid tx bytes: {e}") from e

    def hash(self) -> str:
        """Upper-case hex sha256 of the binary encoding, as nodes index it."""
        return hashlib.sha256(self.encode()).hexdigest().upper()


# -----------------------------------------------------------------------------
# Builder
# -----------------------------------------------------------------------------


def build_unsigned_tx(factory: "TxFactory", msgs: Sequence[AnyMsg]) -> Tx:
    """
    Assemble an unsigned transaction from the prepared factory.

    Signer infos and signatures stay empty; the fee is taken from the
    factory (amount, gas limit, payer, granter).
    """
    if not msgs:
        raise TxBuildError("at least one message is required")
    for m in msgs:
        if not isinstance(m, AnyMsg):
            raise TxBuildError(f"unsupported message type {type(m).__name__}")
    body = TxBody(
        messages=tuple(msgs),
        memo=factory.memo,
        timeout_height=factory.timeout_height,
    )
    fee = Fee(
        amount=tuple(factory.fees),
        gas_limit=factory.gas,
        payer=factory.fee_payer,
        granter=factory.fee_granter,
    )
    return Tx(body=body, auth_info=AuthInfo(fee=fee))
