"""
cosmosclient.tx.sign
====================

Signing of assembled transactions.

`KeyringSigner` is the default `Signer`: it signs the transaction's sign
bytes (see `cosmosclient.tx.encode`) with the account's Ed25519 key held in
the factory's keyring. A signer may also return None (e.g. a dry-run or
offline signer); the transaction then goes out with empty signer infos and
signatures.

Notes
-----
- The sign mode recorded in the signer info is the factory's, with
  SIGN_MODE_UNSPECIFIED resolved to SIGN_MODE_DIRECT as the node does.
- Signatures are attached in call order, so multi-signer transactions keep
  account order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from ..errors import KeyringError
from .build import SIGN_MODE_DIRECT, SIGN_MODE_UNSPECIFIED, SignerInfo, Tx
from .encode import sign_bytes

if TYPE_CHECKING:
    from ..account.keyring import Account
    from .factory import TxFactory

__all__ = ["Signature", "KeyringSigner", "attach_signature", "verify_signature"]


@dataclass(frozen=True)
class Signature:
    signer_info: SignerInfo
    signature: bytes


def attach_signature(tx: Tx, sig: Signature) -> Tx:
    return tx.with_signature(sig.signer_info, sig.signature)


class KeyringSigner:
    """Signs with keys from the factory's keyring."""

    async def sign(self, factory: "TxFactory", account: "Account", tx: Tx) -> Signature:
        if factory.keyring is None:
            raise KeyringError("tx factory has no keyring to sign with")
        mode = factory.sign_mode
        if mode == SIGN_MODE_UNSPECIFIED:
            mode = SIGN_MODE_DIRECT
        info = SignerInfo(public_key=account.public_key, sequence=factory.sequence, mode=mode)
        # The signer info is part of what gets signed
        pending = tx.with_signature(info, b"")
        doc = sign_bytes(_without_signatures(pending), factory.chain_id, factory.account_number)
        return Signature(signer_info=info, signature=factory.keyring.sign(account.name, doc))


def verify_signature(tx: Tx, index: int, chain_id: str, account_number: int) -> bool:
    """Check signature `index` of `tx` against its signer info's public key."""
    info = tx.auth_info.signer_infos[index]
    doc = sign_bytes(_without_signatures(tx), chain_id, account_number)
    try:
        Ed25519PublicKey.from_public_bytes(info.public_key).verify(tx.signatures[index], doc)
    except InvalidSignature:
        return False
    return True


def _without_signatures(tx: Tx) -> Tx:
    return Tx(body=tx.body, auth_info=tx.auth_info)
