"""
cosmosclient.tx.encode
======================

Sign bytes for transactions.

This module provides:
- `sign_doc_dict(tx, chain_id, account_number)` → the signable document
- `sign_bytes(tx, chain_id, account_number)` → bytes to sign (CBOR of the doc)

Design notes
------------
* The sign document mirrors Cosmos SIGN_MODE_DIRECT: the encoded body, the
  encoded auth info (signer infos included, fee included), the chain id and
  the signer's account number. Signatures themselves are never part of it.
* Encoding goes through `cosmosclient.utils.cbor.dumps`, which is canonical,
  so the same transaction always yields the same sign bytes.
"""

from __future__ import annotations

from typing import Any, Dict

from ..utils.cbor import dumps as cbor_dumps
from .build import Tx

__all__ = ["sign_doc_dict", "sign_bytes"]


def sign_doc_dict(tx: Tx, chain_id: str, account_number: int) -> Dict[str, Any]:
    return {
        "body_bytes": tx.body_bytes(),
        "auth_info_bytes": tx.auth_info_bytes(),
        "chain_id": str(chain_id),
        "account_number": int(account_number),
    }


def sign_bytes(tx: Tx, chain_id: str, account_number: int) -> bytes:
    """
    Return the deterministic CBOR-encoded sign bytes for `tx`.

    `tx` must already carry the signer info of the key about to sign.
    """
    return cbor_dumps(sign_doc_dict(tx, chain_id, account_number))
