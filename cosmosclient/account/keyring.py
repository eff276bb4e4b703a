"""
cosmosclient.account.keyring
============================

Local account registry backed by a keyring.

Keys are Ed25519 (via `cryptography`). An account address is the first 20
bytes of sha256(public key), rendered as Bech32 under a prefix:

    address = bech32(prefix, sha256(pubkey)[:20])

Backends
--------
- "memory": keys live in the process only; handy for tests and scripts.
- "test":   unencrypted JSON records under `<home>/keyring-test/<name>.info`.
            Same trade-off as the Cosmos SDK test keyring: fine for local
            development chains, never for real funds.

Export/import of single keys goes through the passphrase-protected armor in
`cosmosclient.account.armor`.
"""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (Ed25519PrivateKey,
                                                               Ed25519PublicKey)

from ..errors import AccountNotFoundError, KeyringError
from ..utils import bech32
from . import armor as _armor

KEY_TYPE_ED25519 = "ed25519"
ADDRESS_LEN = 20

__all__ = [
    "Account",
    "AccountRegistry",
    "address_bytes_from_pubkey",
    "KEY_TYPE_ED25519",
]


def address_bytes_from_pubkey(public_key: bytes) -> bytes:
    return hashlib.sha256(public_key).digest()[:ADDRESS_LEN]


@dataclass(frozen=True)
class Account:
    """A named key; the address depends on the prefix it is rendered with."""

    name: str
    public_key: bytes
    key_type: str = KEY_TYPE_ED25519

    @property
    def address_bytes(self) -> bytes:
        return address_bytes_from_pubkey(self.public_key)

    def address(self, prefix: str) -> str:
        return bech32.encode_bytes(prefix, self.address_bytes)


# ----- Storage -----------------------------------------------------------------


class _MemoryStore:
    def __init__(self) -> None:
        self._records: Dict[str, dict] = {}

    def get(self, name: str) -> Optional[dict]:
        return self._records.get(name)

    def put(self, record: dict) -> None:
        self._records[record["name"]] = dict(record)

    def delete(self, name: str) -> None:
        self._records.pop(name, None)

    def __iter__(self) -> Iterator[dict]:
        return iter(sorted(self._records.values(), key=lambda r: r["name"]))


class _FileStore:
    SUFFIX = ".info"

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path(self, name: str) -> Path:
        return self.directory / f"{name}{self.SUFFIX}"

    def get(self, name: str) -> Optional[dict]:
        path = self._path(name)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            raise KeyringError(f"failed to read key {name!r}: {e}") from e

    def put(self, record: dict) -> None:
        path = self._path(record["name"])
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            data = json.dumps(record, separators=(",", ":"), sort_keys=True).encode("utf-8")
            with tempfile.NamedTemporaryFile("wb", delete=False, dir=str(self.directory)) as tmp:
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
                tmp_name = tmp.name
            os.replace(tmp_name, path)
            if os.name == "posix":
                os.chmod(path, 0o600)
        except OSError as e:
            raise KeyringError(f"failed to write key {record['name']!r}: {e}") from e

    def delete(self, name: str) -> None:
        try:
            self._path(name).unlink(missing_ok=True)
        except OSError as e:
            raise KeyringError(f"failed to delete key {name!r}: {e}") from e

    def __iter__(self) -> Iterator[dict]:
        if not self.directory.is_dir():
            return iter(())
        names = sorted(p.name[: -len(self.SUFFIX)] for p in self.directory.glob(f"*{self.SUFFIX}"))
        return (rec for rec in (self.get(n) for n in names) if rec is not None)


# ----- Registry ----------------------------------------------------------------


class AccountRegistry:
    """
    Named Ed25519 keys with lookup by name or by address.

    >>> reg = AccountRegistry("memory")
    >>> alice = reg.create("alice")
    >>> reg.get_by_name("alice") == alice
    True
    """

    def __init__(self, backend: str = "test", home: Optional[Union[str, Path]] = None) -> None:
        self.backend = backend
        self.home = Path(home) if home is not None else None
        if backend == "memory":
            self._store: Union[_MemoryStore, _FileStore] = _MemoryStore()
        elif backend == "test":
            if self.home is None:
                raise KeyringError("the test keyring backend needs a home directory")
            self._store = _FileStore(self.home / "keyring-test")
        else:
            raise KeyringError(f"unsupported keyring backend {backend!r}")

    # --- creation / import -------------------------------------------------

    def create(self, name: str) -> Account:
        """Generate a new key under `name`."""
        return self.import_private_key(name, _raw_private(Ed25519PrivateKey.generate()))

    def import_private_key(self, name: str, private_key: bytes) -> Account:
        _check_name(name)
        if self._store.get(name) is not None:
            raise KeyringError(f"cannot overwrite key {name!r}: already exists")
        if len(private_key) != 32:
            raise KeyringError(f"ed25519 private key must be 32 bytes, got {len(private_key)}")
        sk = Ed25519PrivateKey.from_private_bytes(private_key)
        pub = _raw_public(sk.public_key())
        self._store.put(
            {
                "name": name,
                "type": KEY_TYPE_ED25519,
                "private_key": private_key.hex(),
                "public_key": pub.hex(),
            }
        )
        return Account(name=name, public_key=pub)

    def import_armored(self, name: str, armored: str, passphrase: str) -> Account:
        key = _armor.unarmor(armored, passphrase)
        if key.key_type and key.key_type != KEY_TYPE_ED25519:
            raise KeyringError(f"unsupported key type {key.key_type!r}")
        return self.import_private_key(name, key.private_key)

    def export(self, name: str, passphrase: str) -> str:
        """Armored, passphrase-encrypted copy of the private key."""
        record = self._record(name)
        return _armor.armor(name, record["type"], bytes.fromhex(record["private_key"]), passphrase)

    # --- lookup ------------------------------------------------------------

    def has(self, name: str) -> bool:
        return _valid_name(name) and self._store.get(name) is not None

    def get_by_name(self, name: str) -> Account:
        return _account(self._record(name))

    def get_by_address(self, address: bytes) -> Account:
        """Look up by raw 20-byte address; `AccountNotFoundError` names the hex address."""
        for record in self._store:
            acc = _account(record)
            if acc.address_bytes == bytes(address):
                return acc
        raise AccountNotFoundError(bytes(address).hex())

    def list(self) -> List[Account]:
        return [_account(r) for r in self._store]

    def delete(self, name: str) -> None:
        self._record(name)
        self._store.delete(name)

    # --- signing -----------------------------------------------------------

    def sign(self, name: str, data: bytes) -> bytes:
        record = self._record(name)
        sk = Ed25519PrivateKey.from_private_bytes(bytes.fromhex(record["private_key"]))
        return sk.sign(data)

    # --- internals ---------------------------------------------------------

    def _record(self, name: str) -> dict:
        record = self._store.get(name) if _valid_name(name) else None
        if record is None:
            raise AccountNotFoundError(name)
        return record


def _valid_name(name: str) -> bool:
    return bool(name) and "/" not in name and "\\" not in name and name not in (".", "..")


def _check_name(name: str) -> None:
    if not _valid_name(name):
        raise KeyringError(f"invalid key name {name!r}")


def _account(record: dict) -> Account:
    return Account(
        name=record["name"],
        public_key=bytes.fromhex(record["public_key"]),
        key_type=record.get("type", KEY_TYPE_ED25519),
    )


def _raw_private(sk: Ed25519PrivateKey) -> bytes:
    return sk.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _raw_public(pk: Ed25519PublicKey) -> bytes:
    return pk.public_bytes(encoding=serialization.Encoding.Raw, format=serialization.PublicFormat.Raw)
