"""
Deterministic (canonical) CBOR encoder/decoder.

Binary transaction encoding and sign bytes are produced here. We delegate to
`cbor2` in canonical mode (RFC 8949 deterministic map ordering, minimal
integers), so the same logical value always yields the same bytes.

Supported types
---------------
- None, bool
- int
- bytes, bytearray, memoryview
- str (UTF-8)
- list/tuple (definite length)
- dict with str keys

API
---
- dumps(obj) -> bytes
- loads(data: bytes|bytearray|memoryview) -> object
- CBOREncodeError / CBORDecodeError
"""

from __future__ import annotations

from typing import Any, Union

import cbor2


class CBOREncodeError(ValueError):
    pass


class CBORDecodeError(ValueError):
    pass


BytesLike = Union[bytes, bytearray, memoryview]


def dumps(obj: Any) -> bytes:
    """Encode *obj* to deterministic CBOR bytes."""
    try:
        return cbor2.dumps(obj, canonical=True)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
        raise CBOREncodeError(str(e)) from e


def loads(data: BytesLike) -> Any:
    """Decode CBOR *data* (bytes-like) into Python objects."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("CBOR input must be bytes-like")
    try:
        return cbor2.loads(bytes(data))
    except (cbor2.CBORDecodeError, ValueError) as e:
        raise CBORDecodeError(str(e)) from e


__all__ = ["dumps", "loads", "CBOREncodeError", "CBORDecodeError"]
