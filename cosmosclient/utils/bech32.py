"""
Bech32 codec (BIP-0173), plus simple address helpers.

Cosmos account addresses are classic Bech32 strings: a human readable prefix
(HRP, e.g. "cosmos"), the separator "1", the 8→5 bit converted address bytes
and a 6 character checksum.

Typical usage
-------------
>>> payload = bytes(20)
>>> addr = encode_bytes("cosmos", payload)
>>> hrp, out = decode_bytes(addr)
>>> assert hrp == "cosmos" and out == payload

Helpers
-------
- encode(hrp, data5) -> string (data must be 5-bit ints 0..31)
- decode(addr) -> (hrp, data5)   (data5 is list[int])
- encode_bytes(hrp, payload) -> string (8→5 convertbits)
- decode_bytes(addr, expected_hrp=None) -> (hrp, payload: bytes)
- is_valid_address(addr, expected_hrp=None) -> bool

Error messages follow the wording of the Go bech32 package used by Cosmos
nodes (e.g. "invalid bech32 string length 7") so errors read the same on
both sides of the wire.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

__all__ = [
    "encode",
    "decode",
    "encode_bytes",
    "decode_bytes",
    "convertbits",
    "is_valid_address",
    "Bech32Error",
    "DEFAULT_HRP",
    "MAX_LENGTH",
]

DEFAULT_HRP = "cosmos"
MAX_LENGTH = 90

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
CHARSET_REV = {c: i for i, c in enumerate(CHARSET)}

_BECH32_CONST = 1


class Bech32Error(ValueError):
    pass


def _polymod(values: Sequence[int]) -> int:
    """Internal bech32 polymod checksum."""
    GENERATORS = (0x3b6a57b2, 0x26508e6d, 0x1ea119fa, 0x3d4233dd, 0x2a1462b3)
    chk = 1
    for v in values:
        b = (chk >> 25) & 0xFF
        chk = ((chk & 0x1FFFFFF) << 5) ^ v
        for i in range(5):
            chk ^= GENERATORS[i] if ((b >> i) & 1) else 0
    return chk


def _hrp_expand(hrp: str) -> List[int]:
    return [ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]


def _create_checksum(hrp: str, data: Sequence[int]) -> List[int]:
    values = _hrp_expand(hrp) + list(data)
    pm = _polymod(values + [0, 0, 0, 0, 0, 0]) ^ _BECH32_CONST
    return [(pm >> 5 * (5 - i)) & 31 for i in range(6)]


def encode(hrp: str, data5: Iterable[int]) -> str:
    """
    Encode to bech32. `data5` must be 5-bit integers (0..31).
    """
    if not hrp or any(ord(c) < 33 or ord(c) > 126 for c in hrp):
        raise Bech32Error(f"invalid human-readable part: {hrp!r}")
    hrp = hrp.lower()
    data5 = list(data5)
    if any((v < 0 or v > 31) for v in data5):
        raise Bech32Error("data5 values must be in 0..31")
    checksum = _create_checksum(hrp, data5)
    return hrp + "1" + "".join(CHARSET[d] for d in (data5 + checksum))


def decode(addr: str, *, limit: int = MAX_LENGTH) -> Tuple[str, List[int]]:
    """
    Decode a bech32 string. Returns (hrp, data5).
    Raises Bech32Error on failure.
    """
    if len(addr) < 8 or len(addr) > limit:
        raise Bech32Error(f"invalid bech32 string length {len(addr)}")
    for c in addr:
        if ord(c) < 33 or ord(c) > 126:
            raise Bech32Error(f"invalid character in string: {c!r}")
    if addr.lower() != addr and addr.upper() != addr:
        raise Bech32Error("string not all lowercase or all uppercase")
    addr = addr.lower()
    pos = addr.rfind("1")
    if pos < 1 or pos + 7 > len(addr):
        raise Bech32Error(f"invalid separator index {pos}")
    hrp, rest = addr[:pos], addr[pos + 1 :]
    data: List[int] = []
    for c in rest:
        if c not in CHARSET_REV:
            raise Bech32Error(f"invalid character not part of charset: {ord(c)}")
        data.append(CHARSET_REV[c])
    if _polymod(_hrp_expand(hrp) + data) != _BECH32_CONST:
        expected = "".join(CHARSET[d] for d in _create_checksum(hrp, data[:-6]))
        raise Bech32Error(f"invalid checksum (expected {expected} got {rest[-6:]})")
    return hrp, data[:-6]


def convertbits(data: Iterable[int], from_bits: int, to_bits: int, *, pad: bool = True) -> List[int]:
    """
    General power-of-two base conversion (e.g., 8→5 or 5→8).
    Returns list of integers in the target base.
    """
    acc = 0
    bits = 0
    ret: List[int] = []
    maxv = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1
    for value in data:
        if value < 0 or value >> from_bits:
            raise Bech32Error("invalid value for convertbits")
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            ret.append((acc >> bits) & maxv)
    if pad:
        if bits:
            ret.append((acc << (to_bits - bits)) & maxv)
    else:
        if bits >= from_bits or ((acc << (to_bits - bits)) & maxv):
            raise Bech32Error("non-zero padding")
    return ret


def encode_bytes(hrp: str, payload: bytes) -> str:
    """
    Convenience: 8-bit payload → Bech32 string via 8→5 conversion.
    """
    return encode(hrp, convertbits(payload, 8, 5, pad=True))


def decode_bytes(addr: str, *, expected_hrp: Optional[str] = None) -> Tuple[str, bytes]:
    """
    Decode an address produced by `encode_bytes`. Validates checksum and (optionally) HRP.
    Returns (hrp, payload_bytes).
    """
    hrp, data5 = decode(addr)
    if expected_hrp is not None and hrp != expected_hrp:
        raise Bech32Error(f"invalid Bech32 prefix; expected {expected_hrp}, got {hrp}")
    return hrp, bytes(convertbits(data5, 5, 8, pad=False))


def is_valid_address(addr: str, expected_hrp: Optional[str] = None) -> bool:
    try:
        decode_bytes(addr, expected_hrp=expected_hrp)
    except Bech32Error:
        return False
    return True
