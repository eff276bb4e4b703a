import pytest

from cosmosclient.utils.bech32 import (Bech32Error, decode, decode_bytes, encode, encode_bytes,
                                       is_valid_address)


def test_known_vector_decodes():
    # BIP-0173 valid test vectors
    assert decode("A12UEL5L") == ("a", [])
    assert decode("a12uel5l") == ("a", [])


def test_address_roundtrip():
    payload = bytes(range(20))
    addr = encode_bytes("cosmos", payload)

    assert addr.startswith("cosmos1")
    assert len(addr) == 45
    assert decode_bytes(addr) == ("cosmos", payload)
    assert decode_bytes(addr, expected_hrp="cosmos")[1] == payload


def test_encode_matches_decode_of_5bit_data():
    data5 = [0, 1, 2, 31, 30]
    assert decode(encode("hrp", data5)) == ("hrp", data5)


@pytest.mark.parametrize(
    "addr,message",
    [
        ("unknown", "invalid bech32 string length 7"),
        ("x" * 91, "invalid bech32 string length 91"),
        ("Cosmos1qqqqqqqqqq", "string not all lowercase or all uppercase"),
        ("qqqqqqqqqqqq", "invalid separator index -1"),
        ("cosmos1qqqqq", "invalid separator index 6"),
    ],
)
def test_decode_errors(addr, message):
    with pytest.raises(Bech32Error) as excinfo:
        decode(addr)
    assert str(excinfo.value) == message


def test_bad_character_and_checksum():
    addr = encode_bytes("cosmos", b"\x00" * 20)

    with pytest.raises(Bech32Error, match="invalid character not part of charset"):
        decode(addr[:-1] + "b")
    flipped = addr[:-1] + ("q" if addr[-1] != "q" else "p")
    with pytest.raises(Bech32Error, match="invalid checksum"):
        decode(flipped)


def test_prefix_mismatch_message():
    addr = encode_bytes("test", b"\x00" * 20)

    with pytest.raises(Bech32Error) as excinfo:
        decode_bytes(addr, expected_hrp="cosmos")
    assert str(excinfo.value) == "invalid Bech32 prefix; expected cosmos, got test"


def test_is_valid_address():
    addr = encode_bytes("cosmos", b"\x07" * 20)
    assert is_valid_address(addr)
    assert is_valid_address(addr, expected_hrp="cosmos")
    assert not is_valid_address(addr, expected_hrp="osmo")
    assert not is_valid_address("cosmos1nope")
