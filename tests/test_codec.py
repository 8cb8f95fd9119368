import base64
import pytest
from pk_codec import (
    MAX_INPUT_BYTES, InvalidInput, ParseError, PalsError, base64_encode, clamp_bytes, clean_hex, hex_decode,
    hex_encode, hex_to_base64, looks_like_base64, looks_like_hex,
)

def test_hex_decode_ok():
    assert hex_decode("aabbccdd1122334455") == bytes([0xaa,0xbb,0xcc,0xdd,0x11,0x22,0x33,0x44,0x55])
    assert hex_decode("deadbeefcafe") == bytes([0xde,0xad,0xbe,0xef,0xca,0xfe])
    assert hex_decode("2137") == bytes([0x21,0x37])
    assert hex_decode("") == b""

def test_hex_decode_uppercase():
    assert hex_decode("DEADbeef") == b"\xde\xad\xbe\xef"

@pytest.mark.parametrize("text", ["0", "000", "abc"])
def test_hex_decode_odd_length(text):
    with pytest.raises(InvalidInput):
        hex_decode(text)

@pytest.mark.parametrize("text", ["abcdefgh", "zz", "+f", " f", "0x", "1_"])
def test_hex_decode_bad_digits(text):
    with pytest.raises(ParseError):
        hex_decode(text)

def test_parse_error_names_offset():
    with pytest.raises(ParseError, match="offset 2"):
        hex_decode("00g0")

def test_errors_are_value_errors():
    assert issubclass(PalsError, ValueError)
    with pytest.raises(ValueError):
        hex_decode("elo")

def test_hex_encode_lowercase():
    assert hex_encode(b"\xde\xad\xbe\xef") == "deadbeef"
    assert hex_encode(b"") == ""
    assert hex_encode(b"\x00\x0f") == "000f"

def test_hex_roundtrip():
    s = b"hello\x00world" + bytes(range(256))
    assert hex_decode(hex_encode(s)) == s
    assert hex_encode(hex_decode("49276D206B")) == "49276d206b"

def test_clean_hex():
    assert clean_hex("  de ad\nbe ef\r\n") == "deadbeef"
    assert looks_like_hex("de ad be ef")
    assert not looks_like_hex("abc")
    assert not looks_like_hex("")

@pytest.mark.parametrize("data,expected", [
    (b"", ""),
    (b"\x00", "AA=="),
    (b"\x00\x00", "AAA="),
    (b"\x00\x00\x00", "AAAA"),
    (b"Man", "TWFu"),
    (b"Ma", "TWE="),
    (b"M", "TQ=="),
])
def test_base64_padding(data, expected):
    assert base64_encode(data) == expected

def test_base64_matches_stdlib():
    for n in range(0, 40):
        data = bytes((i * 37 + 11) % 256 for i in range(n))
        assert base64_encode(data) == base64.b64encode(data).decode("ascii")

def test_hex_to_base64():
    assert hex_to_base64(
        "49276d206b696c6c696e6720796f757220627261696e206c696b65206120706f69736f6e6f7573206d757368726f6f6d"
    ) == "SSdtIGtpbGxpbmcgeW91ciBicmFpbiBsaWtlIGEgcG9pc29ub3VzIG11c2hyb29t"

def test_hex_to_base64_propagates_errors():
    with pytest.raises(InvalidInput):
        hex_to_base64("123")

def test_looks_like_base64():
    assert looks_like_base64("aGVsbG8gd29ybGQ=") is True
    assert looks_like_base64("not base64!") is False
    assert looks_like_base64("abc") is False

def test_clamp_bytes_boundary():
    assert clamp_bytes(b"x" * MAX_INPUT_BYTES) == b"x" * MAX_INPUT_BYTES
    assert len(clamp_bytes(b"x" * (MAX_INPUT_BYTES + 1))) == MAX_INPUT_BYTES
    assert clamp_bytes(b"abcdef", max_len=4) == b"abcd"
    assert clamp_bytes(b"") == b""
