from __future__ import annotations

import regex as regex_lib

# ------------------------------
# Limits
# ------------------------------
MAX_INPUT_BYTES = 2_000_000

# ------------------------------
# Errors
# ------------------------------
class PalsError(ValueError):
    """Base class for codec and XOR input errors."""

class InvalidInput(PalsError):
    """Hex text has an odd number of characters."""

class ParseError(PalsError):
    """A two-character group is not a hex digit pair."""

class LengthMismatch(PalsError):
    """Fixed-XOR operands differ in length."""

# ------------------------------
# Utilities
# ------------------------------
def clamp_bytes(b: bytes, max_len: int = MAX_INPUT_BYTES) -> bytes:
    if len(b) > max_len:
        return b[:max_len]
    return b

def try_decode_utf8(b: bytes) -> str:
    try:
        return b.decode("utf-8")
    except UnicodeDecodeError:
        return b.decode("latin-1", errors="replace")

# ------------------------------
# Hex
# ------------------------------
HEX_PAIR = regex_lib.compile(r"[0-9A-Fa-f]{2}")
HEX_TEXT = regex_lib.compile(r"(?:[0-9A-Fa-f]{2})+")

def hex_decode(text: str) -> bytes:
    """Decode hex text into bytes, most-significant nibble first.

    Raises InvalidInput for odd-length text and ParseError for the first
    group that is not two hex digits. Upper and lower case are accepted.
    """
    if len(text) % 2 != 0:
        raise InvalidInput(f"hex text must have an even number of characters, got {len(text)}")
    out = bytearray()
    for i in range(0, len(text), 2):
        pair = text[i:i+2]
        if HEX_PAIR.fullmatch(pair) is None:
            raise ParseError(f"invalid hex digits {pair!r} at offset {i}")
        out.append(int(pair, 16))
    return bytes(out)

def hex_encode(data: bytes) -> str:
    return "".join(f"{b:02x}" for b in data)

def clean_hex(text: str) -> str:
    # pasted input often wraps or groups digits
    return text.strip().replace(" ", "").replace("\r", "").replace("\n", "")

def looks_like_hex(s: str) -> bool:
    return HEX_TEXT.fullmatch(clean_hex(s)) is not None

# ------------------------------
# Base64
# ------------------------------
B64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
B64_TEXT = regex_lib.compile(r"[A-Za-z0-9+/]*={0,2}")

def base64_encode(data: bytes) -> str:
    """Standard base64 with '=' padding, built on the 64-character table."""
    out = []
    for start in range(0, len(data), 3):
        chunk = data[start:start+3]
        group = 0
        for shift, byte in enumerate(chunk):
            group |= byte << (16 - 8*shift)
        for shift in (18, 12, 6, 0):
            out.append(B64_ALPHABET[(group >> shift) & 0x3F])
    rem = len(data) % 3
    if rem:
        # the zero-padded tail characters are replaced by '=' markers
        del out[len(out) - (3 - rem):]
        out.append("=" * (3 - rem))
    return "".join(out)

def hex_to_base64(text: str) -> str:
    return base64_encode(hex_decode(text))

def looks_like_base64(s: str) -> bool:
    s = "".join(s.split())
    if len(s) < 8 or len(s) % 4 != 0:
        return False
    return B64_TEXT.fullmatch(s) is not None
