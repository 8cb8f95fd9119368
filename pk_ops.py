from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple
import json

from provide.foundation import logger

from pk_codec import (
    LengthMismatch,
    base64_encode,
    clean_hex,
    hex_decode,
    hex_encode,
    looks_like_base64,
    looks_like_hex,
    try_decode_utf8,
)

SPACE = 0x20
CONTROL_CHAR_LIMIT = 32  # ascii values below space are non-printable

# ------------------------------
# Fixed XOR
# ------------------------------
def fixed_xor(a: bytes, b: bytes) -> bytes:
    if len(a) != len(b):
        raise LengthMismatch(f"operands differ in length: {len(a)} != {len(b)}")
    return bytes(x ^ y for x, y in zip(a, b))

def fixed_xor_hex(a_hex: str, b_hex: str) -> str:
    return hex_encode(fixed_xor(hex_decode(a_hex), hex_decode(b_hex)))

# ------------------------------
# Single-byte XOR breaker
# ------------------------------
def byte_frequency(data: bytes) -> Counter:
    return Counter(data)

def most_frequent_byte(data: bytes) -> int:
    """Most common byte value; equal counts go to the smallest value.

    Raises ValueError for empty input, which has no most common byte.
    """
    if not data:
        raise ValueError("cannot rank the bytes of empty input")
    freq = byte_frequency(data)
    return min(freq, key=lambda value: (-freq[value], value))

def find_key(ciphertext: bytes) -> int:
    """Guess the key byte, assuming the most frequent plaintext byte is a space.

    This is a heuristic: short or non-English plaintexts give a wrong key
    without any error. Empty input yields key 0.
    """
    if not ciphertext:
        return 0
    top = most_frequent_byte(ciphertext)
    key = top ^ SPACE
    logger.debug(f"most frequent byte 0x{top:02x}, recovered key 0x{key:02x}")
    return key

def single_byte_xor(data: bytes, key: int) -> bytes:
    return bytes(b ^ key for b in data)

def is_control_char(value: int) -> bool:
    return value < CONTROL_CHAR_LIMIT

def decrypt_with_key(ciphertext: bytes) -> Tuple[int, str]:
    """Recover the key once and return it with the filtered plaintext."""
    key = find_key(ciphertext)
    plain = single_byte_xor(ciphertext, key)
    return key, "".join(chr(b) for b in plain if not is_control_char(b))

def decrypt(ciphertext: bytes) -> str:
    """Decrypt with the recovered key, dropping control characters."""
    return decrypt_with_key(ciphertext)[1]

def break_single_byte_xor(ciphertext_hex: str) -> str:
    return decrypt(hex_decode(ciphertext_hex))

# ------------------------------
# Operation registry
# ------------------------------
@dataclass
class Operation:
    key: str
    name: str
    category: str
    fn: Callable[[bytes, Dict[str, Any]], Tuple[bytes, Dict[str, Any]]]
    params_schema: Dict[str, Any] = field(default_factory=dict)
    output_hint: str = "auto"  # "auto" | "text" | "hex" | "json"

OPS: Dict[str, Operation] = {}

def register(op: Operation):
    OPS[op.key] = op

def _hex_param(p: Dict[str, Any], name: str) -> bytes:
    value = clean_hex(str(p.get(name, "")))
    if not value:
        raise ValueError(f"{name} (hex) required")
    return hex_decode(value)

# --- Encoding ---
def hex_to_bin_op(data: bytes, p: Dict[str, Any]):
    return hex_decode(clean_hex(try_decode_utf8(data))), {}

def bin_to_hex_op(data: bytes, p: Dict[str, Any]):
    return hex_encode(data).encode("ascii"), {"format":"hex"}

def base64_encode_op(data: bytes, p: Dict[str, Any]):
    return base64_encode(data).encode("ascii"), {}

# --- XOR ---
def fixed_xor_op(data: bytes, p: Dict[str, Any]):
    return fixed_xor(data, _hex_param(p, "other")), {}

def single_byte_xor_op(data: bytes, p: Dict[str, Any]):
    key = _hex_param(p, "key")
    if len(key) != 1:
        raise ValueError("key must be exactly one byte (two hex digits)")
    return single_byte_xor(data, key[0]), {"key": key[0]}

def find_key_op(data: bytes, p: Dict[str, Any]):
    key = find_key(data)
    return f"{key:02x}".encode("ascii"), {"key": key}

def break_op(data: bytes, p: Dict[str, Any]):
    key, text = decrypt_with_key(data)
    # one byte per character, so latin-1 is the lossless text form
    return text.encode("latin-1"), {"key": key}

# --- Analysis ---
def byte_freq_op(data: bytes, p: Dict[str, Any]):
    freq = byte_frequency(data)
    ranked = sorted(freq.items(), key=lambda kv: (-kv[1], kv[0]))
    out = {f"{value:02x}": count for value, count in ranked}
    return json.dumps(out, indent=2).encode("utf-8"), {"format":"json"}

# Register ops
register(Operation("hex2bin","Hex → Bytes","Encoding", hex_to_bin_op))
register(Operation("bin2hex","Bytes → Hex","Encoding", bin_to_hex_op, output_hint="hex"))
register(Operation("b64e","Base64 Encode","Encoding", base64_encode_op, output_hint="text"))

register(Operation("fxor","Fixed XOR","XOR", fixed_xor_op, params_schema={"other":""}))
register(Operation("sbx","Single-byte XOR","XOR", single_byte_xor_op, params_schema={"key":""}))
register(Operation("sbx_key","Find Single-byte XOR Key","XOR", find_key_op, output_hint="text"))
register(Operation("sbx_break","Break Single-byte XOR","XOR", break_op, output_hint="text"))

register(Operation("freq","Byte Frequency (JSON)","Analysis", byte_freq_op, output_hint="json"))

# ------------------------------
# Magic detection
# ------------------------------
def magic_detect(sample: str) -> List[Tuple[str, float]]:
    hints: List[Tuple[str, float]] = []
    if looks_like_hex(sample): hints.append(("Hex", 0.9))
    if looks_like_base64(sample): hints.append(("Base64", 0.7))
    return sorted(hints, key=lambda x: x[1], reverse=True)
