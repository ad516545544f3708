from __future__ import annotations

import base64
import binascii
from typing import Union

from ..errors import InvalidEncodingError

BytesLike = Union[bytes, bytearray, memoryview]

TEXT_ENCODINGS = ("base64", "hex")


def ensure_bytes(data: Union[BytesLike, str]) -> bytes:
    """
    Ensure input is bytes.

    Accepts:
      - bytes / bytearray / memoryview  -> bytes(data)
      - str: treated as hex; optional '0x' prefix; even-length enforced
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return from_hex(data)
    raise TypeError(f"Unsupported type for ensure_bytes: {type(data)!r}")


def to_hex(b: BytesLike, prefix: bool = False) -> str:
    """
    Bytes -> lowercase hex string. No '0x' prefix unless asked for.
    """
    s = bytes(b).hex()
    return f"0x{s}" if prefix else s


def from_hex(s: str, *, field: str | None = None) -> bytes:
    """
    Hex string (optionally '0x' prefixed) -> bytes.

    Enforces even length; case-insensitive.
    """
    if not isinstance(s, str):
        raise InvalidEncodingError("hex input must be a string", field=field)
    if s.startswith(("0x", "0X")):
        s = s[2:]
    if len(s) % 2 != 0:
        raise InvalidEncodingError("hex string must have even length", field=field)
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise InvalidEncodingError(f"invalid hex string: {e}", field=field, cause=e) from e


def to_b64(b: BytesLike) -> str:
    return base64.b64encode(bytes(b)).decode("ascii")


def from_b64(s: str, *, field: str | None = None) -> bytes:
    """
    Strict base64 -> bytes. Characters outside the alphabet, missing or excess
    padding and empty input are all rejected: the text must be exactly the
    canonical encoding of the bytes it decodes to.
    """
    if not isinstance(s, str) or not s.strip():
        raise InvalidEncodingError("base64 input must be a non-empty string", field=field)
    text = s.strip()
    try:
        raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncodingError(f"invalid base64 string: {e}", field=field, cause=e) from e
    if to_b64(raw) != text:
        raise InvalidEncodingError("invalid base64 string: non-canonical padding", field=field)
    return raw


def encode_text(raw: BytesLike, encoding: str) -> str:
    """Encode raw bytes under one of TEXT_ENCODINGS."""
    if encoding == "base64":
        return to_b64(raw)
    if encoding == "hex":
        return to_hex(raw)
    raise InvalidEncodingError(f"unsupported encoding {encoding!r}", field="encoding")


def decode_text(data: str, encoding: str, *, field: str | None = None) -> bytes:
    """Undo one of TEXT_ENCODINGS. Empty data decodes to empty bytes."""
    if encoding == "base64":
        if data == "":
            return b""
        return from_b64(data, field=field)
    if encoding == "hex":
        return from_hex(data, field=field)
    raise InvalidEncodingError(f"unsupported encoding {encoding!r}", field="encoding")


__all__ = [
    "BytesLike",
    "TEXT_ENCODINGS",
    "ensure_bytes",
    "to_hex",
    "from_hex",
    "to_b64",
    "from_b64",
    "encode_text",
    "decode_text",
]
