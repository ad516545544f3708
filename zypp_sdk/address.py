"""
zypp_sdk.address
================

Account identifier validation.

Format
------
An account identifier is a 32-byte ed25519 public key rendered as base58
text (Bitcoin alphabet), e.g. "11111111111111111111111111111111" for the
System Program. A string is an identifier only if every character is in the
alphabet and it decodes to exactly 32 bytes.

This module provides:
- is_valid(s) -> bool            total predicate; never raises
- parse(s, field=None) -> bytes  raw 32-byte key, or AddressError
- validate(s, field=None) -> str (returns the input when valid)
- encode(raw) -> str             32 raw bytes -> base58 text
"""

from __future__ import annotations

from typing import Any, Optional

import base58

from .errors import AddressError

PUBKEY_LENGTH = 32

# base58 text of 32 bytes is never longer than this
_MAX_B58_LEN = 44
_ALPHABET = frozenset(base58.BITCOIN_ALPHABET.decode("ascii"))

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"

__all__ = [
    "PUBKEY_LENGTH",
    "SYSTEM_PROGRAM_ID",
    "encode",
    "is_valid",
    "parse",
    "validate",
]


def _decode(s: Any) -> Optional[bytes]:
    if not isinstance(s, str) or not s or len(s) > _MAX_B58_LEN:
        return None
    if not _ALPHABET.issuperset(s):
        return None
    try:
        raw = base58.b58decode(s)
    except ValueError:
        return None
    if len(raw) != PUBKEY_LENGTH:
        return None
    return raw


def is_valid(s: Any) -> bool:
    """
    True when `s` is a well-formed account identifier.

    Pure and total: any input (including non-strings) yields a bool.
    """
    return _decode(s) is not None


def parse(s: Any, field: Optional[str] = None) -> bytes:
    """Decode an identifier to its 32 raw bytes, raising AddressError naming `field`."""
    raw = _decode(s)
    if raw is None:
        what = field or "address"
        raise AddressError(f"{what} is not a valid base58 account identifier", field=field)
    return raw


def validate(s: Any, field: Optional[str] = None) -> str:
    parse(s, field=field)
    return s


def encode(raw: bytes) -> str:
    if len(raw) != PUBKEY_LENGTH:
        raise AddressError(f"public key must be {PUBKEY_LENGTH} bytes, got {len(raw)}")
    return base58.b58encode(bytes(raw)).decode("ascii")
