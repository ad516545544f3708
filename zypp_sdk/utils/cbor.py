"""
Deterministic (canonical) CBOR helpers.

Thin wrapper over `cbor2` in canonical mode (RFC 8949 deterministic map
ordering, minimal integer encoding). Used for envelope signable bytes and
`multi` sub-payload sequences.

API
---
- dumps(obj) -> bytes
- loads(data: bytes|bytearray|memoryview) -> object
- CBOREncodeError / CBORDecodeError
"""

from __future__ import annotations

import io
from typing import Any

import cbor2

from .bytes import BytesLike


class CBOREncodeError(ValueError):
    pass


class CBORDecodeError(ValueError):
    pass


def dumps(obj: Any) -> bytes:
    """Encode *obj* to deterministic CBOR bytes."""
    try:
        return cbor2.dumps(obj, canonical=True)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
        raise CBOREncodeError(str(e)) from e


def loads(data: BytesLike) -> Any:
    """Decode exactly one CBOR item from *data*; trailing bytes are an error."""
    raw = bytes(data)
    fp = io.BytesIO(raw)
    try:
        obj = cbor2.CBORDecoder(fp).decode()
    except (cbor2.CBORDecodeError, TypeError, ValueError, EOFError) as e:
        raise CBORDecodeError(str(e)) from e
    if fp.tell() != len(raw):
        raise CBORDecodeError("trailing bytes after CBOR item")
    return obj


__all__ = ["dumps", "loads", "CBOREncodeError", "CBORDecodeError"]
