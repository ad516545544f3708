"""
Utility helpers for the Python SDK.

Re-exports:
- bytes: hex / base64 helpers
- hash: SHA-256 checksum helpers
- cbor: deterministic CBOR (de)serialization
- retry: bounded retry with backoff
"""

from .bytes import (decode_text, encode_text, ensure_bytes, from_b64, from_hex,
                    to_b64, to_hex)
from .cbor import dumps as cbor_dumps
from .cbor import loads as cbor_loads
from .hash import digest_equals, sha256, sha256_hex
from .retry import RetryError, retry_call

__all__ = [
    # bytes
    "to_hex",
    "from_hex",
    "to_b64",
    "from_b64",
    "encode_text",
    "decode_text",
    "ensure_bytes",
    # hash
    "sha256",
    "sha256_hex",
    "digest_equals",
    # cbor
    "cbor_dumps",
    "cbor_loads",
    # retry
    "RetryError",
    "retry_call",
]
