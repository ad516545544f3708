from __future__ import annotations

import hashlib
import hmac

from .bytes import BytesLike, ensure_bytes, to_hex

# SHA-256 is the canonical envelope checksum. Digests travel as lowercase hex
# without a 0x prefix.


def sha256(data: BytesLike) -> bytes:
    """Return SHA-256 digest of *data*."""
    h = hashlib.sha256()
    h.update(ensure_bytes(data))
    return h.digest()


def sha256_hex(data: BytesLike, *, prefix: bool = False) -> str:
    return to_hex(sha256(data), prefix=prefix)


def digest_equals(expected_hex: str, data: BytesLike) -> bool:
    """
    Constant-time comparison of a hex digest (any case, optional 0x) against
    the SHA-256 of *data*.
    """
    if not isinstance(expected_hex, str):
        return False
    s = expected_hex.strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    return hmac.compare_digest(s.encode("utf-8"), sha256_hex(data).encode("ascii"))


__all__ = ["sha256", "sha256_hex", "digest_equals"]
