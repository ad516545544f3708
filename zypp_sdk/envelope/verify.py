"""
Envelope verification.

`verify(pkg)` runs the checks below in order and raises the first failure:

  1. checksum   payload.checksum == sha256(raw payload bytes)
  2. expiry     meta.expiry unset, or now <= meta.expiry
  3. signatures every (signer, signature) verifies over `signable_bytes`
  4. type       raw bytes are consistent with header.type (skipped when
                payload.encrypted, since ciphertext is opaque)

Verification is all-or-nothing and has no side effects, so verifying the same
package twice gives the same answer.
"""

from __future__ import annotations

import json
import time
from typing import Callable, Dict, Optional

from ..errors import (ChecksumMismatchError, EnvelopeVerificationError,
                      ExpiredError, InvalidSignatureError,
                      TypePayloadMismatchError)
from ..logging import get_logger
from ..tx.encode import parse_transaction
from ..utils.cbor import loads as cbor_loads
from ..utils.hash import digest_equals
from .models import Package
from .signing import signable_bytes, verify_entry

log = get_logger(__name__)


# -----------------------------------------------------------------------------
# Type / payload consistency
# -----------------------------------------------------------------------------


def _is_transaction(raw: bytes) -> bool:
    try:
        parse_transaction(raw)
    except ValueError:
        return False
    return True


def _is_message(raw: bytes) -> bool:
    try:
        raw.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def _is_asset(raw: bytes) -> bool:
    # asset descriptor: a non-empty JSON object
    try:
        obj = json.loads(raw.decode("utf-8"))
    except (ValueError, RecursionError):
        return False
    return isinstance(obj, dict) and bool(obj)


def _is_multi(raw: bytes) -> bool:
    # CBOR array of opaque sub-payloads; items are not inspected
    try:
        items = cbor_loads(raw)
    except ValueError:
        return False
    return isinstance(items, list) and all(isinstance(i, bytes) for i in items)


TYPE_CHECKS: Dict[str, Callable[[bytes], bool]] = {
    "transaction": _is_transaction,
    "message": _is_message,
    "asset": _is_asset,
    "multi": _is_multi,
}


def payload_matches_type(package_type: str, raw: bytes) -> bool:
    check = TYPE_CHECKS.get(package_type)
    return check is not None and check(raw)


# -----------------------------------------------------------------------------
# verify
# -----------------------------------------------------------------------------


def verify(pkg: Package, *, now: Optional[int] = None) -> None:
    """
    Raise the first failing `EnvelopeVerificationError`, or return None.

    `now` defaults to the current unix time in seconds.
    """
    raw = pkg.payload.raw()

    if not digest_equals(pkg.payload.checksum or "", raw):
        raise ChecksumMismatchError("payload checksum does not match data", field="payload.checksum")

    expiry = pkg.meta.expiry
    if expiry is not None:
        now = int(time.time()) if now is None else now
        if now > expiry:
            raise ExpiredError(f"package expired at {expiry} (now {now})", field="meta.expiry")

    if pkg.signatures:
        message = signable_bytes(pkg)
        for entry in pkg.signatures:
            if not verify_entry(entry, message):
                raise InvalidSignatureError(f"signature by {entry.signer} does not verify", signer=entry.signer)

    if not pkg.payload.encrypted and not payload_matches_type(pkg.header.type, raw):
        raise TypePayloadMismatchError(
            f"payload is not a valid {pkg.header.type}", field="payload.data"
        )


def is_verified(pkg: Package, *, now: Optional[int] = None) -> bool:
    try:
        verify(pkg, now=now)
    except EnvelopeVerificationError as e:
        log.debug("package rejected", extra={"package_id": pkg.header.id, "reason": e.reason.value})
        return False
    return True


__all__ = ["TYPE_CHECKS", "payload_matches_type", "verify", "is_verified"]
