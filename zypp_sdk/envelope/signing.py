"""
Envelope signing.

Signable bytes are defined the same way for every package type, `multi`
included:

    DOMAIN_TAG || canonical_cbor({"header": ..., "meta": ..., "payload": ...})

Signatures are excluded, so parties can sign in any order. Unset optional meta
fields are omitted before encoding, which keeps the bytes identical across a
JSON round trip.
"""

from __future__ import annotations

import re
from typing import Optional

import base58
import nacl.exceptions
import nacl.signing

from .. import address
from ..utils.cbor import dumps as cbor_dumps
from .models import Package, SignatureEntry

DOMAIN_TAG = b"zypp:package:v1\x00"
SIGNATURE_LENGTH = 64

_HEX_SIG = re.compile(r"^(0x)?[0-9a-fA-F]{128}$")


def signable_bytes(pkg: Package) -> bytes:
    return DOMAIN_TAG + cbor_dumps(pkg.body())


def decode_signature(text: str) -> Optional[bytes]:
    """64 raw bytes from hex or base58 text, or None when it is neither."""
    if _HEX_SIG.match(text):
        return bytes.fromhex(text[2:] if text.startswith("0x") else text)
    try:
        raw = base58.b58decode(text)
    except ValueError:
        return None
    return raw if len(raw) == SIGNATURE_LENGTH else None


def verify_entry(entry: SignatureEntry, message: bytes) -> bool:
    sig = decode_signature(entry.signature)
    if sig is None:
        return False
    try:
        nacl.signing.VerifyKey(address.parse(entry.signer)).verify(message, sig)
    except nacl.exceptions.BadSignatureError:
        return False
    return True


def sign(pkg: Package, keypair: nacl.signing.SigningKey) -> Package:
    """Return a copy of `pkg` with one more (signer, signature) pair appended."""
    sig = keypair.sign(signable_bytes(pkg)).signature
    entry = SignatureEntry(
        signer=address.encode(bytes(keypair.verify_key)),
        signature=base58.b58encode(sig).decode("ascii"),
    )
    return pkg.model_copy(update={"signatures": [*pkg.signatures, entry]})


__all__ = ["DOMAIN_TAG", "signable_bytes", "decode_signature", "verify_entry", "sign"]
