"""
zypp_sdk.envelope
-----------------

Signed, checksummed package envelopes (header / meta / payload / signatures).

    from zypp_sdk import envelope

    pkg = envelope.encode(header, meta, envelope.make_payload(b"hello"))
    pkg = envelope.sign(pkg, signing_key)
    wire = envelope.dumps(pkg)

    received = envelope.decode(wire)
    envelope.verify(received)        # raises EnvelopeVerificationError
"""

from .codec import decode, dumps, dumps_bytes, encode, make_payload
from .models import (PACKAGE_TYPES, Header, Meta, Package, Payload,
                     SignatureEntry)
from .signing import DOMAIN_TAG, sign, signable_bytes
from .verify import is_verified, payload_matches_type, verify

__all__ = [
    "PACKAGE_TYPES",
    "DOMAIN_TAG",
    "Header",
    "Meta",
    "Payload",
    "SignatureEntry",
    "Package",
    "encode",
    "make_payload",
    "decode",
    "dumps",
    "dumps_bytes",
    "signable_bytes",
    "sign",
    "verify",
    "is_verified",
    "payload_matches_type",
]
