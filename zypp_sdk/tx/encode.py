"""
zypp_sdk.tx.encode
==================

Wire helpers for ledger transactions, on top of `solders`.

This module provides:
- `parse_transaction(raw)` -> `VersionedTransaction` (legacy or v0 wire form)
- `to_base64(raw)` / `from_base64(text)` -> transport text form
- `message_bytes(tx)` -> the bytes every required signer signs
- `signer_keys(tx)` -> the required signers, fee payer first
- `signature_check(tx)` -> per-signer validity, used before relaying
- `require_fully_signed(tx)` -> raises ValidationError on the first bad slot
- `partial_sign(tx, signing_key)` -> fill the slot belonging to a key
- `first_signature(tx)` -> the signature the network identifies the tx by

Design notes
------------
* Unsigned transactions carry all-zero signature slots, one per required
  signer (`Transaction.new_unsigned`), so wallets can fill them in place.
* Parsing is strict: the bytes must re-serialize to exactly the input, the
  message must sanitize, and the signature count must equal the header's
  required-signer count.
"""

from __future__ import annotations

from typing import List, Tuple, Union

import nacl.signing
from solders.errors import BincodeError
from solders.message import to_bytes_versioned
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import SanitizeError, Transaction, VersionedTransaction

from ..errors import ValidationError
from ..utils.bytes import from_b64, to_b64

AnyTransaction = Union[Transaction, VersionedTransaction]


def to_base64(raw: bytes) -> str:
    return to_b64(raw)


def from_base64(text: str, *, field: str = "signedTx") -> bytes:
    """Strict base64 decode; raises InvalidEncodingError naming `field`."""
    return from_b64(text, field=field)


def _versioned(tx: AnyTransaction) -> VersionedTransaction:
    if isinstance(tx, Transaction):
        return VersionedTransaction.from_legacy(tx)
    return tx


# -----------------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------------


def parse_transaction(raw: bytes) -> VersionedTransaction:
    """
    Parse wire bytes (legacy or v0) into a `VersionedTransaction`.

    Raises:
        ValueError on any structural problem.
    """
    data = bytes(raw)
    try:
        tx = VersionedTransaction.from_bytes(data)
        tx.sanitize()
    except (BincodeError, SanitizeError, ValueError) as e:
        raise ValueError(f"malformed transaction: {e}") from e
    if bytes(tx) != data:
        raise ValueError("transaction has trailing or non-canonical bytes")
    required = tx.message.header.num_required_signatures
    if len(tx.signatures) != required:
        raise ValueError(f"expected {required} signatures, found {len(tx.signatures)}")
    return tx


# -----------------------------------------------------------------------------
# Signatures
# -----------------------------------------------------------------------------


def message_bytes(tx: AnyTransaction) -> bytes:
    return to_bytes_versioned(_versioned(tx).message)


def signer_keys(tx: AnyTransaction) -> List[Pubkey]:
    msg = _versioned(tx).message
    return list(msg.account_keys[: msg.header.num_required_signatures])


def signature_check(tx: AnyTransaction) -> List[Tuple[str, bool]]:
    """Return (signer, ok) for every required signer, in order."""
    vtx = _versioned(tx)
    msg = message_bytes(vtx)
    empty = Signature.default()
    return [
        (str(key), sig != empty and sig.verify(key, msg))
        for key, sig in zip(signer_keys(vtx), vtx.signatures)
    ]


def require_fully_signed(tx: AnyTransaction, *, field: str = "signedTx") -> None:
    for signer, ok in signature_check(tx):
        if not ok:
            raise ValidationError(f"missing or invalid signature for {signer}", field=field)


def partial_sign(tx: AnyTransaction, signing_key: nacl.signing.SigningKey) -> VersionedTransaction:
    """Return a copy with the slot belonging to `signing_key` filled in."""
    vtx = _versioned(tx)
    pub = Pubkey.from_bytes(bytes(signing_key.verify_key))
    signers = signer_keys(vtx)
    if pub not in signers:
        raise ValueError(f"{pub} is not a required signer")
    sig = Signature.from_bytes(signing_key.sign(message_bytes(vtx)).signature)
    sigs = list(vtx.signatures)
    sigs[signers.index(pub)] = sig
    return VersionedTransaction.populate(vtx.message, sigs)


def first_signature(tx: AnyTransaction) -> str:
    return str(_versioned(tx).signatures[0])


__all__ = [
    "parse_transaction",
    "to_base64",
    "from_base64",
    "message_bytes",
    "signer_keys",
    "signature_check",
    "require_fully_signed",
    "partial_sign",
    "first_signature",
]
