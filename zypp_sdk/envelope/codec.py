"""
Envelope codec: assemble, parse and serialize package envelopes.

API
---
- encode(header, meta, payload, signatures=()) -> Package
- make_payload(raw, *, encoding="base64", encrypted=False) -> Payload
- decode(raw: bytes | str | Mapping) -> Package
- dumps(pkg) -> str / dumps_bytes(pkg) -> bytes

Every structural problem surfaces as `MalformedEnvelopeError`; nothing here
checks checksums, expiry or signatures (see `verify`).
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping, Union

import pydantic

from ..errors import InvalidEncodingError, MalformedEnvelopeError
from ..utils.bytes import BytesLike, encode_text
from ..utils.hash import sha256_hex
from .models import Header, Meta, Package, Payload, SignatureEntry

PackageInput = Union[bytes, bytearray, str, Mapping[str, Any]]


def _describe(err: pydantic.ValidationError) -> str:
    first = err.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))


def _first_field(err: pydantic.ValidationError, section: str) -> str:
    loc = err.errors()[0].get("loc", ())
    return ".".join([section, *(str(p) for p in loc)])


def _model(cls: type, value: Any, section: str) -> Any:
    if isinstance(value, cls):
        return value
    if not isinstance(value, Mapping):
        raise MalformedEnvelopeError(f"{section} must be an object", field=section)
    try:
        return cls.model_validate(dict(value))
    except pydantic.ValidationError as e:
        raise MalformedEnvelopeError(
            f"invalid {section}: {_describe(e)}", field=_first_field(e, section), cause=e
        ) from e


def make_payload(raw: BytesLike, *, encoding: str = "base64", encrypted: bool = False) -> Payload:
    """Encode raw bytes into a payload with its checksum already set."""
    try:
        data = encode_text(raw, encoding)
    except InvalidEncodingError as e:
        raise MalformedEnvelopeError(e.message, field="payload.encoding", cause=e) from e
    return Payload(encrypted=encrypted, encoding=encoding, data=data, checksum=sha256_hex(raw))


def encode(
    header: Union[Header, Mapping[str, Any]],
    meta: Union[Meta, Mapping[str, Any]],
    payload: Union[Payload, Mapping[str, Any]],
    signatures: Iterable[Union[SignatureEntry, Mapping[str, Any]]] = (),
) -> Package:
    """
    Assemble a package. A supplied checksum is kept as is; a missing one is
    computed over the raw bytes of `payload.data`.
    """
    h = _model(Header, header, "header")
    m = _model(Meta, meta, "meta")
    p = _model(Payload, payload, "payload")
    sigs = [_model(SignatureEntry, s, "signatures") for s in signatures]

    if not p.checksum:
        p = p.model_copy(update={"checksum": sha256_hex(p.raw())})
    return Package(header=h, meta=m, payload=p, signatures=sigs)


def decode(raw: PackageInput) -> Package:
    """Parse a wire document (JSON bytes / text, or an already-parsed mapping)."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedEnvelopeError("envelope is not UTF-8 text", cause=e) from e
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise MalformedEnvelopeError(f"envelope is not valid JSON: {e}", cause=e) from e
    if not isinstance(raw, Mapping):
        raise MalformedEnvelopeError("envelope must be a JSON object")

    for section in ("header", "meta", "payload"):
        if section not in raw:
            raise MalformedEnvelopeError(f"missing {section}", field=section)
    sigs = raw.get("signatures", [])
    if not isinstance(sigs, list):
        raise MalformedEnvelopeError("signatures must be a list", field="signatures")
    if not isinstance(raw["payload"], Mapping) or not raw["payload"].get("checksum"):
        raise MalformedEnvelopeError("missing payload.checksum", field="payload.checksum")

    return encode(raw["header"], raw["meta"], raw["payload"], sigs)


def dumps(pkg: Package) -> str:
    return json.dumps(pkg.to_wire(), separators=(",", ":"), ensure_ascii=False)


def dumps_bytes(pkg: Package) -> bytes:
    return dumps(pkg).encode("utf-8")


__all__ = ["encode", "make_payload", "decode", "dumps", "dumps_bytes"]
