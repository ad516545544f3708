import base64
import hashlib
import json

import cbor2
import pytest

from zypp_sdk import envelope
from zypp_sdk.errors import (ChecksumMismatchError, EnvelopeReason, ExpiredError, InvalidSignatureError,
                             MalformedEnvelopeError, TypePayloadMismatchError)
from zypp_sdk.tx import encode as tx_encode

NOW = 1_700_000_000


@pytest.fixture
def header(addr_a, addr_b):
    return {
        "id": "pkg-0001",
        "type": "message",
        "version": "1.0",
        "createdAt": NOW - 60,
        "sender": addr_a,
        "recipient": addr_b,
    }


@pytest.fixture
def meta():
    return {"network": "devnet", "retries": 2, "tags": ["demo"]}


def _pkg(header, meta, raw=b"hello, world", **payload_kw):
    return envelope.encode(header, meta, envelope.make_payload(raw, **payload_kw))


def _with_data(pkg, raw):
    payload = pkg.payload.model_copy(update={"data": base64.b64encode(raw).decode()})
    return pkg.model_copy(update={"payload": payload})


# --- encode / decode -----------------------------------------------------------


def test_encode_computes_checksum_over_raw_bytes(header, meta):
    payload = {"encrypted": False, "encoding": "hex", "data": b"abc".hex()}
    pkg = envelope.encode(header, meta, payload)
    assert pkg.payload.checksum == hashlib.sha256(b"abc").hexdigest()


def test_encode_keeps_supplied_checksum(header, meta):
    payload = {"encrypted": False, "encoding": "base64", "data": "YWJj", "checksum": "ff" * 32}
    assert envelope.encode(header, meta, payload).payload.checksum == "ff" * 32


def test_roundtrip_reproduces_every_section(header, meta, key_a):
    pkg = envelope.sign(_pkg(header, meta), key_a)
    again = envelope.decode(envelope.dumps(pkg))
    assert again == pkg
    assert again.header.created_at == header["createdAt"]
    assert again.payload.checksum == hashlib.sha256(b"hello, world").hexdigest()
    assert envelope.decode(envelope.dumps_bytes(pkg)) == pkg
    assert envelope.decode(json.loads(envelope.dumps(pkg))) == pkg


def test_wire_form_uses_camel_case_and_omits_unset_meta(header, addr_a):
    pkg = _pkg(header, {"network": "testnet"})
    wire = json.loads(envelope.dumps(pkg))
    assert set(wire) == {"header", "meta", "payload", "signatures"}
    assert "createdAt" in wire["header"]
    assert wire["meta"] == {"network": "testnet"}
    assert wire["signatures"] == []


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.pop("header"),
        lambda d: d["header"].pop("id"),
        lambda d: d["header"].update(type="video"),
        lambda d: d["header"].update(createdAt="yesterday"),
        lambda d: d["header"].update(sender="not-a-key"),
        lambda d: d["meta"].update(network="moonnet"),
        lambda d: d["meta"].update(retries=-1),
        lambda d: d["payload"].update(encoding="base32"),
        lambda d: d["payload"].pop("checksum"),
        lambda d: d["payload"].pop("encrypted"),
        lambda d: d["payload"].update(data="zz-not-hex", encoding="hex"),
        lambda d: d.update(signatures={"signer": "x"}),
        lambda d: d.update(signatures=[{"signer": "x", "signature": "y"}]),
    ],
)
def test_decode_rejects_structural_problems(header, meta, mutate):
    doc = json.loads(envelope.dumps(_pkg(header, meta)))
    mutate(doc)
    with pytest.raises(MalformedEnvelopeError) as ei:
        envelope.decode(json.dumps(doc))
    assert ei.value.reason is EnvelopeReason.MALFORMED_ENVELOPE


@pytest.mark.parametrize("raw", [b"\xff\xfe", "not json", "[1, 2]", b"null"])
def test_decode_rejects_non_documents(raw):
    with pytest.raises(MalformedEnvelopeError):
        envelope.decode(raw)


# --- verify --------------------------------------------------------------------


def test_verify_accepts_valid_package_and_is_idempotent(header, meta, key_a, key_b):
    pkg = envelope.sign(envelope.sign(_pkg(header, meta), key_a), key_b)
    assert envelope.verify(pkg, now=NOW) is None
    assert envelope.verify(pkg, now=NOW) is None
    assert envelope.is_verified(pkg, now=NOW) is True


def test_single_byte_mutation_is_checksum_mismatch(header, meta):
    pkg = _pkg(header, meta)
    tampered = _with_data(pkg, b"hello, worle")
    with pytest.raises(ChecksumMismatchError):
        envelope.verify(tampered, now=NOW)
    assert envelope.is_verified(tampered, now=NOW) is False
    # idempotent on failure too
    with pytest.raises(ChecksumMismatchError):
        envelope.verify(tampered, now=NOW)


def test_expired_package_fails_even_when_otherwise_valid(header, key_a):
    pkg = envelope.sign(_pkg(header, {"network": "devnet", "expiry": NOW - 1}), key_a)
    with pytest.raises(ExpiredError):
        envelope.verify(pkg, now=NOW)
    # exactly at expiry is still valid
    envelope.verify(pkg, now=NOW - 1)


def test_checksum_is_checked_before_expiry(header):
    pkg = _with_data(_pkg(header, {"network": "devnet", "expiry": NOW - 1}), b"other")
    with pytest.raises(ChecksumMismatchError):
        envelope.verify(pkg, now=NOW)


def test_invalid_signature_names_signer(header, meta, key_a, addr_a):
    pkg = envelope.sign(_pkg(header, meta), key_a)
    other = envelope.sign(_pkg({**header, "id": "pkg-0002"}, meta), key_a)
    forged = pkg.model_copy(update={"signatures": other.signatures})
    with pytest.raises(InvalidSignatureError) as ei:
        envelope.verify(forged, now=NOW)
    assert ei.value.signer == addr_a
    assert ei.value.to_dict()["reason"] == "invalid_signature"


def test_signature_over_modified_meta_fails(header, meta, key_a):
    pkg = envelope.sign(_pkg(header, meta), key_a)
    changed = pkg.model_copy(update={"meta": pkg.meta.model_copy(update={"retries": 9})})
    with pytest.raises(InvalidSignatureError):
        envelope.verify(changed, now=NOW)


def test_hex_signatures_are_accepted(header, meta, key_a, addr_a):
    pkg = _pkg(header, meta)
    sig = key_a.sign(envelope.signable_bytes(pkg)).signature.hex()
    signed = envelope.encode(pkg.header, pkg.meta, pkg.payload, [{"signer": addr_a, "signature": sig}])
    envelope.verify(signed, now=NOW)


def test_undecodable_signature_is_invalid(header, meta, addr_a):
    pkg = envelope.encode(header, meta, envelope.make_payload(b"hi"), [{"signer": addr_a, "signature": "0OIl"}])
    with pytest.raises(InvalidSignatureError):
        envelope.verify(pkg, now=NOW)


def test_signable_bytes_are_domain_tagged_and_exclude_signatures(header, meta, key_a):
    pkg = _pkg(header, meta)
    signed = envelope.sign(pkg, key_a)
    assert envelope.signable_bytes(pkg).startswith(envelope.DOMAIN_TAG)
    assert envelope.signable_bytes(pkg) == envelope.signable_bytes(signed)


# --- type / payload consistency -----------------------------------------------


def test_transaction_type_requires_a_transaction(header, meta, signed_tx):
    raw_tx = tx_encode.from_base64(signed_tx)
    good = _pkg({**header, "type": "transaction"}, meta, raw_tx)
    envelope.verify(good, now=NOW)

    bad = _pkg({**header, "type": "transaction"}, meta, b"definitely not a transaction")
    with pytest.raises(TypePayloadMismatchError):
        envelope.verify(bad, now=NOW)


def test_message_type_requires_utf8(header, meta):
    with pytest.raises(TypePayloadMismatchError):
        envelope.verify(_pkg(header, meta, b"\xff\xfe\xfd"), now=NOW)


@pytest.mark.parametrize(
    "raw,ok",
    [(b'{"mint": "abc", "amount": 1}', True), (b"{}", False), (b"[1]", False), (b"nope", False)],
)
def test_asset_type_requires_descriptor_object(header, meta, raw, ok):
    pkg = _pkg({**header, "type": "asset"}, meta, raw)
    assert envelope.is_verified(pkg, now=NOW) is ok


@pytest.mark.parametrize(
    "items,ok",
    [([b"a", b"\x00\x01"], True), ([], True), ([b"a", "text"], False), ({"a": b"b"}, False)],
)
def test_multi_type_requires_sequence_of_sub_payloads(header, meta, items, ok):
    pkg = _pkg({**header, "type": "multi"}, meta, cbor2.dumps(items))
    assert envelope.is_verified(pkg, now=NOW) is ok


def test_multi_sub_payloads_are_not_inspected(header, meta, key_a):
    # a sub-payload that is not itself a valid anything
    pkg = envelope.sign(_pkg({**header, "type": "multi"}, meta, cbor2.dumps([b"\xff" * 10])), key_a)
    envelope.verify(pkg, now=NOW)


def test_encrypted_payload_skips_type_check(header, meta):
    pkg = _pkg({**header, "type": "transaction"}, meta, b"\x8a\x01ciphertext", encrypted=True)
    envelope.verify(pkg, now=NOW)


def test_non_ascii_checksum_is_checksum_mismatch(header, meta):
    pkg = _pkg(header, meta)
    payload = pkg.payload.model_copy(update={"checksum": "é" * 64})
    tampered = pkg.model_copy(update={"payload": payload})
    with pytest.raises(ChecksumMismatchError):
        envelope.verify(tampered, now=NOW)
    assert envelope.is_verified(tampered, now=NOW) is False


def test_deeply_nested_asset_descriptor_is_a_type_mismatch(header, meta):
    pkg = _pkg({**header, "type": "asset"}, meta, b"[" * 100_000)
    with pytest.raises(TypePayloadMismatchError):
        envelope.verify(pkg, now=NOW)
    assert envelope.is_verified(pkg, now=NOW) is False
