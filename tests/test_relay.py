from decimal import Decimal

import pytest

from conftest import blockhash_result, confirmed_status
from zypp_sdk.config import SDKConfig
from zypp_sdk.errors import (AddressError, ChecksumMismatchError, RpcConnectionError, TransactionSubmitError,
                             ValidationError)
from zypp_sdk.relay import RelayService, error_response
from zypp_sdk.tx import encode

SIG = "4" * 64


@pytest.fixture
def service(rpc):
    cfg = SDKConfig.for_network("devnet", retry_base=0.0, poll_interval=0.0)
    return RelayService.from_config(cfg, rpc=rpc)


def test_create_transaction(service, rpc, addr_a, addr_b, blockhash):
    rpc.on("getLatestBlockhash", blockhash_result(blockhash))
    out = service.create_transaction({"from": addr_a, "to": addr_b, "amount": 1000})
    assert set(out) == {"unsignedTx"}
    tx = encode.parse_transaction(encode.from_base64(out["unsignedTx"]))
    assert [str(k) for k in tx.message.account_keys][:2] == [addr_a, addr_b]


@pytest.mark.parametrize(
    "body,field",
    [
        ({"to": "x", "amount": 1}, "from"),
        ({"from": "x", "amount": 1}, "to"),
        ({"from": "x", "to": "y"}, "amount"),
        ({"from": 1, "to": "y", "amount": 1}, "from"),
        ({"from": "x", "to": "y", "amount": "1"}, "amount"),
        ({"from": "x", "to": "y", "amount": True}, "amount"),
    ],
)
def test_create_transaction_field_validation(service, rpc, body, field):
    with pytest.raises(ValidationError) as ei:
        service.create_transaction(body)
    assert ei.value.field == field
    assert rpc.calls == []


def test_create_transaction_names_bad_address(service, addr_a):
    with pytest.raises(AddressError) as ei:
        service.create_transaction({"from": addr_a, "to": "bad", "amount": 1})
    assert ei.value.field == "to"


def test_submit_transaction(service, rpc, signed_tx):
    rpc.on("sendTransaction", SIG)
    rpc.on("getSignatureStatuses", confirmed_status())
    out = service.submit_transaction({"signedTx": signed_tx})
    assert out == {"signature": SIG, "explorerUrl": f"https://explorer.solana.com/tx/{SIG}?cluster=devnet"}


def test_balance(service, rpc, addr_a):
    rpc.on("getBalance", {"context": {"slot": 1}, "value": 2_500_000_000})
    assert service.balance({"account": addr_a}) == {"balance": "2.5", "account": addr_a, "unit": "SOL"}


def test_airdrop(service, rpc, addr_a):
    rpc.on("requestAirdrop", SIG)
    rpc.on("getSignatureStatuses", confirmed_status())
    out = service.airdrop({"account": addr_a, "amount": 0.5})
    assert out["signature"] == SIG
    assert out["amount"] == "0.5"
    assert out["account"] == addr_a
    assert out["explorerUrl"].endswith("?cluster=devnet")


def test_airdrop_rejects_large_amount(service, rpc, addr_a):
    with pytest.raises(ValidationError):
        service.airdrop({"account": addr_a, "amount": Decimal("2.5")})
    assert rpc.calls == []


def test_status(service, rpc):
    rpc.on("getVersion", {"solana-core": "2.0.1"})
    rpc.on("getSlot", 99)
    assert service.status() == {
        "endpoint": "https://api.devnet.solana.com",
        "version": {"solana-core": "2.0.1"},
        "currentSlot": 99,
    }


def test_non_mapping_body_is_rejected(service):
    with pytest.raises(ValidationError):
        service.balance(["account"])


@pytest.mark.parametrize(
    "exc,status,kind",
    [
        (ValidationError("bad", field="amount"), 400, "validation"),
        (RpcConnectionError("down"), 503, "connection"),
        (TransactionSubmitError("nope", signature="S"), 502, "submit"),
        (ChecksumMismatchError("mismatch"), 422, "envelope"),
    ],
)
def test_error_response(exc, status, kind):
    code, body = error_response(exc)
    assert code == status
    assert body["error"] == kind
    assert body["message"]


def test_error_response_includes_field_and_reason():
    _, body = error_response(ValidationError("bad", field="amount"))
    assert body["field"] == "amount"
    _, body = error_response(ChecksumMismatchError("mismatch"))
    assert body["reason"] == "checksum_mismatch"


def test_error_response_for_unexpected_exception():
    code, body = error_response(RuntimeError("boom"))
    assert code == 500
    assert body == {"error": "internal", "message": "boom"}
