"""
Shared pytest fixtures:
- FakeRpc: scriptable in-memory JSON-RPC stub (anything with `.call`)
- Deterministic ed25519 keypairs and their base58 account identifiers
- A fixed blockhash and a signer helper for built transactions
"""
from __future__ import annotations

import typing as t

import nacl.signing
import pytest
from solders.hash import Hash

from zypp_sdk import address
from zypp_sdk.tx import encode


class FakeRpc:
    """
    Minimal JSON-RPC stub. Each method maps to a queue of responses; the last
    response repeats. A response may be a value, an exception instance (raised)
    or a callable taking `params`.
    """

    def __init__(self, url: str = "http://fake.rpc") -> None:
        self.url = url
        self.calls: t.List[t.Tuple[str, t.Any]] = []
        self._handlers: t.Dict[str, t.List[t.Any]] = {}
        self.closed = False

    def __enter__(self) -> "FakeRpc":
        return self

    def __exit__(self, *exc: t.Any) -> None:
        self.closed = True

    def on(self, method: str, *responses: t.Any) -> "FakeRpc":
        self._handlers[method] = list(responses)
        return self

    def call(self, method: str, params: t.Any = None) -> t.Any:
        self.calls.append((method, params))
        if method not in self._handlers:
            raise AssertionError(f"unexpected RPC call {method}")
        queue = self._handlers[method]
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, BaseException):
            raise item
        if callable(item):
            return item(params)
        return item

    def methods(self) -> t.List[str]:
        return [m for m, _ in self.calls]

    def count(self, method: str) -> int:
        return self.methods().count(method)


@pytest.fixture
def rpc() -> FakeRpc:
    return FakeRpc()


@pytest.fixture
def key_a() -> nacl.signing.SigningKey:
    return nacl.signing.SigningKey(bytes([1]) * 32)


@pytest.fixture
def key_b() -> nacl.signing.SigningKey:
    return nacl.signing.SigningKey(bytes([2]) * 32)


@pytest.fixture
def addr_a(key_a: nacl.signing.SigningKey) -> str:
    return address.encode(bytes(key_a.verify_key))


@pytest.fixture
def addr_b(key_b: nacl.signing.SigningKey) -> str:
    return address.encode(bytes(key_b.verify_key))


@pytest.fixture
def blockhash() -> str:
    return str(Hash(bytes([7]) * 32))


def blockhash_result(bh: str) -> dict:
    return {"context": {"slot": 1}, "value": {"blockhash": bh, "lastValidBlockHeight": 150}}


def confirmed_status(status: str = "confirmed", err: t.Any = None) -> dict:
    return {
        "context": {"slot": 2},
        "value": [{"slot": 2, "confirmations": 1, "err": err, "confirmationStatus": status}],
    }


def sign_b64(unsigned_b64: str, key: nacl.signing.SigningKey) -> str:
    tx = encode.parse_transaction(encode.from_base64(unsigned_b64))
    return encode.to_base64(bytes(encode.partial_sign(tx, key)))


@pytest.fixture
def signed_tx(addr_a: str, addr_b: str, blockhash: str, key_a: nacl.signing.SigningKey) -> str:
    from zypp_sdk.tx.build import build_transfer

    tx = encode.partial_sign(build_transfer(addr_a, addr_b, 1000, blockhash), key_a)
    return encode.to_base64(bytes(tx))
