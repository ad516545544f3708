"""
zypp_sdk.tx
===========

Transaction helpers: build, encode, and send.

Submodules
----------
- build : transfer instruction assembly and `TransactionBuilder`.
- encode: wire (de)serialization, base64 transport form, signature checks.
- send  : relay with bounded retry, confirmation polling, `TransactionSubmitter`.

Typical usage
-------------
    from zypp_sdk.tx import TransactionBuilder, TransactionSubmitter

    unsigned_b64 = TransactionBuilder(rpc).build(sender, recipient, 1_000)
    # ... client signs externally ...
    signature = TransactionSubmitter(rpc).submit(signed_b64)
"""

from __future__ import annotations

from . import build as build
from . import encode as encode
from . import send as send
from .build import TransactionBuilder, build_transfer
from .send import TransactionSubmitter, wait_for_confirmation

__all__ = [
    "build",
    "encode",
    "send",
    "TransactionBuilder",
    "TransactionSubmitter",
    "build_transfer",
    "wait_for_confirmation",
]
