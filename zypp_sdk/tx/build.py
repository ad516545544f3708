"""
zypp_sdk.tx.build
=================

Builder for unsigned System Program transfer transactions.

The builder validates inputs, fetches a fresh blockhash and returns the unsigned
transaction as base64 text. The client signs it externally, then hands the
signed text to `zypp_sdk.tx.send.TransactionSubmitter`.

Design notes
------------
- `transfer_instruction`: one System Program transfer (`solders.system_program`).
- `build_transfer`: pure assembly for a given blockhash via
  `Message.new_with_blockhash` (fee payer first, signers before non-signers,
  keys deduped) and `Transaction.new_unsigned`; deterministic.
- `TransactionBuilder.build`: validation -> blockhash fetch -> assembly ->
  unsigned serialization. Output differs between calls because the blockhash
  does.

Examples
--------
    from zypp_sdk.rpc.http import RpcClient
    from zypp_sdk.tx.build import TransactionBuilder

    rpc = RpcClient("https://api.devnet.solana.com")
    unsigned_b64 = TransactionBuilder(rpc).build(sender, recipient, 1_000)
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from solders.hash import Hash
from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

from .. import address
from ..errors import TransactionBuildError, ValidationError
from ..logging import get_logger
from ..types.core import MAX_LAMPORTS, LatestBlockhash
from . import encode

log = get_logger(__name__)


class _RpcClient(Protocol):
    def call(self, method: str, params: Optional[dict | list] = None) -> Any: ...


# -----------------------------------------------------------------------------
# Instruction / transaction assembly
# -----------------------------------------------------------------------------


def transfer_instruction(from_key: Pubkey, to_key: Pubkey, lamports: int) -> Instruction:
    return transfer(TransferParams(from_pubkey=from_key, to_pubkey=to_key, lamports=lamports))


def _check_amount(amount: Any) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError("amount must be an integer number of lamports", field="amount")
    if amount <= 0:
        raise ValidationError("amount must be greater than zero", field="amount")
    if amount > MAX_LAMPORTS:
        raise ValidationError("amount exceeds the u64 lamport range", field="amount")
    return amount


def build_transfer(from_: str, to: str, amount: int, blockhash: str) -> Transaction:
    """
    Assemble an unsigned transfer for a known blockhash.

    Deterministic: the same inputs always give the same transaction.
    """
    from_key = Pubkey.from_bytes(address.parse(from_, field="from"))
    to_key = Pubkey.from_bytes(address.parse(to, field="to"))
    lamports = _check_amount(amount)
    msg = Message.new_with_blockhash(
        [transfer_instruction(from_key, to_key, lamports)], from_key, Hash.from_string(blockhash)
    )
    return Transaction.new_unsigned(msg)


# -----------------------------------------------------------------------------
# Builder
# -----------------------------------------------------------------------------


class TransactionBuilder:
    """Builds base64 unsigned transfer transactions against a live blockhash."""

    def __init__(self, rpc: _RpcClient, *, commitment: str = "confirmed") -> None:
        self.rpc = rpc
        self.commitment = commitment

    def latest_blockhash(self) -> LatestBlockhash:
        res = self.rpc.call("getLatestBlockhash", [{"commitment": self.commitment}])
        return LatestBlockhash.from_rpc_result(res)

    def build(self, from_: str, to: str, amount: int) -> str:
        # Validation happens before any network call and is never wrapped.
        address.parse(from_, field="from")
        address.parse(to, field="to")
        _check_amount(amount)

        try:
            bh = self.latest_blockhash()
            tx = build_transfer(from_, to, amount, bh.blockhash)
            raw = bytes(tx)
        except ValidationError:
            raise
        except Exception as e:  # map every post-validation failure to a build error
            log.warning("transaction build failed", extra={"from_account": from_, "error": str(e)})
            raise TransactionBuildError(f"failed to build transfer: {e}", cause=e) from e

        log.debug(
            "built unsigned transfer",
            extra={"from_account": from_, "to_account": to, "lamports": amount, "blockhash": bh.blockhash},
        )
        return encode.to_base64(raw)


__all__ = [
    "SYSTEM_PROGRAM",
    "transfer_instruction",
    "build_transfer",
    "TransactionBuilder",
]
