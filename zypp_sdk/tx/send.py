"""
zypp_sdk.tx.send
================

Relay signed transactions to the network and await confirmation.

Primary entry points
--------------------
- relay(rpc, raw_tx: bytes) -> str
    Sends the wire bytes via `sendTransaction` (base64, preflight at
    "confirmed"). Returns the base58 signature reported by the node.

- wait_for_confirmation(rpc, signature, *, commitment="confirmed",
                        timeout_s=60, poll_interval_s=0.5) -> SignatureStatus
    Polls `getSignatureStatuses` until the signature reaches `commitment`,
    fails on-chain, or the timeout elapses.

- TransactionSubmitter(rpc).submit(signed_tx_b64) -> str
    decode -> local signature check -> relay (bounded retry) -> confirm.

Retry policy
------------
Only the relay step is retried, and only on `RpcConnectionError` (timeouts,
dropped connections, HTTP 429/502/503/504). A JSON-RPC rejection from the node is final.
Confirmation waiting is never retried: once a relay has been accepted the
transaction may land, and a second relay would only muddy the outcome.
"""

from __future__ import annotations

import time
from typing import Any, Optional, Protocol

from ..errors import (ConfirmationError, RpcConnectionError, RpcError,
                      TransactionSubmitError, ValidationError)
from ..logging import get_logger
from ..types.core import SignatureStatus, commitment_reached
from ..utils.retry import RetryError, retry_call
from . import encode

log = get_logger(__name__)


class _RpcClient(Protocol):
    def call(self, method: str, params: Optional[dict | list] = None) -> Any: ...


# -----------------------------------------------------------------------------
# Core RPC calls
# -----------------------------------------------------------------------------


def relay(rpc: _RpcClient, raw_tx: bytes, *, preflight_commitment: str = "confirmed") -> str:
    """Submit wire bytes once. Returns the signature string the node reports."""
    if not isinstance(raw_tx, (bytes, bytearray)):
        raise TypeError("raw_tx must be bytes")
    result = rpc.call(
        "sendTransaction",
        [
            encode.to_base64(bytes(raw_tx)),
            {"encoding": "base64", "preflightCommitment": preflight_commitment},
        ],
    )
    if not isinstance(result, str) or not result:
        raise RpcError("unexpected sendTransaction result", method="sendTransaction", data=result)
    return result


def get_signature_status(rpc: _RpcClient, signature: str) -> SignatureStatus:
    res = rpc.call("getSignatureStatuses", [[signature], {"searchTransactionHistory": False}])
    value = res.get("value") if isinstance(res, dict) else None
    if not isinstance(value, list) or len(value) != 1:
        raise RpcError("unexpected getSignatureStatuses payload", method="getSignatureStatuses", data=res)
    entry = value[0]
    # null means the node has not seen the signature yet
    if entry is not None and not isinstance(entry, dict):
        raise RpcError("unexpected getSignatureStatuses entry", method="getSignatureStatuses", data=res)
    return SignatureStatus.from_rpc_dict(signature, entry)


# -----------------------------------------------------------------------------
# Polling waiter
# -----------------------------------------------------------------------------


def wait_for_confirmation(
    rpc: _RpcClient,
    signature: str,
    *,
    commitment: str = "confirmed",
    timeout_s: float = 60.0,
    poll_interval_s: float = 0.5,
    max_interval_s: float = 2.5,
    backoff: float = 1.25,
) -> SignatureStatus:
    """
    Poll until `signature` reaches `commitment`.

    Raises:
        ConfirmationError when the transaction failed on-chain or on timeout
        RpcError / RpcConnectionError from the underlying calls
    """
    deadline = time.monotonic() + float(timeout_s)
    interval = float(poll_interval_s)

    while True:
        status = get_signature_status(rpc, signature)
        if status.err is not None:
            raise ConfirmationError(
                f"transaction failed on-chain: {status.err}", signature=signature, err=status.err
            )
        if commitment_reached(status.confirmation_status, commitment):
            return status

        if time.monotonic() >= deadline:
            raise ConfirmationError(
                f"timeout waiting for {commitment} (signature={signature}, timeout_s={timeout_s})",
                signature=signature,
                timed_out=True,
            )

        time.sleep(interval)
        interval = min(interval * float(backoff), float(max_interval_s))


# -----------------------------------------------------------------------------
# Submitter
# -----------------------------------------------------------------------------


class TransactionSubmitter:
    """
    Relays client-signed transactions.

    Args:
        rpc: shared JSON-RPC client (anything with `.call(method, params)`).
        max_attempts: total relay attempts on transient transport failure.
        commitment: level the confirmation wait must reach.
        confirm_timeout_s / poll_interval_s: confirmation polling bounds.
        retry_base_s: first backoff cap between relay attempts.
    """

    def __init__(
        self,
        rpc: _RpcClient,
        *,
        max_attempts: int = 3,
        commitment: str = "confirmed",
        confirm_timeout_s: float = 60.0,
        poll_interval_s: float = 0.5,
        retry_base_s: float = 0.2,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.rpc = rpc
        self.max_attempts = max_attempts
        self.commitment = commitment
        self.confirm_timeout_s = confirm_timeout_s
        self.poll_interval_s = poll_interval_s
        self.retry_base_s = retry_base_s

    @classmethod
    def from_config(cls, rpc: _RpcClient, cfg: Any) -> "TransactionSubmitter":
        return cls(
            rpc,
            max_attempts=cfg.max_attempts,
            commitment=cfg.commitment,
            confirm_timeout_s=cfg.confirm_timeout,
            poll_interval_s=cfg.poll_interval,
            retry_base_s=cfg.retry_base,
        )

    def _on_retry(self, attempt: int, exc: BaseException, sleep_s: float) -> None:
        log.warning(
            "relay attempt failed; retrying",
            extra={"attempt": attempt, "max_attempts": self.max_attempts, "error": str(exc), "sleep_s": round(sleep_s, 3)},
        )

    def submit(self, signed_tx_b64: str) -> str:
        # Local checks: raise before any network call, never wrapped.
        raw = encode.from_base64(signed_tx_b64, field="signedTx")
        try:
            tx = encode.parse_transaction(raw)
        except ValueError as e:
            raise ValidationError(f"not a ledger transaction: {e}", field="signedTx", cause=e) from e
        encode.require_fully_signed(tx, field="signedTx")
        expected_sig = encode.first_signature(tx)

        try:
            signature = retry_call(
                relay,
                self.rpc,
                raw,
                preflight_commitment=self.commitment,
                attempts=self.max_attempts,
                base=self.retry_base_s,
                exceptions=RpcConnectionError,
                on_retry=self._on_retry,
            )
        except RetryError as e:
            cause = e.last_exception
            log.error("relay gave up", extra={"attempts": e.attempts, "signature": expected_sig})
            raise TransactionSubmitError(
                f"relay failed after {e.attempts} attempts: {cause}", signature=expected_sig, cause=cause
            ) from cause
        except RpcError as e:
            log.warning("relay rejected by node", extra={"code": e.code, "signature": expected_sig})
            raise TransactionSubmitError(f"relay rejected: {e.message}", signature=expected_sig, cause=e) from e

        log.info("transaction relayed", extra={"signature": signature})

        try:
            wait_for_confirmation(
                self.rpc,
                signature,
                commitment=self.commitment,
                timeout_s=self.confirm_timeout_s,
                poll_interval_s=self.poll_interval_s,
            )
        except (ConfirmationError, RpcError, RpcConnectionError) as e:
            log.warning("confirmation failed", extra={"signature": signature, "error": str(e)})
            raise TransactionSubmitError(
                f"confirmation failed: {e.message}", signature=signature, cause=e
            ) from e

        log.info("transaction confirmed", extra={"signature": signature, "commitment": self.commitment})
        return signature


__all__ = [
    "relay",
    "get_signature_status",
    "wait_for_confirmation",
    "TransactionSubmitter",
]
