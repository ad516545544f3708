"""
Typed error classes for the Zypp SDK.

Every error raised by the SDK derives from `ZyppError` and carries:

- `kind`    : stable, machine-friendly category ("validation", "connection", ...)
- `message` : human-readable description
- `field`   : offending input field, when the error is about a specific input
- `cause`   : the original exception (also chained as ``__cause__``)

Gateways map errors to transport responses through `to_dict()` / `status_hint`
without inspecting SDK internals.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Dict, Optional

__all__ = [
    "ZyppError",
    "ValidationError",
    "AddressError",
    "InvalidEncodingError",
    "RpcConnectionError",
    "RpcError",
    "JsonRpcCode",
    "TransactionBuildError",
    "TransactionSubmitError",
    "ConfirmationError",
    "EnvelopeReason",
    "EnvelopeVerificationError",
    "ChecksumMismatchError",
    "ExpiredError",
    "InvalidSignatureError",
    "TypePayloadMismatchError",
    "MalformedEnvelopeError",
    "from_jsonrpc_error",
]


class ZyppError(Exception):
    """Base class for all SDK errors."""

    kind = "internal"
    status_hint = 500

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        where = f" [{self.field}]" if self.field else ""
        return f"{type(self).__name__}{where}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"error": self.kind, "message": self.message}
        if self.field:
            out["field"] = self.field
        if self.cause is not None:
            out["cause"] = str(self.cause)
        return out


# ---------------------------------------------------------------------------
# Input validation (always before any network call; never retried)
# ---------------------------------------------------------------------------


class ValidationError(ZyppError, ValueError):
    """Malformed or out-of-range input."""

    kind = "validation"
    status_hint = 400


class AddressError(ValidationError):
    """A string is not a valid base58 account identifier."""


class InvalidEncodingError(ValidationError):
    """Text that should be base64/hex could not be decoded."""


# ---------------------------------------------------------------------------
# Network / JSON-RPC
# ---------------------------------------------------------------------------


class JsonRpcCode(IntEnum):
    # JSON-RPC 2.0
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Solana node extensions (hints only)
    BLOCK_CLEANED_UP = -32001
    SEND_TX_PREFLIGHT_FAILURE = -32002
    TX_SIGNATURE_VERIFICATION_FAILURE = -32003
    BLOCK_NOT_AVAILABLE = -32004
    NODE_UNHEALTHY = -32005


class RpcConnectionError(ZyppError, ConnectionError):
    """Transient transport failure: timeout, dropped connection, HTTP 429/502/503/504."""

    kind = "connection"
    status_hint = 503

    def __init__(
        self,
        message: str,
        *,
        method: Optional[str] = None,
        http_status: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.method = method
        self.http_status = http_status


class RpcError(ZyppError):
    """The node answered with a JSON-RPC error object; carried verbatim."""

    kind = "rpc"
    status_hint = 502

    def __init__(
        self,
        message: str,
        *,
        code: int = JsonRpcCode.INTERNAL_ERROR,
        method: Optional[str] = None,
        data: Any = None,
        request_id: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = int(code)
        self.method = method
        self.data = data
        self.request_id = request_id

    def __str__(self) -> str:
        parts = [f"RPC[{self.method or '-'}] code={self.code} msg={self.message!r}"]
        if self.request_id is not None:
            parts.append(f"id={self.request_id}")
        if self.data is not None:
            parts.append(f"data={self.data!r}")
        return " ".join(parts)

    @property
    def code_enum(self) -> Optional[JsonRpcCode]:
        try:
            return JsonRpcCode(self.code)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["code"] = self.code
        if self.data is not None:
            out["data"] = self.data
        return out


def from_jsonrpc_error(
    err_obj: Dict[str, Any],
    *,
    method: Optional[str] = None,
    request_id: Any = None,
) -> RpcError:
    """
    Convert a JSON-RPC error object into RpcError.

    `err_obj` should resemble: {"code": int, "message": str, "data": any?}
    """
    return RpcError(
        str(err_obj.get("message", "Unknown JSON-RPC error")),
        code=int(err_obj.get("code", JsonRpcCode.INTERNAL_ERROR)),
        method=method,
        data=err_obj.get("data"),
        request_id=request_id,
    )


# ---------------------------------------------------------------------------
# Transaction pipeline
# ---------------------------------------------------------------------------


class TransactionBuildError(ZyppError):
    """Building an unsigned transaction failed after input validation."""

    kind = "build"


class TransactionSubmitError(ZyppError):
    """
    Relaying or confirming a signed transaction failed.

    The final on-chain state is unknown: the transaction may have landed.
    Re-query by `signature` (when known) before retrying the whole flow.
    """

    kind = "submit"
    status_hint = 502

    def __init__(
        self,
        message: str,
        *,
        signature: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.signature = signature

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        if self.signature:
            out["signature"] = self.signature
        return out


class ConfirmationError(ZyppError):
    """A signature did not reach the requested commitment (on-chain error or timeout)."""

    kind = "confirmation"
    status_hint = 504

    def __init__(
        self,
        message: str,
        *,
        signature: str,
        err: Any = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.signature = signature
        self.err = err
        self.timed_out = timed_out


# ---------------------------------------------------------------------------
# Package envelope
# ---------------------------------------------------------------------------


class EnvelopeReason(str, Enum):
    CHECKSUM_MISMATCH = "checksum_mismatch"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"
    TYPE_PAYLOAD_MISMATCH = "type_payload_mismatch"
    MALFORMED_ENVELOPE = "malformed_envelope"


class EnvelopeVerificationError(ZyppError):
    """An envelope failed decoding or verification; never trust it partially."""

    kind = "envelope"
    status_hint = 422
    reason: EnvelopeReason = EnvelopeReason.MALFORMED_ENVELOPE

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["reason"] = self.reason.value
        return out


class ChecksumMismatchError(EnvelopeVerificationError):
    reason = EnvelopeReason.CHECKSUM_MISMATCH


class ExpiredError(EnvelopeVerificationError):
    reason = EnvelopeReason.EXPIRED


class InvalidSignatureError(EnvelopeVerificationError):
    reason = EnvelopeReason.INVALID_SIGNATURE

    def __init__(self, message: str, *, signer: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message, field="signatures", cause=cause)
        self.signer = signer

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["signer"] = self.signer
        return out


class TypePayloadMismatchError(EnvelopeVerificationError):
    reason = EnvelopeReason.TYPE_PAYLOAD_MISMATCH


class MalformedEnvelopeError(EnvelopeVerificationError):
    reason = EnvelopeReason.MALFORMED_ENVELOPE
    status_hint = 400
