"""
Package envelope models: typed views over the JSON wire document.

    {
      "header":     {"id", "type", "version", "createdAt", "sender", "recipient"},
      "meta":       {"network", "retries"?, "expiry"?, "tags"?},
      "payload":    {"encrypted", "encoding", "data", "checksum"},
      "signatures": [{"signer", "signature"}, ...]
    }

Validation:
- `sender`, `recipient` and every `signer` are base58 account identifiers.
- `payload.data` must decode under `payload.encoding`.
- Optional meta fields that are unset are omitted on the wire.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import (BaseModel, ConfigDict, Field, StrictBool, StrictInt,
                      StrictStr, field_validator, model_validator)

from .. import address
from ..errors import InvalidEncodingError
from ..utils.bytes import decode_text

PackageType = Literal["transaction", "message", "asset", "multi"]
NetworkName = Literal["mainnet", "devnet", "testnet", "localnet"]
PayloadEncoding = Literal["base64", "hex"]

PACKAGE_TYPES = ("transaction", "message", "asset", "multi")

_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True)


def _check_account(v: str) -> str:
    if not address.is_valid(v):
        raise ValueError("invalid base58 account identifier")
    return v


class Header(BaseModel):
    model_config = _MODEL_CONFIG
    id: StrictStr = Field(min_length=1)
    type: PackageType
    version: StrictStr = Field(min_length=1)
    created_at: StrictInt = Field(alias="createdAt", ge=0)
    sender: StrictStr
    recipient: StrictStr

    @field_validator("sender", "recipient")
    @classmethod
    def _account_ok(cls, v: str) -> str:
        return _check_account(v)


class Meta(BaseModel):
    model_config = _MODEL_CONFIG
    network: NetworkName
    retries: Optional[StrictInt] = Field(default=None, ge=0)
    expiry: Optional[StrictInt] = Field(default=None, ge=0)
    tags: Optional[List[StrictStr]] = None


class Payload(BaseModel):
    model_config = _MODEL_CONFIG
    encrypted: StrictBool
    encoding: PayloadEncoding
    data: StrictStr
    # lowercase hex SHA-256 of the raw bytes; filled in by `codec.encode`
    checksum: Optional[StrictStr] = None

    @model_validator(mode="after")
    def _data_decodes(self) -> "Payload":
        try:
            decode_text(self.data, self.encoding, field="payload.data")
        except InvalidEncodingError as e:
            raise ValueError(e.message) from e
        return self

    def raw(self) -> bytes:
        """Bytes of `data` with `encoding` undone."""
        return decode_text(self.data, self.encoding, field="payload.data")


class SignatureEntry(BaseModel):
    model_config = _MODEL_CONFIG
    signer: StrictStr
    signature: StrictStr = Field(min_length=1)

    @field_validator("signer")
    @classmethod
    def _signer_ok(cls, v: str) -> str:
        return _check_account(v)


class Package(BaseModel):
    """A complete envelope. `payload.checksum` is always present."""

    model_config = _MODEL_CONFIG
    header: Header
    meta: Meta
    payload: Payload
    signatures: List[SignatureEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def _checksum_present(self) -> "Package":
        if not self.payload.checksum:
            raise ValueError("payload.checksum is required")
        return self

    def body(self) -> Dict[str, Any]:
        """header + meta + payload in wire form (the signed part)."""
        return {
            "header": self.header.model_dump(by_alias=True, exclude_none=True),
            "meta": self.meta.model_dump(by_alias=True, exclude_none=True),
            "payload": self.payload.model_dump(by_alias=True, exclude_none=True),
        }

    def to_wire(self) -> Dict[str, Any]:
        out = self.body()
        out["signatures"] = [s.model_dump(by_alias=True) for s in self.signatures]
        return out


__all__ = [
    "PackageType",
    "NetworkName",
    "PayloadEncoding",
    "PACKAGE_TYPES",
    "Header",
    "Meta",
    "Payload",
    "SignatureEntry",
    "Package",
]
