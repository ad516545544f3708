from __future__ import annotations

"""
Core ledger types for the Python SDK.

- Lightweight `TypedDict` shapes mirroring the JSON-RPC payloads we read.
- Small frozen dataclasses for values handed back to callers, with
  `from_rpc_*` / `to_dict()` converters.

Nothing here performs network I/O.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, TypedDict

# --- Constants ---------------------------------------------------------------

LAMPORTS_PER_SOL = 1_000_000_000
DISPLAY_UNIT = "SOL"
MAX_LAMPORTS = 2**64 - 1

Commitment = Literal["processed", "confirmed", "finalized"]

# Commitment levels in increasing durability.
_COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}


def commitment_reached(status: Optional[str], wanted: str) -> bool:
    """True when `status` is at least as durable as `wanted`."""
    if status is None:
        return False
    return _COMMITMENT_RANK.get(status, -1) >= _COMMITMENT_RANK[wanted]


class Network(str, Enum):
    MAINNET = "mainnet"
    DEVNET = "devnet"
    TESTNET = "testnet"
    LOCALNET = "localnet"

    @property
    def is_production(self) -> bool:
        return self is Network.MAINNET


# --- Unit conversion ---------------------------------------------------------


def lamports_to_sol(lamports: int) -> Decimal:
    return Decimal(int(lamports)) / Decimal(LAMPORTS_PER_SOL)


def sol_to_lamports(amount: Decimal) -> int:
    """Exact conversion; raises ValueError when `amount` has sub-lamport precision."""
    lamports = Decimal(amount) * LAMPORTS_PER_SOL
    if lamports != lamports.to_integral_value():
        raise ValueError("amount has more precision than one lamport")
    return int(lamports)


# --- JSON-RPC TypedDict shapes ----------------------------------------------


class RpcContextDict(TypedDict):
    slot: int


class BlockhashValueDict(TypedDict):
    blockhash: str
    lastValidBlockHeight: int


class SignatureStatusDict(TypedDict, total=False):
    slot: int
    confirmations: Optional[int]
    err: Any
    confirmationStatus: Optional[Commitment]


# --- Dataclasses -------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class LatestBlockhash:
    blockhash: str
    last_valid_block_height: int

    @classmethod
    def from_rpc_result(cls, res: Any) -> "LatestBlockhash":
        if not isinstance(res, dict) or not isinstance(res.get("value"), dict):
            raise ValueError(f"unexpected getLatestBlockhash payload: {res!r}")
        value = res["value"]
        bh = value.get("blockhash")
        if not isinstance(bh, str) or not bh:
            raise ValueError("getLatestBlockhash result has no blockhash")
        return cls(blockhash=bh, last_valid_block_height=int(value.get("lastValidBlockHeight", 0)))


@dataclass(slots=True, frozen=True)
class NetworkStatus:
    endpoint: str
    version: Dict[str, Any]
    current_slot: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "version": dict(self.version),
            "currentSlot": self.current_slot,
        }


@dataclass(slots=True, frozen=True)
class SignatureStatus:
    signature: str
    slot: Optional[int]
    confirmation_status: Optional[str]
    err: Any = None

    @classmethod
    def from_rpc_dict(cls, signature: str, d: Optional[SignatureStatusDict]) -> "SignatureStatus":
        if d is None:
            return cls(signature=signature, slot=None, confirmation_status=None)
        return cls(
            signature=signature,
            slot=d.get("slot"),
            confirmation_status=d.get("confirmationStatus"),
            err=d.get("err"),
        )


__all__ = [
    "LAMPORTS_PER_SOL",
    "DISPLAY_UNIT",
    "MAX_LAMPORTS",
    "Commitment",
    "commitment_reached",
    "Network",
    "lamports_to_sol",
    "sol_to_lamports",
    "RpcContextDict",
    "BlockhashValueDict",
    "SignatureStatusDict",
    "LatestBlockhash",
    "NetworkStatus",
    "SignatureStatus",
]
