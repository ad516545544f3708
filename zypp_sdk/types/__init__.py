"""
zypp_sdk.types
--------------

Ledger value types and unit helpers (see `core`).
"""

from .core import (DISPLAY_UNIT, LAMPORTS_PER_SOL, MAX_LAMPORTS, Commitment,
                   LatestBlockhash, Network, NetworkStatus, SignatureStatus,
                   commitment_reached, lamports_to_sol, sol_to_lamports)

__all__ = [
    "DISPLAY_UNIT",
    "LAMPORTS_PER_SOL",
    "MAX_LAMPORTS",
    "Commitment",
    "LatestBlockhash",
    "Network",
    "NetworkStatus",
    "SignatureStatus",
    "commitment_reached",
    "lamports_to_sol",
    "sol_to_lamports",
]
