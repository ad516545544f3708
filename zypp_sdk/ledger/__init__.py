"""
zypp_sdk.ledger
---------------

Read-only ledger queries (balance, network status) and the test-network faucet.
"""

from .client import FAUCET_MAX, LedgerQueryClient, coerce_amount, faucet_lamports

__all__ = ["FAUCET_MAX", "LedgerQueryClient", "coerce_amount", "faucet_lamports"]
