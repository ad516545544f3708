"""
Zypp SDK for Python
Relay transfers to a Solana-style ledger and move payloads in signed package
envelopes. Convenience exports for the most common APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import SDKConfig, explorer_url  # noqa: F401
from .errors import (  # noqa: F401
    ZyppError,
    ValidationError,
    AddressError,
    InvalidEncodingError,
    RpcConnectionError,
    RpcError,
    TransactionBuildError,
    TransactionSubmitError,
    ConfirmationError,
    EnvelopeVerificationError,
)

# RPC
from .rpc.http import RpcClient  # noqa: F401

# Addresses
from .address import is_valid as is_valid_address  # noqa: F401

# Tx pipeline
from .tx.build import TransactionBuilder, build_transfer  # noqa: F401
from .tx.send import TransactionSubmitter, wait_for_confirmation  # noqa: F401

# Ledger queries
from .ledger.client import LedgerQueryClient  # noqa: F401

# Envelopes
from . import envelope  # noqa: F401

# Gateway facade
from .relay import RelayService, error_response  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "SDKConfig", "explorer_url",
    "ZyppError", "ValidationError", "AddressError", "InvalidEncodingError",
    "RpcConnectionError", "RpcError", "TransactionBuildError",
    "TransactionSubmitError", "ConfirmationError", "EnvelopeVerificationError",
    # RPC
    "RpcClient",
    # Address
    "is_valid_address",
    # Tx
    "TransactionBuilder", "build_transfer",
    "TransactionSubmitter", "wait_for_confirmation",
    # Ledger
    "LedgerQueryClient",
    # Envelope
    "envelope",
    # Relay
    "RelayService", "error_response",
]
