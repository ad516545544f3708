"""
zypp_sdk.rpc
------------

HTTP JSON-RPC client (see .http).

    from zypp_sdk.rpc import RpcClient
    rpc = RpcClient(url="https://api.devnet.solana.com")
"""

from __future__ import annotations

from .http import RpcClient

__all__ = ["RpcClient"]
