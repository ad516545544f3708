"""
zypp_sdk.ledger.client
======================

Read-only ledger queries plus the non-production faucet.

Entry points
------------
- LedgerQueryClient(rpc, network=..., endpoint=...)
    .get_balance(account) -> Decimal                   (display units, >= 0)
    .request_faucet_credit(account, amount) -> str     (signature, confirmed)
    .get_network_status() -> NetworkStatus

All input validation runs before the first RPC call.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Protocol, Union

from .. import address
from ..errors import (RpcConnectionError, RpcError, TransactionSubmitError,
                      ValidationError, ZyppError)
from ..logging import get_logger
from ..tx.send import wait_for_confirmation
from ..types.core import Network, NetworkStatus, lamports_to_sol, sol_to_lamports

log = get_logger(__name__)

FAUCET_MAX = Decimal(2)

AmountLike = Union[Decimal, int, float, str]


class _RpcClient(Protocol):
    def call(self, method: str, params: Optional[dict | list] = None) -> Any: ...


def coerce_amount(amount: AmountLike, *, field: str = "amount") -> Decimal:
    """Turn a user-supplied display amount into a finite Decimal."""
    if isinstance(amount, bool):
        raise ValidationError("amount must be a number", field=field)
    if isinstance(amount, Decimal):
        value = amount
    elif isinstance(amount, int):
        value = Decimal(amount)
    elif isinstance(amount, (float, str)):
        # str() keeps 0.0001 as 0.0001 instead of its binary expansion
        try:
            value = Decimal(str(amount).strip())
        except InvalidOperation:
            raise ValidationError(f"amount is not a number: {amount!r}", field=field) from None
    else:
        raise ValidationError("amount must be a number", field=field)
    if not value.is_finite():
        raise ValidationError("amount must be finite", field=field)
    return value


def faucet_lamports(amount: AmountLike) -> int:
    """Validate a faucet amount in (0, 2] display units and convert to lamports."""
    value = coerce_amount(amount)
    if value <= 0 or value > FAUCET_MAX:
        raise ValidationError(f"amount must be greater than 0 and at most {FAUCET_MAX}", field="amount")
    try:
        return sol_to_lamports(value)
    except ValueError as e:
        raise ValidationError(str(e), field="amount", cause=e) from e


class LedgerQueryClient:
    def __init__(
        self,
        rpc: _RpcClient,
        *,
        network: Network | str = Network.DEVNET,
        endpoint: Optional[str] = None,
        commitment: str = "confirmed",
        confirm_timeout_s: float = 60.0,
        poll_interval_s: float = 0.5,
    ) -> None:
        self.rpc = rpc
        self.network = Network(network)
        self.endpoint = endpoint if endpoint is not None else getattr(rpc, "url", "")
        self.commitment = commitment
        self.confirm_timeout_s = confirm_timeout_s
        self.poll_interval_s = poll_interval_s

    @classmethod
    def from_config(cls, rpc: _RpcClient, cfg: Any) -> "LedgerQueryClient":
        return cls(
            rpc,
            network=cfg.network,
            endpoint=cfg.rpc_url,
            commitment=cfg.commitment,
            confirm_timeout_s=cfg.confirm_timeout,
            poll_interval_s=cfg.poll_interval,
        )

    # --- balance ---------------------------------------------------------

    def get_balance(self, account: str) -> Decimal:
        """Balance in display units. Unknown accounts read as 0."""
        address.parse(account, field="account")
        res = self.rpc.call("getBalance", [account, {"commitment": self.commitment}])
        lamports = res.get("value") if isinstance(res, dict) else res
        if isinstance(lamports, bool) or not isinstance(lamports, int) or lamports < 0:
            raise RpcError("unexpected getBalance result", method="getBalance", data=res)
        return lamports_to_sol(lamports)

    # --- faucet ----------------------------------------------------------

    def request_faucet_credit(self, account: str, amount: AmountLike) -> str:
        """
        Request test funds and wait until the credit is confirmed.

        Raises:
            ValidationError for a bad account / amount, or on mainnet
            TransactionSubmitError when the credit did not confirm
        """
        address.parse(account, field="account")
        lamports = faucet_lamports(amount)
        if self.network.is_production:
            raise ValidationError("faucet credit is not available on mainnet", field="network")

        signature = self.rpc.call("requestAirdrop", [account, lamports])
        if not isinstance(signature, str) or not signature:
            raise RpcError("unexpected requestAirdrop result", method="requestAirdrop", data=signature)
        log.info("faucet credit requested", extra={"signature": signature, "lamports": lamports})

        try:
            wait_for_confirmation(
                self.rpc,
                signature,
                commitment=self.commitment,
                timeout_s=self.confirm_timeout_s,
                poll_interval_s=self.poll_interval_s,
            )
        except ZyppError as e:
            raise TransactionSubmitError(
                f"faucet credit did not confirm: {e.message}", signature=signature, cause=e
            ) from e
        return signature

    # --- status ----------------------------------------------------------

    def get_network_status(self) -> NetworkStatus:
        try:
            version = self.rpc.call("getVersion", [])
            slot = self.rpc.call("getSlot", [{"commitment": self.commitment}])
        except RpcConnectionError:
            raise
        except ZyppError as e:
            raise RpcConnectionError(f"connection check failed: {e.message}", cause=e) from e
        if not isinstance(version, dict) or isinstance(slot, bool) or not isinstance(slot, int):
            raise RpcConnectionError(f"connection check failed: unexpected payload {version!r} / {slot!r}")
        return NetworkStatus(endpoint=self.endpoint, version=version, current_slot=slot)


__all__ = ["LedgerQueryClient", "FAUCET_MAX", "coerce_amount", "faucet_lamports"]
