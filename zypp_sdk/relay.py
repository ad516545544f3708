"""
Transport-agnostic relay facade.

`RelayService` takes plain request mappings (as a gateway would parse them from
a request body) and returns plain response mappings. Gateways map any raised
`ZyppError` through `error_response` without inspecting SDK internals.

    service = RelayService.from_config(SDKConfig.from_env())
    service.create_transaction({"from": a, "to": b, "amount": 1000})
    # -> {"unsignedTx": "AQAAAA..."}

Amounts and balances in responses are decimal strings so no precision is lost
in JSON.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Tuple

from .config import SDKConfig, explorer_url, parse_network
from .errors import ValidationError, ZyppError
from .ledger.client import LedgerQueryClient, coerce_amount
from .logging import get_logger
from .rpc.http import RpcClient
from .tx.build import TransactionBuilder
from .tx.send import TransactionSubmitter
from .types.core import DISPLAY_UNIT, Network

log = get_logger(__name__)

Request = Mapping[str, Any]
Response = Dict[str, Any]


def _require(req: Request, name: str, kind: type | Tuple[type, ...], what: str) -> Any:
    if not isinstance(req, Mapping):
        raise ValidationError("request body must be an object", field="body")
    if name not in req or req[name] is None:
        raise ValidationError(f"{name} is required", field=name)
    value = req[name]
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ValidationError(f"{name} must be {what}", field=name)
    return value


def _decimal_text(d: Decimal) -> str:
    # 1.500000000 -> "1.5", 2 -> "2"
    return format(d.normalize(), "f")


class RelayService:
    def __init__(
        self,
        builder: TransactionBuilder,
        submitter: TransactionSubmitter,
        ledger: LedgerQueryClient,
        *,
        network: Network | str = Network.DEVNET,
    ) -> None:
        self.builder = builder
        self.submitter = submitter
        self.ledger = ledger
        self.network = parse_network(network)

    @classmethod
    def from_config(cls, cfg: SDKConfig, rpc: Optional[Any] = None) -> "RelayService":
        """Wire every component to one shared RPC client."""
        rpc = rpc if rpc is not None else RpcClient.from_config(cfg)
        return cls(
            TransactionBuilder(rpc, commitment=cfg.commitment),
            TransactionSubmitter.from_config(rpc, cfg),
            LedgerQueryClient.from_config(rpc, cfg),
            network=cfg.network,
        )

    # --- contracts -------------------------------------------------------

    def create_transaction(self, req: Request) -> Response:
        from_ = _require(req, "from", str, "a base58 account identifier")
        to = _require(req, "to", str, "a base58 account identifier")
        amount = _require(req, "amount", int, "an integer number of lamports")
        return {"unsignedTx": self.builder.build(from_, to, amount)}

    def submit_transaction(self, req: Request) -> Response:
        signed = _require(req, "signedTx", str, "a base64 string")
        signature = self.submitter.submit(signed)
        return {"signature": signature, "explorerUrl": explorer_url(signature, self.network)}

    def balance(self, req: Request) -> Response:
        account = _require(req, "account", str, "a base58 account identifier")
        bal = self.ledger.get_balance(account)
        return {"balance": _decimal_text(bal), "account": account, "unit": DISPLAY_UNIT}

    def airdrop(self, req: Request) -> Response:
        account = _require(req, "account", str, "a base58 account identifier")
        raw_amount = _require(req, "amount", (int, float, str, Decimal), "a decimal number")
        amount = coerce_amount(raw_amount)
        signature = self.ledger.request_faucet_credit(account, amount)
        return {
            "signature": signature,
            "amount": _decimal_text(amount),
            "account": account,
            "explorerUrl": explorer_url(signature, self.network),
        }

    def status(self) -> Response:
        return self.ledger.get_network_status().to_dict()


def error_response(exc: BaseException) -> Tuple[int, Response]:
    """Map an exception to (HTTP-style status, JSON body)."""
    if isinstance(exc, ZyppError):
        return exc.status_hint, exc.to_dict()
    log.error("unexpected error", exc_info=exc)
    return 500, {"error": "internal", "message": str(exc) or type(exc).__name__}


__all__ = ["RelayService", "error_response"]
