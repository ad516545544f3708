from __future__ import annotations

"""
HTTP JSON-RPC client (sync) for Solana-style ledger nodes.

- Uses httpx with a pooled `httpx.Client`; one instance is safe to share
  between the builder, submitter and ledger client.
- Transport failures (timeouts, dropped connections, HTTP 429/502/503/504) raise
  `RpcConnectionError`; JSON-RPC error objects raise `RpcError` verbatim.
- No retries here: callers decide where a retry is safe (only the relay step
  of `TransactionSubmitter.submit` does).

Example:
    from zypp_sdk.rpc.http import RpcClient
    rpc = RpcClient("https://api.devnet.solana.com")
    slot = rpc.call("getSlot", [{"commitment": "confirmed"}])
"""

import json
import time
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Union

import httpx

from ..errors import JsonRpcCode, RpcConnectionError, RpcError, from_jsonrpc_error
from ..logging import get_logger
from ..version import __version__ as SDK_VERSION

JSON = Union[dict, list, str, int, float, bool, None]
Params = Union[Sequence[Any], Mapping[str, Any], None]

log = get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _is_retriable_http(status: int) -> bool:
    # Typical transient HTTP statuses: 429/502/503/504
    return status in (429, 502, 503, 504)


@dataclass
class RpcClient:
    """Synchronous JSON-RPC 2.0 client over HTTP."""

    url: str
    timeout: float = 30.0
    headers: Optional[Mapping[str, str]] = None
    transport: Optional[httpx.BaseTransport] = None
    _id_counter: Iterator[int] = field(default_factory=lambda: count(start=_now_ms()))
    _client: Optional[httpx.Client] = field(init=False, default=None)

    def __post_init__(self) -> None:
        merged_headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": f"zypp-sdk-python/{SDK_VERSION}",
        }
        if self.headers:
            merged_headers.update(dict(self.headers))
        self._client = httpx.Client(
            timeout=self.timeout,
            headers=merged_headers,
            transport=self.transport,
        )

    @classmethod
    def from_config(cls, cfg: Any, **kwargs: Any) -> "RpcClient":
        return cls(cfg.rpc_url, timeout=cfg.request_timeout, headers=cfg.http_headers(), **kwargs)

    # --- context manager -------------------------------------------------

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    # --- public API ------------------------------------------------------

    def call(self, method: str, params: Params = None) -> JSON:
        """Perform a single JSON-RPC request and return `result` or raise."""
        payload = self._make_payload(method, params)
        return self._send_once(method, payload)

    # --- internals -------------------------------------------------------

    def _make_payload(self, method: str, params: Params) -> Dict[str, Any]:
        rid = next(self._id_counter)
        if params is None:
            params = []
        elif isinstance(params, Mapping):
            params = dict(params)
        elif isinstance(params, Sequence) and not isinstance(params, (str, bytes, bytearray)):
            params = list(params)
        else:
            # Coerce single param into positional list
            params = [params]  # type: ignore[list-item]
        return {"jsonrpc": "2.0", "id": rid, "method": method, "params": params}

    def _send_once(self, method: str, payload: Dict[str, Any]) -> JSON:
        assert self._client is not None
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        try:
            r = self._client.post(self.url, content=body)
        except httpx.TransportError as e:
            log.debug("rpc transport error", extra={"method": method, "error": str(e)})
            raise RpcConnectionError(f"{method}: network error: {e}", method=method, cause=e) from e
        if _is_retriable_http(r.status_code):
            raise RpcConnectionError(
                f"{method}: HTTP {r.status_code}", method=method, http_status=r.status_code
            )
        # Avoid raise_for_status() so an error body stays visible below
        try:
            resp = r.json()
        except ValueError as e:
            raise RpcError(
                "Non-JSON response from RPC",
                code=JsonRpcCode.INTERNAL_ERROR,
                method=method,
                data=f"HTTP {r.status_code}: {r.text[:256]}",
            ) from e

        if not isinstance(resp, dict):
            raise RpcError(
                "Invalid JSON-RPC response type",
                method=method,
                data=type(resp).__name__,
            )
        if resp.get("error") is not None:
            raise from_jsonrpc_error(resp["error"], method=method, request_id=resp.get("id"))
        if "result" not in resp:
            raise RpcError("Malformed JSON-RPC response", method=method, data=resp)
        return resp["result"]


__all__ = ["RpcClient"]
