"""
SDK configuration: network, RPC endpoint, commitment, retry and timeouts.

- Loads sane defaults and supports overrides via environment variables (ZYPP_*).
- Maps each network to its default public RPC endpoint and explorer cluster.
- Provides helpers for building HTTP headers and validating endpoints.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .types.core import Network
from .version import __version__

DEFAULT_RPC_URLS: Dict[Network, str] = {
    Network.MAINNET: "https://api.mainnet-beta.solana.com",
    Network.DEVNET: "https://api.devnet.solana.com",
    Network.TESTNET: "https://api.testnet.solana.com",
    Network.LOCALNET: "http://127.0.0.1:8899",
}

EXPLORER_BASE = "https://explorer.solana.com"

_COMMITMENTS = ("processed", "confirmed", "finalized")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v not in (None, "") else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


def parse_network(val: Any, default: Network = Network.DEVNET) -> Network:
    """Accepts a Network, its value, or None (-> default)."""
    if val is None or val == "":
        return default
    if isinstance(val, Network):
        return val
    try:
        return Network(str(val).strip().lower())
    except ValueError:
        raise ValueError(f"unknown network {val!r}; expected one of {[n.value for n in Network]}") from None


def explorer_url(signature: str, network: Network | str) -> str:
    """Block-explorer link for a transaction signature."""
    net = parse_network(network)
    url = f"{EXPLORER_BASE}/tx/{signature}"
    if net is Network.MAINNET:
        return url
    if net is Network.LOCALNET:
        return f"{url}?cluster=custom"
    return f"{url}?cluster={net.value}"


@dataclass(slots=True)
class SDKConfig:
    # Core
    network: Network = Network.DEVNET
    rpc_url: str = field(default_factory=lambda: DEFAULT_RPC_URLS[Network.DEVNET])
    commitment: str = "confirmed"
    # HTTP behavior
    request_timeout: float = 30.0
    # Submit path
    max_attempts: int = 3
    retry_base: float = 0.2
    confirm_timeout: float = 60.0
    poll_interval: float = 0.5
    # Headers / identity
    user_agent: str = field(default_factory=lambda: f"zypp-sdk-py/{__version__}")
    # Logging
    log_level: str = "INFO"
    log_format: Optional[str] = None

    def __post_init__(self) -> None:
        self.network = parse_network(self.network)
        _ensure_scheme(self.rpc_url, ("http", "https"))
        if self.commitment not in _COMMITMENTS:
            raise ValueError(f"commitment must be one of {_COMMITMENTS}, got {self.commitment!r}")
        if int(self.max_attempts) < 1:
            raise ValueError("max_attempts must be >= 1")

    @classmethod
    def for_network(cls, network: Network | str, **overrides: Any) -> "SDKConfig":
        net = parse_network(network)
        overrides.setdefault("rpc_url", DEFAULT_RPC_URLS[net])
        return cls(network=net, **overrides)

    @classmethod
    def from_env(cls, prefix: str = "ZYPP_") -> "SDKConfig":
        """
        Create config from environment variables:

        ZYPP_NETWORK            (mainnet|devnet|testnet|localnet, default devnet)
        ZYPP_RPC_URL            (http/https; default derived from network)
        ZYPP_COMMITMENT         (processed|confirmed|finalized, default confirmed)
        ZYPP_TIMEOUT            (float seconds, HTTP)
        ZYPP_MAX_ATTEMPTS       (int, relay attempts on submit)
        ZYPP_RETRY_BASE         (float seconds, first backoff cap)
        ZYPP_CONFIRM_TIMEOUT    (float seconds)
        ZYPP_POLL_INTERVAL      (float seconds)
        ZYPP_USER_AGENT         (str)
        ZYPP_LOG_LEVEL          (str)
        ZYPP_LOG_FORMAT         (json|text)
        """
        net = parse_network(_env(f"{prefix}NETWORK"))
        return cls(
            network=net,
            rpc_url=_env(f"{prefix}RPC_URL", DEFAULT_RPC_URLS[net]) or DEFAULT_RPC_URLS[net],
            commitment=_env(f"{prefix}COMMITMENT", "confirmed") or "confirmed",
            request_timeout=float(_env(f"{prefix}TIMEOUT", "30.0") or 30.0),
            max_attempts=int(_env(f"{prefix}MAX_ATTEMPTS", "3") or 3),
            retry_base=float(_env(f"{prefix}RETRY_BASE", "0.2") or 0.2),
            confirm_timeout=float(_env(f"{prefix}CONFIRM_TIMEOUT", "60.0") or 60.0),
            poll_interval=float(_env(f"{prefix}POLL_INTERVAL", "0.5") or 0.5),
            user_agent=_env(f"{prefix}USER_AGENT", f"zypp-sdk-py/{__version__}") or f"zypp-sdk-py/{__version__}",
            log_level=_env(f"{prefix}LOG_LEVEL", "INFO") or "INFO",
            log_format=_env(f"{prefix}LOG_FORMAT"),
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["SDKConfig"] = None, **overrides: Any
    ) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored; None values are ignored. Changing the network
        without an explicit rpc_url switches to that network's default endpoint.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        if overrides.get("network") is not None and overrides.get("rpc_url") is None:
            data["rpc_url"] = DEFAULT_RPC_URLS[parse_network(overrides["network"])]
        return cls(**data)

    def explorer_url(self, signature: str) -> str:
        return explorer_url(signature, self.network)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network.value,
            "rpc_url": self.rpc_url,
            "commitment": self.commitment,
            "request_timeout": float(self.request_timeout),
            "max_attempts": int(self.max_attempts),
            "retry_base": float(self.retry_base),
            "confirm_timeout": float(self.confirm_timeout),
            "poll_interval": float(self.poll_interval),
            "user_agent": self.user_agent,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


__all__ = ["SDKConfig", "DEFAULT_RPC_URLS", "explorer_url", "parse_network"]
