"""
zypp_sdk.cli.main
=================

`zypp-sdk`: command-line access to the relay pipeline and the envelope codec.

Examples
--------
    $ zypp-sdk --network devnet status
    $ zypp-sdk balance 4Nd1mYw...
    $ zypp-sdk airdrop 4Nd1mYw... 1.5
    $ zypp-sdk build <FROM> <TO> 1000
    $ zypp-sdk submit AQAB...
    $ zypp-sdk envelope-verify package.json
    $ zypp-sdk version

Configuration
-------------
- RPC URL      : `--rpc` or env `ZYPP_RPC_URL` (default: the network's public endpoint)
- Network      : `--network` or env `ZYPP_NETWORK` (default: devnet)
- HTTP Timeout : `--timeout` or env `ZYPP_TIMEOUT` seconds (default: 30)
- Log level    : `--log-level` or env `ZYPP_LOG_LEVEL` (default: INFO)

Failures print the same JSON error body a gateway would return and exit with
status 1.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import typer

from .. import logging as zlog
from ..config import SDKConfig
from ..envelope import decode as decode_package
from ..envelope import verify as verify_package
from ..errors import ZyppError
from ..relay import RelayService, error_response
from ..rpc.http import RpcClient
from ..version import __version__ as SDK_VERSION

app = typer.Typer(
    name="zypp-sdk",
    help="Zypp SDK CLI: build, relay and query ledger transfers; verify package envelopes.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main", "run"]


@dataclass
class Ctx:
    cfg: SDKConfig


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False, default=str))


def _client(cfg: SDKConfig) -> RpcClient:
    return RpcClient.from_config(cfg)


def _with_service(ctx: typer.Context, call: Callable[[RelayService], Any]) -> None:
    """Run `call` against a relay service whose RPC client is closed afterwards."""
    cfg = ctx.obj.cfg

    def _call() -> Any:
        with _client(cfg) as rpc:
            return call(RelayService.from_config(cfg, rpc=rpc))

    _run(_call)


def _run(fn: Callable[[], Any]) -> None:
    """Print the result as JSON, or the error body and exit 1."""
    try:
        result = fn()
    except ZyppError as e:
        _, body = error_response(e)
        typer.echo(json.dumps(body, ensure_ascii=False, default=str), err=True)
        raise typer.Exit(code=1)
    _print_json(result)


@app.callback()
def _root(
    ctx: typer.Context,
    rpc: Optional[str] = typer.Option(None, "--rpc", help="Ledger HTTP JSON-RPC URL."),
    network: Optional[str] = typer.Option(
        None, "--network", help="mainnet | devnet | testnet | localnet."
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="HTTP timeout in seconds."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ..."),
) -> None:
    """
    Resolve the effective configuration (flags over ZYPP_* env over defaults)
    and configure logging once for the process.
    """
    try:
        cfg = SDKConfig.with_overrides(
            SDKConfig.from_env(),
            network=network,
            rpc_url=rpc,
            request_timeout=timeout,
            log_level=log_level,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    json_logs = None if cfg.log_format is None else cfg.log_format.lower() == "json"
    zlog.configure(json=json_logs, level=cfg.log_level)
    zlog.bind(network=cfg.network.value)
    ctx.obj = Ctx(cfg=cfg)


# --- commands -----------------------------------------------------------------


@app.command("version")
def version() -> None:
    """Print the SDK CLI version."""
    typer.echo(f"zypp-sdk {SDK_VERSION}")


@app.command("status")
def status(ctx: typer.Context) -> None:
    """Endpoint, node version and current slot."""
    _with_service(ctx, lambda svc: svc.status())


@app.command("balance")
def balance(
    ctx: typer.Context,
    account: str = typer.Argument(..., help="Base58 account identifier."),
) -> None:
    """Account balance in SOL."""
    _with_service(ctx, lambda svc: svc.balance({"account": account}))


@app.command("airdrop")
def airdrop(
    ctx: typer.Context,
    account: str = typer.Argument(..., help="Base58 account identifier."),
    amount: str = typer.Argument(..., help="Amount in SOL, greater than 0 and at most 2."),
) -> None:
    """Request test funds (not available on mainnet)."""
    _with_service(ctx, lambda svc: svc.airdrop({"account": account, "amount": amount}))


@app.command("build")
def build(
    ctx: typer.Context,
    from_: str = typer.Argument(..., metavar="FROM", help="Sender / fee payer."),
    to: str = typer.Argument(..., help="Recipient."),
    lamports: int = typer.Argument(..., help="Amount in lamports."),
) -> None:
    """Build an unsigned transfer and print it as base64."""
    _with_service(ctx, lambda svc: svc.create_transaction({"from": from_, "to": to, "amount": lamports}))


@app.command("submit")
def submit(
    ctx: typer.Context,
    signed_tx: str = typer.Argument(..., metavar="SIGNED_TX_B64", help="Signed transaction, base64."),
) -> None:
    """Relay a signed transaction and wait for confirmation."""
    _with_service(ctx, lambda svc: svc.submit_transaction({"signedTx": signed_tx}))


@app.command("envelope-verify")
def envelope_verify(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Envelope JSON file."),
    now: Optional[int] = typer.Option(None, "--now", help="Verification time (unix seconds)."),
) -> None:
    """Decode and verify a package envelope."""

    def _verify() -> Any:
        pkg = decode_package(file.read_bytes())
        verify_package(pkg, now=now)
        return {
            "verified": True,
            "id": pkg.header.id,
            "type": pkg.header.type,
            "signatures": len(pkg.signatures),
        }

    _run(_verify)


# --- Entrypoints --------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        rc = app(prog_name="zypp-sdk", standalone_mode=False, args=argv)
        return int(rc or 0)
    except typer.Exit as e:
        return int(e.exit_code)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        return 1


def run(argv: Optional[list[str]] = None) -> int:
    """Alias for :func:`main`."""
    return main(argv)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
