"""
zypp_sdk.cli
============

Typer-based command-line interface, installed as the `zypp-sdk` console
script (entry point `zypp_sdk.cli.main:main`).

Typer is only imported when the CLI is actually used:

    >>> from zypp_sdk.cli import run
    >>> run(["version"])
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, List

__all__: List[str] = ["app", "run"]

_SUBMODULE = "zypp_sdk.cli.main"


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name in __all__:
        return getattr(import_module(_SUBMODULE), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
