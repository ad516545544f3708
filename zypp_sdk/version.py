"""
Version of the Zypp Python SDK (PEP 440). Sent in the default User-Agent and
printed by `zypp-sdk version`.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
