"""
Runtime settings for the Permit2 swap runner.

All credentials and endpoints are read from the environment exactly once,
at startup, into a frozen :class:`SwapSettings` that is then passed to the
pipeline. Nothing downstream calls ``os.getenv`` mid-flow.

Environment variables:
  • PRIVATE_KEY                 (required; hex, with or without 0x)
  • ZERO_EX_API_KEY             (required)
  • ALCHEMY_HTTP_TRANSPORT_URL  (required; RPC_URL is accepted as fallback)
  • CHAIN                       (optional; default "scroll")
  • ZERO_EX_API_URL             (optional; default https://api.0x.org)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .network import DEFAULT_CHAIN, ZERO_EX_API_URL, ZERO_EX_API_VERSION, get_chain_config

__all__ = ["ConfigurationError", "SwapSettings", "load_settings"]


class ConfigurationError(ValueError):
    """A required setting is missing or malformed."""


@dataclass(frozen=True)
class SwapSettings:
    private_key: str
    zero_ex_api_key: str
    rpc_url: str
    chain: str = DEFAULT_CHAIN
    api_url: str = ZERO_EX_API_URL
    api_version: str = ZERO_EX_API_VERSION

    @property
    def chain_id(self) -> int:
        return get_chain_config(self.chain)["chain_id"]

    def __repr__(self) -> str:
        # keep secrets out of logs and tracebacks
        return (
            f"SwapSettings(chain={self.chain!r}, rpc_url={self.rpc_url!r}, "
            f"api_url={self.api_url!r}, api_version={self.api_version!r})"
        )


def _normalize_private_key(value: str) -> str:
    key = value.strip()
    if not key.startswith("0x"):
        key = "0x" + key
    try:
        int(key, 16)
    except ValueError:
        raise ConfigurationError("PRIVATE_KEY is not a hex string") from None
    if len(key) != 66:
        raise ConfigurationError("PRIVATE_KEY must be 32 bytes (64 hex characters)")
    return key


def load_settings(environ: Mapping[str, str] | None = None) -> SwapSettings:
    """Build :class:`SwapSettings` from *environ* (defaults to ``os.environ``).

    Raises:
        ConfigurationError: If any required variable is absent or invalid.
    """
    env = os.environ if environ is None else environ

    private_key = env.get("PRIVATE_KEY")
    api_key = env.get("ZERO_EX_API_KEY")
    rpc_url = env.get("ALCHEMY_HTTP_TRANSPORT_URL") or env.get("RPC_URL")

    missing = [
        name
        for name, value in (
            ("PRIVATE_KEY", private_key),
            ("ZERO_EX_API_KEY", api_key),
            ("ALCHEMY_HTTP_TRANSPORT_URL", rpc_url),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    chain = env.get("CHAIN", DEFAULT_CHAIN).lower()
    try:
        get_chain_config(chain)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    return SwapSettings(
        private_key=_normalize_private_key(private_key),
        zero_ex_api_key=api_key,
        rpc_url=rpc_url,
        chain=chain,
        api_url=env.get("ZERO_EX_API_URL", ZERO_EX_API_URL).rstrip("/"),
    )
