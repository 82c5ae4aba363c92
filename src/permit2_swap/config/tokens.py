"""
Token configurations for the Permit2 swap runner.

Contains per-chain token addresses and the default swap parameters.
"""

from decimal import Decimal
from typing import Any

# Token configurations, keyed by chain name then symbol
TOKEN_CONFIG: dict[str, dict[str, dict[str, Any]]] = {
    "scroll": {
        "WETH": {
            "name": "Wrapped Ether",
            "address": "0x5300000000000000000000000000000000000004",
            "decimals": 18,
            "wrapped_native": True,
        },
        "wstETH": {
            "name": "Wrapped liquid staked Ether 2.0",
            "address": "0xf610A9dfB7C89644979b4A0f27063E9e7d7Cda32",
            "decimals": 18,
        },
    },
    "scroll_sepolia": {
        "WETH": {
            "name": "Wrapped Ether",
            "address": "0x5300000000000000000000000000000000000004",
            "decimals": 18,
            "wrapped_native": True,
        },
    },
}

# Default swap configuration: sell 0.1 WETH for wstETH, 1% affiliate fee
DEFAULT_SWAP_CONFIG = {
    "sell_token": "WETH",
    "buy_token": "wstETH",
    "sell_amount": Decimal("0.1"),
    "affiliate_fee_bps": 100,
}


def resolve_token(chain: str, token: str) -> str:
    """Return the address for *token*, which may be a symbol or an address.

    Raises:
        ValueError: If a symbol is not configured for *chain*.
    """
    if token.startswith("0x"):
        return token
    tokens = TOKEN_CONFIG.get(chain, {})
    for symbol, info in tokens.items():
        if symbol.lower() == token.lower():
            return info["address"]
    raise ValueError(f"Unknown token {token!r} on {chain}. Known: {list(tokens)}")


def is_wrapped_native(chain: str, address: str) -> bool:
    """True if *address* is the chain's wrapped native token (WETH)."""
    return any(
        info.get("wrapped_native") and info["address"].lower() == address.lower()
        for info in TOKEN_CONFIG.get(chain, {}).values()
    )
