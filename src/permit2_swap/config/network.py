"""
Network configuration for the Permit2 swap runner.

Contains chain IDs, explorer links and the 0x API endpoint for the
supported chains.
"""

from typing import Any


# =============================================================================
# CHAIN CONFIGURATIONS
# =============================================================================

CHAINS: dict[str, dict[str, Any]] = {
    "scroll": {
        "chain_id": 534352,
        "name": "Scroll",
        "explorer": {
            "name": "Scrollscan",
            "url": "https://scrollscan.com",
        },
    },
    "scroll_sepolia": {
        "chain_id": 534351,
        "name": "Scroll Sepolia",
        "explorer": {
            "name": "Scrollscan Sepolia",
            "url": "https://sepolia.scrollscan.com",
        },
    },
}

DEFAULT_CHAIN: str = "scroll"

# 0x Swap API
ZERO_EX_API_URL: str = "https://api.0x.org"
ZERO_EX_API_VERSION: str = "v2"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_chain_config(chain: str) -> dict[str, Any]:
    """Get configuration for a specific chain.

    Args:
        chain: Chain name (e.g., 'scroll'), case-insensitive.

    Returns:
        Chain configuration dictionary.

    Raises:
        ValueError: If chain is not supported.
    """
    chain = chain.lower()
    if chain not in CHAINS:
        raise ValueError(f"Unsupported chain: {chain}. Supported: {list(CHAINS.keys())}")

    return CHAINS[chain]


def get_explorer_url(chain: str) -> str:
    """Get the block explorer URL for a chain."""
    config = get_chain_config(chain)
    return config["explorer"]["url"]


def get_tx_url(tx_hash: str, chain: str) -> str:
    """Explorer link for a transaction hash."""
    if not tx_hash.startswith("0x"):
        tx_hash = "0x" + tx_hash
    return f"{get_explorer_url(chain)}/tx/{tx_hash}"
