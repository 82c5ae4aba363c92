"""
Configuration package for the Permit2 swap runner.
"""

from permit2_swap.config.network import (
    CHAINS,
    DEFAULT_CHAIN,
    ZERO_EX_API_URL,
    ZERO_EX_API_VERSION,
    get_chain_config,
    get_explorer_url,
    get_tx_url,
)

from permit2_swap.config.tokens import (
    TOKEN_CONFIG,
    DEFAULT_SWAP_CONFIG,
    resolve_token,
    is_wrapped_native,
)

from permit2_swap.config.settings import (
    ConfigurationError,
    SwapSettings,
    load_settings,
)

from permit2_swap.config.abis import (
    ERC20_ABI,
    WETH_ABI,
)

__all__ = [
    # Network
    'CHAINS',
    'DEFAULT_CHAIN',
    'ZERO_EX_API_URL',
    'ZERO_EX_API_VERSION',
    'get_chain_config',
    'get_explorer_url',
    'get_tx_url',

    # Tokens
    'TOKEN_CONFIG',
    'DEFAULT_SWAP_CONFIG',
    'resolve_token',
    'is_wrapped_native',

    # Settings
    'ConfigurationError',
    'SwapSettings',
    'load_settings',

    # ABIs
    'ERC20_ABI',
    'WETH_ABI',
]
