"""
Contract ABI package for the Permit2 swap runner.
"""

from .erc20 import ERC20_ABI
from .weth import WETH_ABI

__all__ = [
    'ERC20_ABI',
    'WETH_ABI',
]
