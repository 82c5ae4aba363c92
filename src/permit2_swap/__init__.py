"""
Permit2 swap runner for the 0x Swap API.

Fetches a price, makes sure Permit2 may spend the sell token, fetches a
firm quote, signs its Permit2 message and broadcasts the swap.
"""

__version__ = "0.1.0"
