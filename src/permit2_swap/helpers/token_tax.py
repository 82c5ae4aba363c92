"""
Buy/sell tax reporting from a quote's ``tokenMetadata``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from permit2_swap.models import TaxInfo

__all__ = ["bps_to_percent", "extract_taxes", "format_percent"]


def bps_to_percent(bps: Any) -> Decimal:
    """Basis points to percent: 250 -> 2.5."""
    return Decimal(str(bps)) / Decimal(100)


def format_percent(pct: Decimal) -> str:
    text = format(pct.normalize(), "f")
    return f"{text}%"


def extract_taxes(quote: dict[str, Any]) -> TaxInfo:
    """Non-zero buy tax of the buy token and sell tax of the sell token."""
    metadata = quote.get("tokenMetadata") or {}
    buy_token = metadata.get("buyToken") or {}
    sell_token = metadata.get("sellToken") or {}

    # A zero tax ("0" or 0) is treated as no tax and is not reported.
    info = TaxInfo()
    if buy_token.get("buyTaxBps") and bps_to_percent(buy_token["buyTaxBps"]):
        info.buy_tax_pct = bps_to_percent(buy_token["buyTaxBps"])
    if sell_token.get("sellTaxBps") and bps_to_percent(sell_token["sellTaxBps"]):
        info.sell_tax_pct = bps_to_percent(sell_token["sellTaxBps"])
    return info
