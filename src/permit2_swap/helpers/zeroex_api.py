"""
Tiny wrapper around the 0x Swap API (v2, Permit2 flavour).

Only the three endpoints the swap runner needs:

  • GET /swap/permit2/price   indicative price + allowance issues
  • GET /swap/permit2/quote   firm quote with transaction and Permit2 message
  • GET /sources              liquidity sources for a chain

Every request carries the same headers. There is no retry and no cache;
HTTP and connection errors propagate to the caller.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from permit2_swap.config.network import ZERO_EX_API_URL, ZERO_EX_API_VERSION

__all__ = ["ZeroExClient", "build_swap_params"]

logger = logging.getLogger(__name__)


def build_swap_params(
    *,
    chain_id: int,
    sell_token: str,
    buy_token: str,
    sell_amount: int,
    taker: str,
    affiliate_address: str,
    affiliate_fee_bps: int,
) -> dict[str, str]:
    """Query parameters shared by /price and /quote."""
    return {
        "chainId": str(chain_id),
        "sellToken": sell_token,
        "buyToken": buy_token,
        "sellAmount": str(sell_amount),
        "taker": taker,
        "affiliateAddress": affiliate_address,
        "affiliateFeeBps": str(affiliate_fee_bps),
    }


class ZeroExClient:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = ZERO_EX_API_URL,
        version: str = ZERO_EX_API_VERSION,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "0x-api-key": api_key,
            "0x-version": version,
        })

    def _get(self, path: str, params: dict[str, str]) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} {params}")
        r = self.session.get(url, params=params, timeout=self.timeout)
        if not r.ok:
            logger.error(f"0x API error {r.status_code} on {path}: {r.text}")
        r.raise_for_status()
        return r.json()

    def get_price(self, params: dict[str, str]) -> dict[str, Any]:
        """Indicative (non-binding) price."""
        return self._get("/swap/permit2/price", params)

    def get_quote(self, params: dict[str, str]) -> dict[str, Any]:
        """Firm quote including ``transaction`` and optional ``permit2.eip712``."""
        return self._get("/swap/permit2/quote", params)

    def get_sources(self, chain_id: int) -> Any:
        return self._get("/sources", {"chainId": str(chain_id)})

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ZeroExClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
