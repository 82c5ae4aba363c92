#!/usr/bin/env python3
"""
Swap a token through the 0x Permit2 flow, end to end, in one run.

Steps, strictly in order:

  1. read the sell token's decimals and fetch an indicative price
  2. approve Permit2 for the sell token if the price reports it missing
  3. fetch the firm quote
  4. sign the quote's Permit2 message and append it to the calldata
  5. sign and broadcast the transaction
  6. print liquidity sources and any buy/sell token tax

Usage
-----
    PRIVATE_KEY=<hex> \
    ZERO_EX_API_KEY=<key> \
    ALCHEMY_HTTP_TRANSPORT_URL=<rpc> \
    python -m permit2_swap \
        --sell-token WETH      \\ # symbol from config.tokens or an address
        --buy-token  wstETH    \\
        --amount     0.1       \\ # human units of the sell token
        --affiliate-fee-bps 100
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext

from dotenv import load_dotenv

from permit2_swap.config.logging_config import log_swap, setup_logger
from permit2_swap.config.network import CHAINS
from permit2_swap.config.settings import ConfigurationError, load_settings
from permit2_swap.config.tokens import DEFAULT_SWAP_CONFIG, resolve_token
from permit2_swap.helpers.allowance import ensure_allowance
from permit2_swap.helpers.permit2 import PermitSignatureError, append_signature, sign_permit2_message
from permit2_swap.helpers.token_tax import extract_taxes, format_percent
from permit2_swap.helpers.tx_sender import submit_swap
from permit2_swap.helpers.web3_setup import ChainClient
from permit2_swap.helpers.zeroex_api import ZeroExClient, build_swap_params
from permit2_swap.models import QuoteTransaction, SubmissionStatus, SwapParams, SwapReport

logger = logging.getLogger(__name__)


def to_base_units(amount: Decimal, decimals: int) -> int:
    """Human amount to integer base units: 0.1 @ 18 -> 10**17.

    Digits beyond *decimals* are rounded half-up, as ``parseUnits`` does.
    The context precision covers the full uint256 range.
    """
    with localcontext() as ctx:
        ctx.prec = 78
        scaled = Decimal(amount).scaleb(decimals)
        return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


# --------------------------------------------------------------------------- #
# Pipeline                                                                    #
# --------------------------------------------------------------------------- #
def run_swap(chain: ChainClient, api: ZeroExClient, params: SwapParams) -> SwapReport:
    """Run the whole swap once.

    Approval and submission problems are logged and the run continues;
    a Permit2 signature that was required but not obtained raises
    :class:`PermitSignatureError` before anything is broadcast. API errors
    propagate.
    """
    # 1. price
    decimals = chain.token_decimals(params.sell_token)
    sell_amount = to_base_units(params.sell_amount, decimals)

    query = build_swap_params(
        chain_id=chain.chain_id,
        sell_token=params.sell_token,
        buy_token=params.buy_token,
        sell_amount=sell_amount,
        taker=chain.address,
        affiliate_address=params.affiliate_address or chain.address,
        affiliate_fee_bps=params.affiliate_fee_bps,
    )
    price = api.get_price(query)
    logger.info(f"Fetching price to swap {params.sell_amount} {params.sell_token} for {params.buy_token}: {price}")

    # 2. allowance
    # Approval confirmation does not gate the quote or the swap below.
    approval = ensure_allowance(chain, params.sell_token, price)

    # 3. quote
    quote = api.get_quote(dict(query))
    logger.info(f"Quote for the swap: {quote}")

    # 4. permit2 signature
    signature = sign_permit2_message(chain, quote)
    qtx = QuoteTransaction.from_quote(quote)
    if signature.required:
        if signature.signature is None or not qtx.data:
            raise PermitSignatureError("Failed to obtain signature or transaction data.")
        qtx.data = append_signature(qtx.data, signature.signature)

    # 5. broadcast
    submission = submit_swap(chain, qtx, signature)
    log_swap(
        logger,
        params.sell_token,
        params.buy_token,
        sell_amount,
        tx_hash=submission.tx_hash,
        success=submission.status is SubmissionStatus.SENT,
        reason=submission.reason,
    )

    # 6. informational trailer
    sources = api.get_sources(chain.chain_id)
    logger.info(f"Liquidity sources for chain {chain.chain_id}: {sources}")

    taxes = extract_taxes(quote)
    if taxes.buy_tax_pct is not None:
        logger.info(f"Buy Tax for the token: {format_percent(taxes.buy_tax_pct)}")
    if taxes.sell_tax_pct is not None:
        logger.info(f"Sell Tax for the token: {format_percent(taxes.sell_tax_pct)}")

    return SwapReport(
        sell_amount=sell_amount,
        price=price,
        approval=approval,
        quote=quote,
        signature=signature,
        submission=submission,
        sources=sources,
        taxes=taxes,
    )


# --------------------------------------------------------------------------- #
# CLI                                                                         #
# --------------------------------------------------------------------------- #
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Swap tokens through the 0x Permit2 API.")
    ap.add_argument("--chain", choices=sorted(CHAINS), default=None, help="Chain name (default: CHAIN env or scroll)")
    ap.add_argument("--sell-token", default=DEFAULT_SWAP_CONFIG["sell_token"], help="Symbol or address to sell")
    ap.add_argument("--buy-token", default=DEFAULT_SWAP_CONFIG["buy_token"], help="Symbol or address to buy")
    ap.add_argument("--amount", type=Decimal, default=DEFAULT_SWAP_CONFIG["sell_amount"],
                    help="Sell amount in token units (default 0.1)")
    ap.add_argument("--affiliate-fee-bps", type=int, default=DEFAULT_SWAP_CONFIG["affiliate_fee_bps"],
                    help="Affiliate fee in basis points (default 100 = 1%%)")
    ap.add_argument("--affiliate-address", default=None, help="Fee recipient (default: taker)")
    ap.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = parse_args(argv)
    setup_logger("permit2_swap", level=logging.DEBUG if args.verbose else logging.INFO, detailed=args.verbose)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        raise SystemExit(f"❌  {e}")
    if args.chain:
        settings = dataclasses.replace(settings, chain=args.chain)

    try:
        params = SwapParams(
            sell_token=resolve_token(settings.chain, args.sell_token),
            buy_token=resolve_token(settings.chain, args.buy_token),
            sell_amount=args.amount,
            affiliate_fee_bps=args.affiliate_fee_bps,
            affiliate_address=args.affiliate_address,
        )
    except ValueError as e:
        raise SystemExit(f"❌  {e}")

    chain = ChainClient.connect(settings)
    with ZeroExClient(settings.zero_ex_api_key, base_url=settings.api_url, version=settings.api_version) as api:
        run_swap(chain, api, params)


if __name__ == "__main__":
    main()
