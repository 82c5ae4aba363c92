"""
Sign and broadcast the swap transaction from a firm quote.
"""

from __future__ import annotations

import logging
from typing import Any

from web3 import Web3

from permit2_swap.models import QuoteTransaction, SignatureOutcome, SubmissionOutcome, SubmissionStatus

__all__ = ["build_swap_transaction", "submit_swap"]

logger = logging.getLogger(__name__)


def build_swap_transaction(chain, qtx: QuoteTransaction) -> dict[str, Any]:
    """Legacy-fee transaction dict for *qtx* with a freshly fetched nonce.

    Missing ``value`` defaults to 0; missing ``gasPrice`` and ``gas`` are
    filled from the node.
    """
    tx: dict[str, Any] = {
        "to": Web3.to_checksum_address(qtx.to),
        "data": qtx.data,
        "value": qtx.value or 0,
        "nonce": chain.nonce(),
        "chainId": chain.chain_id,
    }
    tx["gasPrice"] = qtx.gas_price if qtx.gas_price is not None else chain.w3.eth.gas_price
    if qtx.gas is not None:
        tx["gas"] = qtx.gas
    else:
        tx["gas"] = chain.w3.eth.estimate_gas({
            "from": chain.address,
            "to": tx["to"],
            "data": tx["data"],
            "value": tx["value"],
        })
        logger.debug(f"Estimated gas: {tx['gas']}")
    return tx


def submit_swap(chain, qtx: QuoteTransaction, signature: SignatureOutcome) -> SubmissionOutcome:
    """Broadcast the swap if its preconditions hold, otherwise skip it.

    Preconditions: the quote has calldata, and a signature was produced
    whenever one was required.
    """
    if not signature.ok or not qtx.data:
        reason = "missing Permit2 signature" if not signature.ok else "quote has no transaction data"
        logger.error(f"Failed to send the transaction: {reason}.")
        return SubmissionOutcome(SubmissionStatus.SKIPPED, reason=reason)

    tx = build_swap_transaction(chain, qtx)
    tx_hash = chain.send_transaction(tx)
    url = chain.explorer_tx_url(tx_hash)
    logger.info(f"Transaction sent successfully. See details at: {url}")
    return SubmissionOutcome(SubmissionStatus.SENT, tx_hash=tx_hash, explorer_url=url)
