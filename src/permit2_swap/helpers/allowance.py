"""
Permit2 allowance check driven by the 0x price response.

The price endpoint reports ``issues.allowance`` when the taker has not yet
approved the Permit2 contract for the sell token. In that case we push a
single ``approve(spender, MAX_UINT256)``; otherwise nothing is sent.

Approval failures are reported, never raised: the caller carries on to the
quote, and the swap itself may then revert for lack of allowance.
"""

from __future__ import annotations

import logging
from typing import Any

from web3 import Web3

from permit2_swap.models import ApprovalOutcome, ApprovalStatus

__all__ = ["MAX_UINT256", "allowance_spender", "ensure_allowance"]

logger = logging.getLogger(__name__)

MAX_UINT256 = (1 << 256) - 1         # 2**256 − 1


def allowance_spender(price: dict[str, Any]) -> str | None:
    """Spender from ``issues.allowance``, or None if no approval is outstanding."""
    issues = price.get("issues") or {}
    allowance = issues.get("allowance")
    if allowance is None:
        return None
    return allowance["spender"]


def ensure_allowance(chain, token_address: str, price: dict[str, Any]) -> ApprovalOutcome:
    """Approve Permit2 for *token_address* if the price response asks for it.

    The approve call is simulated with ``eth_call`` first, then signed,
    broadcast and waited on.
    """
    try:
        spender = allowance_spender(price)
    except (KeyError, TypeError) as e:
        logger.error(f"Malformed allowance issue in price response: {e}")
        return ApprovalOutcome(ApprovalStatus.FAILED, error=e)

    if spender is None:
        logger.info("Sell token already approved for Permit2.")
        return ApprovalOutcome(ApprovalStatus.NOT_NEEDED)

    try:
        token = chain.token(token_address)
        fn = token.functions.approve(Web3.to_checksum_address(spender), MAX_UINT256)

        # simulate
        fn.call({"from": chain.address})

        tx = fn.build_transaction({
            "from": chain.address,
            "nonce": chain.nonce(),
            "chainId": chain.chain_id,
        })
        tx_hash = chain.send_transaction(tx)
        logger.info(f"→ approve {spender} for MAX_UINT256 on {token_address} [{tx_hash}]")
        receipt = chain.wait_for_receipt(tx_hash)
    except Exception as e:
        logger.error(f"Error approving Permit2: {e}")
        return ApprovalOutcome(ApprovalStatus.FAILED, spender=spender, error=e)

    outcome = ApprovalOutcome(ApprovalStatus.APPROVED, spender=spender, tx_hash=tx_hash, receipt=receipt)
    logger.info(f"Approved Permit2 to spend sell token. Receipt: {dict(receipt)}")
    if not outcome.confirmed:
        logger.warning("Approval receipt status is not 1; continuing, the swap may revert for lack of allowance")
    return outcome
