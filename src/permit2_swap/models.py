"""
Typed inputs and outputs passed between the swap pipeline steps.

Recoverable steps (approval, signing, submission) never raise for expected
failures; they return an outcome that the orchestrator inspects to decide
whether to continue or abort.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

__all__ = [
    "SwapParams",
    "QuoteTransaction",
    "ApprovalStatus",
    "ApprovalOutcome",
    "SignatureOutcome",
    "SubmissionStatus",
    "SubmissionOutcome",
    "TaxInfo",
    "SwapReport",
]


@dataclass
class SwapParams:
    """What to swap. Token fields are addresses."""
    sell_token: str
    buy_token: str
    sell_amount: Decimal = Decimal("0.1")
    affiliate_fee_bps: int = 100
    affiliate_address: str | None = None


def _to_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return int(value, 0)
    return int(value)


@dataclass
class QuoteTransaction:
    """The ``transaction`` object of a firm quote."""
    to: str | None
    data: str | None
    value: int | None = None
    gas: int | None = None
    gas_price: int | None = None

    @classmethod
    def from_quote(cls, quote: dict[str, Any]) -> "QuoteTransaction":
        tx = quote.get("transaction") or {}
        return cls(
            to=tx.get("to"),
            data=tx.get("data") or None,
            value=_to_int(tx.get("value")),
            gas=_to_int(tx.get("gas")),
            gas_price=_to_int(tx.get("gasPrice")),
        )


class ApprovalStatus(str, Enum):
    NOT_NEEDED = "not_needed"
    APPROVED = "approved"
    FAILED = "failed"


@dataclass
class ApprovalOutcome:
    status: ApprovalStatus
    spender: str | None = None
    tx_hash: str | None = None
    receipt: Any = None
    error: Exception | None = None

    @property
    def confirmed(self) -> bool:
        return (
            self.status is ApprovalStatus.APPROVED
            and self.receipt is not None
            and self.receipt.get("status") == 1
        )


@dataclass
class SignatureOutcome:
    required: bool
    signature: bytes | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return not self.required or self.signature is not None


class SubmissionStatus(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"


@dataclass
class SubmissionOutcome:
    status: SubmissionStatus
    tx_hash: str | None = None
    explorer_url: str | None = None
    reason: str | None = None


@dataclass
class TaxInfo:
    """Token tax percentages derived from ``tokenMetadata``."""
    buy_tax_pct: Decimal | None = None
    sell_tax_pct: Decimal | None = None


@dataclass
class SwapReport:
    """Everything a run produced, in pipeline order."""
    sell_amount: int
    price: dict[str, Any]
    approval: ApprovalOutcome
    quote: dict[str, Any]
    signature: SignatureOutcome
    submission: SubmissionOutcome
    sources: Any = None
    taxes: TaxInfo = field(default_factory=TaxInfo)
