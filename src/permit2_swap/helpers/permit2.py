"""
Permit2 signing for 0x firm quotes.

A Permit2 quote carries ``permit2.eip712``: a ready-to-sign EIP-712
``PermitTransferFrom`` payload. The taker signs it and the signature is
appended to the quote's calldata as ``uint256(len(signature)) || signature``,
which is what the 0x settler contract expects to find after the call.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from eth_utils import to_bytes

from permit2_swap.models import SignatureOutcome

__all__ = [
    "PermitSignatureError",
    "prepare_typed_data",
    "sign_permit2_message",
    "append_signature",
]

logger = logging.getLogger(__name__)


class PermitSignatureError(RuntimeError):
    """A Permit2 signature was required but could not be attached to the swap."""


def _parse_int(value: Any) -> Any:
    if isinstance(value, str):
        return int(value, 16) if value.startswith(("0x", "0X")) else int(value)
    return value


def _coerce(types: dict[str, list[dict[str, str]]], type_name: str, value: Any) -> Any:
    if type_name.endswith("]"):
        inner = type_name[: type_name.rindex("[")]
        return [_coerce(types, inner, v) for v in value]
    if type_name in types:
        return {
            f["name"]: _coerce(types, f["type"], value[f["name"]])
            for f in types[type_name]
            if f["name"] in value
        }
    if type_name.startswith(("uint", "int")):
        return _parse_int(value)
    return value


def prepare_typed_data(eip712: dict[str, Any]) -> dict[str, Any]:
    """Copy of *eip712* with numeric strings in int fields turned into ints.

    The API serialises uint256 amounts, nonces and deadlines as decimal
    strings; the encoder wants Python ints.
    """
    typed = copy.deepcopy(eip712)
    types = typed["types"]
    if "EIP712Domain" in types:
        typed["domain"] = _coerce(types, "EIP712Domain", typed["domain"])
    else:
        typed["domain"] = {k: _parse_int(v) if k == "chainId" else v for k, v in typed["domain"].items()}
    typed["message"] = _coerce(types, typed["primaryType"], typed["message"])
    return typed


def sign_permit2_message(chain, quote: dict[str, Any]) -> SignatureOutcome:
    """Sign ``quote["permit2"]["eip712"]`` if present.

    Returns an outcome with ``required=False`` when the quote needs no
    signature. Signing errors are logged and reported in the outcome.
    """
    eip712 = (quote.get("permit2") or {}).get("eip712")
    if not eip712:
        return SignatureOutcome(required=False)

    try:
        signature = chain.sign_typed_data(prepare_typed_data(eip712))
    except Exception as e:
        logger.error(f"Error signing permit2 coupon: {e}")
        return SignatureOutcome(required=True, error=e)

    if not signature:
        logger.error("Signing permit2 coupon returned an empty signature")
        return SignatureOutcome(required=True)

    logger.info("Signed Permit2 message from quote response.")
    return SignatureOutcome(required=True, signature=bytes(signature))


def append_signature(data: str, signature: bytes) -> str:
    """``data || uint256_be(len(signature)) || signature`` as 0x-hex."""
    length_prefix = len(signature).to_bytes(32, "big")
    return "0x" + (to_bytes(hexstr=data) + length_prefix + bytes(signature)).hex()
