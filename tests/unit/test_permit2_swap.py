import logging
from decimal import Decimal
from unittest.mock import patch

import pytest
from web3 import Web3

from permit2_swap.commands import permit2_swap as cmd
from permit2_swap.commands.permit2_swap import run_swap, to_base_units
from permit2_swap.helpers.allowance import MAX_UINT256
from permit2_swap.helpers.permit2 import PermitSignatureError
from permit2_swap.models import ApprovalStatus, SubmissionStatus, SwapParams

from conftest import PERMIT2, TAKER, WETH, WSTETH


@pytest.fixture
def params():
    return SwapParams(sell_token=WETH, buy_token=WSTETH)


def _sent_tx(chain):
    chain.send_transaction.assert_called_once()
    return chain.send_transaction.call_args.args[0]


def test_to_base_units():
    assert to_base_units(Decimal("0.1"), 18) == 100000000000000000
    assert to_base_units(Decimal("0.1"), 6) == 100000
    assert to_base_units(Decimal("2"), 0) == 2


def test_to_base_units_keeps_every_digit():
    amount = Decimal("123456789012.123456789012345678")
    assert to_base_units(amount, 18) == 123456789012123456789012345678


def test_to_base_units_covers_uint256_range():
    max_uint = (1 << 256) - 1
    assert to_base_units(Decimal(max_uint), 0) == max_uint


def test_to_base_units_rounds_extra_fraction_half_up():
    assert to_base_units(Decimal("1.5"), 0) == 2
    assert to_base_units(Decimal("0.1234565"), 6) == 123457
    assert to_base_units(Decimal("0.1234564"), 6) == 123456
    assert to_base_units(Decimal("0.0000004"), 6) == 0


def test_sell_amount_uses_live_decimals(chain, api, params):
    report = run_swap(chain, api, params)

    chain.token_decimals.assert_called_once_with(WETH)
    query = api.get_price.call_args.args[0]
    assert query["sellAmount"] == "100000000000000000"
    assert report.sell_amount == 10**17


def test_price_and_quote_share_parameters(chain, api, params):
    run_swap(chain, api, params)

    price_query = api.get_price.call_args.args[0]
    assert api.get_quote.call_args.args[0] == price_query
    assert price_query == {
        "chainId": "534352",
        "sellToken": WETH,
        "buyToken": WSTETH,
        "sellAmount": "100000000000000000",
        "taker": TAKER,
        "affiliateAddress": TAKER,
        "affiliateFeeBps": "100",
    }


def test_custom_affiliate(chain, api):
    params = SwapParams(WETH, WSTETH, affiliate_fee_bps=25, affiliate_address=PERMIT2)
    run_swap(chain, api, params)
    query = api.get_price.call_args.args[0]
    assert query["affiliateAddress"] == PERMIT2
    assert query["affiliateFeeBps"] == "25"


def test_no_approval_when_allowance_null(chain, api, params):
    report = run_swap(chain, api, params)

    assert report.approval.status is ApprovalStatus.NOT_NEEDED
    chain.token.assert_not_called()


def test_approval_attempted_once_then_quote(chain, api, params, price_needs_allowance):
    api.get_price.return_value = price_needs_allowance

    report = run_swap(chain, api, params)

    approve = chain.token.return_value.functions.approve
    approve.assert_called_once_with(Web3.to_checksum_address(PERMIT2), MAX_UINT256)
    assert report.approval.status is ApprovalStatus.APPROVED
    # approval tx + swap tx
    assert chain.send_transaction.call_count == 2
    api.get_quote.assert_called_once()


def test_failed_approval_does_not_stop_the_run(chain, api, params, price_needs_allowance):
    api.get_price.return_value = price_needs_allowance
    chain.token.return_value.functions.approve.return_value.call.side_effect = ValueError("reverted")

    report = run_swap(chain, api, params)

    chain.token.return_value.functions.approve.assert_called_once()
    assert report.approval.status is ApprovalStatus.FAILED
    assert report.submission.status is SubmissionStatus.SENT


def test_signature_is_spliced_into_calldata(chain, api, params):
    signature = bytes(range(65))
    chain.sign_typed_data.return_value = signature

    report = run_swap(chain, api, params)

    tx = _sent_tx(chain)
    assert tx["data"] == "0xdeadbeef" + (65).to_bytes(32, "big").hex() + signature.hex()
    assert tx["to"] == Web3.to_checksum_address(report.quote["transaction"]["to"])
    assert tx["gas"] == 288079
    assert tx["gasPrice"] == 4837860000
    assert tx["value"] == 0
    assert tx["nonce"] == 7
    assert report.submission.status is SubmissionStatus.SENT
    assert report.submission.explorer_url.startswith("https://scrollscan.com/tx/0x")


def test_signed_typed_data_has_numeric_fields(chain, api, params):
    run_swap(chain, api, params)
    typed = chain.sign_typed_data.call_args.args[0]
    assert typed["message"]["permitted"]["amount"] == 100000000000000000


def test_signing_failure_aborts_before_submission(chain, api, params):
    chain.sign_typed_data.side_effect = ValueError("cannot sign")

    with pytest.raises(PermitSignatureError):
        run_swap(chain, api, params)

    chain.send_transaction.assert_not_called()
    chain.nonce.assert_not_called()
    api.get_sources.assert_not_called()


def test_required_signature_without_data_aborts(chain, api, params, quote):
    quote["transaction"]["data"] = ""

    with pytest.raises(PermitSignatureError):
        run_swap(chain, api, params)

    chain.send_transaction.assert_not_called()


def test_quote_without_permit_is_sent_unmodified(chain, api, params, quote):
    del quote["permit2"]

    report = run_swap(chain, api, params)

    assert _sent_tx(chain)["data"] == "0xdeadbeef"
    chain.sign_typed_data.assert_not_called()
    assert not report.signature.required


def test_missing_data_skips_submission_but_runs_trailer(chain, api, params, quote):
    del quote["permit2"]
    quote["transaction"] = {}

    report = run_swap(chain, api, params)

    assert report.submission.status is SubmissionStatus.SKIPPED
    chain.send_transaction.assert_not_called()
    api.get_sources.assert_called_once_with(534352)
    assert report.sources == {"sources": ["Ambient", "SyncSwap", "Uniswap_V3"]}


def test_sources_fetched_after_swap(chain, api, params):
    order = []
    chain.send_transaction.side_effect = lambda tx: order.append("send") or "0x" + "cd" * 32
    api.get_sources.side_effect = lambda chain_id: order.append("sources") or {}

    run_swap(chain, api, params)

    assert order == ["send", "sources"]


def test_quote_error_propagates(chain, api, params):
    api.get_quote.side_effect = RuntimeError("network down")
    with pytest.raises(RuntimeError, match="network down"):
        run_swap(chain, api, params)
    chain.send_transaction.assert_not_called()


def test_tax_lines_are_logged(chain, api, params, quote, caplog):
    quote["tokenMetadata"]["buyToken"]["buyTaxBps"] = 250
    quote["tokenMetadata"]["sellToken"]["sellTaxBps"] = "100"
    caplog.set_level(logging.INFO, logger="permit2_swap")

    report = run_swap(chain, api, params)

    assert "Buy Tax for the token: 2.5%" in caplog.text
    assert "Sell Tax for the token: 1%" in caplog.text
    assert report.taxes.buy_tax_pct == Decimal("2.5")


def test_no_tax_lines_without_taxes(chain, api, params, caplog):
    caplog.set_level(logging.INFO, logger="permit2_swap")
    run_swap(chain, api, params)
    assert "Tax for the token" not in caplog.text


# --------------------------------------------------------------------------- #
# CLI                                                                         #
# --------------------------------------------------------------------------- #

@pytest.fixture
def no_side_effects():
    with patch.object(cmd, "load_dotenv"), patch.object(cmd, "setup_logger"), \
            patch.object(cmd, "ChainClient") as client_cls, patch.object(cmd, "ZeroExClient") as api_cls, \
            patch.object(cmd, "run_swap") as run:
        yield client_cls, api_cls, run


@pytest.mark.parametrize("missing", ["PRIVATE_KEY", "ZERO_EX_API_KEY", "ALCHEMY_HTTP_TRANSPORT_URL"])
def test_main_aborts_on_missing_config_before_network(monkeypatch, no_side_effects, missing):
    client_cls, api_cls, run = no_side_effects
    monkeypatch.setenv("PRIVATE_KEY", "11" * 32)
    monkeypatch.setenv("ZERO_EX_API_KEY", "zx-key")
    monkeypatch.setenv("ALCHEMY_HTTP_TRANSPORT_URL", "https://rpc.example")
    monkeypatch.delenv("RPC_URL", raising=False)
    monkeypatch.delenv(missing)

    with pytest.raises(SystemExit, match=missing):
        cmd.main([])

    client_cls.connect.assert_not_called()
    api_cls.assert_not_called()
    run.assert_not_called()


def test_main_runs_default_swap(monkeypatch, no_side_effects):
    client_cls, api_cls, run = no_side_effects
    monkeypatch.setenv("PRIVATE_KEY", "11" * 32)
    monkeypatch.setenv("ZERO_EX_API_KEY", "zx-key")
    monkeypatch.setenv("ALCHEMY_HTTP_TRANSPORT_URL", "https://rpc.example")
    monkeypatch.delenv("CHAIN", raising=False)
    monkeypatch.delenv("ZERO_EX_API_URL", raising=False)

    cmd.main([])

    settings = client_cls.connect.call_args.args[0]
    assert settings.chain == "scroll"
    api_cls.assert_called_once_with("zx-key", base_url="https://api.0x.org", version="v2")
    chain, api, params = run.call_args.args
    assert chain is client_cls.connect.return_value
    assert api is api_cls.return_value.__enter__.return_value
    assert params == SwapParams(WETH, WSTETH, Decimal("0.1"), 100, None)


def test_main_rejects_unknown_token(monkeypatch, no_side_effects):
    client_cls, _, _ = no_side_effects
    monkeypatch.setenv("PRIVATE_KEY", "11" * 32)
    monkeypatch.setenv("ZERO_EX_API_KEY", "zx-key")
    monkeypatch.setenv("ALCHEMY_HTTP_TRANSPORT_URL", "https://rpc.example")
    monkeypatch.delenv("CHAIN", raising=False)

    with pytest.raises(SystemExit, match="Unknown token"):
        cmd.main(["--sell-token", "DOGE"])

    client_cls.connect.assert_not_called()


def test_zero_tax_lines_are_not_logged(chain, api, params, quote, caplog):
    quote["tokenMetadata"]["buyToken"]["buyTaxBps"] = "0"
    quote["tokenMetadata"]["sellToken"]["sellTaxBps"] = "0"
    caplog.set_level(logging.INFO, logger="permit2_swap")

    run_swap(chain, api, params)

    assert "Buy Tax for the token: 0%" not in caplog.text
    assert "Sell Tax for the token" not in caplog.text
