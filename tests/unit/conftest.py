from unittest.mock import MagicMock

import pytest

TAKER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
WETH = "0x5300000000000000000000000000000000000004"
WSTETH = "0xf610A9dfB7C89644979b4A0f27063E9e7d7Cda32"
PERMIT2 = "0x000000000022D473030F116dDEE9F6B43aC78BA3"
SETTLER = "0x1111111111111111111111111111111111111111"
TX_HASH = "0x" + "ab" * 32


@pytest.fixture
def chain():
    c = MagicMock()
    c.address = TAKER
    c.chain = "scroll"
    c.chain_id = 534352
    c.token_decimals.return_value = 18
    c.nonce.return_value = 7
    c.send_transaction.return_value = TX_HASH
    c.wait_for_receipt.return_value = {"status": 1, "transactionHash": TX_HASH}
    c.sign_typed_data.return_value = b"\x11" * 65
    c.explorer_tx_url.side_effect = lambda h: f"https://scrollscan.com/tx/{h}"
    c.w3.eth.gas_price = 100
    c.w3.eth.estimate_gas.return_value = 210_000
    return c


@pytest.fixture
def eip712():
    return {
        "types": {
            "PermitTransferFrom": [
                {"name": "permitted", "type": "TokenPermissions"},
                {"name": "spender", "type": "address"},
                {"name": "nonce", "type": "uint256"},
                {"name": "deadline", "type": "uint256"},
            ],
            "TokenPermissions": [
                {"name": "token", "type": "address"},
                {"name": "amount", "type": "uint256"},
            ],
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "chainId", "type": "uint256"},
                {"name": "verifyingContract", "type": "address"},
            ],
        },
        "domain": {
            "name": "Permit2",
            "chainId": 534352,
            "verifyingContract": PERMIT2,
        },
        "message": {
            "permitted": {"token": WETH, "amount": "100000000000000000"},
            "spender": SETTLER,
            "nonce": "2241959297937691820908574931991586",
            "deadline": "1718669420",
        },
        "primaryType": "PermitTransferFrom",
    }


@pytest.fixture
def price_no_issues():
    return {
        "buyAmount": "86000000000000000",
        "sellAmount": "100000000000000000",
        "issues": {"allowance": None, "balance": None},
    }


@pytest.fixture
def price_needs_allowance():
    return {
        "buyAmount": "86000000000000000",
        "sellAmount": "100000000000000000",
        "issues": {"allowance": {"actual": "0", "spender": PERMIT2.lower()}, "balance": None},
    }


@pytest.fixture
def quote(eip712):
    return {
        "buyAmount": "86000000000000000",
        "permit2": {"type": "Permit2", "hash": "0x" + "00" * 32, "eip712": eip712},
        "transaction": {
            "to": SETTLER,
            "data": "0xdeadbeef",
            "value": "0",
            "gas": "288079",
            "gasPrice": "4837860000",
        },
        "tokenMetadata": {
            "buyToken": {"buyTaxBps": "0", "sellTaxBps": "0"},
            "sellToken": {"buyTaxBps": "0", "sellTaxBps": "0"},
        },
    }


@pytest.fixture
def api(price_no_issues, quote):
    a = MagicMock()
    a.get_price.return_value = price_no_issues
    a.get_quote.return_value = quote
    a.get_sources.return_value = {"sources": ["Ambient", "SyncSwap", "Uniswap_V3"]}
    return a
