"""
Web3 setup helper - the chain client used for every on-chain read and write.

Public API
----------
make_web3(rpc_url)
    Return a Web3 instance connected to *rpc_url*.
ChainClient.connect(settings)
    Bind the settings' private key to a Web3 HTTP provider for the
    configured chain.
"""
from __future__ import annotations

import logging
from typing import Any

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract

from permit2_swap.config.abis import ERC20_ABI, WETH_ABI
from permit2_swap.config.network import get_chain_config, get_tx_url
from permit2_swap.config.settings import SwapSettings
from permit2_swap.config.tokens import is_wrapped_native

__all__ = ["make_web3", "ChainClient"]

logger = logging.getLogger(__name__)


def make_web3(rpc_url: str) -> Web3:
    """Web3 over HTTP; raises ConnectionError if the endpoint does not answer."""
    w3 = Web3(Web3.HTTPProvider(rpc_url))
    if not w3.is_connected():
        raise ConnectionError("Could not connect to RPC endpoint")
    return w3


class ChainClient:
    """An account plus a JSON-RPC endpoint for one chain."""

    def __init__(self, w3: Web3, account: LocalAccount, chain: str):
        self.w3 = w3
        self.account = account
        self.chain = chain
        self.chain_id: int = get_chain_config(chain)["chain_id"]

    @classmethod
    def connect(cls, settings: SwapSettings) -> "ChainClient":
        w3 = make_web3(settings.rpc_url)
        account = Account.from_key(settings.private_key)
        client = cls(w3, account, settings.chain)
        logger.info(f"Connected to {settings.chain} (chain id {client.chain_id}) as {client.address}")
        return client

    @property
    def address(self) -> str:
        return self.account.address

    # ------------------------------------------------------------------ #
    # Reads                                                              #
    # ------------------------------------------------------------------ #

    def token(self, address: str) -> Contract:
        abi = WETH_ABI if is_wrapped_native(self.chain, address) else ERC20_ABI
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def token_decimals(self, address: str) -> int:
        return self.token(address).functions.decimals().call()

    def nonce(self) -> int:
        """Next nonce counting pending transactions, so an unmined approval is not reused."""
        return self.w3.eth.get_transaction_count(self.address, "pending")

    # ------------------------------------------------------------------ #
    # Signing / writes                                                   #
    # ------------------------------------------------------------------ #

    def sign_typed_data(self, typed_data: dict[str, Any]) -> bytes:
        """EIP-712 signature (65 bytes, r || s || v) over *typed_data*."""
        encoded = encode_typed_data(full_message=typed_data)
        signed = self.account.sign_message(encoded)
        return bytes(signed.signature)

    def sign_transaction(self, tx: dict[str, Any]) -> bytes:
        signed = self.account.sign_transaction(tx)
        return bytes(signed.raw_transaction)

    def send_raw_transaction(self, raw_tx: bytes) -> str:
        tx_hash = self.w3.eth.send_raw_transaction(raw_tx)
        return Web3.to_hex(tx_hash)

    def send_transaction(self, tx: dict[str, Any]) -> str:
        """Sign *tx* locally and broadcast it; returns the 0x-prefixed hash."""
        return self.send_raw_transaction(self.sign_transaction(tx))

    def wait_for_receipt(self, tx_hash: str) -> Any:
        return self.w3.eth.wait_for_transaction_receipt(tx_hash)

    def explorer_tx_url(self, tx_hash: str) -> str:
        return get_tx_url(tx_hash, self.chain)
