"""Chain queries over JSON-RPC for forge-deployments library."""

import logging
from typing import Any, List

import requests
from eth_utils import encode_hex, function_signature_to_4byte_selector

from .constants import POOL_INIT_CODE_HASH_GETTERS, REQUEST_TIMEOUT
from .exceptions import RpcError

logger = logging.getLogger(__name__)


class ChainClient:
    """Minimal JSON-RPC client for the lookups a registration needs."""

    def __init__(self, rpc_url: str):
        self.rpc_url = rpc_url

    def _call(self, method: str, params: List[Any]) -> Any:
        """
        Make a JSON-RPC call and return its result field.

        Raises:
            RpcError: On HTTP failure, network error or RPC error object
        """
        try:
            response = requests.post(
                self.rpc_url,
                json={
                    "jsonrpc": "2.0",
                    "method": method,
                    "params": params,
                    "id": 1,
                },
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise RpcError(f"Network error during RPC call: {e}") from e

        # Check for HTTP errors
        if response.status_code != 200:
            raise RpcError(f"RPC request failed with status {response.status_code}")

        result = response.json()

        # Check for RPC errors
        if "error" in result:
            raise RpcError(f"RPC error: {result['error']}")

        return result.get("result")

    def get_block_number_by_transaction_hash(self, tx_hash: str) -> int:
        """
        Get the number of the block containing a transaction.

        Raises:
            RpcError: If the transaction is unknown or still pending
        """
        transaction = self._call("eth_getTransactionByHash", [tx_hash])
        if not transaction or transaction.get("blockNumber") is None:
            raise RpcError(f"Transaction {tx_hash} not found or not yet mined")

        block_number = int(transaction["blockNumber"], 16)
        logger.debug("Transaction %s mined in block %d", tx_hash, block_number)
        return block_number

    def get_block_timestamp(self, block_number: int) -> int:
        """
        Get the Unix timestamp of a block.

        Raises:
            RpcError: If the block is unknown
        """
        # Block number as hex, no full transactions
        block = self._call("eth_getBlockByNumber", [hex(block_number), False])
        if not block:
            raise RpcError(f"Block {block_number} not found")
        if block.get("timestamp") is None:
            raise RpcError(f"Block {block_number} has no timestamp")
        return int(block["timestamp"], 16)

    def get_pool_init_code_hash(
        self, contract_name: str, factory_address: str, block_number: int
    ) -> str:
        """
        Read the pool init code hash of a factory contract.

        Calls the getter configured for the factory name at the given block.

        Args:
            contract_name: Factory contract name, a key of POOL_INIT_CODE_HASH_GETTERS
            factory_address: Factory contract address
            block_number: Block to query at

        Returns:
            0x-prefixed 32-byte hex string

        Raises:
            KeyError: If contract_name is not a recognized factory
            RpcError: If the call fails or does not return 32 bytes
        """
        signature = POOL_INIT_CODE_HASH_GETTERS[contract_name]
        data = encode_hex(function_signature_to_4byte_selector(signature))

        result = self._call(
            "eth_call",
            [{"to": factory_address, "data": data}, hex(block_number)],
        )
        if not isinstance(result, str) or len(result) != 66:
            raise RpcError(f"Unexpected {signature} result from {factory_address}: {result!r}")
        return result.lower()
