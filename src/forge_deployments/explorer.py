"""Block explorer lookups for forge-deployments library."""

import json
import logging
from typing import Any, Dict, List, Union

import requests

from .constants import REQUEST_TIMEOUT
from .exceptions import ExplorerError
from .types import ContractMetadata

logger = logging.getLogger(__name__)


class ExplorerClient:
    """Client for an Etherscan-compatible contract API."""

    def __init__(self, api_url: str, api_key: str, chain_id: Union[int, str]):
        """
        Initialize the explorer client.

        Args:
            api_url: API endpoint, e.g. https://api.etherscan.io/v2/api
            api_key: Explorer API key
            chain_id: Network identifier sent as the chainid parameter
        """
        self.api_url = api_url
        self.api_key = api_key
        self.chain_id = chain_id

    def _get(self, action: str, **params: str) -> List[Dict[str, Any]]:
        query = {
            "chainid": str(self.chain_id),
            "module": "contract",
            "action": action,
            "apikey": self.api_key,
            **params,
        }
        try:
            response = requests.get(self.api_url, params=query, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise ExplorerError(f"Network error during explorer request: {e}") from e

        if response.status_code != 200:
            raise ExplorerError(
                f"Explorer request failed with status {response.status_code}"
            )

        payload = response.json()
        if payload.get("status") != "1":
            raise ExplorerError(
                f"Explorer error for {action}: {payload.get('result') or payload.get('message')}"
            )

        result = payload.get("result")
        if not isinstance(result, list) or not result:
            raise ExplorerError(f"Explorer returned no result for {action}")
        return result

    def get_contract_data(self, address: str) -> ContractMetadata:
        """
        Get name and constructor data of a verified contract.

        Args:
            address: Contract address

        Returns:
            ContractMetadata with constructor_inputs None if the ABI has no constructor

        Raises:
            ExplorerError: If the request fails or the contract is not verified
        """
        logger.debug("Fetching source metadata for %s", address)
        entry = self._get("getsourcecode", address=address)[0]

        contract_name = entry.get("ContractName")
        if not contract_name:
            raise ExplorerError(f"Contract {address} is not verified")

        try:
            abi = json.loads(entry["ABI"])
        except (KeyError, json.JSONDecodeError) as e:
            raise ExplorerError(f"Could not parse ABI of contract {address}") from e

        constructor_inputs = None
        for item in abi:
            if item.get("type") == "constructor":
                constructor_inputs = item.get("inputs", [])
                break

        return ContractMetadata(
            name=contract_name,
            constructor_arguments=entry.get("ConstructorArguments", ""),
            constructor_inputs=constructor_inputs,
        )

    def get_creation_transaction_hash(self, address: str) -> str:
        """
        Get the hash of the transaction that created a contract.

        Raises:
            ExplorerError: If the request fails or no creation record exists
        """
        logger.debug("Fetching creation transaction for %s", address)
        entry = self._get("getcontractcreation", contractaddresses=address)[0]

        tx_hash = entry.get("txHash")
        if not tx_hash:
            raise ExplorerError(f"No creation transaction found for {address}")
        return tx_hash
