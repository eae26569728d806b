"""Data types and dataclasses for forge-deployments library."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .exceptions import MalformedLogFileError

ChainId = Union[int, str]


@dataclass
class ContractMetadata:
    """Verified contract data resolved from the block explorer."""

    name: str  # Contract name, e.g. "UniswapV2Factory"
    constructor_arguments: str  # ABI-encoded constructor arguments as hex
    constructor_inputs: Optional[List[Dict[str, Any]]] = None  # None without constructor


@dataclass
class ContractRecord:
    """A single contract inside a history entry."""

    address: str  # Checksummed address
    deployment_txn: str  # Creation transaction hash
    proxy: bool = False  # Placeholder, proxies are not detected
    input: Dict[str, Any] = field(default_factory=lambda: {"constructor": {}})
    pool_init_code_hash: Optional[str] = None  # Factory contracts only

    # Keys written by other tools, preserved on rewrite
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContractRecord":
        try:
            address = data["address"]
            deployment_txn = data["deploymentTxn"]
        except (KeyError, TypeError) as e:
            raise MalformedLogFileError(f"Contract record is missing {e}") from e

        if not isinstance(address, str):
            raise MalformedLogFileError(f"Contract address must be a string: {address!r}")
        if not isinstance(data.get("input", {}), dict):
            raise MalformedLogFileError(f"Contract input of {address} must be an object")

        known = {"address", "proxy", "deploymentTxn", "input", "poolInitCodeHash"}
        return cls(
            address=address,
            deployment_txn=deployment_txn,
            proxy=bool(data.get("proxy", False)),
            input=dict(data.get("input", {"constructor": {}})),
            pool_init_code_hash=data.get("poolInitCodeHash"),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "address": self.address,
            "proxy": self.proxy,
            "deploymentTxn": self.deployment_txn,
            "input": self.input,
        }
        if self.pool_init_code_hash is not None:
            result["poolInitCodeHash"] = self.pool_init_code_hash
        result.update(self.extra)
        return result


@dataclass
class HistoryEntry:
    """One timestamped registration event."""

    timestamp: int  # Block timestamp, seconds since epoch
    contracts: Dict[str, ContractRecord]  # Contract name -> record
    commit_hash: Optional[str] = None

    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        if not isinstance(data, dict):
            raise MalformedLogFileError(f"History entry must be an object: {data!r}")

        timestamp = data.get("timestamp")
        # bool is an int subclass but never a valid timestamp
        if not isinstance(timestamp, int) or isinstance(timestamp, bool) or timestamp < 0:
            raise MalformedLogFileError(f"Invalid history timestamp: {timestamp!r}")

        contracts = data.get("contracts")
        if not isinstance(contracts, dict):
            raise MalformedLogFileError("History entry is missing 'contracts'")

        known = {"timestamp", "commitHash", "contracts"}
        return cls(
            timestamp=timestamp,
            contracts={
                name: ContractRecord.from_dict(record)
                for name, record in contracts.items()
            },
            commit_hash=data.get("commitHash"),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"timestamp": self.timestamp}
        if self.commit_hash is not None:
            result["commitHash"] = self.commit_hash
        result["contracts"] = {
            name: record.to_dict() for name, record in self.contracts.items()
        }
        result.update(self.extra)
        return result


@dataclass
class LatestRecord:
    """Most recent deployment of a contract name, derived from history."""

    address: str
    proxy: bool
    deployment_txn: str
    timestamp: int
    commit_hash: Optional[str] = None
    pool_init_code_hash: Optional[str] = None

    @classmethod
    def from_winner(cls, entry: HistoryEntry, record: ContractRecord) -> "LatestRecord":
        return cls(
            address=record.address,
            proxy=record.proxy,
            deployment_txn=record.deployment_txn,
            timestamp=entry.timestamp,
            commit_hash=entry.commit_hash,
            pool_init_code_hash=record.pool_init_code_hash,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "address": self.address,
            "proxy": self.proxy,
            "deploymentTxn": self.deployment_txn,
            "timestamp": self.timestamp,
        }
        if self.commit_hash is not None:
            result["commitHash"] = self.commit_hash
        if self.pool_init_code_hash is not None:
            result["poolInitCodeHash"] = self.pool_init_code_hash
        return result


@dataclass
class DeploymentLog:
    """Per-network deployment history plus its latest projection."""

    chain_id: ChainId
    history: List[HistoryEntry] = field(default_factory=list)
    latest: Dict[str, LatestRecord] = field(default_factory=dict)

    @classmethod
    def empty(cls, chain_id: ChainId) -> "DeploymentLog":
        return cls(chain_id=chain_id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentLog":
        """
        Build a log from its on-disk JSON form.

        The stored 'latest' section is not read back; it is derived from
        history on every write.

        Raises:
            MalformedLogFileError: If the document does not match the format
        """
        if not isinstance(data, dict):
            raise MalformedLogFileError("Deployment log must be a JSON object")
        if "chainId" not in data:
            raise MalformedLogFileError("Deployment log is missing 'chainId'")

        history = data.get("history")
        if not isinstance(history, list):
            raise MalformedLogFileError("Deployment log is missing 'history' list")

        log = cls(
            chain_id=data["chainId"],
            history=[HistoryEntry.from_dict(item) for item in history],
        )
        log.reconcile()
        return log

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chainId": self.chain_id,
            "latest": {name: record.to_dict() for name, record in self.latest.items()},
            "history": [entry.to_dict() for entry in self.history],
        }

    def reconcile(self) -> None:
        """Re-sort history and rebuild the latest projection in place."""
        # Imported here to keep types free of module-level cycles
        from .reconcile import reconcile_history

        self.history, self.latest = reconcile_history(self.history)
