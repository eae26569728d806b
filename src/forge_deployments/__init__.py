"""
forge-deployments: Python library for maintaining foundry deployment logs
"""

from importlib.metadata import PackageNotFoundError, version

from .deployments import (
    load_deployment_log,
    record_deployment,
    register_contract,
    save_deployment_log,
)
from .exceptions import (
    ArtifactNotFoundError,
    ConstructorDecodingError,
    DeploymentLogError,
    DocGeneratorMissingError,
    DuplicateContractError,
    ExplorerError,
    MalformedLogFileError,
    RpcError,
    UnsupportedAbiTypeError,
)
from .reconcile import detect_duplicate, reconcile_history
from .types import (
    ContractMetadata,
    ContractRecord,
    DeploymentLog,
    HistoryEntry,
    LatestRecord,
)

try:
    __version__ = version("forge-deployments")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "register_contract",
    "record_deployment",
    "load_deployment_log",
    "save_deployment_log",
    "detect_duplicate",
    "reconcile_history",
    "ContractMetadata",
    "ContractRecord",
    "DeploymentLog",
    "HistoryEntry",
    "LatestRecord",
    "DeploymentLogError",
    "ArtifactNotFoundError",
    "DuplicateContractError",
    "UnsupportedAbiTypeError",
    "ConstructorDecodingError",
    "MalformedLogFileError",
    "DocGeneratorMissingError",
    "ExplorerError",
    "RpcError",
]
