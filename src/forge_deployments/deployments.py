"""Main API for forge-deployments library."""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional

from eth_utils import to_checksum_address

from .abi import decode_constructor_arguments
from .constants import (
    DEFAULT_EXPLORER_API_URL,
    EXPLORER_API_KEY_ENV,
    EXPLORER_API_URL_ENV,
    FACTORY_CONTRACT_NAMES,
    JSON_INDENT,
    RPC_URL_ENV,
)
from .docs import generate_docs as run_doc_generator
from .exceptions import ArtifactNotFoundError, MalformedLogFileError
from .explorer import ExplorerClient
from .paths import PathLike, get_artifact_path, get_deployment_log_path
from .reconcile import detect_duplicate
from .rpc import ChainClient
from .types import ChainId, ContractMetadata, ContractRecord, DeploymentLog, HistoryEntry

logger = logging.getLogger(__name__)


def load_deployment_log(path: Path, chain_id: ChainId) -> DeploymentLog:
    """
    Load a deployment log from disk, or start an empty one.

    Args:
        path: Path to <chain_id>.json
        chain_id: Network identifier used when the file does not exist

    Returns:
        DeploymentLog with reconciled latest projection

    Raises:
        MalformedLogFileError: If the file is not valid JSON or not a deployment log
    """
    if not path.exists():
        return DeploymentLog.empty(chain_id)

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedLogFileError(f"Deployment log {path} is not valid JSON: {e}") from e

    return DeploymentLog.from_dict(data)


def _target_mode(path: Path) -> int:
    """Permission bits the log file should end up with."""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)

    # Only way to read the umask is to set it
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def save_deployment_log(log: DeploymentLog, path: Path) -> None:
    """
    Write the whole deployment log to disk.

    The file is written next to its target and moved into place, so a
    failed write leaves the previous log intact. An existing log keeps
    its permissions; a new one gets the usual umask-derived mode.
    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(log.to_dict(), f, indent=JSON_INDENT)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise


def build_history_entry(
    address: str,
    metadata: ContractMetadata,
    deployment_txn: str,
    timestamp: int,
    pool_init_code_hash: Optional[str] = None,
) -> HistoryEntry:
    """
    Build the history entry for one newly registered contract.

    Args:
        address: Checksummed contract address
        metadata: Contract name and constructor data from the explorer
        deployment_txn: Creation transaction hash
        timestamp: Timestamp of the block containing the creation transaction
        pool_init_code_hash: Required for factory contracts, ignored otherwise

    Returns:
        HistoryEntry with a single contract and no commit hash

    Raises:
        UnsupportedAbiTypeError: If a constructor parameter is array-typed
        ConstructorDecodingError: If the constructor arguments do not match the inputs
        ValueError: If a factory contract comes without its pool init code hash
    """
    if metadata.name in FACTORY_CONTRACT_NAMES:
        if pool_init_code_hash is None:
            raise ValueError(f"Pool init code hash required for {metadata.name}")
    else:
        pool_init_code_hash = None

    constructor = decode_constructor_arguments(
        metadata.constructor_inputs, metadata.constructor_arguments
    )

    record = ContractRecord(
        address=address,
        deployment_txn=deployment_txn,
        # TODO: detect proxies
        proxy=False,
        input={"constructor": constructor},
        pool_init_code_hash=pool_init_code_hash,
    )
    return HistoryEntry(timestamp=timestamp, contracts={metadata.name: record})


def _check_registrable(
    log: DeploymentLog, working_dir: PathLike, contract_name: str, address: str
) -> None:
    artifact = get_artifact_path(working_dir, contract_name)
    if not artifact.exists():
        raise ArtifactNotFoundError(
            f"Smart contract '{contract_name}' not found in foundry 'out' directory"
        )

    detect_duplicate(log.history, address)


def _commit(
    log: DeploymentLog,
    entry: HistoryEntry,
    log_path: Path,
    working_dir: PathLike,
    chain_id: ChainId,
    generate_docs: bool,
) -> DeploymentLog:
    log.history.append(entry)
    log.reconcile()
    save_deployment_log(log, log_path)

    for name, record in entry.contracts.items():
        logger.info(
            "Registered %s at %s on chain %s (timestamp %d)",
            name,
            record.address,
            chain_id,
            entry.timestamp,
        )

    if generate_docs:
        run_doc_generator(working_dir, chain_id)
    return log


def record_deployment(
    working_dir: PathLike,
    chain_id: ChainId,
    contract_address: str,
    metadata: ContractMetadata,
    deployment_txn: str,
    timestamp: int,
    pool_init_code_hash: Optional[str] = None,
    generate_docs: bool = True,
) -> DeploymentLog:
    """
    Register a deployment from already resolved on-chain data.

    Args:
        working_dir: Root of the foundry project
        chain_id: Network identifier
        contract_address: Deployed contract address
        metadata: Contract name and constructor data from the explorer
        deployment_txn: Creation transaction hash
        timestamp: Timestamp of the block containing the creation transaction
        pool_init_code_hash: Required for factory contracts, ignored otherwise
        generate_docs: Run forge-chronicles after writing the log

    Returns:
        The updated DeploymentLog as written to disk

    Raises:
        MalformedLogFileError: If the existing log cannot be parsed
        ArtifactNotFoundError: If out/<Name>.sol/<Name>.json is missing
        DuplicateContractError: If the address is already in the log
        UnsupportedAbiTypeError: If a constructor parameter is array-typed
        ConstructorDecodingError: If the constructor arguments do not match the inputs
        DocGeneratorMissingError: If generate_docs is set and forge-chronicles is missing
    """
    address = to_checksum_address(contract_address)
    log_path = get_deployment_log_path(working_dir, chain_id)
    log = load_deployment_log(log_path, chain_id)

    _check_registrable(log, working_dir, metadata.name, address)

    entry = build_history_entry(
        address, metadata, deployment_txn, timestamp, pool_init_code_hash
    )
    return _commit(log, entry, log_path, working_dir, chain_id, generate_docs)


def register_contract(
    contract_address: str,
    chain_id: ChainId,
    working_dir: PathLike = ".",
    rpc_url: Optional[str] = None,
    explorer_api_url: Optional[str] = None,
    explorer_api_key: Optional[str] = None,
    generate_docs: bool = True,
) -> DeploymentLog:
    """
    Register a deployed contract by looking up its data on the explorer and chain.

    Lookups run one after another; the first failure aborts the
    registration and leaves the log on disk untouched.

    Args:
        contract_address: Deployed contract address
        chain_id: Network identifier
        working_dir: Root of the foundry project
        rpc_url: JSON-RPC endpoint (defaults to $RPC_URL)
        explorer_api_url: Explorer API endpoint (defaults to $EXPLORER_API_URL,
                          then the Etherscan v2 API)
        explorer_api_key: Explorer API key (defaults to $ETHERSCAN_API_KEY)
        generate_docs: Run forge-chronicles after writing the log

    Returns:
        The updated DeploymentLog as written to disk

    Raises:
        ValueError: If no RPC URL or API key is available
        ExplorerError: If explorer lookups fail
        RpcError: If chain queries fail
        DeploymentLogError: Any error raised by record_deployment
    """
    if rpc_url is None:
        rpc_url = os.environ.get(RPC_URL_ENV)
    if explorer_api_key is None:
        explorer_api_key = os.environ.get(EXPLORER_API_KEY_ENV)
    if explorer_api_url is None:
        explorer_api_url = os.environ.get(EXPLORER_API_URL_ENV, DEFAULT_EXPLORER_API_URL)

    if rpc_url is None:
        raise ValueError(
            f"RPC URL required: set ${RPC_URL_ENV} or pass rpc_url parameter"
        )
    if explorer_api_key is None:
        raise ValueError(
            f"Explorer API key required: set ${EXPLORER_API_KEY_ENV} "
            "or pass explorer_api_key parameter"
        )

    explorer = ExplorerClient(explorer_api_url, explorer_api_key, chain_id)
    chain = ChainClient(rpc_url)

    address = to_checksum_address(contract_address)
    log_path = get_deployment_log_path(working_dir, chain_id)
    log = load_deployment_log(log_path, chain_id)

    metadata = explorer.get_contract_data(address)
    _check_registrable(log, working_dir, metadata.name, address)

    tx_hash = explorer.get_creation_transaction_hash(address)
    block_number = chain.get_block_number_by_transaction_hash(tx_hash)
    timestamp = chain.get_block_timestamp(block_number)

    pool_init_code_hash = None
    if metadata.name in FACTORY_CONTRACT_NAMES:
        pool_init_code_hash = chain.get_pool_init_code_hash(
            metadata.name, address, block_number
        )

    entry = build_history_entry(address, metadata, tx_hash, timestamp, pool_init_code_hash)
    return _commit(log, entry, log_path, working_dir, chain_id, generate_docs)
