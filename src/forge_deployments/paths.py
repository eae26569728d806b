"""Path conventions for forge-deployments library."""

from pathlib import Path
from typing import Union

PathLike = Union[Path, str]


def get_deployment_log_path(working_dir: PathLike, chain_id: Union[int, str]) -> Path:
    """
    Get the deployment log path for a network.

    Args:
        working_dir: Root of the foundry project
        chain_id: Network identifier

    Returns:
        Path to <working_dir>/deployments/json/<chain_id>.json
    """
    return Path(working_dir).absolute() / "deployments" / "json" / f"{chain_id}.json"


def get_artifact_path(working_dir: PathLike, contract_name: str) -> Path:
    """
    Get the forge build artifact path for a contract.

    Args:
        working_dir: Root of the foundry project
        contract_name: Contract name as reported by the explorer

    Returns:
        Path to <working_dir>/out/<Name>.sol/<Name>.json
    """
    return (
        Path(working_dir).absolute()
        / "out"
        / f"{contract_name}.sol"
        / f"{contract_name}.json"
    )


def get_doc_generator_path(working_dir: PathLike) -> Path:
    """Get the forge-chronicles entry script path."""
    return Path(working_dir).absolute() / "lib" / "forge-chronicles" / "index.js"
