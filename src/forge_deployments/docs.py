"""Markdown generation through forge-chronicles."""

import logging
import subprocess
from typing import Union

from .exceptions import DocGeneratorMissingError
from .paths import PathLike, get_doc_generator_path

logger = logging.getLogger(__name__)


def generate_docs(working_dir: PathLike, chain_id: Union[int, str]) -> None:
    """
    Regenerate deployment markdown for a network.

    Runs `node lib/forge-chronicles/index.js -c <chain_id> -s`. The exit
    status of the generator is not checked.

    Args:
        working_dir: Root of the foundry project
        chain_id: Network identifier

    Raises:
        DocGeneratorMissingError: If forge-chronicles is not installed
    """
    script = get_doc_generator_path(working_dir)
    if not script.exists():
        raise DocGeneratorMissingError(
            "forge-chronicles not installed. "
            "Please run 'forge install 0xPolygon/forge-chronicles'"
        )

    # TODO: raise on a non-zero exit status
    result = subprocess.run(
        ["node", str(script), "-c", str(chain_id), "-s"],
        capture_output=True,
        text=True,
    )
    logger.debug("forge-chronicles exited with status %s", result.returncode)
